"""Domain-layer generators.

``generate:domain`` creates the full vertical slice for one aggregate:
entity, events, repository interface, domain service, application DTO and
CRUD use cases, an in-memory repository, and the HTTP controller, DTO and
routes.  The narrower generators here add one artefact to a domain that
already exists.
"""

from __future__ import annotations

from typing import ClassVar

from ..naming import NamingVariants
from .generator import BaseGenerator, GenerationContext
from .registry import GeneratorConfig, file_template, unless_skip_tests
from .wiring import WiringPlan, domain_plan, repository_plan, service_plan, use_case_plan

# Output path prefixes, relative to the project root.
DOMAIN_DIR = "src/domain/{domainNames.lowercase}"
USE_CASE_DIR = "src/application/use-cases/{domainNames.lowercase}"
DOMAIN_TEST_DIR = "test/unit/domain/{domainNames.lowercase}"
APPLICATION_TEST_DIR = "test/unit/application/{domainNames.lowercase}"


# ---------------------------------------------------------------------------
# generate:domain
# ---------------------------------------------------------------------------


class DomainGenerator(BaseGenerator):
    """Full domain slice, wired into types, container and routes."""

    generator_type: ClassVar[str] = "domain"
    description: ClassVar[str] = "Generate a complete domain with entity, use cases and HTTP layer"
    required_fields: ClassVar[tuple[str, ...]] = ("domain_name",)
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="Domain",
        type="domain",
        description=description,
        templates=[
            file_template("entity", "domain/entity.ts.j2", f"{DOMAIN_DIR}/entities/{{kebabCase}}.entity.ts"),
            file_template(
                "created-event", "domain/created.event.ts.j2", f"{DOMAIN_DIR}/events/{{kebabCase}}-created.event.ts"
            ),
            file_template(
                "updated-event", "domain/updated.event.ts.j2", f"{DOMAIN_DIR}/events/{{kebabCase}}-updated.event.ts"
            ),
            file_template(
                "repository-interface",
                "domain/repository.interface.ts.j2",
                f"{DOMAIN_DIR}/repositories/{{kebabCase}}.repository.interface.ts",
            ),
            file_template(
                "domain-service",
                "domain/domain.service.ts.j2",
                f"{DOMAIN_DIR}/services/{{kebabCase}}-domain.service.ts",
            ),
            file_template("dto", "application/dto.ts.j2", "src/application/dtos/{lowercase}/{kebabCase}.dto.ts"),
            file_template(
                "create-use-case", "application/create.use-case.ts.j2", f"{USE_CASE_DIR}/create-{{kebabCase}}.use-case.ts"
            ),
            file_template(
                "get-use-case", "application/get.use-case.ts.j2", f"{USE_CASE_DIR}/get-{{kebabCase}}.use-case.ts"
            ),
            file_template(
                "update-use-case", "application/update.use-case.ts.j2", f"{USE_CASE_DIR}/update-{{kebabCase}}.use-case.ts"
            ),
            file_template(
                "delete-use-case", "application/delete.use-case.ts.j2", f"{USE_CASE_DIR}/delete-{{kebabCase}}.use-case.ts"
            ),
            file_template(
                "repository",
                "infrastructure/repository.ts.j2",
                "src/infrastructure/repositories/{kebabCase}.repository.ts",
            ),
            file_template(
                "controller",
                "presentation/controller.ts.j2",
                "src/presentation/http/controllers/{kebabCase}.controller.ts",
            ),
            file_template(
                "http-dto", "presentation/http.dto.ts.j2", "src/presentation/http/dtos/{kebabCase}.http-dto.ts"
            ),
            file_template(
                "routes", "presentation/routes.ts.j2", "src/presentation/http/routes/{kebabCase}.routes.ts"
            ),
            file_template(
                "entity-test",
                "tests/entity.spec.ts.j2",
                f"{DOMAIN_TEST_DIR}/{{kebabCase}}.entity.spec.ts",
                unless_skip_tests(),
            ),
            file_template(
                "create-use-case-test",
                "tests/create.use-case.spec.ts.j2",
                f"{APPLICATION_TEST_DIR}/create-{{kebabCase}}.use-case.spec.ts",
                unless_skip_tests(),
            ),
        ],
    )

    def subject_name(self, context: GenerationContext) -> str | None:
        return context.domain_name

    def prepare(self, context: GenerationContext) -> None:
        super().prepare(context)
        context.template_data.setdefault("withEvents", True)

    def wiring_plan(self, context: GenerationContext) -> WiringPlan:
        return domain_plan(self.domain_names(context))


# ---------------------------------------------------------------------------
# Generators that add to an existing domain
# ---------------------------------------------------------------------------


class DomainMemberGenerator(BaseGenerator):
    """Base for generators whose output lives inside an existing domain.

    ``entity_name`` names the generated artefact; the domain directory must
    already exist.
    """

    required_fields: ClassVar[tuple[str, ...]] = ("domain_name", "entity_name")


class EntityGenerator(DomainMemberGenerator):
    generator_type: ClassVar[str] = "entity"
    description: ClassVar[str] = "Generate an entity inside an existing domain"
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="Entity",
        type="entity",
        description=description,
        templates=[
            file_template("entity", "domain/entity.ts.j2", f"{DOMAIN_DIR}/entities/{{kebabCase}}.entity.ts"),
            file_template(
                "entity-test",
                "tests/entity.spec.ts.j2",
                f"{DOMAIN_TEST_DIR}/{{kebabCase}}.entity.spec.ts",
                unless_skip_tests(),
            ),
        ],
        dependencies=[DOMAIN_DIR],
    )

    def prepare(self, context: GenerationContext) -> None:
        super().prepare(context)
        context.template_data.setdefault("withEvents", False)


class ValueObjectGenerator(DomainMemberGenerator):
    generator_type: ClassVar[str] = "value-object"
    description: ClassVar[str] = "Generate a value object inside an existing domain"
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="Value Object",
        type="value-object",
        description=description,
        templates=[
            file_template(
                "value-object",
                "domain/value-object.ts.j2",
                f"{DOMAIN_DIR}/value-objects/{{kebabCase}}.value-object.ts",
            ),
            file_template(
                "value-object-test",
                "tests/value-object.spec.ts.j2",
                f"{DOMAIN_TEST_DIR}/{{kebabCase}}.value-object.spec.ts",
                unless_skip_tests(),
            ),
        ],
        dependencies=[DOMAIN_DIR],
    )


class RepositoryGenerator(BaseGenerator):
    """Repository interface plus in-memory implementation for a domain."""

    generator_type: ClassVar[str] = "repository"
    description: ClassVar[str] = "Generate a repository interface and in-memory implementation"
    required_fields: ClassVar[tuple[str, ...]] = ("domain_name",)
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="Repository",
        type="repository",
        description=description,
        templates=[
            file_template(
                "repository-interface",
                "domain/repository.interface.ts.j2",
                f"{DOMAIN_DIR}/repositories/{{kebabCase}}.repository.interface.ts",
            ),
            file_template(
                "repository",
                "infrastructure/repository.ts.j2",
                "src/infrastructure/repositories/{kebabCase}.repository.ts",
            ),
        ],
        dependencies=[DOMAIN_DIR],
    )

    def subject_name(self, context: GenerationContext) -> str | None:
        return context.domain_name

    def wiring_plan(self, context: GenerationContext) -> WiringPlan:
        return repository_plan(self.domain_names(context))


class ServiceGenerator(DomainMemberGenerator):
    generator_type: ClassVar[str] = "service"
    description: ClassVar[str] = "Generate a domain service"
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="Domain Service",
        type="service",
        description=description,
        templates=[
            file_template("service", "domain/service.ts.j2", f"{DOMAIN_DIR}/services/{{kebabCase}}.service.ts"),
        ],
        dependencies=[DOMAIN_DIR],
    )

    def wiring_plan(self, context: GenerationContext) -> WiringPlan:
        names = NamingVariants.model_validate(context.template_data)
        return service_plan(self.domain_names(context), f"{names.pascal_case}Service", f"{names.kebab_case}.service")


class UseCaseGenerator(DomainMemberGenerator):
    generator_type: ClassVar[str] = "use-case"
    description: ClassVar[str] = "Generate an application use case"
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="Use Case",
        type="use-case",
        description=description,
        templates=[
            file_template("use-case", "application/use-case.ts.j2", f"{USE_CASE_DIR}/{{kebabCase}}.use-case.ts"),
            file_template(
                "use-case-test",
                "tests/use-case.spec.ts.j2",
                f"{APPLICATION_TEST_DIR}/{{kebabCase}}.use-case.spec.ts",
                unless_skip_tests(),
            ),
        ],
        dependencies=[DOMAIN_DIR],
    )

    def wiring_plan(self, context: GenerationContext) -> WiringPlan:
        names = NamingVariants.model_validate(context.template_data)
        return use_case_plan(self.domain_names(context), f"{names.pascal_case}UseCase", f"{names.kebab_case}.use-case")
