"""Lazy database generators (``generate:mongodb:lazy`` / ``generate:mysql:lazy``).

"Lazy" because the database layer is added to an entity after the fact:
the domain structure is generated first if it does not exist yet, then the
connection, schema, model, repository and barrel files are rendered under
``src/infrastructure/database/<kebab>/<backend>/`` and the repository token is
re-bound to the database repository in the container.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from ..errors import UserInputError
from ..naming import NamingVariants
from ..utils import print_info
from .domain_gen import DomainGenerator
from .fields import SchemaField, enrich_mongodb_fields, enrich_mysql_fields, parse_fields, validate_fields
from .files import FileRepository
from .generator import BaseGenerator, GenerationContext, GenerationResult
from .registry import GeneratorConfig, TemplateDefinition, file_template
from .wiring import WiringPlan, database_plan


def _database_templates(backend: str) -> list[TemplateDefinition]:
    base = f"src/infrastructure/database/{{kebabCase}}/{backend}"
    return [
        file_template("connection", f"database/{backend}/connection.ts.j2", f"{base}/connection.ts"),
        file_template("schema", f"database/{backend}/schema.ts.j2", f"{base}/schemas/{{kebabCase}}.schema.ts"),
        file_template("model", f"database/{backend}/model.ts.j2", f"{base}/models/{{kebabCase}}.model.ts"),
        file_template(
            "repository",
            f"database/{backend}/repository.ts.j2",
            f"{base}/repositories/{{kebabCase}}.repository.ts",
        ),
        file_template("index", f"database/{backend}/index.ts.j2", f"{base}/index.ts"),
    ]


class LazyDatabaseGenerator(BaseGenerator, ABC):
    """Shared flow for the MongoDB and MySQL generators.

    Subclasses set :attr:`backend`, :attr:`repository_class` (a format
    string over the entity's PascalCase name) and :attr:`env_var_suffix`.
    """

    backend: ClassVar[str] = ""
    repository_class: ClassVar[str] = ""
    env_var_suffix: ClassVar[str] = ""
    npm_packages: ClassVar[tuple[str, ...]] = ()
    required_fields: ClassVar[tuple[str, ...]] = ("entity_name",)

    def prepare(self, context: GenerationContext) -> None:
        # The entity doubles as its own domain.
        if not context.domain_name:
            context.domain_name = context.entity_name
        super().prepare(context)
        if not context.entity_name:
            return
        data = context.template_data
        names = NamingVariants.model_validate(data)

        data["fields"] = self.enrich_fields(self._schema_fields(context))
        data["timestamps"] = context.options.get("timestamps") is not False and bool(data.get("timestamps", True))
        data["databaseName"] = context.options.get("db_name") or data.get("databaseName") or f"{names.snake_case}_db"
        data["envVar"] = self._env_var(context, names)
        data["repositoryClass"] = self.repository_class.format(pascal=names.pascal_case)

    async def generate(self, context: GenerationContext) -> GenerationResult:
        result = await super().generate(context)
        if result.success and self.npm_packages:
            print_info(f"Install the driver in the project: npm install {' '.join(self.npm_packages)}")
        return result

    @abstractmethod
    def enrich_fields(self, fields: list[SchemaField]) -> list[dict[str, Any]]:
        """Template-ready field definitions for this backend."""

    async def before_render(
        self, context: GenerationContext, files: FileRepository, result: GenerationResult
    ) -> None:
        """Generate the domain first when its entity or repository interface is missing."""
        domain = self.domain_names(context)
        required = [
            f"src/domain/{domain.lowercase}/entities/{domain.kebab_case}.entity.ts",
            f"src/domain/{domain.lowercase}/repositories/{domain.kebab_case}.repository.interface.ts",
        ]
        for path in required:
            if not await files.exists(path):
                break
        else:
            return

        print_info(f"Domain structure for '{context.domain_name}' not found; generating it first.")
        domain_context = GenerationContext(
            project_root=context.project_root,
            domain_name=context.domain_name,
            options={**context.options, "force": False},
            template_data={"skipTests": context.skip_tests},
        )
        domain_generator = DomainGenerator(self.renderer, self.registry, self.settings)
        result.merge(await domain_generator.generate(domain_context))

    def wiring_plan(self, context: GenerationContext) -> WiringPlan:
        names = NamingVariants.model_validate(context.template_data)
        return database_plan(names, self.backend, context.template_data["repositoryClass"])

    # -- Helpers -----------------------------------------------------------

    @staticmethod
    def _schema_fields(context: GenerationContext) -> list[SchemaField]:
        """Fields from ``--fields`` (a JSON string) or ``--config`` data (a list).

        Raises:
            UserInputError: If the value is malformed.
        """
        raw = context.options.get("fields")
        if raw is None:
            raw = context.template_data.get("fields")
        if raw is None or raw == []:
            return []
        if isinstance(raw, str):
            return parse_fields(raw)
        if isinstance(raw, list) and all(isinstance(item, SchemaField) for item in raw):
            return raw
        return validate_fields(raw)

    def _env_var(self, context: GenerationContext, names: NamingVariants) -> str:
        custom = context.options.get("env_var") or context.template_data.get("envVar")
        if custom:
            if not isinstance(custom, str):
                raise UserInputError("--env-var must be a string")
            return custom.replace("{ENTITY}", names.constant_case)
        return f"{names.constant_case}_{self.env_var_suffix}"


class MongoDbLazyGenerator(LazyDatabaseGenerator):
    generator_type: ClassVar[str] = "mongodb-lazy"
    description: ClassVar[str] = "Add a MongoDB (Mongoose) repository for an entity"
    backend: ClassVar[str] = "mongodb"
    repository_class: ClassVar[str] = "{pascal}MongoRepository"
    env_var_suffix: ClassVar[str] = "MONGODB_URI"
    npm_packages: ClassVar[tuple[str, ...]] = ("mongoose",)
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="MongoDB Lazy",
        type="mongodb-lazy",
        description=description,
        templates=_database_templates("mongodb"),
    )

    def enrich_fields(self, fields: list[SchemaField]) -> list[dict[str, Any]]:
        return enrich_mongodb_fields(fields)


class MySqlLazyGenerator(LazyDatabaseGenerator):
    generator_type: ClassVar[str] = "mysql-lazy"
    description: ClassVar[str] = "Add a MySQL (Sequelize) repository for an entity"
    backend: ClassVar[str] = "mysql"
    repository_class: ClassVar[str] = "{pascal}MySqlRepository"
    env_var_suffix: ClassVar[str] = "DATABASE_URL"
    npm_packages: ClassVar[tuple[str, ...]] = ("sequelize", "mysql2")
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="MySQL Lazy",
        type="mysql-lazy",
        description=description,
        templates=_database_templates("mysql"),
    )

    def enrich_fields(self, fields: list[SchemaField]) -> list[dict[str, Any]]:
        return enrich_mysql_fields(fields)
