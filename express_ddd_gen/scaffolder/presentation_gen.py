"""HTTP presentation-layer generators for an existing domain."""

from __future__ import annotations

from typing import ClassVar

from .generator import BaseGenerator, GenerationContext
from .registry import GeneratorConfig, file_template
from .wiring import WiringPlan, controller_plan, presentation_plan

DOMAIN_DIR = "src/domain/{domainNames.lowercase}"
HTTP_DIR = "src/presentation/http"


class ControllerGenerator(BaseGenerator):
    """Controller class bound in the container, without routes."""

    generator_type: ClassVar[str] = "controller"
    description: ClassVar[str] = "Generate an HTTP controller for a domain"
    required_fields: ClassVar[tuple[str, ...]] = ("domain_name",)
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="Controller",
        type="controller",
        description=description,
        templates=[
            file_template(
                "controller", "presentation/controller.ts.j2", f"{HTTP_DIR}/controllers/{{kebabCase}}.controller.ts"
            ),
        ],
        dependencies=[DOMAIN_DIR],
    )

    def subject_name(self, context: GenerationContext) -> str | None:
        return context.domain_name

    def wiring_plan(self, context: GenerationContext) -> WiringPlan:
        return controller_plan(self.domain_names(context))


class PresentationHttpGenerator(ControllerGenerator):
    """Controller, request DTOs and an Express router registered with the route registry."""

    generator_type: ClassVar[str] = "presentation-http"
    description: ClassVar[str] = "Generate the HTTP presentation layer (controller, DTOs, routes) for a domain"
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="Presentation HTTP",
        type="presentation-http",
        description=description,
        templates=[
            *ControllerGenerator.config.templates,
            file_template("http-dto", "presentation/http.dto.ts.j2", f"{HTTP_DIR}/dtos/{{kebabCase}}.http-dto.ts"),
            file_template("routes", "presentation/routes.ts.j2", f"{HTTP_DIR}/routes/{{kebabCase}}.routes.ts"),
        ],
        dependencies=[DOMAIN_DIR],
    )

    def wiring_plan(self, context: GenerationContext) -> WiringPlan:
        return presentation_plan(self.domain_names(context))
