"""Project skeleton generator (the ``new`` command).

Renders every template under ``templates/project/`` into the new project
directory, including the three wiring files that later ``generate:*``
commands patch.
"""

from __future__ import annotations

from typing import ClassVar

from ..errors import PreconditionError
from .files import FileRepository
from .generator import BaseGenerator, GenerationContext, GenerationResult
from .registry import GeneratorConfig, TemplateDefinition

DEFAULT_PORT = 3000


class ProjectGenerator(BaseGenerator):
    """Express + TypeScript + inversify project laid out in DDD layers."""

    generator_type: ClassVar[str] = "project"
    description: ClassVar[str] = "Create a new Express TypeScript project with DDD structure"
    config: ClassVar[GeneratorConfig] = GeneratorConfig(
        name="Project",
        type="project",
        description=description,
        templates=[
            TemplateDefinition(name="project", path="project", type="directory", output_path=""),
        ],
    )

    def subject_name(self, context: GenerationContext) -> str | None:
        return context.template_data.get("projectName") or context.project_root.name

    def prepare(self, context: GenerationContext) -> None:
        data = context.template_data
        data.setdefault("projectName", context.project_root.name)
        super().prepare(context)
        data.setdefault("description", f"{data['projectName']} API built with Express and DDD")
        data.setdefault("port", DEFAULT_PORT)

    async def before_render(
        self, context: GenerationContext, files: FileRepository, result: GenerationResult
    ) -> None:
        """Refuse to scaffold into a non-empty directory unless forced.

        Raises:
            PreconditionError: If the project directory already has content.
        """
        if not context.force and not await files.is_empty_dir(context.project_root):
            raise PreconditionError(
                f"Directory {context.project_root} already exists and is not empty. "
                "Use --force to overwrite."
            )
        await files.mkdir(context.project_root)
