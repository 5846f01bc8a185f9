"""Generator base class and the per-call generation state machine.

Every generator runs the same sequence for one :class:`GenerationContext`:

1. **Validating** -- ``prepare`` fills derived template data, required
   context fields and naming variants are checked, and the project-relative
   dependency paths of the generator config must exist.  A failure here is
   recorded on the result and nothing is written.
2. **Rendering / Writing** -- every applicable template of the generator
   config is rendered and written.  Existing files are skipped unless
   ``force`` is set.  Render and write failures are recorded per file.
3. **Patching** -- when no errors were recorded, the generator's
   :class:`~express_ddd_gen.scaffolder.wiring.WiringPlan` is applied to the
   shared wiring files.  Patch problems only add warnings.

``success`` on the result is ``not errors``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, Field, computed_field, field_validator

from ..config import GeneratorSettings
from ..errors import DependencyNotFound, MissingRequiredField, RenderError, ScaffoldError, WriteError
from ..naming import NamingVariants, derive_naming_variants
from ..utils import print_debug
from .files import FileRepository
from .registry import GeneratorConfig, TemplateDefinition, TemplateRegistry
from .templates import TemplateRenderer
from .wiring import WiringPlan, apply_plan

# Keys every naming-variant dump carries; checked before rendering.
NAMING_KEYS = ("camelCase", "pascalCase", "kebabCase", "lowercase")


# ---------------------------------------------------------------------------
# Context and result models
# ---------------------------------------------------------------------------


class GenerationContext(BaseModel):
    """Input to one generator call."""

    project_root: Path = Field(..., description="Absolute path of the target project")
    domain_name: str | None = Field(default=None, description="Domain the output belongs to")
    entity_name: str | None = Field(default=None, description="Subject for entity-level generators")
    template_data: dict[str, Any] = Field(
        default_factory=dict, description="Naming variants, flags and user config"
    )
    options: dict[str, Any] = Field(default_factory=dict, description="Raw command options")

    @field_validator("project_root")
    @classmethod
    def _absolute(cls, value: Path) -> Path:
        return value.resolve()

    @property
    def force(self) -> bool:
        return bool(self.options.get("force") or self.template_data.get("force"))

    @property
    def skip_tests(self) -> bool:
        return bool(self.options.get("skip_tests") or self.template_data.get("skipTests"))


class GenerationResult(BaseModel):
    """Outcome of one generator call."""

    generated_files: list[str] = Field(default_factory=list)
    skipped_files: list[str] = Field(default_factory=list)
    updated_files: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success(self) -> bool:
        return not self.errors

    def merge(self, other: "GenerationResult") -> "GenerationResult":
        """Fold *other* into this result (used when one generator runs another)."""
        self.generated_files.extend(other.generated_files)
        self.skipped_files.extend(other.skipped_files)
        for path in other.updated_files:
            if path not in self.updated_files:
                self.updated_files.append(path)
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


# ---------------------------------------------------------------------------
# Base generator
# ---------------------------------------------------------------------------


class BaseGenerator:
    """Renders the templates of one :class:`GeneratorConfig` and wires the result.

    Subclasses set :attr:`generator_type` and :attr:`config`, and override
    :meth:`prepare`, :meth:`before_render` or :meth:`wiring_plan` as needed.
    """

    generator_type: ClassVar[str] = ""
    description: ClassVar[str] = ""
    required_fields: ClassVar[tuple[str, ...]] = ()
    config: ClassVar[GeneratorConfig | None] = None

    def __init__(
        self,
        renderer: TemplateRenderer,
        registry: TemplateRegistry,
        settings: GeneratorSettings,
    ) -> None:
        self.renderer = renderer
        self.registry = registry
        self.settings = settings

    # -- Public API --------------------------------------------------------

    async def generate(self, context: GenerationContext) -> GenerationResult:
        """Run the full Validating -> Writing -> Patching sequence."""
        result = GenerationResult()
        files = FileRepository(context.project_root)

        try:
            self.prepare(context)
            self.validate(context)
            await self.check_dependencies(context, files)
            await self.before_render(context, files, result)
        except ScaffoldError as exc:
            result.errors.append(str(exc))
            return result
        if result.errors:
            return result

        for template in self.registry.get_applicable_templates(self.generator_type, context):
            await self._write_template(template, context, files, result)

        if result.errors:
            print_debug(f"{self.generator_type}: skipping wiring after {len(result.errors)} error(s)")
            return result

        plan = self.wiring_plan(context)
        if plan is not None and not plan.is_empty():
            patched = await apply_plan(files, plan, self.settings.patch_targets)
            for path, patch_result in patched.items():
                result.warnings.extend(patch_result.warnings)
                if patch_result.changed and path not in result.updated_files:
                    result.updated_files.append(path)
        return result

    # -- Hooks -------------------------------------------------------------

    def subject_name(self, context: GenerationContext) -> str | None:
        """The name the top-level naming variants are derived from."""
        return context.entity_name or context.domain_name

    def prepare(self, context: GenerationContext) -> None:
        """Add derived values to ``context.template_data`` before validation.

        Fills in the naming variants of :meth:`subject_name`, ``domainNames``
        and the ``skipTests`` / ``force`` flags unless already present.
        Subclasses extending this should call ``super().prepare``.
        """
        data = context.template_data
        subject = self.subject_name(context)
        if subject and not all(key in data for key in NAMING_KEYS):
            data.update(derive_naming_variants(subject).as_template_data())
        if context.domain_name and "domainNames" not in data:
            data["domainNames"] = derive_naming_variants(context.domain_name).as_template_data()
        data.setdefault("skipTests", context.skip_tests)
        data.setdefault("force", context.force)

    async def before_render(
        self, context: GenerationContext, files: FileRepository, result: GenerationResult
    ) -> None:
        """Run after validation and before any template is written."""

    def wiring_plan(self, context: GenerationContext) -> WiringPlan | None:
        """Patches for the shared wiring files, or ``None`` for no wiring."""
        return None

    # -- Validation --------------------------------------------------------

    def validate(self, context: GenerationContext) -> None:
        """Check required context fields and the naming-variant keys.

        Raises:
            MissingRequiredField: If any of them is absent.
        """
        for name in self.required_fields:
            if not getattr(context, name, None):
                raise MissingRequiredField(f"'{name}' is required for {self.generator_type} generation")
        missing = [key for key in NAMING_KEYS if key not in context.template_data]
        if missing:
            raise MissingRequiredField(
                f"Template data for {self.generator_type} is missing naming variants: {', '.join(missing)}"
            )

    async def check_dependencies(self, context: GenerationContext, files: FileRepository) -> None:
        """Every dependency path of the config must exist in the project.

        Raises:
            DependencyNotFound: On the first missing path.
        """
        config = self.registry.get_config(self.generator_type)
        if config is None:
            return
        for pattern in config.dependencies:
            path = self.registry.resolve_output_path(pattern, context.template_data)
            if not await files.exists(path):
                raise DependencyNotFound(self.dependency_message(context, path))

    def dependency_message(self, context: GenerationContext, path: str) -> str:
        domain = context.domain_name
        if domain and path.startswith("src/domain/"):
            return (
                f"Domain '{domain}' does not exist ({path} not found). "
                f"Run 'generate:domain {domain}' first."
            )
        return f"Required path {path} not found"

    # -- Rendering + writing -----------------------------------------------

    async def _write_template(
        self,
        template: TemplateDefinition,
        context: GenerationContext,
        files: FileRepository,
        result: GenerationResult,
    ) -> None:
        try:
            output = self.registry.resolve_output_path(template.output_path, context.template_data)
        except ScaffoldError as exc:
            result.errors.append(str(exc))
            return

        if template.type == "directory":
            for template_key, relative in self.renderer.list_tree(template.path):
                target = f"{output.rstrip('/')}/{relative}" if output else relative
                await self._write_one(template_key, target, context, files, result)
        else:
            await self._write_one(template.path, output, context, files, result)

    async def _write_one(
        self,
        template_key: str,
        output: str,
        context: GenerationContext,
        files: FileRepository,
        result: GenerationResult,
    ) -> None:
        relative = files.relative(output)
        if not context.force and await files.exists(output):
            print_debug(f"Skipping existing file {relative}")
            result.skipped_files.append(relative)
            return
        try:
            content = self.renderer.render(template_key, context.template_data)
            await files.write_text(output, content)
        except (RenderError, WriteError) as exc:
            result.errors.append(str(exc))
            return
        print_debug(f"Wrote {relative}")
        result.generated_files.append(relative)

    # -- Helpers -----------------------------------------------------------

    @staticmethod
    def domain_names(context: GenerationContext) -> NamingVariants:
        """Naming variants of the context's domain, from ``domainNames``.

        Falls back to the top-level variants for domain-level generators.
        """
        data = context.template_data.get("domainNames") or context.template_data
        return NamingVariants.model_validate(data)


class ConfiguredGenerator(BaseGenerator):
    """Generator for a type that only exists as a loaded JSON config.

    Renders the config's templates; no wiring.
    """

    def __init__(
        self,
        generator_type: str,
        renderer: TemplateRenderer,
        registry: TemplateRegistry,
        settings: GeneratorSettings,
    ) -> None:
        super().__init__(renderer, registry, settings)
        self.generator_type = generator_type  # type: ignore[misc]
