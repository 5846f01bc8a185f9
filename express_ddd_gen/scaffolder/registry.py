"""Template registry: which templates each generator renders, and where to.

A :class:`GeneratorConfig` lists the :class:`TemplateDefinition` entries for
one generator type.  Output paths carry ``{field.path}`` placeholders that are
looked up in the generation context's ``template_data`` (dotted paths reach
into nested dicts such as ``domainNames``).  A definition is applied only
when all of its :class:`TemplateCondition` entries hold.

Built-in configurations are declared next to each generator class (the
``*_gen`` modules) and registered by the factory; extra ones can be loaded
from a directory of JSON files with :meth:`TemplateRegistry.load_from_directory`.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import UserInputError
from ..utils import print_debug, print_warning

if TYPE_CHECKING:
    from .generator import GenerationContext


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class TemplateCondition(BaseModel):
    """A test on one context field."""

    field: str = Field(..., description="Dotted path into template data, falling back to options")
    operator: Literal["equals", "not-equals", "exists", "not-exists"]
    value: Any = None


class TemplateDefinition(BaseModel):
    """One template (or template directory) and the path it is written to."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str = Field(..., description="Template id relative to the template root")
    type: Literal["file", "directory"] = "file"
    output_path: str = Field(
        ..., alias="outputPath", description="Output path with {field.path} placeholders"
    )
    conditions: list[TemplateCondition] = Field(default_factory=list)


class GeneratorConfig(BaseModel):
    """Templates and prerequisites for one generator type."""

    name: str
    type: str
    description: str = ""
    templates: list[TemplateDefinition] = Field(default_factory=list)
    dependencies: list[str] = Field(
        default_factory=list,
        description="Project-relative path patterns that must exist before generating",
    )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_PLACEHOLDER_RE = re.compile(r"\{([^{}]+)\}")
MISSING = object()


class TemplateRegistry:
    """Generator type -> :class:`GeneratorConfig` lookup."""

    def __init__(self, configs: list[GeneratorConfig] | None = None) -> None:
        self._configs: dict[str, GeneratorConfig] = {}
        for config in configs or []:
            self.register(config)

    def register(self, config: GeneratorConfig) -> None:
        """Register *config*, replacing any earlier config of the same type."""
        print_debug(f"Registering generator config: {config.name} ({config.type})")
        self._configs[config.type] = config

    def get_config(self, generator_type: str) -> GeneratorConfig | None:
        return self._configs.get(generator_type)

    def get_templates(self, generator_type: str) -> list[TemplateDefinition]:
        config = self._configs.get(generator_type)
        return list(config.templates) if config else []

    def generator_types(self) -> list[str]:
        return sorted(self._configs)

    # -- Conditions ----------------------------------------------------------

    def evaluate_conditions(
        self, conditions: list[TemplateCondition], context: "GenerationContext"
    ) -> bool:
        """Return ``True`` when every condition holds (vacuously for none)."""
        for condition in conditions:
            value = lookup(context.template_data, condition.field)
            if value is MISSING or value is None:
                value = context.options.get(condition.field)
            if condition.operator == "equals" and value != condition.value:
                return False
            if condition.operator == "not-equals" and value == condition.value:
                return False
            if condition.operator == "exists" and value is None:
                return False
            if condition.operator == "not-exists" and value is not None:
                return False
        return True

    def get_applicable_templates(
        self, generator_type: str, context: "GenerationContext"
    ) -> list[TemplateDefinition]:
        return [
            template
            for template in self.get_templates(generator_type)
            if self.evaluate_conditions(template.conditions, context)
        ]

    # -- Output paths ----------------------------------------------------------

    def resolve_output_path(self, output_path: str, template_data: dict[str, Any]) -> str:
        """Substitute ``{field.path}`` placeholders from *template_data*.

        Raises:
            UserInputError: If a placeholder has no value.
        """

        def _replace(match: re.Match[str]) -> str:
            value = lookup(template_data, match.group(1).strip())
            if value is MISSING or value is None:
                raise UserInputError(
                    f"No value for placeholder {{{match.group(1)}}} in output path {output_path!r}"
                )
            return str(value)

        return _PLACEHOLDER_RE.sub(_replace, output_path)

    # -- Loading -----------------------------------------------------------

    def load_from_directory(self, config_dir: str | Path) -> list[str]:
        """Register every ``*.json`` generator config found in *config_dir*.

        Files that are not valid configs are reported as warnings and
        skipped.

        Returns:
            The generator types that were registered.
        """
        directory = Path(config_dir)
        if not directory.is_dir():
            print_warning(f"Generator config directory not found: {directory}")
            return []

        loaded: list[str] = []
        for config_file in sorted(directory.glob("*.json")):
            try:
                raw = json.loads(config_file.read_text(encoding="utf-8"))
                config = GeneratorConfig.model_validate(raw)
            except (OSError, json.JSONDecodeError, ValidationError) as exc:
                print_warning(f"Skipping generator config {config_file.name}: {exc}")
                continue
            self.register(config)
            loaded.append(config.type)
        return loaded


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def lookup(data: dict[str, Any], dotted: str) -> Any:
    """Follow a dotted path (``domainNames.lowercase``) through nested dicts.

    Returns :data:`MISSING` when any step is absent.
    """
    current: Any = data
    for key in dotted.split("."):
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return MISSING
    return current


def file_template(
    name: str, path: str, output_path: str, conditions: list[TemplateCondition] | None = None
) -> TemplateDefinition:
    """Shorthand for a ``type="file"`` definition in built-in configs."""
    return TemplateDefinition(
        name=name, path=path, type="file", output_path=output_path, conditions=conditions or []
    )


def unless_skip_tests() -> list[TemplateCondition]:
    """Conditions for test templates: rendered unless ``--skip-tests``."""
    return [TemplateCondition(field="skipTests", operator="not-equals", value=True)]
