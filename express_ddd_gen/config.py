"""express-ddd-gen configuration.

Typed settings for a scaffolding run.  Settings use a Pydantic v2 model so
they are validated at construction time and can be overridden from
environment variables without boiler-plate.

``load_config_file`` reads the ``--config`` file that is merged into a
command's template data (JSON, or YAML for ``.yaml``/``.yml`` files).
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .errors import UserInputError


_TRUE_VALUES = {"1", "true", "yes", "on"}


class GeneratorSettings(BaseModel):
    """Settings shared by every command.

    The three wiring-file paths are relative to the project root; they only
    need changing for projects whose layout deviates from the one ``new``
    creates.
    """

    project_root: Path = Field(default_factory=Path.cwd, description="Project being generated into")
    template_dir: Path | None = Field(
        default=None, description="Override for the packaged Jinja2 templates"
    )
    configs_dir: Path | None = Field(
        default=None, description="Directory of extra JSON generator configs"
    )
    types_file: str = Field(default="src/infrastructure/types.ts")
    container_file: str = Field(default="src/infrastructure/container.ts")
    routes_index_file: str = Field(default="src/presentation/http/routes/index.ts")
    verbose: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def patch_targets(self) -> dict[str, str]:
        """Wiring-file paths keyed the way wiring plans address them."""
        return {
            "types": self.types_file,
            "container": self.container_file,
            "routes": self.routes_index_file,
        }

    def with_project_root(self, root: str | Path) -> "GeneratorSettings":
        return self.model_copy(update={"project_root": Path(root).resolve()})

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "GeneratorSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            DDDGEN_PROJECT_ROOT, DDDGEN_TEMPLATE_DIR, DDDGEN_CONFIGS_DIR,
            DDDGEN_VERBOSE.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("DDDGEN_PROJECT_ROOT"):
            kwargs["project_root"] = Path(os.environ["DDDGEN_PROJECT_ROOT"])
        if os.environ.get("DDDGEN_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["DDDGEN_TEMPLATE_DIR"])
        if os.environ.get("DDDGEN_CONFIGS_DIR"):
            kwargs["configs_dir"] = Path(os.environ["DDDGEN_CONFIGS_DIR"])
        if os.environ.get("DDDGEN_VERBOSE"):
            kwargs["verbose"] = os.environ["DDDGEN_VERBOSE"].strip().lower() in _TRUE_VALUES
        return cls(**kwargs)


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load a ``--config`` file as a dict.

    ``.yaml`` / ``.yml`` files are parsed with PyYAML, everything else as
    JSON.

    Raises:
        UserInputError: If the file is missing, unparsable, or its top level
            is not an object.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise UserInputError(f"Configuration file not found: {file_path}")

    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise UserInputError(f"Cannot read configuration file {file_path}: {exc}") from exc

    try:
        if file_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise UserInputError(f"Invalid configuration file {file_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise UserInputError(
            f"Configuration file {file_path} must contain an object, got {type(data).__name__}"
        )
    return data
