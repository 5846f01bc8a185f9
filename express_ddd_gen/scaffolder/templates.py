"""Jinja2 template rendering for DDD scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``express_ddd_gen/scaffolder/templates/`` directory and renders them with
naming-variant context data.  Supports single-file rendering and listing
the files of a directory template.

Rendering failures of any kind are re-raised as
:class:`~express_ddd_gen.errors.RenderError` so that generators can record
them per file and move on.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape

from ..errors import RenderError
from ..naming import pluralize, to_camel_case, to_kebab_case, to_pascal_case, to_snake_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

TEMPLATE_SUFFIX = ".j2"

# setuptools package-data globs skip dotfiles, so ``dot-gitignore.j2`` is
# written out as ``.gitignore``.
DOTFILE_PREFIX = "dot-"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for DDD scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Templates are rendered with the generation
    context's ``template_data`` (naming variants plus generator flags).
    Undefined variables are errors rather than empty strings.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["pascal_case"] = to_pascal_case
        self.env.filters["camel_case"] = to_camel_case
        self.env.filters["kebab_case"] = to_kebab_case
        self.env.filters["snake_case"] = to_snake_case
        self.env.filters["pluralize"] = pluralize
        self.env.filters["ts_literal"] = ts_literal

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"domain/entity.ts.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.

        Raises:
            RenderError: If the template is missing, malformed, or refers to
                a variable that is not in *context*.
        """
        try:
            template = self.env.get_template(template_path)
            return template.render(**context)
        except TemplateError as exc:
            raise RenderError(f"{template_path}: {exc}") from exc

    # -- Directory templates -----------------------------------------------

    def list_tree(self, template_prefix: str) -> list[tuple[str, str]]:
        """List every ``*.j2`` file under *template_prefix*.

        The directory structure is preserved: a template at
        ``project/src/server.ts.j2`` listed with ``template_prefix="project"``
        maps to the relative output path ``src/server.ts``.

        Returns:
            Sorted ``(template_key, relative_output_path)`` pairs, with posix
            separators.  Empty when the prefix is not a directory.
        """
        prefix_path = self.template_dir / template_prefix
        if not prefix_path.is_dir():
            return []

        entries: list[tuple[str, str]] = []
        for template_file in sorted(prefix_path.rglob(f"*{TEMPLATE_SUFFIX}")):
            rel = template_file.relative_to(prefix_path)
            template_key = f"{template_prefix}/{rel.as_posix()}"
            entries.append((template_key, output_name(rel.as_posix())))
        return entries


# ---------------------------------------------------------------------------
# Output naming
# ---------------------------------------------------------------------------


def output_name(relative_template: str) -> str:
    """Map a template-relative path to its output path.

    Strips the ``.j2`` suffix and turns a leading ``dot-`` in the file name
    into ``.``.
    """
    if relative_template.endswith(TEMPLATE_SUFFIX):
        relative_template = relative_template[: -len(TEMPLATE_SUFFIX)]
    head, _, name = relative_template.rpartition("/")
    if name.startswith(DOTFILE_PREFIX):
        name = "." + name[len(DOTFILE_PREFIX):]
    return f"{head}/{name}" if head else name


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def ts_literal(value: Any) -> str:
    """Render a Python value as a TypeScript literal.

    Strings are single-quoted, booleans lower-cased and ``None`` becomes
    ``undefined``; lists and dicts are rendered recursively.
    """
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(ts_literal(v) for v in value) + "]"
    if isinstance(value, dict):
        inner = ", ".join(f"{k}: {ts_literal(v)}" for k, v in value.items())
        return "{ " + inner + " }" if inner else "{}"
    return ts_literal(str(value))
