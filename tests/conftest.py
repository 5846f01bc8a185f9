"""Shared pytest fixtures for the express-ddd-gen test suite.

Provides reusable fixtures for:
- Generator settings and a factory rooted in a temporary directory
- A freshly scaffolded project (``new``) to generate domains into
- The three wiring files rendered from the project templates
"""

from __future__ import annotations

from pathlib import Path

import pytest

from express_ddd_gen.config import GeneratorSettings
from express_ddd_gen.scaffolder.factory import GeneratorFactory
from express_ddd_gen.scaffolder.generator import GenerationContext
from express_ddd_gen.scaffolder.templates import TemplateRenderer
from express_ddd_gen.utils import set_verbose


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_verbose(monkeypatch: pytest.MonkeyPatch):
    """Every test starts non-verbose with no DDDGEN_* overrides."""
    for name in ("DDDGEN_PROJECT_ROOT", "DDDGEN_TEMPLATE_DIR", "DDDGEN_CONFIGS_DIR", "DDDGEN_VERBOSE"):
        monkeypatch.delenv(name, raising=False)
    set_verbose(False)
    yield
    set_verbose(False)


# ---------------------------------------------------------------------------
# Settings & factory
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path: Path) -> GeneratorSettings:
    return GeneratorSettings(project_root=tmp_path)


@pytest.fixture
def factory(settings: GeneratorSettings) -> GeneratorFactory:
    return GeneratorFactory(settings)


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@pytest.fixture
async def project(tmp_path: Path, factory: GeneratorFactory) -> Path:
    """A project scaffolded by the ``project`` generator at ``tmp_path/shop``."""
    root = tmp_path / "shop"
    result = await factory.create("project").generate(
        GenerationContext(project_root=root, template_data={"projectName": "shop"})
    )
    assert result.success, result.errors
    return root


@pytest.fixture
def make_context():
    """Build a GenerationContext with keyword shortcuts."""

    def _make(
        root: Path,
        domain: str | None = None,
        entity: str | None = None,
        **options,
    ) -> GenerationContext:
        return GenerationContext(
            project_root=root, domain_name=domain, entity_name=entity, options=options
        )

    return _make


@pytest.fixture
def wiring_sources(renderer: TemplateRenderer) -> dict[str, str]:
    """types.ts, container.ts and routes/index.ts exactly as ``new`` writes them."""
    data = {"projectName": "shop", "kebabCase": "shop", "description": "", "port": 3000}
    return {
        "types": renderer.render("project/src/infrastructure/types.ts.j2", data),
        "container": renderer.render("project/src/infrastructure/container.ts.j2", data),
        "routes": renderer.render("project/src/presentation/http/routes/index.ts.j2", data),
    }


def read(root: Path, relative: str) -> str:
    return (root / relative).read_text(encoding="utf-8")
