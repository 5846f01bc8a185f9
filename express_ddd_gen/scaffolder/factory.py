"""Generator type -> generator instance dispatch."""

from __future__ import annotations

from ..config import GeneratorSettings
from ..errors import UserInputError
from .database_gen import MongoDbLazyGenerator, MySqlLazyGenerator
from .domain_gen import (
    DomainGenerator,
    EntityGenerator,
    RepositoryGenerator,
    ServiceGenerator,
    UseCaseGenerator,
    ValueObjectGenerator,
)
from .generator import BaseGenerator, ConfiguredGenerator
from .presentation_gen import ControllerGenerator, PresentationHttpGenerator
from .project_gen import ProjectGenerator
from .registry import TemplateRegistry
from .templates import TemplateRenderer

BUILTIN_GENERATORS: dict[str, type[BaseGenerator]] = {
    cls.generator_type: cls
    for cls in (
        ProjectGenerator,
        DomainGenerator,
        EntityGenerator,
        ValueObjectGenerator,
        RepositoryGenerator,
        UseCaseGenerator,
        ServiceGenerator,
        ControllerGenerator,
        PresentationHttpGenerator,
        MongoDbLazyGenerator,
        MySqlLazyGenerator,
    )
}

ALIASES: dict[str, str] = {
    "mongo-lazy": "mongodb-lazy",
    "sequelize-lazy": "mysql-lazy",
}


class GeneratorFactory:
    """Builds generators sharing one renderer and one template registry.

    Built-in generator configs are registered first; JSON configs from
    ``settings.configs_dir`` are loaded on top and may replace them or add new
    template-only generator types.
    """

    def __init__(self, settings: GeneratorSettings | None = None) -> None:
        self.settings = settings or GeneratorSettings()
        self.renderer = TemplateRenderer(self.settings.template_dir)
        self.registry = TemplateRegistry(
            [cls.config for cls in BUILTIN_GENERATORS.values() if cls.config is not None]
        )
        if self.settings.configs_dir is not None:
            self.registry.load_from_directory(self.settings.configs_dir)

    def create(self, generator_type: str) -> BaseGenerator:
        """Return a generator for *generator_type* (aliases accepted).

        Raises:
            UserInputError: If the type is neither built in nor configured.
        """
        resolved = ALIASES.get(generator_type, generator_type)
        generator_cls = BUILTIN_GENERATORS.get(resolved)
        if generator_cls is not None:
            return generator_cls(self.renderer, self.registry, self.settings)
        if self.registry.get_config(resolved) is not None:
            return ConfiguredGenerator(resolved, self.renderer, self.registry, self.settings)
        raise UserInputError(
            f"Unknown generator type '{generator_type}'. "
            f"Available: {', '.join(self.available_types())}"
        )

    def available_types(self) -> list[str]:
        return sorted(set(BUILTIN_GENERATORS) | set(self.registry.generator_types()))
