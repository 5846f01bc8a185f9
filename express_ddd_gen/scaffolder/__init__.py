"""Scaffolding engine -- templates, generators and DI wiring.

Quick usage::

    from express_ddd_gen.scaffolder import GenerationContext, GeneratorFactory

    factory = GeneratorFactory()
    generator = factory.create("domain")
    result = await generator.generate(
        GenerationContext(project_root=Path("my-api"), domain_name="order")
    )
"""

from express_ddd_gen.scaffolder.factory import GeneratorFactory
from express_ddd_gen.scaffolder.generator import BaseGenerator, GenerationContext, GenerationResult
from express_ddd_gen.scaffolder.patcher import Patch, PatchResult, Placement, apply_patches
from express_ddd_gen.scaffolder.templates import TemplateRenderer

__all__ = [
    "BaseGenerator",
    "GenerationContext",
    "GenerationResult",
    "GeneratorFactory",
    "Patch",
    "PatchResult",
    "Placement",
    "TemplateRenderer",
    "apply_patches",
]
