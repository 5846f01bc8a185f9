"""Dependency-injection wiring for generated code.

Generated projects register every injectable class in three shared files:

``src/infrastructure/types.ts``
    the ``TYPES`` symbol registry, grouped under ``// Domain Services``,
    ``// Use Cases``, ``// Repositories`` and ``// Controllers``.
``src/infrastructure/container.ts``
    inversify imports (``// Domain``, ``// Application``,
    ``// Infrastructure``, ``// Presentation``) and ``container.bind`` calls
    (``// Repositories``, ``// Domain Services``, ``// Use Cases``,
    ``// Controllers``), closed by ``export { container };``.
``src/presentation/http/routes/index.ts``
    route module imports under ``// Route Modules`` and
    ``RouteRegistry.register`` calls ahead of ``// END_GENERATED_ROUTES``.

The functions below build a :class:`WiringPlan` (one patch per inserted
line or statement) for each kind of generated artefact; :func:`apply_plan`
runs it through the patch engine.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from ..errors import PatchWarning, WriteError
from ..naming import NamingVariants
from .files import FileRepository
from .patcher import Patch, PatchResult, Placement, apply_patches, whole_line

TYPES_FILE = "src/infrastructure/types.ts"
CONTAINER_FILE = "src/infrastructure/container.ts"
ROUTES_INDEX_FILE = "src/presentation/http/routes/index.ts"

DEFAULT_TARGETS: dict[str, str] = {
    "types": TYPES_FILE,
    "container": CONTAINER_FILE,
    "routes": ROUTES_INDEX_FILE,
}

CONTAINER_EXPORT = "export { container };"
ROUTES_END_MARKER = "// END_GENERATED_ROUTES"

CRUD_VERBS = ("Create", "Get", "Update", "Delete")


# ---------------------------------------------------------------------------
# Plan container
# ---------------------------------------------------------------------------


@dataclass
class WiringPlan:
    """Patches grouped by target file key (``types``, ``container``, ``routes``)."""

    types: list[Patch] = field(default_factory=list)
    container: list[Patch] = field(default_factory=list)
    routes: list[Patch] = field(default_factory=list)

    def extend(self, other: "WiringPlan") -> "WiringPlan":
        self.types.extend(other.types)
        self.container.extend(other.container)
        self.routes.extend(other.routes)
        return self

    def items(self) -> list[tuple[str, list[Patch]]]:
        """Non-empty ``(target_key, patches)`` pairs in a fixed order."""
        pairs = [("types", self.types), ("container", self.container), ("routes", self.routes)]
        return [(key, patches) for key, patches in pairs if patches]

    def is_empty(self) -> bool:
        return not self.items()


# ---------------------------------------------------------------------------
# Patch builders
# ---------------------------------------------------------------------------


def symbol_patch(section: str, name: str) -> Patch:
    """``  Name: Symbol.for('Name'),`` at the end of a ``TYPES`` section."""
    pattern = re.compile(rf"^[ \t]*{re.escape(name)}[ \t]*:", re.MULTILINE)
    return Patch(
        anchor=whole_line(f"// {section}"),
        text=f"  {name}: Symbol.for('{name}'),\n",
        placement=Placement.SECTION,
        duplicate_test=lambda source: pattern.search(source) is not None,
        separator=",",
        label=f"TYPES.{name}",
    )


def import_patch(section: str, symbols: list[str], module: str) -> Patch:
    statement = f"import {{ {', '.join(symbols)} }} from '{module}';"
    return Patch(
        anchor=whole_line(f"// {section}"),
        text=statement + "\n",
        placement=Placement.SECTION,
        label=f"import {', '.join(symbols)}",
    )


def binding_patch(section: str, token: str, implementation: str, interface: str | None = None) -> Patch:
    """``container.bind<I>(TYPES.Token).to(Impl);`` at the end of a binding section.

    Any existing ``bind`` for the same token counts as applied.
    """
    pattern = re.compile(rf"container\.bind<[^>]*>\(\s*TYPES\.{re.escape(token)}\s*\)")
    return Patch(
        anchor=whole_line(f"// {section}"),
        text=f"container.bind<{interface or implementation}>(TYPES.{token}).to({implementation});\n",
        placement=Placement.SECTION,
        duplicate_test=lambda source: pattern.search(source) is not None,
        label=f"bind TYPES.{token}",
    )


def rebind_patch(token: str, implementation: str, interface: str) -> Patch:
    """Re-point *token* at *implementation*, right before the container export."""
    pattern = re.compile(
        rf"container\.rebind<[^>]*>\(\s*TYPES\.{re.escape(token)}\s*\)\.to\(\s*{re.escape(implementation)}\s*\)"
    )
    return Patch(
        anchor=whole_line(CONTAINER_EXPORT),
        text=f"container.rebind<{interface}>(TYPES.{token}).to({implementation});\n",
        placement=Placement.BEFORE,
        duplicate_test=lambda source: pattern.search(source) is not None,
        label=f"rebind TYPES.{token}",
    )


def route_patches(names: NamingVariants) -> list[Patch]:
    routes_symbol = f"{names.camel_case}Routes"
    module = f"./{names.kebab_case}.routes"
    registration = (
        "RouteRegistry.register({\n"
        f"  path: '/{names.plural_kebab_case}',\n"
        f"  router: {routes_symbol},\n"
        f"  name: '{names.pascal_case} Routes',\n"
        f"  description: '{names.pascal_case} management endpoints',\n"
        "});\n"
    )
    router_ref = re.compile(rf"router:\s*{re.escape(routes_symbol)}\b")
    return [
        import_patch("Route Modules", [routes_symbol], module),
        Patch(
            anchor=whole_line(ROUTES_END_MARKER),
            text=registration,
            placement=Placement.BEFORE,
            duplicate_test=lambda source: router_ref.search(source) is not None,
            label=f"register /{names.plural_kebab_case}",
        ),
    ]


# ---------------------------------------------------------------------------
# Plans per generated artefact
# ---------------------------------------------------------------------------


def repository_plan(domain: NamingVariants) -> WiringPlan:
    pascal = domain.pascal_case
    return WiringPlan(
        types=[symbol_patch("Repositories", f"{pascal}Repository")],
        container=[
            import_patch("Infrastructure", [f"{pascal}Repository"], f"./repositories/{domain.kebab_case}.repository"),
            import_patch(
                "Infrastructure",
                [f"I{pascal}Repository"],
                f"../domain/{domain.lowercase}/repositories/{domain.kebab_case}.repository.interface",
            ),
            binding_patch("Repositories", f"{pascal}Repository", f"{pascal}Repository", f"I{pascal}Repository"),
        ],
    )


def service_plan(domain: NamingVariants, class_name: str, module_name: str) -> WiringPlan:
    """Wiring for a domain service class living in ``src/domain/<d>/services/``."""
    return WiringPlan(
        types=[symbol_patch("Domain Services", class_name)],
        container=[
            import_patch("Domain", [class_name], f"../domain/{domain.lowercase}/services/{module_name}"),
            binding_patch("Domain Services", class_name, class_name),
        ],
    )


def use_case_plan(domain: NamingVariants, class_name: str, module_name: str) -> WiringPlan:
    """Wiring for one use-case class living in ``src/application/use-cases/<d>/``."""
    return WiringPlan(
        types=[symbol_patch("Use Cases", class_name)],
        container=[
            import_patch("Application", [class_name], f"../application/use-cases/{domain.lowercase}/{module_name}"),
            binding_patch("Use Cases", class_name, class_name),
        ],
    )


def controller_plan(domain: NamingVariants) -> WiringPlan:
    controller = f"{domain.pascal_case}Controller"
    return WiringPlan(
        types=[symbol_patch("Controllers", controller)],
        container=[
            import_patch("Presentation", [controller], f"../presentation/http/controllers/{domain.kebab_case}.controller"),
            binding_patch("Controllers", controller, controller),
        ],
    )


def presentation_plan(domain: NamingVariants) -> WiringPlan:
    """Controller wiring plus route registration."""
    plan = controller_plan(domain)
    plan.routes.extend(route_patches(domain))
    return plan


def domain_plan(domain: NamingVariants) -> WiringPlan:
    """Everything a full ``generate:domain`` run registers."""
    pascal = domain.pascal_case
    kebab = domain.kebab_case
    plan = service_plan(domain, f"{pascal}DomainService", f"{kebab}-domain.service")
    for verb in CRUD_VERBS:
        plan.extend(use_case_plan(domain, f"{verb}{pascal}UseCase", f"{verb.lower()}-{kebab}.use-case"))
    plan.extend(repository_plan(domain))
    plan.extend(presentation_plan(domain))
    return plan


def database_plan(entity: NamingVariants, backend: str, repository_class: str) -> WiringPlan:
    """Import the database repository and rebind the repository token to it.

    Args:
        entity: Naming variants of the entity.
        backend: ``"mongodb"`` or ``"mysql"``; the directory under
            ``src/infrastructure/database/<kebab>/``.
        repository_class: Class exported by the generated repository.
    """
    kebab = entity.kebab_case
    return WiringPlan(
        container=[
            import_patch(
                "Infrastructure",
                [repository_class],
                f"./database/{kebab}/{backend}/repositories/{kebab}.repository",
            ),
            rebind_patch(f"{entity.pascal_case}Repository", repository_class, f"I{entity.pascal_case}Repository"),
        ],
    )


# ---------------------------------------------------------------------------
# Applying plans
# ---------------------------------------------------------------------------


async def patch_file(files: FileRepository, path: str, patches: list[Patch]) -> PatchResult:
    """Read *path*, apply *patches* and write it back if anything changed.

    Never raises: a missing or unreadable file, a missing anchor or a failed
    write are all returned as warnings on the result.
    """
    if not await files.exists(path):
        result = PatchResult(text="", original="")
        result.warnings.append(PatchWarning(f"{path} not found; skipped {len(patches)} patch(es)"))
        return result

    try:
        source = await files.read_text(path)
    except WriteError as exc:
        result = PatchResult(text="", original="")
        result.warnings.append(PatchWarning(exc.message))
        return result

    result = apply_patches(source, patches)
    result.warnings = [PatchWarning(f"{path}: {warning}") for warning in result.warnings]
    if result.changed:
        try:
            await files.write_text(path, result.text)
        except WriteError as exc:
            result.warnings.append(PatchWarning(exc.message))
    return result


async def apply_plan(
    files: FileRepository,
    plan: WiringPlan,
    targets: Mapping[str, str] | None = None,
) -> dict[str, PatchResult]:
    """Apply every non-empty patch group of *plan* to its target file.

    Args:
        files: Repository rooted at the project.
        plan: The patches to apply.
        targets: Mapping of target key to project-relative path; defaults to
            :data:`DEFAULT_TARGETS`.

    Returns:
        ``{relative_path: PatchResult}`` for each file touched.
    """
    paths = {**DEFAULT_TARGETS, **(targets or {})}
    results: dict[str, PatchResult] = {}
    for key, patches in plan.items():
        path = paths[key]
        results[path] = await patch_file(files, path, patches)
    return results
