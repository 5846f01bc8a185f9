"""Command-line interface for express-ddd-gen.

Each sub-command is a :class:`Command` describing its positional arguments
and options; :func:`main` turns the command table into an argparse parser,
runs the selected command and maps the outcome to an exit code.

Usage::

    express-ddd-gen new my-api
    express-ddd-gen generate:domain order
    express-ddd-gen g:uc order approve-order
    express-ddd-gen g:ml product --fields '[{"name": "price", "type": "number"}]'
"""

from __future__ import annotations

import argparse
import asyncio
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from . import __version__
from .config import GeneratorSettings, load_config_file
from .errors import PreconditionError, ScaffoldError, UserInputError
from .scaffolder.factory import GeneratorFactory
from .scaffolder.generator import GenerationContext, GenerationResult
from .utils import (
    console,
    is_verbose,
    print_banner,
    print_error,
    print_file_table,
    print_info,
    print_success,
    print_warning,
    set_verbose,
)

_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")
_PROJECT_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


# ---------------------------------------------------------------------------
# Command model
# ---------------------------------------------------------------------------


@dataclass
class CommandArgument:
    name: str
    description: str
    required: bool = True
    variadic: bool = False


@dataclass
class CommandOption:
    flags: tuple[str, ...]
    description: str
    default: Any = None
    is_flag: bool = False

    @property
    def dest(self) -> str:
        long_flag = next(f for f in self.flags if f.startswith("--"))
        return long_flag[2:].replace("-", "_")


COMMON_OPTIONS = [
    CommandOption(("--force", "-f"), "Overwrite existing files", False, is_flag=True),
    CommandOption(("--skip-tests",), "Do not generate test files", False, is_flag=True),
    CommandOption(("--config", "-c"), "JSON or YAML file merged into the template data"),
]

DATABASE_OPTIONS = [
    CommandOption(("--fields",), "JSON array of field definitions"),
    CommandOption(("--db-name",), "Database name (default: <entity>_db)"),
    CommandOption(("--env-var",), "Connection string variable; {ENTITY} is replaced by the entity name"),
    CommandOption(("--no-timestamps",), "Do not add createdAt/updatedAt", False, is_flag=True),
]


@dataclass
class Command:
    """One CLI sub-command bound to a generator type.

    ``domain_argument`` and ``entity_argument`` name the positional arguments
    that become the context's ``domain_name`` and ``entity_name``.
    """

    name: str
    generator_type: str
    description: str
    aliases: list[str] = field(default_factory=list)
    arguments: list[CommandArgument] = field(default_factory=list)
    options: list[CommandOption] = field(default_factory=lambda: list(COMMON_OPTIONS))
    domain_argument: str | None = None
    entity_argument: str | None = None
    requires_project: bool = True

    async def execute(
        self,
        args: dict[str, Any],
        options: dict[str, Any],
        settings: GeneratorSettings | None = None,
    ) -> GenerationResult:
        """Validate input, run the generator and report the result.

        Raises:
            UserInputError: On invalid names or an unreadable ``--config``.
            PreconditionError: When run outside an initialised project.
        """
        settings = settings or GeneratorSettings()
        for argument in self.arguments:
            value = args.get(argument.name)
            if argument.required and not value:
                raise UserInputError(f"Missing required argument <{argument.name}>")
            if value:
                for item in value if isinstance(value, list) else [value]:
                    self.validate_name(argument, item)

        project_root = self.project_root(args, settings)
        if self.requires_project:
            await _check_project(project_root)

        template_data: dict[str, Any] = {}
        if options.get("config"):
            template_data.update(load_config_file(options["config"]))
        if options.get("skip_tests"):
            template_data["skipTests"] = True
        if options.get("force"):
            template_data["force"] = True

        context = GenerationContext(
            project_root=project_root,
            domain_name=args.get(self.domain_argument) if self.domain_argument else None,
            entity_name=args.get(self.entity_argument) if self.entity_argument else None,
            template_data=template_data,
            options=options,
        )
        self.before_generate(context)

        generator = GeneratorFactory(settings).create(self.generator_type)
        result = await generator.generate(context)
        self.report(context, result)
        return result

    # -- Overridable steps -------------------------------------------------

    def validate_name(self, argument: CommandArgument, value: str) -> None:
        if not _NAME_RE.match(value):
            raise UserInputError(
                f"Invalid {argument.name} '{value}': use letters, digits, '-' or '_', starting with a letter"
            )

    def project_root(self, args: dict[str, Any], settings: GeneratorSettings) -> Path:
        return settings.project_root

    def before_generate(self, context: GenerationContext) -> None:
        pass

    def subject(self, context: GenerationContext) -> str:
        return context.entity_name or context.domain_name or ""

    def report(self, context: GenerationContext, result: GenerationResult) -> None:
        label = self.generator_type.replace("-", " ")
        print_file_table(
            result.generated_files,
            skipped=result.skipped_files,
            updated=result.updated_files,
            title=f"{label.title()} '{self.subject(context)}'",
        )
        for warning in result.warnings:
            print_warning(f"Warning: {warning}")
        for error in result.errors:
            print_error(error)
        if result.skipped_files and not context.force:
            print_info(f"{len(result.skipped_files)} existing file(s) skipped; use --force to overwrite.")
        if result.success:
            print_banner(f"{label.capitalize()} '{self.subject(context)}' generated successfully", True)
        else:
            print_banner(f"{label.capitalize()} generation failed with {len(result.errors)} error(s)", False)


class NewProjectCommand(Command):
    """``new <project-name>``: creates ``<project-root>/<project-name>``."""

    def validate_name(self, argument: CommandArgument, value: str) -> None:
        if not _PROJECT_NAME_RE.match(value):
            raise UserInputError(
                f"Invalid project name '{value}': use letters, digits, '.', '-' or '_'"
            )

    def project_root(self, args: dict[str, Any], settings: GeneratorSettings) -> Path:
        return settings.project_root / args["project-name"]

    def before_generate(self, context: GenerationContext) -> None:
        context.template_data.setdefault("projectName", context.project_root.name)

    def subject(self, context: GenerationContext) -> str:
        return context.template_data.get("projectName", context.project_root.name)

    def report(self, context: GenerationContext, result: GenerationResult) -> None:
        super().report(context, result)
        if result.success:
            print_success(f"Project created at {context.project_root}")
            print_info("\nNext steps:")
            print_info(f"  cd {context.project_root.name}")
            print_info("  npm install")
            print_info("  npm run dev")


async def _check_project(project_root: Path) -> None:
    """Raise PreconditionError unless *project_root* holds package.json and src/."""

    def _check() -> bool:
        return (project_root / "package.json").is_file() and (project_root / "src").is_dir()

    if not await asyncio.to_thread(_check):
        raise PreconditionError(
            f"{project_root} is not an express-ddd-gen project (package.json and src/ are required). "
            "Run 'new <project-name>' first or pass --project-root."
        )


# ---------------------------------------------------------------------------
# Command table
# ---------------------------------------------------------------------------


def _domain_arg() -> CommandArgument:
    return CommandArgument("domain-name", "Name of the domain (e.g. order, user-profile)")


COMMANDS: list[Command] = [
    NewProjectCommand(
        name="new",
        generator_type="project",
        description="Create a new Express TypeScript project with DDD structure",
        aliases=["create"],
        arguments=[CommandArgument("project-name", "Name of the project directory to create")],
        requires_project=False,
    ),
    Command(
        name="generate:domain",
        generator_type="domain",
        description="Generate a complete domain (entity, use cases, repository, HTTP layer)",
        aliases=["g:d", "g-d"],
        arguments=[_domain_arg()],
        domain_argument="domain-name",
    ),
    Command(
        name="generate:entity",
        generator_type="entity",
        description="Generate an entity in an existing domain",
        aliases=["g:e", "g-e"],
        arguments=[_domain_arg(), CommandArgument("entity-name", "Name of the entity")],
        domain_argument="domain-name",
        entity_argument="entity-name",
    ),
    Command(
        name="generate:value-object",
        generator_type="value-object",
        description="Generate a value object in an existing domain",
        aliases=["g:vo", "g-vo"],
        arguments=[_domain_arg(), CommandArgument("value-object-name", "Name of the value object")],
        domain_argument="domain-name",
        entity_argument="value-object-name",
    ),
    Command(
        name="generate:repository",
        generator_type="repository",
        description="Generate a repository interface and in-memory implementation",
        aliases=["g:r", "g-r"],
        arguments=[_domain_arg()],
        domain_argument="domain-name",
    ),
    Command(
        name="generate:use-case",
        generator_type="use-case",
        description="Generate a use case in an existing domain",
        aliases=["g:uc", "g-uc"],
        arguments=[_domain_arg(), CommandArgument("use-case-name", "Name of the use case (e.g. approve-order)")],
        domain_argument="domain-name",
        entity_argument="use-case-name",
    ),
    Command(
        name="generate:service",
        generator_type="service",
        description="Generate a domain service in an existing domain",
        aliases=["g:s", "g-s"],
        arguments=[_domain_arg(), CommandArgument("service-name", "Name of the service")],
        domain_argument="domain-name",
        entity_argument="service-name",
    ),
    Command(
        name="generate:controller",
        generator_type="controller",
        description="Generate an HTTP controller for an existing domain",
        aliases=["g:c", "g-c"],
        arguments=[_domain_arg()],
        domain_argument="domain-name",
    ),
    Command(
        name="generate:presentation-http",
        generator_type="presentation-http",
        description="Generate controller, DTOs and routes for an existing domain",
        aliases=["g:p-http", "g-p-http"],
        arguments=[_domain_arg()],
        domain_argument="domain-name",
    ),
    Command(
        name="generate:mongodb:lazy",
        generator_type="mongodb-lazy",
        description="Add a MongoDB repository for an entity (generates the domain if missing)",
        aliases=["g:mongo:lazy", "g:ml"],
        arguments=[CommandArgument("entity-name", "Name of the entity")],
        options=[*COMMON_OPTIONS, *DATABASE_OPTIONS],
        entity_argument="entity-name",
    ),
    Command(
        name="generate:mysql:lazy",
        generator_type="mysql-lazy",
        description="Add a MySQL repository for an entity (generates the domain if missing)",
        aliases=["g:mysql:lazy", "g:sl"],
        arguments=[CommandArgument("entity-name", "Name of the entity")],
        options=[*COMMON_OPTIONS, *DATABASE_OPTIONS],
        entity_argument="entity-name",
    ),
]


def find_command(name: str) -> Command | None:
    """Look a command up by name or alias."""
    for command in COMMANDS:
        if name == command.name or name in command.aliases:
            return command
    return None


# ---------------------------------------------------------------------------
# argparse wiring
# ---------------------------------------------------------------------------


def _global_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    default_root: Any = argparse.SUPPRESS if suppress else None
    default_verbose: Any = argparse.SUPPRESS if suppress else False
    parser.add_argument(
        "--project-root",
        default=default_root,
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=default_verbose,
        help="Show debug output and tracebacks",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="express-ddd-gen",
        description="Scaffold Express + TypeScript projects with a Domain-Driven Design layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  express-ddd-gen new my-api\n"
            "  express-ddd-gen generate:domain order\n"
            "  express-ddd-gen g:e order order-line\n"
            "  express-ddd-gen g:sl product --fields '[{\"name\": \"price\", \"type\": \"decimal\"}]'\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _global_options(parser, suppress=False)

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    for command in COMMANDS:
        sub = subparsers.add_parser(
            command.name, aliases=command.aliases, help=command.description, description=command.description
        )
        for argument in command.arguments:
            nargs: Any = None
            if argument.variadic:
                nargs = "+" if argument.required else "*"
            elif not argument.required:
                nargs = "?"
            sub.add_argument(argument.name, nargs=nargs, help=argument.description)
        for option in command.options:
            if option.is_flag:
                sub.add_argument(*option.flags, dest=option.dest, action="store_true", help=option.description)
            else:
                sub.add_argument(*option.flags, dest=option.dest, default=option.default, help=option.description)
        _global_options(sub, suppress=True)
    return parser


def _collect(namespace: argparse.Namespace, command: Command) -> tuple[dict[str, Any], dict[str, Any]]:
    values = vars(namespace)
    args = {argument.name: values.get(argument.name) for argument in command.arguments}
    options = {option.dest: values.get(option.dest, option.default) for option in command.options}
    if "no_timestamps" in options:
        options["timestamps"] = not options.pop("no_timestamps")
    return args, options


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    parser = build_parser()
    namespace = parser.parse_args(argv)

    if not namespace.command:
        parser.print_help()
        return 1

    command = find_command(namespace.command)
    if command is None:
        print_error(f"Unknown command: {namespace.command}")
        return 1

    settings = GeneratorSettings.from_env()
    if namespace.verbose:
        settings = settings.model_copy(update={"verbose": True})
    if namespace.project_root:
        settings = settings.with_project_root(namespace.project_root)
    set_verbose(settings.verbose)

    args, options = _collect(namespace, command)
    try:
        result = asyncio.run(command.execute(args, options, settings))
    except ScaffoldError as exc:
        print_error(str(exc))
        return 1
    except Exception as exc:
        if is_verbose():
            console.print_exception()
        else:
            print_error(f"Unexpected error: {exc} (run with --verbose for details)")
        return 1

    return 0 if result.success else 1


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
