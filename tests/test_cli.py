"""Unit tests for the command-line interface (express_ddd_gen.cli).

Tests cover:
- Command table: names, aliases, find_command
- build_parser: positional names, global options before and after the command
- _collect: option mapping including --no-timestamps
- Command.execute: name validation, project detection, --config merging
- main: exit codes for success, user errors, preconditions and failed results
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from express_ddd_gen.cli import COMMANDS, _collect, build_parser, find_command, main
from express_ddd_gen.config import GeneratorSettings
from express_ddd_gen.errors import PreconditionError, UserInputError
from express_ddd_gen.utils import console


# ---------------------------------------------------------------------------
# Command table
# ---------------------------------------------------------------------------


class TestCommandTable:
    @pytest.mark.unit
    def test_all_commands_present(self):
        names = {command.name for command in COMMANDS}
        assert names == {
            "new",
            "generate:domain",
            "generate:entity",
            "generate:value-object",
            "generate:repository",
            "generate:use-case",
            "generate:service",
            "generate:controller",
            "generate:presentation-http",
            "generate:mongodb:lazy",
            "generate:mysql:lazy",
        }

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "alias,name",
        [
            ("g:d", "generate:domain"),
            ("g-uc", "generate:use-case"),
            ("g:vo", "generate:value-object"),
            ("g:ml", "generate:mongodb:lazy"),
            ("g:sl", "generate:mysql:lazy"),
            ("create", "new"),
        ],
    )
    def test_aliases(self, alias: str, name: str):
        assert find_command(alias).name == name

    @pytest.mark.unit
    def test_unknown(self):
        assert find_command("generate:graphql") is None

    @pytest.mark.unit
    def test_aliases_are_unique(self):
        seen = [alias for command in COMMANDS for alias in [command.name, *command.aliases]]
        assert len(seen) == len(set(seen))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParser:
    @pytest.mark.unit
    def test_positionals_and_flags(self):
        namespace = build_parser().parse_args(["g:e", "order", "order-line", "--force", "--skip-tests"])
        assert namespace.command == "g:e"
        assert vars(namespace)["domain-name"] == "order"
        assert vars(namespace)["entity-name"] == "order-line"
        assert namespace.force is True
        assert namespace.skip_tests is True

    @pytest.mark.unit
    def test_global_options_before_or_after(self):
        before = build_parser().parse_args(["--project-root", "/tmp/a", "-v", "g:d", "order"])
        after = build_parser().parse_args(["g:d", "order", "--project-root", "/tmp/a", "-v"])
        assert before.project_root == after.project_root == "/tmp/a"
        assert before.verbose is after.verbose is True

    @pytest.mark.unit
    def test_collect_database_options(self):
        command = find_command("g:ml")
        namespace = build_parser().parse_args(
            ["g:ml", "product", "--fields", "[]", "--db-name", "catalog", "--no-timestamps"]
        )
        args, options = _collect(namespace, command)
        assert args == {"entity-name": "product"}
        assert options["fields"] == "[]"
        assert options["db_name"] == "catalog"
        assert options["env_var"] is None
        assert options["timestamps"] is False
        assert "no_timestamps" not in options

    @pytest.mark.unit
    def test_missing_positional_exits(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["generate:domain"])


# ---------------------------------------------------------------------------
# Command.execute
# ---------------------------------------------------------------------------


class TestExecute:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_name(self, tmp_path: Path):
        command = find_command("generate:domain")
        with pytest.raises(UserInputError, match="Invalid domain-name '1order'"):
            await command.execute({"domain-name": "1order"}, {}, GeneratorSettings(project_root=tmp_path))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_requires_project(self, tmp_path: Path):
        command = find_command("generate:domain")
        with pytest.raises(PreconditionError, match="package.json and src/"):
            await command.execute({"domain-name": "order"}, {}, GeneratorSettings(project_root=tmp_path))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_new_creates_subdirectory(self, tmp_path: Path):
        command = find_command("new")
        result = await command.execute({"project-name": "shop"}, {}, GeneratorSettings(project_root=tmp_path))
        assert result.success
        assert (tmp_path / "shop" / "package.json").is_file()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_config_file_is_merged(self, tmp_path: Path):
        config = tmp_path / "project.yaml"
        config.write_text("description: Orders and invoices\nport: 4100\n")
        command = find_command("new")
        result = await command.execute(
            {"project-name": "shop"}, {"config": str(config)}, GeneratorSettings(project_root=tmp_path)
        )
        assert result.success
        readme = (tmp_path / "shop" / "README.md").read_text()
        assert "Orders and invoices" in readme
        assert "PORT=4100" in (tmp_path / "shop" / ".env.example").read_text()


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------


class TestMain:
    @pytest.mark.unit
    def test_no_command(self):
        assert main([]) == 1

    @pytest.mark.unit
    def test_new_then_domain(self, tmp_path: Path):
        assert main(["--project-root", str(tmp_path), "new", "shop"]) == 0
        root = tmp_path / "shop"
        assert main(["g:d", "order", "--project-root", str(root)]) == 0
        assert (root / "src/domain/order/entities/order.entity.ts").is_file()
        assert "OrderRepository" in (root / "src/infrastructure/types.ts").read_text()

    @pytest.mark.unit
    def test_new_reports_project_location(self, tmp_path: Path):
        with console.capture() as capture:
            assert main(["--project-root", str(tmp_path), "new", "shop"]) == 0
        output = capture.get()
        assert "Project created at" in output
        assert "npm install" in output

    @pytest.mark.unit
    def test_new_into_existing_project_fails(self, tmp_path: Path):
        assert main(["--project-root", str(tmp_path), "new", "shop"]) == 0
        assert main(["--project-root", str(tmp_path), "new", "shop"]) == 1
        assert main(["--project-root", str(tmp_path), "new", "shop", "--force"]) == 0

    @pytest.mark.unit
    def test_invalid_project_name(self, tmp_path: Path):
        assert main(["--project-root", str(tmp_path), "new", "my app"]) == 1
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.unit
    def test_outside_project(self, tmp_path: Path):
        assert main(["--project-root", str(tmp_path), "generate:domain", "order"]) == 1
        assert not (tmp_path / "src").exists()

    @pytest.mark.unit
    def test_failed_result_exits_non_zero(self, tmp_path: Path):
        main(["--project-root", str(tmp_path), "new", "shop"])
        root = str(tmp_path / "shop")
        assert main(["--project-root", root, "g:e", "ghost", "line-item"]) == 1

    @pytest.mark.unit
    def test_database_command_with_fields(self, tmp_path: Path):
        main(["--project-root", str(tmp_path), "new", "shop"])
        root = tmp_path / "shop"
        fields = json.dumps([{"name": "price", "type": "number", "required": True}])
        assert main(["--project-root", str(root), "g:ml", "product", "--fields", fields]) == 0
        schema = root / "src/infrastructure/database/product/mongodb/schemas/product.schema.ts"
        assert "price: { type: Number, required: true }," in schema.read_text()

    @pytest.mark.unit
    def test_missing_config_file(self, tmp_path: Path):
        assert main(["--project-root", str(tmp_path), "new", "shop", "--config", str(tmp_path / "nope.json")]) == 1

    @pytest.mark.unit
    def test_project_root_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DDDGEN_PROJECT_ROOT", str(tmp_path))
        assert main(["new", "shop"]) == 0
        assert (tmp_path / "shop" / "package.json").is_file()
