"""Unit tests for the async file repository (express_ddd_gen.scaffolder.files)."""

from __future__ import annotations

from pathlib import Path

import pytest

from express_ddd_gen.errors import WriteError
from express_ddd_gen.scaffolder.files import FileRepository

pytestmark = pytest.mark.unit


class TestPaths:
    def test_resolve_and_relative(self, tmp_path: Path):
        files = FileRepository(tmp_path)
        assert files.resolve("src/a.ts") == tmp_path.resolve() / "src" / "a.ts"
        assert files.relative(tmp_path / "src" / "a.ts") == "src/a.ts"
        assert files.relative("src/a.ts") == "src/a.ts"

    def test_relative_outside_root_is_absolute(self, tmp_path: Path):
        files = FileRepository(tmp_path / "project")
        outside = (tmp_path / "other.ts").resolve()
        assert files.relative(outside) == outside.as_posix()


class TestReadWrite:
    @pytest.mark.asyncio
    async def test_write_creates_parents(self, tmp_path: Path):
        files = FileRepository(tmp_path)
        written = await files.write_text("src/domain/order/entities/order.entity.ts", "export {};\n")
        assert written.read_text() == "export {};\n"
        assert await files.exists("src/domain/order")
        assert (tmp_path / "src" / "domain" / "order").is_dir()
        assert await files.read_text("src/domain/order/entities/order.entity.ts") == "export {};\n"

    @pytest.mark.asyncio
    async def test_read_missing_file(self, tmp_path: Path):
        with pytest.raises(WriteError, match="Cannot read missing.ts"):
            await FileRepository(tmp_path).read_text("missing.ts")

    @pytest.mark.asyncio
    async def test_write_over_a_directory_fails(self, tmp_path: Path):
        (tmp_path / "src").mkdir()
        with pytest.raises(WriteError, match="Cannot write src"):
            await FileRepository(tmp_path).write_text("src", "x")

    @pytest.mark.asyncio
    async def test_is_empty_dir(self, tmp_path: Path):
        files = FileRepository(tmp_path)
        assert await files.is_empty_dir("missing")
        await files.mkdir("empty")
        assert await files.is_empty_dir("empty")
        await files.write_text("full/a.txt", "a")
        assert not await files.is_empty_dir("full")
        assert not await files.is_empty_dir("full/a.txt")

    @pytest.mark.asyncio
    async def test_line_endings_are_kept(self, tmp_path: Path):
        files = FileRepository(tmp_path)
        (tmp_path / "types.ts").write_bytes(b"export const TYPES = {\r\n};\r\n")
        text = await files.read_text("types.ts")
        assert text == "export const TYPES = {\r\n};\r\n"
        await files.write_text("types.ts", text.replace("};", "  A: 1,\r\n};"))
        assert (tmp_path / "types.ts").read_bytes() == b"export const TYPES = {\r\n  A: 1,\r\n};\r\n"
