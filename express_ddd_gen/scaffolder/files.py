"""Async file-system access rooted at a project directory.

Every path handed to :class:`FileRepository` is interpreted relative to the
project root (absolute paths are used as-is).  Blocking calls run in a worker
thread via ``asyncio.to_thread`` and are awaited one at a time by the
generators, so two outputs are never written concurrently.

Text is read and written without newline translation, so a CRLF file keeps
its line endings when it is patched.  ``OSError`` from the underlying calls
is re-raised as :class:`~express_ddd_gen.errors.WriteError`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from ..errors import WriteError


class FileRepository:
    """exists / read / write / mkdir relative to *root*."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    # -- Path helpers ------------------------------------------------------

    def resolve(self, path: str | Path) -> Path:
        """Return the absolute path for *path*."""
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.root / candidate

    def relative(self, path: str | Path) -> str:
        """Return *path* relative to the root with posix separators.

        Paths outside the root are returned absolute.
        """
        absolute = self.resolve(path)
        try:
            return absolute.relative_to(self.root).as_posix()
        except ValueError:
            return absolute.as_posix()

    # -- Queries -----------------------------------------------------------

    async def exists(self, path: str | Path) -> bool:
        return await asyncio.to_thread(self.resolve(path).exists)

    async def is_empty_dir(self, path: str | Path) -> bool:
        """``True`` when *path* is missing or an empty directory."""
        target = self.resolve(path)

        def _check() -> bool:
            if not target.exists():
                return True
            return target.is_dir() and not any(target.iterdir())

        return await asyncio.to_thread(_check)

    # -- Read / write ------------------------------------------------------

    async def read_text(self, path: str | Path) -> str:
        """Read a UTF-8 text file.

        Raises:
            WriteError: If the file cannot be read.
        """
        target = self.resolve(path)
        try:
            return await asyncio.to_thread(_read_file, target)
        except OSError as exc:
            raise WriteError(f"Cannot read {self.relative(target)}: {exc}") from exc

    async def write_text(self, path: str | Path, content: str) -> Path:
        """Write *content*, creating parent directories first.

        Returns:
            The absolute path written.

        Raises:
            WriteError: If the directory or file cannot be created.
        """
        target = self.resolve(path)
        try:
            await asyncio.to_thread(_write_file, target, content)
        except OSError as exc:
            raise WriteError(f"Cannot write {self.relative(target)}: {exc}") from exc
        return target

    async def mkdir(self, path: str | Path) -> Path:
        target = self.resolve(path)
        try:
            await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(f"Cannot create directory {self.relative(target)}: {exc}") from exc
        return target


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _read_file(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)
