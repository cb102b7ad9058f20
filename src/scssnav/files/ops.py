"""File operations - the engine's only view of the file system.

Every call is a suspension point: blocking work runs in the default
executor so one request awaiting a slow read never stalls another.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol, TypeVar

_T = TypeVar("_T")


@dataclass
class FileEntry:
    """A single file or directory entry."""

    name: str
    path: str  # Absolute
    type: Literal["file", "directory"]


class FileSystem(Protocol):
    """Async file system collaborator used by the resolver components."""

    async def read_text(self, path: str) -> str: ...

    async def exists(self, path: str) -> bool: ...

    async def is_file(self, path: str) -> bool: ...

    async def list_dir(self, path: str) -> list[FileEntry]: ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    async def _run(self, fn: Callable[[], _T]) -> _T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)

    async def read_text(self, path: str) -> str:
        """Read a whole file. Raises OSError / UnicodeDecodeError."""
        return await self._run(lambda: Path(path).read_text(encoding=self._encoding))

    async def exists(self, path: str) -> bool:
        return await self._run(lambda: os.path.exists(path))

    async def is_file(self, path: str) -> bool:
        return await self._run(lambda: os.path.isfile(path))

    async def list_dir(self, path: str) -> list[FileEntry]:
        """List a directory, sorted by name. Raises OSError."""

        def _list() -> list[FileEntry]:
            entries: list[FileEntry] = []
            with os.scandir(path) as it:
                for entry in it:
                    kind: Literal["file", "directory"] = "directory" if entry.is_dir() else "file"
                    entries.append(FileEntry(name=entry.name, path=entry.path, type=kind))
            return sorted(entries, key=lambda e: e.name)

        return await self._run(_list)
