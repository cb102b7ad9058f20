"""Open-document store.

Buffers the editor reports as open are served from memory, so navigation
sees unsaved edits. Everything else is read from the file system.
"""

from __future__ import annotations

from scssnav.files.ops import FileSystem
from scssnav.index.models import Document


class DocumentStore:
    """Open buffers keyed by absolute path."""

    def __init__(self, fs: FileSystem) -> None:
        self._fs = fs
        self._open: dict[str, Document] = {}

    @property
    def fs(self) -> FileSystem:
        return self._fs

    def open(self, path: str, text: str) -> Document:
        doc = Document(path=path, text=text)
        self._open[path] = doc
        return doc

    def close(self, path: str) -> None:
        self._open.pop(path, None)

    def get_open(self, path: str) -> Document | None:
        return self._open.get(path)

    def is_open(self, path: str) -> bool:
        return path in self._open

    async def read(self, path: str) -> Document:
        """Open buffer if any, else the file on disk.

        Raises:
            OSError, UnicodeDecodeError: When the file cannot be read.
        """
        doc = self._open.get(path)
        if doc is not None:
            return doc
        return Document(path=path, text=await self._fs.read_text(path))

    async def exists(self, path: str) -> bool:
        return path in self._open or await self._fs.is_file(path)
