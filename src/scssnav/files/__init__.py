"""File system access."""

from scssnav.files.ops import FileEntry, FileSystem, LocalFileSystem

__all__ = ["FileEntry", "FileSystem", "LocalFileSystem"]
