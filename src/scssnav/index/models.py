"""Data model shared by the resolution engine.

All records are immutable once built. Paths are absolute, OS-native strings;
lines and columns are zero-based.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path
from urllib.parse import unquote, urlparse

# ============================================================================
# ENUMS
# ============================================================================


class SymbolKind(str, Enum):
    """Declaration kinds the extractor recognises."""

    VARIABLE = "variable"
    MIXIN = "mixin"
    FUNCTION = "function"


class ImportKind(str, Enum):
    """Statement that produced an import edge."""

    USE = "use"
    FORWARD = "forward"
    IMPORT = "import"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


# ============================================================================
# POSITIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True, slots=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> Range:
        return cls(Position(line, start), Position(line, end))

    def contains(self, position: Position) -> bool:
        """Inclusive of both ends, so a cursor right after a word still hits it."""
        if position.line < self.start.line or position.line > self.end.line:
            return False
        if position.line == self.start.line and position.character < self.start.character:
            return False
        return not (position.line == self.end.line and position.character > self.end.character)


@dataclass(frozen=True, slots=True)
class Location:
    """Declaration site returned by definition lookups."""

    path: str
    line: int
    column: int

    @property
    def uri(self) -> str:
        return Path(self.path).as_uri()


def to_path(path_or_uri: str | Path) -> str:
    """Normalize a ``file://`` URI or a path into an absolute path string."""
    text = str(path_or_uri)
    if text.startswith("file://"):
        parsed = urlparse(text)
        text = unquote(parsed.path)
        # file:///C:/x on Windows
        if len(text) > 2 and text[0] == "/" and text[2] == ":":
            text = text[1:]
    return str(Path(text).resolve())


# ============================================================================
# IMPORT GRAPH
# ============================================================================


@dataclass(frozen=True, slots=True)
class ImportStatement:
    """One ``@use`` / ``@forward`` / ``@import`` occurrence in a file."""

    kind: ImportKind
    path: str  # As written, unresolved
    namespace: str | None
    line: int
    start: int  # Column span of the path literal, quotes excluded
    end: int
    is_builtin: bool = False  # sass: module
    is_plain_css: bool = False

    @property
    def range(self) -> Range:
        return Range.on_line(self.line, self.start, self.end)

    @property
    def resolvable(self) -> bool:
        return not (self.is_builtin or self.is_plain_css)


@dataclass(frozen=True, slots=True)
class ImportEdge:
    """Resolved import: target file plus the namespace its symbols land in.

    ``namespace=None`` is the importer's unscoped set.
    """

    target_file: str
    namespace: str | None
    kind: ImportKind = ImportKind.USE


# ============================================================================
# SYMBOLS
# ============================================================================


def is_private_name(name: str) -> bool:
    return name.startswith(("_", "-"))


@dataclass(frozen=True, slots=True)
class Symbol:
    """A declaration; identity is ``(defining_file, name, kind)``."""

    name: str
    kind: SymbolKind
    defining_file: str
    line: int
    detail: str = ""
    documentation: str | None = None

    @property
    def is_private(self) -> bool:
        return is_private_name(self.name)


@dataclass(frozen=True, slots=True)
class SymbolReference:
    """A symbol use found under the cursor."""

    name: str
    kind: SymbolKind
    namespace: str | None
    range: Range


# ============================================================================
# COMPLETION / DIAGNOSTICS / LINKS
# ============================================================================


@dataclass(frozen=True, slots=True)
class CompletionContext:
    """What the user is typing: kind, namespace and filter prefix."""

    kind: SymbolKind | None
    namespace: str | None = None
    prefix: str = ""

    @property
    def is_active(self) -> bool:
        return self.kind is not None


@dataclass(frozen=True, slots=True)
class CompletionItem:
    label: str
    insert_text: str
    kind: SymbolKind
    detail: str
    source_file: str
    documentation: str | None = None
    is_snippet: bool = False
    replace_start: int | None = None  # Column where the typed fragment begins


@dataclass(frozen=True, slots=True)
class Diagnostic:
    range: Range
    message: str
    severity: Severity
    code: str
    source: str = "scssnav"


@dataclass(frozen=True, slots=True)
class DocumentLink:
    range: Range
    target: str


# ============================================================================
# REPOSITORIES / DOCUMENTS
# ============================================================================

AliasMap = dict[str, list[str]]
"""Alias pattern (e.g. ``"@/*"``) -> resolved absolute directories, in order."""


@dataclass(frozen=True)
class RepositoryContext:
    """One project root with its own alias map."""

    root_path: str
    aliases: AliasMap = field(default_factory=dict)
    config_sources: tuple[str, ...] = ()


@dataclass
class Document:
    """Text of one stylesheet, from an open buffer or from disk."""

    path: str
    text: str

    @cached_property
    def lines(self) -> list[str]:
        return self.text.splitlines()

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line_at(self, line: int) -> str:
        if 0 <= line < len(self.lines):
            return self.lines[line]
        return ""
