"""Definition lookup for variables, mixins and functions.

``DefinitionResolver.find_definition`` searches one file top-to-bottom for
the first declaration of a name, then descends depth-first into the files
it ``@forward``s. Private names (leading ``_`` or ``-``) never match outside
the file that asked. Only the outermost call of a traversal reads or writes
the definition cache; its result, negative ones included, is recorded
together with every file the traversal visited.

``reference_at`` finds the symbol reference under a cursor.
"""

from __future__ import annotations

import re

import structlog

from scssnav.index._internal.cache import CachedDefinition, NavigationCache
from scssnav.index._internal.documents import DocumentStore
from scssnav.index._internal.indexing.import_graph import ImportGraphWalker
from scssnav.index.models import (
    Document,
    Location,
    Range,
    SymbolKind,
    SymbolReference,
    is_private_name,
)

log = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Declaration search
# ---------------------------------------------------------------------------


def declaration_pattern(name: str, kind: SymbolKind) -> re.Pattern[str]:
    escaped = re.escape(name)
    if kind is SymbolKind.VARIABLE:
        return re.compile(rf"\${escaped}\s*:")
    if kind is SymbolKind.MIXIN:
        return re.compile(rf"@mixin\s+{escaped}(?![\w-])")
    return re.compile(rf"@function\s+{escaped}\s*\(")


def is_comment_line(line: str) -> bool:
    stripped = line.lstrip()
    return stripped.startswith(("//", "/*"))


def find_declaration(text: str, name: str, kind: SymbolKind) -> tuple[int, int] | None:
    """(line, column) of the first declaration of ``name``; comment lines skipped."""
    pattern = declaration_pattern(name, kind)
    for line_no, line in enumerate(text.splitlines()):
        if is_comment_line(line):
            continue
        m = pattern.search(line)
        if m:
            return line_no, m.start()
    return None


# ---------------------------------------------------------------------------
# Reference under cursor
# ---------------------------------------------------------------------------

# Checked in order; the first pattern with a match spanning the cursor wins.
_REFERENCE_PATTERNS: tuple[tuple[re.Pattern[str], SymbolKind, bool], ...] = (
    (re.compile(r"([\w-]+)\.\$([\w-]+)"), SymbolKind.VARIABLE, True),
    (re.compile(r"\$([\w-]+)"), SymbolKind.VARIABLE, False),
    (re.compile(r"@include\s+([\w-]+)\.([\w-]+)"), SymbolKind.MIXIN, True),
    (re.compile(r"@include\s+([\w-]+)"), SymbolKind.MIXIN, False),
    (re.compile(r"([\w-]+)\.([\w-]+)\s*\("), SymbolKind.FUNCTION, True),
    (re.compile(r"([\w-]+)\s*\("), SymbolKind.FUNCTION, False),
)


def reference_at(line_text: str, line: int, character: int) -> SymbolReference | None:
    """Symbol reference whose text span contains ``character``, if any."""
    for pattern, kind, namespaced in _REFERENCE_PATTERNS:
        for m in pattern.finditer(line_text):
            if m.start() > character:
                break
            if character > m.end():
                continue
            if namespaced:
                namespace, name = m.group(1), m.group(2)
            else:
                namespace, name = None, m.group(1)
            return SymbolReference(
                name=name,
                kind=kind,
                namespace=namespace,
                range=Range.on_line(line, m.start(), m.end()),
            )
    return None


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class DefinitionResolver:
    """Point lookups over one repository's import graph."""

    def __init__(
        self,
        walker: ImportGraphWalker,
        documents: DocumentStore,
        cache: NavigationCache,
    ) -> None:
        self._walker = walker
        self._documents = documents
        self._cache = cache

    async def find_definition(
        self,
        path: str,
        name: str,
        kind: SymbolKind,
        *,
        origin: str | None = None,
        visited: set[str] | None = None,
    ) -> Location | None:
        """Declaration of ``name`` in ``path`` or anything it forwards.

        Args:
            path: File to search.
            name: Symbol name without ``$``.
            kind: Declaration kind to match.
            origin: File the request came from. Private names match only
                when ``path`` is the origin. None means a cross-file request.
            visited: Files already searched by this traversal.

        Returns:
            Location of the first match, or None.
        """
        if visited is None:
            visited = set()
        if path in visited:
            return None
        visited.add(path)

        private = is_private_name(name)
        if private and path != origin:
            return None

        outermost = len(visited) == 1
        cacheable = outermost and not private
        key = (path, name, kind)
        repository = self._walker.repository

        if cacheable:
            cached = self._cache.get_definition(repository, key)
            if cached is not None:
                return cached.location

        location = await self._search(path, name, kind, origin, visited)

        if cacheable:
            self._cache.set_definition(
                repository, key, CachedDefinition(location, frozenset(visited))
            )
        return location

    async def _search(
        self,
        path: str,
        name: str,
        kind: SymbolKind,
        origin: str | None,
        visited: set[str],
    ) -> Location | None:
        try:
            document = await self._documents.read(path)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("stylesheet_read_failed", file=path, error=str(e))
            return None

        found = find_declaration(document.text, name, kind)
        if found is not None:
            return Location(path=path, line=found[0], column=found[1])

        for forwarded in await self._walker.forwards_for(path):
            location = await self.find_definition(
                forwarded, name, kind, origin=origin, visited=visited
            )
            if location is not None:
                return location
        return None

    async def resolve(
        self,
        document: Document,
        name: str,
        kind: SymbolKind,
        namespace: str | None = None,
    ) -> Location | None:
        """Resolve a reference written in ``document``.

        A namespaced reference searches only the edge bound to that namespace.
        An unscoped one tries every unscoped edge in order, then the document.
        """
        edges = await self._walker.imports_for(document)

        if namespace is not None:
            edge = next((e for e in edges if e.namespace == namespace), None)
            if edge is None:
                return None
            return await self.find_definition(
                edge.target_file, name, kind, origin=document.path
            )

        for edge in edges:
            if edge.namespace is not None:
                continue
            location = await self.find_definition(
                edge.target_file, name, kind, origin=document.path
            )
            if location is not None:
                return location

        return await self.find_definition(document.path, name, kind, origin=document.path)
