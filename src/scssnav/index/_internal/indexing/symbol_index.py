"""Symbol universe reachable from a stylesheet.

Composes the import graph walker with declaration extraction:

- direct declarations of one file (memoized per file path)
- everything a file re-exports through ``@forward`` chains, cycle-safe
- per-namespace aggregation over a document's import edges, with the
  document's own declarations appended to the unscoped set
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from scssnav.index._internal.cache import NavigationCache
from scssnav.index._internal.documents import DocumentStore
from scssnav.index._internal.indexing.extraction import extract_symbols
from scssnav.index._internal.indexing.import_graph import ImportGraphWalker
from scssnav.index.models import Document, Symbol, SymbolKind

log = structlog.get_logger(__name__)

SymbolsByNamespace = dict[str | None, list[Symbol]]


def dedupe_symbols(symbols: Iterable[Symbol]) -> list[Symbol]:
    """Keep the first symbol per ``(name, kind)``."""
    seen: set[tuple[str, SymbolKind]] = set()
    result: list[Symbol] = []
    for symbol in symbols:
        key = (symbol.name, symbol.kind)
        if key in seen:
            continue
        seen.add(key)
        result.append(symbol)
    return result


class SymbolIndexer:
    """Builds and memoizes symbol sets for files in one repository."""

    def __init__(
        self,
        walker: ImportGraphWalker,
        documents: DocumentStore,
        cache: NavigationCache,
    ) -> None:
        self._walker = walker
        self._documents = documents
        self._cache = cache

    @property
    def walker(self) -> ImportGraphWalker:
        return self._walker

    def symbols_in_document(self, document: Document) -> list[Symbol]:
        repository = self._walker.repository
        cached = self._cache.get_symbols(repository, document.path)
        if cached is not None:
            return cached
        symbols = extract_symbols(document.path, document.text)
        self._cache.set_symbols(repository, document.path, symbols)
        return symbols

    async def symbols_in_file(self, path: str) -> list[Symbol]:
        """Direct declarations of ``path``; an unreadable file declares nothing."""
        cached = self._cache.get_symbols(self._walker.repository, path)
        if cached is not None:
            return cached
        try:
            document = await self._documents.read(path)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("stylesheet_read_failed", file=path, error=str(e))
            return []
        return self.symbols_in_document(document)

    async def collect_recursive(self, path: str, visited: set[str] | None = None) -> list[Symbol]:
        """Declarations of ``path`` followed by those of every file it forwards.

        Depth-first in declared order. ``visited`` breaks forwarding cycles.
        """
        if visited is None:
            visited = set()
        if path in visited:
            return []
        visited.add(path)

        symbols = list(await self.symbols_in_file(path))
        for forwarded in await self._walker.forwards_for(path):
            symbols.extend(await self.collect_recursive(forwarded, visited))
        return symbols

    async def available_symbols(self, document: Document) -> SymbolsByNamespace:
        """Every symbol visible from ``document``, grouped by namespace.

        Imported symbols are concatenated in edge order without private names.
        The document's own declarations (private ones included) close the
        unscoped (None) group. Callers de-duplicate.
        """
        by_namespace: SymbolsByNamespace = {}
        for edge in await self._walker.imports_for(document):
            reachable = await self.collect_recursive(edge.target_file)
            by_namespace.setdefault(edge.namespace, []).extend(
                s for s in reachable if not s.is_private
            )

        by_namespace.setdefault(None, []).extend(self.symbols_in_document(document))
        return by_namespace
