"""Per-repository memo tables for the resolution engine.

Four partitions per repository root:

- imports:     document path -> list[ImportEdge]
- forwards:    file path -> list[str] (resolved ``@forward`` targets)
- symbols:     file path -> list[Symbol] (direct declarations only)
- definitions: (file, name, kind) -> CachedDefinition

Entries are content-addressed by file path, so requests completing out of
order cannot corrupt each other. Nothing is evicted except by explicit
invalidation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from scssnav.index.models import ImportEdge, Location, Symbol, SymbolKind

_K = TypeVar("_K")
_V = TypeVar("_V")

DefinitionKey = tuple[str, str, SymbolKind]


@dataclass(frozen=True, slots=True)
class CachedDefinition:
    """Outcome of a top-level lookup, negative results included.

    ``depends_on`` holds every file the lookup visited.
    """

    location: Location | None
    depends_on: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Diagnostics only; not part of correctness."""

    hits: int
    misses: int
    hit_rate: str
    repositories: int
    imports: int
    forwards: int
    definitions: int
    symbols: int


class _Partitioned(Generic[_K, _V]):
    """repository root -> {key -> value}."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[_K, _V]] = {}

    def table(self, repository: str) -> dict[_K, _V]:
        return self._tables.setdefault(repository, {})

    def drop(self, repository: str) -> None:
        self._tables.pop(repository, None)

    def clear(self) -> None:
        self._tables.clear()

    def repositories(self) -> set[str]:
        return set(self._tables)

    def size(self) -> int:
        return sum(len(t) for t in self._tables.values())

    def size_of(self, repository: str) -> int:
        return len(self._tables.get(repository, {}))


@dataclass
class NavigationCache:
    """Cache service injected into the resolver components."""

    _imports: _Partitioned[str, list[ImportEdge]] = field(default_factory=_Partitioned)
    _forwards: _Partitioned[str, list[str]] = field(default_factory=_Partitioned)
    _symbols: _Partitioned[str, list[Symbol]] = field(default_factory=_Partitioned)
    _definitions: _Partitioned[DefinitionKey, CachedDefinition] = field(
        default_factory=_Partitioned
    )
    hits: int = 0
    misses: int = 0

    def _count(self, found: bool) -> None:
        if found:
            self.hits += 1
        else:
            self.misses += 1

    # ----- imports -----

    def get_imports(self, repository: str, path: str) -> list[ImportEdge] | None:
        cached = self._imports.table(repository).get(path)
        self._count(cached is not None)
        return cached

    def set_imports(self, repository: str, path: str, imports: list[ImportEdge]) -> None:
        self._imports.table(repository)[path] = imports

    # ----- forwards -----

    def get_forwards(self, repository: str, path: str) -> list[str] | None:
        cached = self._forwards.table(repository).get(path)
        self._count(cached is not None)
        return cached

    def set_forwards(self, repository: str, path: str, forwards: list[str]) -> None:
        self._forwards.table(repository)[path] = forwards

    # ----- symbols -----

    def get_symbols(self, repository: str, path: str) -> list[Symbol] | None:
        cached = self._symbols.table(repository).get(path)
        self._count(cached is not None)
        return cached

    def set_symbols(self, repository: str, path: str, symbols: list[Symbol]) -> None:
        self._symbols.table(repository)[path] = symbols

    # ----- definitions -----

    def get_definition(self, repository: str, key: DefinitionKey) -> CachedDefinition | None:
        cached = self._definitions.table(repository).get(key)
        self._count(cached is not None)
        return cached

    def set_definition(
        self, repository: str, key: DefinitionKey, definition: CachedDefinition
    ) -> None:
        self._definitions.table(repository)[key] = definition

    # ----- invalidation -----

    def invalidate_file(self, repository: str, path: str) -> None:
        """Forget everything computed from ``path``.

        Definition results are dropped when the lookup started at ``path``
        or visited it through a forwarding chain.
        """
        self._imports.table(repository).pop(path, None)
        self._forwards.table(repository).pop(path, None)
        self._symbols.table(repository).pop(path, None)

        definitions = self._definitions.table(repository)
        stale = [
            key
            for key, cached in definitions.items()
            if key[0] == path or path in cached.depends_on
        ]
        for key in stale:
            del definitions[key]

    def invalidate_repository(self, repository: str) -> None:
        self._imports.drop(repository)
        self._forwards.drop(repository)
        self._symbols.drop(repository)
        self._definitions.drop(repository)

    def clear(self) -> None:
        self._imports.clear()
        self._forwards.clear()
        self._symbols.clear()
        self._definitions.clear()
        self.hits = 0
        self.misses = 0

    # ----- inspection -----

    def entry_counts(self, repository: str) -> dict[str, int]:
        return {
            "imports": self._imports.size_of(repository),
            "forwards": self._forwards.size_of(repository),
            "definitions": self._definitions.size_of(repository),
            "symbols": self._symbols.size_of(repository),
        }

    def stats(self) -> CacheStats:
        total = self.hits + self.misses
        repositories = (
            self._imports.repositories()
            | self._forwards.repositories()
            | self._symbols.repositories()
            | self._definitions.repositories()
        )
        return CacheStats(
            hits=self.hits,
            misses=self.misses,
            hit_rate=f"{self.hits / total * 100:.1f}%" if total else "0%",
            repositories=len(repositories),
            imports=self._imports.size(),
            forwards=self._forwards.size(),
            definitions=self._definitions.size(),
            symbols=self._symbols.size(),
        )
