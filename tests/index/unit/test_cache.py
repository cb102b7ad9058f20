"""Tests for the navigation cache service."""

from __future__ import annotations

from scssnav.index._internal.cache import CachedDefinition, NavigationCache
from scssnav.index.models import ImportEdge, Location, Symbol, SymbolKind

REPO_A = "/work/a"
REPO_B = "/work/b"


def _symbol(path: str, name: str = "gap") -> Symbol:
    return Symbol(name=name, kind=SymbolKind.VARIABLE, defining_file=path, line=0)


class TestPartitioning:
    """Entries never leak across repositories."""

    def test_given_same_path_in_two_repos_when_read_then_isolated(self) -> None:
        # Given
        cache = NavigationCache()
        cache.set_symbols(REPO_A, "/shared/_vars.scss", [_symbol("/shared/_vars.scss")])

        # When
        in_a = cache.get_symbols(REPO_A, "/shared/_vars.scss")
        in_b = cache.get_symbols(REPO_B, "/shared/_vars.scss")

        # Then
        assert in_a is not None and len(in_a) == 1
        assert in_b is None

    def test_invalidate_repository_leaves_others(self) -> None:
        cache = NavigationCache()
        cache.set_imports(REPO_A, "/work/a/app.scss", [ImportEdge("/work/a/_v.scss", "v")])
        cache.set_imports(REPO_B, "/work/b/app.scss", [ImportEdge("/work/b/_v.scss", "v")])

        cache.invalidate_repository(REPO_A)

        assert cache.get_imports(REPO_A, "/work/a/app.scss") is None
        assert cache.get_imports(REPO_B, "/work/b/app.scss") is not None


class TestInvalidateFile:
    """invalidate_file drops everything derived from one file."""

    def test_drops_per_file_entries(self) -> None:
        cache = NavigationCache()
        path = "/work/a/_vars.scss"
        cache.set_imports(REPO_A, path, [])
        cache.set_forwards(REPO_A, path, [])
        cache.set_symbols(REPO_A, path, [])

        cache.invalidate_file(REPO_A, path)

        assert cache.entry_counts(REPO_A) == {
            "imports": 0,
            "forwards": 0,
            "definitions": 0,
            "symbols": 0,
        }

    def test_drops_definitions_that_visited_file(self) -> None:
        # Given a lookup that started at the index and ended in a forwarded file
        cache = NavigationCache()
        index = "/work/a/theme/_index.scss"
        colors = "/work/a/theme/_colors.scss"
        unrelated = "/work/a/_other.scss"
        cache.set_definition(
            REPO_A,
            (index, "primary", SymbolKind.VARIABLE),
            CachedDefinition(Location(colors, 0, 0), frozenset({index, colors})),
        )
        cache.set_definition(
            REPO_A,
            (unrelated, "gap", SymbolKind.VARIABLE),
            CachedDefinition(None, frozenset({unrelated})),
        )

        # When
        cache.invalidate_file(REPO_A, colors)

        # Then
        assert cache.get_definition(REPO_A, (index, "primary", SymbolKind.VARIABLE)) is None
        assert cache.get_definition(REPO_A, (unrelated, "gap", SymbolKind.VARIABLE)) is not None

    def test_negative_results_are_cached(self) -> None:
        cache = NavigationCache()
        key = ("/work/a/_v.scss", "missing", SymbolKind.MIXIN)
        cache.set_definition(REPO_A, key, CachedDefinition(None))

        cached = cache.get_definition(REPO_A, key)

        assert cached is not None
        assert cached.location is None


class TestStats:
    """Hit and miss counters."""

    def test_given_no_lookups_when_stats_then_zero_rate(self) -> None:
        stats = NavigationCache().stats()
        assert stats.hits == 0
        assert stats.misses == 0
        assert stats.hit_rate == "0%"

    def test_counts_hits_and_misses(self) -> None:
        # Given
        cache = NavigationCache()
        cache.set_symbols(REPO_A, "/x.scss", [])

        # When
        cache.get_symbols(REPO_A, "/x.scss")
        cache.get_symbols(REPO_A, "/y.scss")
        stats = cache.stats()

        # Then
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.hit_rate == "50.0%"
        assert stats.symbols == 1

    def test_clear_resets_counters_and_tables(self) -> None:
        cache = NavigationCache()
        cache.set_symbols(REPO_A, "/x.scss", [])
        cache.get_symbols(REPO_A, "/x.scss")

        cache.clear()
        stats = cache.stats()

        assert stats.hits == 0
        assert stats.symbols == 0
        assert stats.repositories == 0
