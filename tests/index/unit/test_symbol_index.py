"""Tests for reachable-symbol aggregation."""

from __future__ import annotations

from pathlib import Path

import pytest

from scssnav.index._internal.indexing.symbol_index import dedupe_symbols
from scssnav.index.models import Document, Symbol, SymbolKind


def _names(symbols: list[Symbol]) -> list[str]:
    return [s.name for s in symbols]


class TestDedupeSymbols:
    """First occurrence per (name, kind) wins."""

    def test_keeps_first_and_distinguishes_kinds(self) -> None:
        symbols = [
            Symbol("size", SymbolKind.VARIABLE, "/a.scss", 0),
            Symbol("size", SymbolKind.MIXIN, "/a.scss", 1),
            Symbol("size", SymbolKind.VARIABLE, "/b.scss", 0),
        ]

        result = dedupe_symbols(symbols)

        assert [(s.kind, s.defining_file) for s in result] == [
            (SymbolKind.VARIABLE, "/a.scss"),
            (SymbolKind.MIXIN, "/a.scss"),
        ]


class TestAvailableSymbols:
    """Per-namespace symbol universe of a document."""

    @pytest.mark.asyncio
    async def test_given_forward_chain_when_collected_then_under_use_namespace(
        self, write_file, tmp_path: Path, components
    ) -> None:
        # Given
        write_file("b.scss", "$color: red;")
        write_file("a.scss", '@forward "./b";\n$local: 1px;')
        app = Document(str(tmp_path / "app.scss"), '@use "./a";\n$own: 2px;')

        # When
        by_namespace = await components.indexer.available_symbols(app)

        # Then
        assert _names(by_namespace["a"]) == ["local", "color"]
        assert _names(by_namespace[None]) == ["own"]

    @pytest.mark.asyncio
    async def test_given_forward_cycle_when_collected_then_terminates(
        self, write_file, tmp_path: Path, components
    ) -> None:
        write_file("a.scss", '@forward "./b";\n$from-a: 1;')
        write_file("b.scss", '@forward "./a";\n$from-b: 2;')
        app = Document(str(tmp_path / "app.scss"), '@use "./a";')

        by_namespace = await components.indexer.available_symbols(app)

        assert _names(by_namespace["a"]) == ["from-a", "from-b"]

    @pytest.mark.asyncio
    async def test_private_imported_symbols_are_hidden(
        self, write_file, tmp_path: Path, components
    ) -> None:
        write_file("lib.scss", "$_helper: 1;\n$-internal: 2;\n$public: 3;")
        app = Document(str(tmp_path / "app.scss"), '@use "./lib";\n$_mine: 4;')

        by_namespace = await components.indexer.available_symbols(app)

        assert _names(by_namespace["lib"]) == ["public"]
        assert _names(by_namespace[None]) == ["_mine"]

    @pytest.mark.asyncio
    async def test_same_namespace_across_edges_concatenates_in_order(
        self, write_file, tmp_path: Path, components
    ) -> None:
        write_file("_one.scss", "$gap: 1px;")
        write_file("_two.scss", "$gap: 2px;\n$pad: 3px;")
        app = Document(str(tmp_path / "app.scss"), '@use "./one" as *;\n@use "./two" as *;')

        by_namespace = await components.indexer.available_symbols(app)

        unscoped = by_namespace[None]
        assert _names(unscoped) == ["gap", "gap", "pad"]
        assert dedupe_symbols(unscoped)[0].defining_file == str(tmp_path / "_one.scss")

    @pytest.mark.asyncio
    async def test_unreadable_file_contributes_nothing(self, tmp_path: Path, components) -> None:
        assert await components.indexer.symbols_in_file(str(tmp_path / "gone.scss")) == []

    @pytest.mark.asyncio
    async def test_symbols_are_memoized_per_file(self, write_file, components) -> None:
        path = str(write_file("_m.scss", "@mixin m() {}"))

        await components.indexer.symbols_in_file(path)
        await components.indexer.symbols_in_file(path)

        assert components.cache.stats().hits == 1
