"""Tests for definition lookup and reference detection."""

from __future__ import annotations

from pathlib import Path

import pytest

from scssnav.index._internal.indexing.resolver import find_declaration, reference_at
from scssnav.index.models import Document, Location, SymbolKind


class TestFindDeclaration:
    """First declaration wins; comment lines are skipped."""

    def test_first_occurrence_wins(self) -> None:
        text = "$gap: 4px;\n@if $dense {\n  $gap: 2px;\n}"
        assert find_declaration(text, "gap", SymbolKind.VARIABLE) == (0, 0)

    def test_comment_lines_are_skipped(self) -> None:
        text = "// $gap: 1px;\n/* $gap: 2px; */\n  $gap: 3px;"
        assert find_declaration(text, "gap", SymbolKind.VARIABLE) == (2, 2)

    def test_mixin_name_must_end_at_word_boundary(self) -> None:
        text = "@mixin button-large {}\n@mixin button {}"
        assert find_declaration(text, "button", SymbolKind.MIXIN) == (1, 0)

    def test_function_requires_parameter_list(self) -> None:
        text = "@function rem($px) { @return $px / 16px * 1rem; }"
        assert find_declaration(text, "rem", SymbolKind.FUNCTION) == (0, 0)
        assert find_declaration(text, "rem", SymbolKind.MIXIN) is None


class TestReferenceAt:
    """Reference detection under the cursor."""

    @pytest.mark.parametrize(
        ("line", "character", "expected"),
        [
            (".x { margin: v.$gap; }", 17, ("gap", SymbolKind.VARIABLE, "v")),
            (".x { margin: $gap; }", 13, ("gap", SymbolKind.VARIABLE, None)),
            ("  @include mx.center;", 15, ("center", SymbolKind.MIXIN, "mx")),
            ("  @include center;", 12, ("center", SymbolKind.MIXIN, None)),
            ("  width: fn.rem(12px);", 12, ("rem", SymbolKind.FUNCTION, "fn")),
            ("  width: rem(12px);", 10, ("rem", SymbolKind.FUNCTION, None)),
        ],
    )
    def test_detects_kind_and_namespace(
        self, line: str, character: int, expected: tuple[str, SymbolKind, str | None]
    ) -> None:
        reference = reference_at(line, 3, character)

        assert reference is not None
        assert (reference.name, reference.kind, reference.namespace) == expected
        assert reference.range.start.line == 3

    def test_cursor_right_after_name_still_hits(self) -> None:
        line = "margin: $gap"
        reference = reference_at(line, 0, len(line))
        assert reference is not None and reference.name == "gap"

    def test_cursor_outside_any_reference(self) -> None:
        assert reference_at(".card { display: block; }", 0, 2) is None


class TestDefinitionResolver:
    """Point lookups across the import graph."""

    @pytest.mark.asyncio
    async def test_given_namespaced_use_when_resolved_then_target_line(
        self, write_file, tmp_path: Path, components
    ) -> None:
        # Given
        vars_path = str(write_file("vars.scss", "$gap: 8px;"))
        app = Document(
            str(tmp_path / "app.scss"), '@use "./vars" as v;\n.x { margin: v.$gap; }'
        )

        # When
        location = await components.resolver.resolve(app, "gap", SymbolKind.VARIABLE, "v")

        # Then
        assert location == Location(vars_path, 0, 0)

    @pytest.mark.asyncio
    async def test_given_unknown_namespace_when_resolved_then_none(
        self, write_file, tmp_path: Path, components
    ) -> None:
        write_file("vars.scss", "$gap: 8px;")
        app = Document(str(tmp_path / "app.scss"), '@use "./vars" as v;')

        assert await components.resolver.resolve(app, "gap", SymbolKind.VARIABLE, "w") is None

    @pytest.mark.asyncio
    async def test_namespace_never_falls_back_to_unscoped_imports(
        self, write_file, tmp_path: Path, components
    ) -> None:
        # Given
        write_file("x.scss", "$other: 1;")
        write_file("y.scss", "$v: 2;")
        app = Document(
            str(tmp_path / "app.scss"), '@use "./x" as alpha;\n@use "./y" as *;'
        )

        # When
        scoped = await components.resolver.resolve(app, "v", SymbolKind.VARIABLE, "alpha")
        unscoped = await components.resolver.resolve(app, "v", SymbolKind.VARIABLE)

        # Then
        assert scoped is None
        assert unscoped == Location(str(tmp_path / "y.scss"), 0, 0)

    @pytest.mark.asyncio
    async def test_forwarding_transitivity(self, write_file, tmp_path: Path, components) -> None:
        write_file("a.scss", '@forward "b";')
        b_path = str(write_file("b.scss", "// brand\n$color: red;"))
        app = Document(str(tmp_path / "app.scss"), '@use "a";')

        location = await components.resolver.resolve(app, "color", SymbolKind.VARIABLE, "a")

        assert location == Location(b_path, 1, 0)

    @pytest.mark.asyncio
    async def test_forward_cycle_terminates(self, write_file, tmp_path: Path, components) -> None:
        write_file("a.scss", '@forward "./b";')
        write_file("b.scss", '@forward "./a";')

        location = await components.resolver.find_definition(
            str(tmp_path / "a.scss"), "missing", SymbolKind.VARIABLE
        )

        assert location is None

    @pytest.mark.asyncio
    async def test_private_name_hidden_from_importers(
        self, write_file, tmp_path: Path, components
    ) -> None:
        # Given
        lib = str(write_file("lib.scss", "@mixin _helper() {}"))
        app = Document(str(tmp_path / "app.scss"), '@use "./lib";')

        # When
        from_importer = await components.resolver.resolve(app, "_helper", SymbolKind.MIXIN, "lib")
        in_place = await components.resolver.find_definition(
            lib, "_helper", SymbolKind.MIXIN, origin=lib
        )

        # Then
        assert from_importer is None
        assert in_place == Location(lib, 0, 0)

    @pytest.mark.asyncio
    async def test_unscoped_falls_back_to_own_declarations(
        self, write_file, tmp_path: Path, components
    ) -> None:
        path = str(write_file("page.scss", "$_pad: 4px;\n.x { padding: $_pad; }"))
        document = await components.documents.read(path)

        location = await components.resolver.resolve(document, "_pad", SymbolKind.VARIABLE)

        assert location == Location(path, 0, 0)

    @pytest.mark.asyncio
    async def test_outermost_result_is_cached_with_dependencies(
        self, write_file, tmp_path: Path, components
    ) -> None:
        # Given
        index = str(write_file("theme/_index.scss", '@forward "./colors";'))
        colors = str(write_file("theme/_colors.scss", "$primary: blue;"))

        # When
        await components.resolver.find_definition(index, "primary", SymbolKind.VARIABLE)
        cached = components.cache.get_definition(
            str(tmp_path), (index, "primary", SymbolKind.VARIABLE)
        )

        # Then
        assert cached is not None
        assert cached.location == Location(colors, 0, 0)
        assert cached.depends_on == frozenset({index, colors})
        assert (
            components.cache.get_definition(str(tmp_path), (colors, "primary", SymbolKind.VARIABLE))
            is None
        )

    @pytest.mark.asyncio
    async def test_negative_result_is_cached(self, write_file, components, tmp_path: Path) -> None:
        path = str(write_file("_empty.scss", ""))

        await components.resolver.find_definition(path, "nope", SymbolKind.FUNCTION)
        cached = components.cache.get_definition(str(tmp_path), (path, "nope", SymbolKind.FUNCTION))

        assert cached is not None
        assert cached.location is None
