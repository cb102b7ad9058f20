"""Tests for reference validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from scssnav.config.models import DiagnosticsConfig
from scssnav.index._internal.indexing.diagnostics import (
    UNRESOLVED_IMPORT,
    UNRESOLVED_SYMBOL,
    ReferenceValidator,
)
from scssnav.index.models import Document, Severity


@pytest.fixture
def validator(components) -> ReferenceValidator:
    return ReferenceValidator(components.walker, components.resolver, DiagnosticsConfig())


class TestValidateImports:
    """Unresolved imports are errors at the path span."""

    @pytest.mark.asyncio
    async def test_given_missing_target_when_validated_then_error(
        self, tmp_path: Path, validator
    ) -> None:
        # Given
        document = Document(str(tmp_path / "app.scss"), '@use "./missing" as m;')

        # When
        [diagnostic] = await validator.validate_imports(document)

        # Then
        assert diagnostic.severity is Severity.ERROR
        assert diagnostic.code == UNRESOLVED_IMPORT
        assert diagnostic.message == "Cannot find SCSS file: ./missing"
        assert (diagnostic.range.start.character, diagnostic.range.end.character) == (6, 15)

    @pytest.mark.asyncio
    async def test_builtins_and_plain_css_are_never_reported(
        self, tmp_path: Path, validator
    ) -> None:
        document = Document(
            str(tmp_path / "app.scss"),
            '@use "sass:math";\n@import "https://fonts.example.com/x.css";\n@import "theme.css";',
        )

        assert await validator.validate_imports(document) == []


class TestValidateSymbols:
    """Unresolved symbol references are warnings."""

    @pytest.mark.asyncio
    async def test_given_missing_namespaced_members_when_validated_then_warnings(
        self, write_file, tmp_path: Path, validator
    ) -> None:
        # Given
        write_file("_tokens.scss", "$gap: 8px;\n@mixin stack() {}\n@function rem($px) {}")
        document = Document(
            str(tmp_path / "app.scss"),
            "\n".join(
                [
                    '@use "./tokens" as t;',
                    ".a { margin: t.$gap; padding: t.$pad; }",
                    ".b { @include t.stack; @include t.grid; }",
                    ".c { width: t.rem(4px); height: t.em(2px); }",
                ]
            ),
        )

        # When
        diagnostics = await validator.validate_symbols(document)

        # Then
        assert [d.message for d in diagnostics] == [
            "Cannot find variable '$pad' in 't'",
            "Cannot find mixin 'grid' in 't'",
            "Cannot find function 'em' in 't'",
        ]
        assert all(d.severity is Severity.WARNING for d in diagnostics)
        assert all(d.code == UNRESOLVED_SYMBOL for d in diagnostics)
        pad = diagnostics[0]
        assert pad.range.start.line == 1
        line = document.line_at(1)
        assert line[pad.range.start.character : pad.range.end.character] == "t.$pad"

    @pytest.mark.asyncio
    async def test_unknown_namespace_is_ignored(self, write_file, tmp_path: Path, validator) -> None:
        write_file("_tokens.scss", "$gap: 8px;")
        document = Document(
            str(tmp_path / "app.scss"), '@use "./tokens" as t;\n.a { margin: other.$gap; }'
        )

        assert await validator.validate_symbols(document) == []

    @pytest.mark.asyncio
    async def test_given_unscoped_imports_when_validated_then_unscoped_checks(
        self, write_file, tmp_path: Path, validator
    ) -> None:
        # Given
        write_file("_base.scss", "$gap: 8px;\n@mixin center() {}\n@function rem($px) {}")
        document = Document(
            str(tmp_path / "app.scss"),
            "\n".join(
                [
                    '@use "./base" as *;',
                    "$local: 2px;",
                    ".a { margin: $gap $local $nope; }",
                    ".b { @include center; @include missing; }",
                    ".c { width: rem(4px); height: calc(100% - 2px); top: unknown(1); }",
                    "// .d { margin: $commented; }",
                ]
            ),
        )

        # When
        diagnostics = await validator.validate_symbols(document)

        # Then
        assert [d.message for d in diagnostics] == [
            "Cannot find variable '$nope'",
            "Cannot find mixin 'missing'",
            "Cannot find function 'unknown'",
        ]

    @pytest.mark.asyncio
    async def test_parameters_loops_and_selectors_are_not_references(
        self, write_file, tmp_path: Path, validator
    ) -> None:
        write_file("_base.scss", "$sizes: 1px 2px;")
        document = Document(
            str(tmp_path / "app.scss"),
            "\n".join(
                [
                    '@use "./base" as *;',
                    "@mixin pad($amount, $side: top) {",
                    "  padding-#{$side}: $amount;",
                    "}",
                    "@function twice($n) { @return $n * 2; }",
                    "@each $size in $sizes { .m { margin: $size; } }",
                    "@for $i from 1 through 3 { .p-#{$i} { padding: $i; } }",
                    "a:not(.x):hover { color: red; }",
                    "@media (min-width: 10px) { .y { color: blue; } }",
                ]
            ),
        )

        assert await validator.validate_symbols(document) == []

    @pytest.mark.asyncio
    async def test_without_unscoped_imports_bare_references_are_not_checked(
        self, write_file, tmp_path: Path, validator
    ) -> None:
        write_file("_tokens.scss", "$gap: 8px;")
        document = Document(
            str(tmp_path / "app.scss"), '@use "./tokens" as t;\n.a { margin: $anything; }'
        )

        assert await validator.validate_symbols(document) == []

    @pytest.mark.asyncio
    async def test_private_members_are_reported_from_importers(
        self, write_file, tmp_path: Path, validator
    ) -> None:
        write_file("_lib.scss", "$_secret: 1;")
        document = Document(str(tmp_path / "app.scss"), '@use "./lib";\n.a { top: lib.$_secret; }')

        [diagnostic] = await validator.validate_symbols(document)

        assert diagnostic.message == "Cannot find variable '$_secret' in 'lib'"


class TestValidate:
    """Config switches."""

    @pytest.mark.asyncio
    async def test_disabled_checks_report_nothing(self, tmp_path: Path, components) -> None:
        validator = ReferenceValidator(
            components.walker,
            components.resolver,
            DiagnosticsConfig(validate_imports=False, validate_symbols=False),
        )
        document = Document(str(tmp_path / "app.scss"), '@use "./gone";')

        assert await validator.validate(document) == []
