"""Reference validation: unresolved imports and unresolved symbols.

Nothing here raises for a bad reference; every miss becomes a Diagnostic
at the reference's source range.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from scssnav.config.constants import DIAGNOSTIC_SOURCE
from scssnav.config.models import DiagnosticsConfig
from scssnav.index._internal.indexing.import_graph import (
    ImportGraphWalker,
    parse_import_statements,
)
from scssnav.index._internal.indexing.resolver import (
    DefinitionResolver,
    find_declaration,
    is_comment_line,
)
from scssnav.index.models import (
    Diagnostic,
    Document,
    ImportEdge,
    Range,
    Severity,
    SymbolKind,
)

UNRESOLVED_IMPORT = "unresolved-import"
UNRESOLVED_SYMBOL = "unresolved-symbol"

_NS_VARIABLE_RE = re.compile(r"([\w-]+)\.\$([\w-]+)")
_VARIABLE_RE = re.compile(r"\$([\w-]+)")
_NS_MIXIN_RE = re.compile(r"@include\s+([\w-]+)\.([\w-]+)")
_MIXIN_RE = re.compile(r"@include\s+([\w-]+)(?![\w.-])")
_NS_FUNCTION_RE = re.compile(r"([\w-]+)\.([\w-]+)\s*\(")
_FUNCTION_RE = re.compile(r"([\w-]+)\s*\(")
_DECLARATION_TAIL_RE = re.compile(r"\s*:")
# Call syntax that names a mixin or a declaration, not a function call
_NON_CALL_HEAD_RE = re.compile(r"(?:@include|@mixin|@function)\s+$")
# Bindings that declare variables without a `$name:` line
_LOCAL_BINDING_RE = re.compile(
    r"@(?:mixin|function)\s+[\w-]+\s*\(([^)]*)\)|@each\s+([^{]*?)\s+in\b|@for\s+(\$[\w-]+)"
)

_KIND_LABEL = {
    SymbolKind.VARIABLE: "variable",
    SymbolKind.MIXIN: "mixin",
    SymbolKind.FUNCTION: "function",
}


def _local_bindings(text: str) -> frozenset[str]:
    """Parameter and loop variable names declared anywhere in ``text``."""
    names: set[str] = set()
    for m in _LOCAL_BINDING_RE.finditer(text):
        for group in m.groups():
            if group:
                names.update(_VARIABLE_RE.findall(group))
    return frozenset(names)


def _display_name(name: str, kind: SymbolKind) -> str:
    return f"${name}" if kind is SymbolKind.VARIABLE else name


def _symbol_diagnostic(
    line: int, start: int, end: int, name: str, kind: SymbolKind, namespace: str | None
) -> Diagnostic:
    message = f"Cannot find {_KIND_LABEL[kind]} '{_display_name(name, kind)}'"
    if namespace is not None:
        message += f" in '{namespace}'"
    return Diagnostic(
        range=Range.on_line(line, start, end),
        message=message,
        severity=Severity.WARNING,
        code=UNRESOLVED_SYMBOL,
        source=DIAGNOSTIC_SOURCE,
    )


class ReferenceValidator:
    """Produces diagnostics for one document of one repository."""

    def __init__(
        self,
        walker: ImportGraphWalker,
        resolver: DefinitionResolver,
        config: DiagnosticsConfig,
    ) -> None:
        self._walker = walker
        self._resolver = resolver
        self._config = config
        self._ignored = frozenset(config.ignored_functions)

    async def validate(self, document: Document) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        if self._config.validate_imports:
            diagnostics.extend(await self.validate_imports(document))
        if self._config.validate_symbols:
            diagnostics.extend(await self.validate_symbols(document))
        return diagnostics

    async def validate_imports(self, document: Document) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for statement in parse_import_statements(document.text):
            if not statement.resolvable:
                continue
            if await self._walker.resolve_statement(statement, document.path) is not None:
                continue
            diagnostics.append(
                Diagnostic(
                    range=statement.range,
                    message=f"Cannot find SCSS file: {statement.path}",
                    severity=Severity.ERROR,
                    code=UNRESOLVED_IMPORT,
                    source=DIAGNOSTIC_SOURCE,
                )
            )
        return diagnostics

    async def validate_symbols(self, document: Document) -> list[Diagnostic]:
        edges = await self._walker.imports_for(document)
        by_namespace: dict[str, ImportEdge] = {}
        for edge in edges:
            if edge.namespace is not None:
                by_namespace.setdefault(edge.namespace, edge)
        unscoped = [e for e in edges if e.namespace is None]
        bound = _local_bindings(document.text)

        diagnostics: list[Diagnostic] = []
        for line_no, text in enumerate(document.lines):
            if is_comment_line(text):
                continue
            diagnostics.extend(
                await self._check_namespaced(document, line_no, text, by_namespace)
            )
            if unscoped:
                diagnostics.extend(
                    await self._check_unscoped(document, line_no, text, unscoped, bound)
                )
        return diagnostics

    async def _check_namespaced(
        self,
        document: Document,
        line_no: int,
        text: str,
        by_namespace: dict[str, ImportEdge],
    ) -> list[Diagnostic]:
        found: list[Diagnostic] = []
        for pattern, kind in (
            (_NS_VARIABLE_RE, SymbolKind.VARIABLE),
            (_NS_MIXIN_RE, SymbolKind.MIXIN),
            (_NS_FUNCTION_RE, SymbolKind.FUNCTION),
        ):
            for m in pattern.finditer(text):
                namespace, name = m.group(1), m.group(2)
                if kind is SymbolKind.FUNCTION and _NON_CALL_HEAD_RE.search(text, 0, m.start()):
                    continue
                edge = by_namespace.get(namespace)
                # Unknown namespaces are left alone
                if edge is None:
                    continue
                location = await self._resolver.find_definition(
                    edge.target_file, name, kind, origin=document.path
                )
                if location is None:
                    found.append(
                        _symbol_diagnostic(line_no, m.start(1), m.end(2), name, kind, namespace)
                    )
        return found

    async def _check_unscoped(
        self,
        document: Document,
        line_no: int,
        text: str,
        unscoped: list[ImportEdge],
        bound: frozenset[str],
    ) -> list[Diagnostic]:
        found: list[Diagnostic] = []

        for m in _VARIABLE_RE.finditer(text):
            if m.start() > 0 and text[m.start() - 1] == ".":
                continue
            if _DECLARATION_TAIL_RE.match(text, m.end()):
                continue
            name = m.group(1)
            if name in bound:
                continue
            if not await self._is_defined(document, name, SymbolKind.VARIABLE, unscoped):
                found.append(
                    _symbol_diagnostic(line_no, m.start(), m.end(), name, SymbolKind.VARIABLE, None)
                )

        for m in _MIXIN_RE.finditer(text):
            name = m.group(1)
            if not await self._is_defined(document, name, SymbolKind.MIXIN, unscoped):
                found.append(
                    _symbol_diagnostic(line_no, m.start(1), m.end(1), name, SymbolKind.MIXIN, None)
                )

        for m in _FUNCTION_RE.finditer(text):
            name = m.group(1)
            if name in self._ignored:
                continue
            if m.start() > 0 and text[m.start() - 1] in ".:@":
                continue
            if _NON_CALL_HEAD_RE.search(text, 0, m.start()):
                continue
            if not await self._is_defined(document, name, SymbolKind.FUNCTION, unscoped):
                found.append(
                    _symbol_diagnostic(
                        line_no, m.start(1), m.end(1), name, SymbolKind.FUNCTION, None
                    )
                )

        return found

    async def _is_defined(
        self,
        document: Document,
        name: str,
        kind: SymbolKind,
        unscoped: Iterable[ImportEdge],
    ) -> bool:
        for edge in unscoped:
            location = await self._resolver.find_definition(
                edge.target_file, name, kind, origin=document.path
            )
            if location is not None:
                return True
        return find_declaration(document.text, name, kind) is not None
