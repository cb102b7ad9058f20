"""Completion: what is being typed, and which symbols fit.

``classify_completion_context`` is a pure function of the text before the
cursor. Patterns overlap (``@include ns.`` also ends like ``ns.``), so they
are tried in a fixed priority order and the first match wins.
"""

from __future__ import annotations

import os
import re

from scssnav.index._internal.indexing.symbol_index import SymbolsByNamespace, dedupe_symbols
from scssnav.index.models import CompletionContext, CompletionItem, Symbol, SymbolKind

_CONTEXT_PATTERNS: tuple[tuple[re.Pattern[str], SymbolKind, bool], ...] = (
    (re.compile(r"@include\s+([\w-]+)\.([\w-]*)$"), SymbolKind.MIXIN, True),
    (re.compile(r"@include\s+([\w-]*)$"), SymbolKind.MIXIN, False),
    (re.compile(r"([\w-]+)\.\$([\w-]*)$"), SymbolKind.VARIABLE, True),
    (re.compile(r"\$([\w-]*)$"), SymbolKind.VARIABLE, False),
    (re.compile(r"([\w-]+)\.([\w-]*)$"), SymbolKind.FUNCTION, True),
)
_VALUE_POSITION_RE = re.compile(r"[:,(]\s*([\w-]*)$")
_BARE_VARIABLE_RE = re.compile(r"\$([\w-]*)$")

NO_CONTEXT = CompletionContext(kind=None)


def classify_completion_context(text_before_cursor: str) -> CompletionContext:
    """Kind, namespace and prefix of the symbol being typed.

    >>> classify_completion_context("  @include mx.fl")
    CompletionContext(kind=<SymbolKind.MIXIN: 'mixin'>, namespace='mx', prefix='fl')
    >>> classify_completion_context("  color: ").kind
    <SymbolKind.FUNCTION: 'function'>
    """
    for pattern, kind, namespaced in _CONTEXT_PATTERNS:
        m = pattern.search(text_before_cursor)
        if m is None:
            continue
        if namespaced:
            return CompletionContext(kind=kind, namespace=m.group(1), prefix=m.group(2))
        return CompletionContext(kind=kind, prefix=m.group(1))

    m = _VALUE_POSITION_RE.search(text_before_cursor)
    if m:
        return CompletionContext(kind=SymbolKind.FUNCTION, prefix=m.group(1))
    return NO_CONTEXT


def build_completion_item(
    symbol: Symbol,
    context: CompletionContext,
    replace_start: int | None = None,
) -> CompletionItem:
    label = symbol.name
    insert_text = symbol.name
    is_snippet = False

    if symbol.kind is SymbolKind.VARIABLE and context.namespace is None:
        label = insert_text = f"${symbol.name}"
    elif symbol.kind is SymbolKind.FUNCTION:
        insert_text = f"{symbol.name}($1)$0"
        is_snippet = True

    file_name = os.path.basename(symbol.defining_file)
    return CompletionItem(
        label=label,
        insert_text=insert_text,
        kind=symbol.kind,
        detail=f"{symbol.detail} • {file_name}" if symbol.detail else file_name,
        source_file=symbol.defining_file,
        documentation=symbol.documentation,
        is_snippet=is_snippet,
        replace_start=replace_start if symbol.kind is SymbolKind.VARIABLE else None,
    )


def complete(
    by_namespace: SymbolsByNamespace,
    context: CompletionContext,
    text_before_cursor: str,
) -> list[CompletionItem]:
    """Items for ``context`` from a namespace-grouped symbol set.

    Candidates of the context's kind are filtered by prefix and kept once
    per ``(name, kind)``, first occurrence winning.
    """
    if not context.is_active:
        return []

    candidates = [
        s
        for s in by_namespace.get(context.namespace, [])
        if s.kind is context.kind and s.name.startswith(context.prefix)
    ]

    replace_start: int | None = None
    if context.kind is SymbolKind.VARIABLE and context.namespace is None:
        m = _BARE_VARIABLE_RE.search(text_before_cursor)
        if m:
            replace_start = m.start()

    return [build_completion_item(s, context, replace_start) for s in dedupe_symbols(candidates)]
