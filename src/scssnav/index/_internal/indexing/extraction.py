"""Declaration extraction for a single stylesheet.

Line-oriented: each line is matched on its own against the variable, mixin
and function declaration patterns. The only state carried between lines is
the documentation buffer built from consecutive ``//`` comment lines.
"""

from __future__ import annotations

import re

from scssnav.index.models import Symbol, SymbolKind

_VARIABLE_RE = re.compile(r"^\s*\$([a-zA-Z0-9_-]+)\s*:\s*(.+?);")
_MIXIN_RE = re.compile(r"^\s*@mixin\s+([a-zA-Z0-9_-]+)\s*(\([^)]*\))?")
_FUNCTION_RE = re.compile(r"^\s*@function\s+([a-zA-Z0-9_-]+)\s*(\([^)]*\))")


def _match_declaration(line: str) -> tuple[str, SymbolKind, str] | None:
    m = _VARIABLE_RE.match(line)
    if m:
        return m.group(1), SymbolKind.VARIABLE, m.group(2).strip()
    m = _MIXIN_RE.match(line)
    if m:
        return m.group(1), SymbolKind.MIXIN, m.group(2) or "()"
    m = _FUNCTION_RE.match(line)
    if m:
        return m.group(1), SymbolKind.FUNCTION, m.group(2)
    return None


def extract_symbols(path: str, text: str) -> list[Symbol]:
    """All declarations in ``text``, duplicates included, in line order.

    Args:
        path: Absolute path recorded as each symbol's defining file.
        text: Stylesheet source.
    """
    symbols: list[Symbol] = []
    doc_lines: list[str] = []

    for line_no, line in enumerate(text.splitlines()):
        stripped = line.strip()

        if stripped.startswith("//"):
            doc_lines.append(stripped[2:].strip())
            continue

        declaration = _match_declaration(line)
        if declaration is not None:
            name, kind, detail = declaration
            symbols.append(
                Symbol(
                    name=name,
                    kind=kind,
                    defining_file=path,
                    line=line_no,
                    detail=detail,
                    documentation="\n".join(doc_lines) or None,
                )
            )
            doc_lines = []
            continue

        if not stripped.startswith("/*"):
            doc_lines = []

    return symbols
