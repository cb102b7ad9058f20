"""Navigation engine: import graph, symbol index and definition lookup."""

from scssnav.index.models import (
    CompletionItem,
    Diagnostic,
    DocumentLink,
    ImportEdge,
    Location,
    Position,
    Range,
    RepositoryContext,
    Symbol,
    SymbolKind,
)
from scssnav.index.ops import InitResult, NavigatorEngine

__all__ = [
    "CompletionItem",
    "Diagnostic",
    "DocumentLink",
    "ImportEdge",
    "InitResult",
    "Location",
    "NavigatorEngine",
    "Position",
    "Range",
    "RepositoryContext",
    "Symbol",
    "SymbolKind",
]
