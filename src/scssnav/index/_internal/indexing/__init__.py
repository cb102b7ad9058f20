"""Resolution layers: aliases, import graph, symbols, definitions, completion."""

from scssnav.index._internal.indexing.completion import (
    build_completion_item,
    classify_completion_context,
    complete,
)
from scssnav.index._internal.indexing.config_resolver import (
    collect_config_sources,
    extract_path_aliases,
    load_aliases,
    merge_alias_maps,
    parse_jsonc,
    resolve_alias,
)
from scssnav.index._internal.indexing.diagnostics import (
    UNRESOLVED_IMPORT,
    UNRESOLVED_SYMBOL,
    ReferenceValidator,
)
from scssnav.index._internal.indexing.extraction import extract_symbols
from scssnav.index._internal.indexing.import_graph import (
    ImportGraphWalker,
    candidate_paths,
    derive_namespace,
    parse_import_statements,
    resolve_import_base,
)
from scssnav.index._internal.indexing.resolver import (
    DefinitionResolver,
    find_declaration,
    reference_at,
)
from scssnav.index._internal.indexing.symbol_index import (
    SymbolIndexer,
    SymbolsByNamespace,
    dedupe_symbols,
)

__all__ = [
    # Aliases
    "collect_config_sources",
    "extract_path_aliases",
    "load_aliases",
    "merge_alias_maps",
    "parse_jsonc",
    "resolve_alias",
    # Import graph
    "ImportGraphWalker",
    "candidate_paths",
    "derive_namespace",
    "parse_import_statements",
    "resolve_import_base",
    # Symbols
    "SymbolIndexer",
    "SymbolsByNamespace",
    "dedupe_symbols",
    "extract_symbols",
    # Definitions
    "DefinitionResolver",
    "find_declaration",
    "reference_at",
    # Completion
    "build_completion_item",
    "classify_completion_context",
    "complete",
    # Diagnostics
    "ReferenceValidator",
    "UNRESOLVED_IMPORT",
    "UNRESOLVED_SYMBOL",
]
