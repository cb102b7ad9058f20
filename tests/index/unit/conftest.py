"""Fixtures for resolver component tests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from scssnav.files.ops import LocalFileSystem
from scssnav.index._internal.cache import NavigationCache
from scssnav.index._internal.documents import DocumentStore
from scssnav.index._internal.indexing.import_graph import ImportGraphWalker
from scssnav.index._internal.indexing.resolver import DefinitionResolver
from scssnav.index._internal.indexing.symbol_index import SymbolIndexer
from scssnav.index.models import RepositoryContext


@dataclass
class Components:
    documents: DocumentStore
    cache: NavigationCache
    walker: ImportGraphWalker
    indexer: SymbolIndexer
    resolver: DefinitionResolver


@pytest.fixture
def components(tmp_path: Path) -> Components:
    """Walker, indexer and resolver over tmp_path with no aliases."""
    documents = DocumentStore(LocalFileSystem())
    cache = NavigationCache()
    walker = ImportGraphWalker(RepositoryContext(root_path=str(tmp_path)), documents, cache)
    return Components(
        documents=documents,
        cache=cache,
        walker=walker,
        indexer=SymbolIndexer(walker, documents, cache),
        resolver=DefinitionResolver(walker, documents, cache),
    )
