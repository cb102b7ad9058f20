"""High-level entry points of the navigation engine.

``NavigatorEngine`` owns the repository contexts, the open-document store
and the cache service. Every request (definition, completion, diagnostics,
links) runs under its own request id and builds lightweight per-repository
components over the shared cache:

Repository lookup -> ImportGraphWalker -> SymbolIndexer / DefinitionResolver
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from scssnav.config.constants import STYLESHEET_EXTENSIONS
from scssnav.config.models import NavigatorConfig
from scssnav.core.errors import ResolveError
from scssnav.core.logging import request_scope
from scssnav.files.ops import FileSystem, LocalFileSystem
from scssnav.index._internal.cache import CacheStats, NavigationCache
from scssnav.index._internal.documents import DocumentStore
from scssnav.index._internal.indexing import (
    DefinitionResolver,
    ImportGraphWalker,
    ReferenceValidator,
    SymbolIndexer,
    SymbolsByNamespace,
    classify_completion_context,
    complete,
    extract_symbols,
    parse_import_statements,
    reference_at,
)
from scssnav.index._internal.repository import (
    find_repository_context,
    load_repository_contexts,
)
from scssnav.index.models import (
    CompletionItem,
    Diagnostic,
    Document,
    DocumentLink,
    ImportEdge,
    Location,
    Position,
    RepositoryContext,
    to_path,
)

log = structlog.get_logger(__name__)


@dataclass
class InitResult:
    """Result of loading repository contexts."""

    repositories: int
    aliases: int
    config_sources: int


@dataclass
class _Components:
    walker: ImportGraphWalker
    indexer: SymbolIndexer
    resolver: DefinitionResolver


class NavigatorEngine:
    """Cross-file navigation over one workspace.

    Usage::

        engine = NavigatorEngine(workspace_root, config)
        await engine.initialize()
        location = await engine.definition(path, Position(3, 12))
        engine.shutdown()
    """

    def __init__(
        self,
        workspace_root: Path | str,
        config: NavigatorConfig | None = None,
        fs: FileSystem | None = None,
        cache: NavigationCache | None = None,
    ) -> None:
        self._workspace_root = str(Path(workspace_root).resolve())
        self._config = config or NavigatorConfig()
        self._fs = fs or LocalFileSystem()
        self._cache = cache or NavigationCache()
        self._documents = DocumentStore(self._fs)
        self._contexts: dict[str, RepositoryContext] = {}

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def workspace_root(self) -> str:
        return self._workspace_root

    @property
    def config(self) -> NavigatorConfig:
        return self._config

    @property
    def cache(self) -> NavigationCache:
        return self._cache

    @property
    def contexts(self) -> dict[str, RepositoryContext]:
        return dict(self._contexts)

    async def initialize(self) -> InitResult:
        """Load repository contexts from the configured entries."""
        self._contexts = await load_repository_contexts(
            self._config, self._workspace_root, self._fs
        )
        result = InitResult(
            repositories=len(self._contexts),
            aliases=sum(len(c.aliases) for c in self._contexts.values()),
            config_sources=sum(len(c.config_sources) for c in self._contexts.values()),
        )
        log.info(
            "engine_initialized",
            workspace=self._workspace_root,
            repositories=result.repositories,
            aliases=result.aliases,
        )
        return result

    async def reconfigure(self, config: NavigatorConfig | None = None) -> InitResult:
        """Reload repository contexts and drop every cached result."""
        if config is not None:
            self._config = config
        self._cache.clear()
        return await self.initialize()

    def shutdown(self) -> None:
        self._cache.clear()
        log.info("engine_shutdown", workspace=self._workspace_root)

    def repository_for(self, path: str) -> RepositoryContext | None:
        return find_repository_context(to_path(path), self._contexts)

    # =========================================================================
    # Documents and invalidation
    # =========================================================================

    def open_document(self, path: str, text: str) -> Document:
        path = to_path(path)
        document = self._documents.open(path, text)
        self.invalidate_file(path)
        return document

    def change_document(self, path: str, text: str) -> Document:
        return self.open_document(path, text)

    def save_document(self, path: str) -> None:
        self.invalidate_file(path)

    def close_document(self, path: str) -> None:
        path = to_path(path)
        self._documents.close(path)
        self.invalidate_file(path)

    def invalidate_file(self, path: str) -> None:
        path = to_path(path)
        context = find_repository_context(path, self._contexts)
        if context is not None:
            self._cache.invalidate_file(context.root_path, path)

    def invalidate_repository(self, root_path: str) -> None:
        self._cache.invalidate_repository(root_path)

    def _is_config_source(self, path: str) -> bool:
        if os.path.basename(path) in self._config.resolver.config_file_names:
            return True
        return any(path in c.config_sources for c in self._contexts.values())

    async def apply_changes(self, paths: Iterable[str], *, structural: bool = False) -> list[str]:
        """Invalidate after on-disk changes.

        Args:
            paths: Changed files.
            structural: True when files were created or deleted. Import
                probing may then resolve differently anywhere in the owning
                repositories, so those repositories are invalidated whole.

        Returns:
            Changed stylesheet paths. A changed alias configuration triggers
            ``reconfigure()`` instead.
        """
        changed = [to_path(p) for p in paths]
        if any(self._is_config_source(p) for p in changed):
            log.info("alias_config_changed", files=len(changed))
            await self.reconfigure()
            return [p for p in changed if p.endswith(STYLESHEET_EXTENSIONS)]

        stylesheets = [p for p in changed if p.endswith(STYLESHEET_EXTENSIONS)]
        for path in stylesheets:
            context = find_repository_context(path, self._contexts)
            if context is None:
                continue
            if structural:
                self._cache.invalidate_repository(context.root_path)
            else:
                self._cache.invalidate_file(context.root_path, path)
        return stylesheets

    # =========================================================================
    # Requests
    # =========================================================================

    def _components(self, context: RepositoryContext) -> _Components:
        walker = ImportGraphWalker(context, self._documents, self._cache)
        return _Components(
            walker=walker,
            indexer=SymbolIndexer(walker, self._documents, self._cache),
            resolver=DefinitionResolver(walker, self._documents, self._cache),
        )

    async def _document(self, path: str) -> Document:
        path = to_path(path)
        try:
            return await self._documents.read(path)
        except FileNotFoundError as e:
            raise ResolveError.file_not_found(path) from e

    @staticmethod
    def _check_position(document: Document, position: Position) -> None:
        line, character = position.line, position.character
        if (
            line < 0
            or character < 0
            or line > document.line_count
            or character > len(document.line_at(line))
        ):
            raise ResolveError.invalid_position(document.path, line, character)

    async def imports(self, path: str) -> list[ImportEdge]:
        """Resolved import edges of a file; empty outside every repository."""
        document = await self._document(path)
        context = self.repository_for(document.path)
        if context is None:
            return []
        return await self._components(context).walker.imports_for(document)

    async def available_symbols(self, path: str) -> SymbolsByNamespace:
        document = await self._document(path)
        context = self.repository_for(document.path)
        if context is None:
            return {None: extract_symbols(document.path, document.text)}
        return await self._components(context).indexer.available_symbols(document)

    async def definition(self, path: str, position: Position) -> Location | None:
        """Declaration site of the import or symbol under the cursor.

        Raises:
            ResolveError: If the file is missing or the position lies outside it.
        """
        with request_scope("definition", file=path):
            document = await self._document(path)
            self._check_position(document, position)
            context = self.repository_for(document.path)
            if context is None:
                log.debug("no_repository_context", file=document.path)
                return None
            components = self._components(context)

            for statement in parse_import_statements(document.text):
                if statement.line == position.line and statement.range.contains(position):
                    target = await components.walker.resolve_statement(statement, document.path)
                    return Location(path=target, line=0, column=0) if target else None

            reference = reference_at(
                document.line_at(position.line), position.line, position.character
            )
            if reference is None:
                return None

            location = await components.resolver.resolve(
                document, reference.name, reference.kind, reference.namespace
            )
            log.debug(
                "definition_resolved",
                name=reference.name,
                kind=reference.kind.value,
                found=location is not None,
            )
            return location

    async def completion(self, path: str, position: Position) -> list[CompletionItem]:
        """Completion items for the symbol being typed at ``position``.

        Raises:
            ResolveError: If the file is missing or the position lies outside it.
        """
        with request_scope("completion", file=path):
            document = await self._document(path)
            self._check_position(document, position)
            before = document.line_at(position.line)[: position.character]
            context = classify_completion_context(before)
            if not context.is_active:
                return []

            repository = self.repository_for(document.path)
            if repository is None:
                by_namespace: SymbolsByNamespace = {
                    None: extract_symbols(document.path, document.text)
                }
            else:
                by_namespace = await self._components(repository).indexer.available_symbols(
                    document
                )
            items = complete(by_namespace, context, before)
            log.debug("completion_built", kind=context.kind, items=len(items))
            return items

    async def diagnostics(self, path: str) -> list[Diagnostic]:
        """Unresolved imports and symbols of a file."""
        with request_scope("diagnostics", file=path):
            document = await self._document(path)
            context = self.repository_for(document.path)
            if context is None:
                return []
            components = self._components(context)
            validator = ReferenceValidator(
                components.walker, components.resolver, self._config.diagnostics
            )
            diagnostics = await validator.validate(document)
            log.debug("diagnostics_built", file=document.path, count=len(diagnostics))
            return diagnostics

    async def document_links(self, path: str) -> list[DocumentLink]:
        """Clickable import paths that resolve to a file."""
        with request_scope("document_links", file=path):
            document = await self._document(path)
            context = self.repository_for(document.path)
            if context is None:
                return []
            walker = self._components(context).walker
            links: list[DocumentLink] = []
            for statement in parse_import_statements(document.text):
                target = await walker.resolve_statement(statement, document.path)
                if target is not None:
                    links.append(DocumentLink(range=statement.range, target=target))
            return links

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()
