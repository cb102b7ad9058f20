"""Repository contexts: one root + alias map per configured entry.

Entries are turned into RepositoryContext records once, at load time.
Lookups pick the context whose root is the longest case-insensitive
prefix of the file path.
"""

from __future__ import annotations

import os

import structlog

from scssnav.config.models import DirectoryRef, ExplicitConfigRef, NavigatorConfig
from scssnav.files.ops import FileSystem
from scssnav.index._internal.indexing.config_resolver import (
    ParsedConfigs,
    collect_config_sources,
    find_config_in_directory,
    load_aliases,
)
from scssnav.index.models import RepositoryContext

log = structlog.get_logger(__name__)


def _absolute(workspace_root: str, path: str) -> str:
    return os.path.normpath(os.path.join(workspace_root, path))


async def _locate_config(
    entry: DirectoryRef | ExplicitConfigRef,
    workspace_root: str,
    fs: FileSystem,
    config_file_names: list[str],
) -> tuple[str, str | None]:
    """(root, configuration file) for an entry; the file is None when missing."""
    if isinstance(entry, ExplicitConfigRef):
        root = _absolute(workspace_root, entry.root)
        config_path = _absolute(workspace_root, entry.tsconfig)
        return root, config_path if await fs.is_file(config_path) else None

    path = _absolute(workspace_root, entry.path)
    if path.endswith(".json"):
        return os.path.dirname(path), path if await fs.is_file(path) else None
    return path, await find_config_in_directory(path, fs, config_file_names)


async def load_repository_context(
    entry: DirectoryRef | ExplicitConfigRef,
    workspace_root: str,
    fs: FileSystem,
    config_file_names: list[str],
) -> RepositoryContext | None:
    """Build one context, or None when its configuration file is missing."""
    root, config_path = await _locate_config(entry, workspace_root, fs, config_file_names)
    if config_path is None:
        log.warning("alias_config_not_found", root=root)
        return None

    parsed: ParsedConfigs = {}
    sources = await collect_config_sources(config_path, fs, parsed=parsed)
    aliases = await load_aliases(sources, fs, parsed)
    if not aliases:
        log.info("repository_without_aliases", root=root, config=config_path)

    context = RepositoryContext(root_path=root, aliases=aliases, config_sources=tuple(sources))
    log.info(
        "repository_context_loaded",
        root=root,
        aliases=len(aliases),
        sources=len(sources),
    )
    return context


async def load_repository_contexts(
    config: NavigatorConfig,
    workspace_root: str,
    fs: FileSystem,
) -> dict[str, RepositoryContext]:
    """Contexts keyed by root path, in configuration order.

    A later entry for the same root replaces an earlier one.
    """
    contexts: dict[str, RepositoryContext] = {}
    for entry in config.repository_entries():
        context = await load_repository_context(
            entry, workspace_root, fs, config.resolver.config_file_names
        )
        if context is not None:
            contexts[context.root_path] = context
    return contexts


def _is_under(path: str, root: str) -> bool:
    if path == root:
        return True
    prefix = root if root.endswith(("/", "\\")) else root + os.sep
    return path.startswith(prefix) or path.startswith(root + "/")


def find_repository_context(
    path: str,
    contexts: dict[str, RepositoryContext],
) -> RepositoryContext | None:
    """Owning context of ``path``: longest root prefix, compared case-insensitively.

    A root only owns paths at a separator boundary, so ``/repo/app`` does
    not own ``/repo/app-legacy/x.scss``.
    """
    target = path.lower()
    best: RepositoryContext | None = None
    best_len = -1
    for root, context in contexts.items():
        normalized = root.lower()
        if _is_under(target, normalized) and len(normalized) > best_len:
            best = context
            best_len = len(normalized)
    return best
