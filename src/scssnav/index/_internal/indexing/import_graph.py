"""Import graph: ``@use`` / ``@forward`` / ``@import`` edges between stylesheets.

Two layers:

1. ``parse_import_statements(text)`` recognises every statement with its
   raw path, namespace and source span. Pure; no I/O.
2. ``ImportGraphWalker`` resolves statements to files on disk (alias first,
   then relative to the importer), probing partial and index conventions,
   and memoizes per-file edges and forward targets in the cache service.

Built-in ``sass:`` modules and plain-CSS imports are recognised but never
resolved and never produce edges.
"""

from __future__ import annotations

import os
import re

import structlog

from scssnav.config.constants import (
    BUILTIN_MODULE_PREFIX,
    INDEX_BASENAME,
    PLAIN_CSS_PREFIXES,
    STYLESHEET_EXTENSIONS,
)
from scssnav.index._internal.cache import NavigationCache
from scssnav.index._internal.documents import DocumentStore
from scssnav.index._internal.indexing.config_resolver import resolve_alias
from scssnav.index.models import (
    AliasMap,
    Document,
    ImportEdge,
    ImportKind,
    ImportStatement,
    RepositoryContext,
)

log = structlog.get_logger(__name__)

_USE_RE = re.compile(r"""@use\s+(["'])([^"']+)\1(?:\s+as\s+(\*|[\w-]+))?""")
_FORWARD_RE = re.compile(r"""@forward\s+(["'])([^"']+)\1""")
_IMPORT_RE = re.compile(r"@import\s+")
_QUOTED_RE = re.compile(r"""(["'])([^"']+)\1""")
_LIST_SEPARATOR_RE = re.compile(r"\s*,\s*")

_NAMESPACE_EXTENSIONS = (*STYLESHEET_EXTENSIONS, ".css")


# ---------------------------------------------------------------------------
# Statement recognition
# ---------------------------------------------------------------------------


def strip_line_comment(line: str) -> str:
    """Cut a line at the first ``//`` outside quotes.

    ``//`` right after ``:`` is a URL scheme separator, not a comment.
    """
    quote: str | None = None
    for i, ch in enumerate(line):
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "/" and line[i + 1 : i + 2] == "/" and (i == 0 or line[i - 1] != ":"):
            return line[:i]
    return line


def is_plain_css_import(import_path: str) -> bool:
    return import_path.startswith(PLAIN_CSS_PREFIXES) or import_path.endswith(".css")


def derive_namespace(import_path: str, alias: str | None = None) -> str | None:
    """Namespace a ``@use`` binds.

    ``as *`` means unscoped (None); an explicit alias wins; otherwise the last
    path segment without a leading underscore or stylesheet extension.

    >>> derive_namespace("@/styles/_colors.scss")
    'colors'
    >>> derive_namespace("./theme", "t")
    't'
    """
    if alias == "*":
        return None
    if alias:
        return alias
    if import_path.startswith(BUILTIN_MODULE_PREFIX):
        return import_path[len(BUILTIN_MODULE_PREFIX) :]
    segment = import_path.rstrip("/").split("/")[-1]
    if segment.startswith("_"):
        segment = segment[1:]
    for ext in _NAMESPACE_EXTENSIONS:
        if segment.endswith(ext):
            segment = segment[: -len(ext)]
            break
    return segment


def _statement(
    kind: ImportKind, path: str, namespace: str | None, line: int, start: int
) -> ImportStatement:
    return ImportStatement(
        kind=kind,
        path=path,
        namespace=namespace,
        line=line,
        start=start,
        end=start + len(path),
        is_builtin=path.startswith(BUILTIN_MODULE_PREFIX),
        is_plain_css=is_plain_css_import(path),
    )


def _parse_line(text: str, line: int) -> list[ImportStatement]:
    found: list[ImportStatement] = []

    for m in _USE_RE.finditer(text):
        path = m.group(2)
        found.append(
            _statement(ImportKind.USE, path, derive_namespace(path, m.group(3)), line, m.start(2))
        )

    for m in _FORWARD_RE.finditer(text):
        found.append(_statement(ImportKind.FORWARD, m.group(2), None, line, m.start(2)))

    for m in _IMPORT_RE.finditer(text):
        pos = m.end()
        # @import "a", "b";
        while True:
            quoted = _QUOTED_RE.match(text, pos)
            if quoted is None:
                break
            found.append(
                _statement(ImportKind.IMPORT, quoted.group(2), None, line, quoted.start(2))
            )
            sep = _LIST_SEPARATOR_RE.match(text, quoted.end())
            if sep is None:
                break
            pos = sep.end()

    found.sort(key=lambda s: s.start)
    return found


def parse_import_statements(text: str) -> list[ImportStatement]:
    """Recognise every import statement in a stylesheet, in textual order."""
    statements: list[ImportStatement] = []
    for line_no, raw in enumerate(text.splitlines()):
        if "@" not in raw or raw.lstrip().startswith("//"):
            continue
        statements.extend(_parse_line(strip_line_comment(raw), line_no))
    return statements


# ---------------------------------------------------------------------------
# Target resolution
# ---------------------------------------------------------------------------


def resolve_import_base(import_path: str, importer: str, aliases: AliasMap) -> str:
    """Base path for an import, before extension and partial probing.

    Paths starting with ``.`` are relative to the importer's directory.
    Anything else tries the alias map first, then falls back to relative.
    """
    importer_dir = os.path.dirname(importer)
    if not import_path.startswith("."):
        aliased = resolve_alias(import_path, aliases)
        if aliased is not None:
            return aliased
    return os.path.normpath(os.path.join(importer_dir, import_path))


def candidate_paths(base: str) -> list[str]:
    """Probe order for an import base path; first existing file wins."""
    directory, basename = os.path.split(base)
    candidates: list[str] = []

    if basename.endswith(STYLESHEET_EXTENSIONS):
        candidates.append(base)
        if not basename.startswith("_"):
            candidates.append(os.path.join(directory, "_" + basename))

    candidates.extend(base + ext for ext in STYLESHEET_EXTENSIONS)
    candidates.extend(os.path.join(directory, f"_{basename}{ext}") for ext in STYLESHEET_EXTENSIONS)

    if basename != INDEX_BASENAME:
        for ext in STYLESHEET_EXTENSIONS:
            candidates.append(os.path.join(base, f"{INDEX_BASENAME}{ext}"))
            candidates.append(os.path.join(base, f"_{INDEX_BASENAME}{ext}"))

    return candidates


async def find_stylesheet(base: str, documents: DocumentStore) -> str | None:
    for candidate in candidate_paths(base):
        if await documents.exists(candidate):
            return candidate
    return None


# ---------------------------------------------------------------------------
# Walker
# ---------------------------------------------------------------------------


class ImportGraphWalker:
    """Resolves and memoizes the import edges of files in one repository."""

    def __init__(
        self,
        context: RepositoryContext,
        documents: DocumentStore,
        cache: NavigationCache,
    ) -> None:
        self._context = context
        self._documents = documents
        self._cache = cache

    @property
    def context(self) -> RepositoryContext:
        return self._context

    @property
    def repository(self) -> str:
        return self._context.root_path

    async def resolve_statement(self, statement: ImportStatement, importer: str) -> str | None:
        """Target file of one statement; None for built-ins, plain CSS or misses."""
        if not statement.resolvable:
            return None
        base = resolve_import_base(statement.path, importer, self._context.aliases)
        return await find_stylesheet(base, self._documents)

    async def imports_for(self, document: Document) -> list[ImportEdge]:
        """Resolved edges of a document, in textual order.

        Unresolved statements are skipped here; diagnostics report them.
        """
        cached = self._cache.get_imports(self.repository, document.path)
        if cached is not None:
            return cached

        edges: list[ImportEdge] = []
        for statement in parse_import_statements(document.text):
            if not statement.resolvable:
                continue
            target = await self.resolve_statement(statement, document.path)
            if target is None:
                log.debug("import_unresolved", file=document.path, path=statement.path)
                continue
            edges.append(ImportEdge(target, statement.namespace, statement.kind))

        self._cache.set_imports(self.repository, document.path, edges)
        return edges

    async def forwards_for(self, path: str) -> list[str]:
        """Files ``path`` re-exports through ``@forward``, in declared order.

        A file that cannot be read forwards nothing; that outcome is not cached.
        """
        cached = self._cache.get_forwards(self.repository, path)
        if cached is not None:
            return cached

        try:
            document = await self._documents.read(path)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("stylesheet_read_failed", file=path, error=str(e))
            return []

        forwards: list[str] = []
        for statement in parse_import_statements(document.text):
            if statement.kind is not ImportKind.FORWARD:
                continue
            target = await self.resolve_statement(statement, path)
            if target is not None:
                forwards.append(target)

        self._cache.set_forwards(self.repository, path, forwards)
        return forwards
