"""Alias resolution: turns alias-configuration files into path rewrites.

An alias configuration is a JSONC file (``tsconfig.json`` shape) with
optional ``compilerOptions.baseUrl``, ``compilerOptions.paths`` and
``references``. Loading happens in two steps:

1. ``collect_config_sources`` flattens a configuration and everything it
   ``extends`` or ``references`` into a de-duplicated list, in discovery
   order (extended sources before the extending one).
2. ``load_aliases`` extracts each source's ``paths`` and merges them,
   later sources overwriting earlier ones for an identical pattern.

``resolve_alias`` then rewrites an import path using longest-prefix-first
matching. Every failure here is local: unreadable or malformed sources
contribute no aliases.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from typing import Any

from scssnav.config.constants import DEFAULT_CONFIG_FILE_NAME
from scssnav.core.errors import ConfigError
from scssnav.files.ops import FileSystem
from scssnav.index.models import AliasMap

logger = logging.getLogger(__name__)

# Parsed configuration per source path; None marks an unreadable source
ParsedConfigs = dict[str, dict[str, Any] | None]


# ---------------------------------------------------------------------------
# JSONC
# ---------------------------------------------------------------------------


def _scan_jsonc(text: str, skip: Callable[[int], int | None]) -> str:
    """Copy ``text``, consulting ``skip`` at each index outside string literals.

    ``skip(i)`` returns the index to resume at, or None to copy ``text[i]``.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        resume = skip(i)
        if resume is not None:
            i = resume
            continue
        if ch == '"':
            in_string = True
        out.append(ch)
        i += 1

    return "".join(out)


def _strip_comments(text: str) -> str:
    n = len(text)

    def skip_comment(i: int) -> int | None:
        if text.startswith("//", i):
            end = text.find("\n", i)
            return n if end == -1 else end
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            return n if end == -1 else end + 2
        return None

    return _scan_jsonc(text, skip_comment)


def _strip_trailing_commas(text: str) -> str:
    n = len(text)

    def skip_comma(i: int) -> int | None:
        if text[i] != ",":
            return None
        j = i + 1
        while j < n and text[j] in " \t\r\n":
            j += 1
        return i + 1 if j < n and text[j] in "}]" else None

    return _scan_jsonc(text, skip_comma)


def _strip_jsonc(text: str) -> str:
    """Remove comments, then trailing commas, outside string literals."""
    return _strip_trailing_commas(_strip_comments(text))


def parse_jsonc(text: str) -> Any:
    """Parse JSON with comments and trailing commas.

    >>> parse_jsonc('{"a": [1, 2,], // note\\n}')
    {'a': [1, 2]}

    Raises:
        ValueError: If the text is not valid JSONC.
    """
    return json.loads(_strip_jsonc(text))


# ---------------------------------------------------------------------------
# Reading configuration sources
# ---------------------------------------------------------------------------


def _normalize_key(path: str) -> str:
    return os.path.normcase(os.path.abspath(path)).lower()


async def load_alias_config(path: str, fs: FileSystem) -> dict[str, Any]:
    """Read and parse one configuration file.

    Raises:
        ConfigError: If the file is missing, unreadable or malformed.
    """
    try:
        text = await fs.read_text(path)
    except FileNotFoundError as e:
        raise ConfigError.file_not_found(path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError.parse_error(path, str(e)) from e
    try:
        data = parse_jsonc(text)
    except ValueError as e:
        raise ConfigError.parse_error(path, str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(path, "top-level value must be an object")
    return data


async def read_alias_config(path: str, fs: FileSystem) -> dict[str, Any] | None:
    """Like ``load_alias_config`` but logs failures and returns None."""
    try:
        return await load_alias_config(path, fs)
    except ConfigError as e:
        logger.warning("alias_config_unreadable: %s", e)
        return None


def _reference_path(config_dir: str, ref_path: str) -> str:
    if not ref_path.endswith(".json"):
        ref_path = os.path.join(ref_path, DEFAULT_CONFIG_FILE_NAME)
    return os.path.normpath(os.path.join(config_dir, ref_path))


def _extends_path(config_dir: str, extends: str) -> str | None:
    """Resolve a local ``extends`` value; package names are not followed."""
    value = extends.strip()
    if not value.startswith(("./", "../", "/")) and not os.path.isabs(value):
        return None
    if not value.endswith(".json"):
        value += ".json"
    return os.path.normpath(os.path.join(config_dir, value))


async def collect_config_sources(
    path: str,
    fs: FileSystem,
    visited: set[str] | None = None,
    parsed: ParsedConfigs | None = None,
) -> list[str]:
    """Flatten a configuration with its ``extends`` and ``references``.

    Cycles are broken by a visited set keyed by the lower-cased absolute
    path. A referenced source that does not exist is skipped with a warning.
    When ``parsed`` is given it receives every source read, None for an
    unreadable one, so ``load_aliases`` can skip reading them again.

    Returns:
        Absolute configuration paths in discovery order, each listed once.
    """
    if visited is None:
        visited = set()
    key = _normalize_key(path)
    if key in visited:
        return []
    visited.add(key)

    config = await read_alias_config(path, fs)
    if parsed is not None:
        parsed[path] = config
    if config is None:
        return [path]

    config_dir = os.path.dirname(path)
    result: list[str] = []

    extends = config.get("extends")
    if isinstance(extends, str):
        base = _extends_path(config_dir, extends)
        if base is not None:
            if await fs.is_file(base):
                result.extend(await collect_config_sources(base, fs, visited, parsed))
            else:
                logger.warning("extended_config_missing: %s", base)

    result.append(path)

    references = config.get("references")
    if isinstance(references, list):
        for ref in references:
            ref_path = ref.get("path") if isinstance(ref, dict) else None
            if not isinstance(ref_path, str) or not ref_path:
                continue
            target = _reference_path(config_dir, ref_path)
            if not await fs.is_file(target):
                logger.warning("referenced_config_missing: %s", target)
                continue
            result.extend(await collect_config_sources(target, fs, visited, parsed))

    return result


async def find_config_in_directory(
    directory: str,
    fs: FileSystem,
    names: list[str] | tuple[str, ...] = (DEFAULT_CONFIG_FILE_NAME,),
) -> str | None:
    """Return the first of ``names`` present in ``directory``."""
    try:
        entries = await fs.list_dir(directory)
    except OSError:
        return None
    present = {e.name: e.path for e in entries if e.type == "file"}
    for name in names:
        if name in present:
            return present[name]
    return None


# ---------------------------------------------------------------------------
# Alias extraction and merge
# ---------------------------------------------------------------------------


def _strip_wildcard(pattern: str) -> str:
    if pattern.endswith("/*"):
        return pattern[:-2]
    if pattern.endswith("*"):
        return pattern[:-1]
    return pattern


def extract_path_aliases(config: dict[str, Any], config_path: str) -> AliasMap:
    """Map each ``paths`` pattern to absolute directories.

    Templates lose a trailing ``/*`` and resolve against ``baseUrl``, which
    itself resolves against the configuration file's directory.
    """
    options = config.get("compilerOptions")
    if not isinstance(options, dict):
        return {}
    paths = options.get("paths")
    if not isinstance(paths, dict):
        return {}

    base_url = options.get("baseUrl")
    if not isinstance(base_url, str) or not base_url:
        base_url = "."
    resolved_base = os.path.normpath(os.path.join(os.path.dirname(config_path), base_url))

    aliases: AliasMap = {}
    for pattern, templates in paths.items():
        if not isinstance(templates, list):
            continue
        roots = [
            os.path.normpath(os.path.join(resolved_base, _strip_wildcard(t)))
            for t in templates
            if isinstance(t, str)
        ]
        if roots:
            aliases[pattern] = roots
    return aliases


def merge_alias_maps(*alias_maps: AliasMap) -> AliasMap:
    """Merge maps in order; later maps win for an identical pattern."""
    merged: AliasMap = {}
    for alias_map in alias_maps:
        for pattern, roots in alias_map.items():
            merged[pattern] = list(roots)
    return merged


async def load_aliases(
    config_paths: list[str],
    fs: FileSystem,
    parsed: ParsedConfigs | None = None,
) -> AliasMap:
    """Extract and merge aliases from every source, in order.

    Sources already in ``parsed`` are not read again.
    """
    maps: list[AliasMap] = []
    for path in config_paths:
        if parsed is not None and path in parsed:
            config = parsed[path]
        else:
            config = await read_alias_config(path, fs)
        if config is not None:
            maps.append(extract_path_aliases(config, path))
    return merge_alias_maps(*maps)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_alias(import_path: str, aliases: AliasMap) -> str | None:
    """Rewrite an import path with the longest matching alias prefix.

    >>> resolve_alias("@/components/button", {"@/*": ["/r/src"], "@/components/*": ["/r/src/components"]})
    '/r/src/components/button'

    Returns:
        The first candidate path of the matching pattern, or None when no
        pattern matches (callers fall back to relative resolution).
    """
    ordered = sorted(aliases.items(), key=lambda item: len(_strip_wildcard(item[0])), reverse=True)
    for pattern, roots in ordered:
        prefix = _strip_wildcard(pattern)
        if not import_path.startswith(prefix) or not roots:
            continue
        remainder = import_path[len(prefix) :].lstrip("/\\")
        root = roots[0]
        return os.path.normpath(os.path.join(root, remainder)) if remainder else root
    return None
