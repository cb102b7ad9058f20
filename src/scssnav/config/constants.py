"""Configuration constants.

Values here are stylesheet-language facts and implementation details that
should NOT be user-configurable. For configurable values, see models.py.
"""

# =============================================================================
# Stylesheet files
# =============================================================================

STYLESHEET_EXTENSIONS: tuple[str, ...] = (".scss", ".sass")
"""Extensions probed, in order, when resolving an import target."""

PLAIN_CSS_PREFIXES: tuple[str, ...] = ("http://", "https://", "//", "url(")
"""Import paths with these prefixes are plain CSS imports, never resolved."""

BUILTIN_MODULE_PREFIX = "sass:"
"""Built-in module namespace (``@use "sass:math"``), never resolved to a file."""

INDEX_BASENAME = "index"
"""Directory index file stem (``index.scss`` / ``_index.scss``)."""

# =============================================================================
# Alias configuration
# =============================================================================

DEFAULT_CONFIG_FILE_NAME = "tsconfig.json"
"""Configuration file appended to ``references`` entries that name a directory."""

# =============================================================================
# Diagnostics
# =============================================================================

DIAGNOSTIC_SOURCE = "scssnav"
"""Source tag attached to every diagnostic."""

CSS_BUILTIN_FUNCTIONS: tuple[str, ...] = (
    "calc",
    "var",
    "rgb",
    "rgba",
    "hsl",
    "hsla",
    "url",
    "linear-gradient",
    "radial-gradient",
    "if",
    "not",
    "and",
    "or",
)
"""Function-call names that are never reported as unresolved symbols."""

# =============================================================================
# Watcher
# =============================================================================

PRUNED_DIRS: frozenset[str] = frozenset(
    {".git", ".svn", ".hg", ".bzr", ".scssnav", "node_modules", ".sass-cache", "dist"}
)
"""Directories whose changes never reach the engine."""
