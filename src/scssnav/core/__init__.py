"""Core utilities: errors and logging."""

from scssnav.core.errors import ConfigError, ErrorCode, ResolveError, ScssNavError
from scssnav.core.logging import configure_logging, request_scope

__all__ = [
    "ConfigError",
    "ErrorCode",
    "ResolveError",
    "ScssNavError",
    "configure_logging",
    "request_scope",
]
