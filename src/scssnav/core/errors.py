"""scssnav error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Resolution
- 9xxx: Internal

Resolution problems inside a request (unresolved imports, unknown symbols,
unreadable stylesheets) are never raised; they surface as diagnostics or as
empty results. These errors cover configuration loading and malformed
requests.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Resolution (3xxx)
    RESOLVE_FILE_NOT_FOUND = 3001
    RESOLVE_INVALID_POSITION = 3002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class ScssNavError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ScssNavError):
    """Configuration-related errors (user config and alias configuration)."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ResolveError(ScssNavError):
    """Malformed navigation requests."""

    @classmethod
    def file_not_found(cls, path: str) -> "ResolveError":
        return cls(
            code=ErrorCode.RESOLVE_FILE_NOT_FOUND,
            message=f"Stylesheet not found: {path}",
            details={"path": path},
        )

    @classmethod
    def invalid_position(cls, path: str, line: int, character: int) -> "ResolveError":
        return cls(
            code=ErrorCode.RESOLVE_INVALID_POSITION,
            message=f"Position {line}:{character} is outside {path}",
            details={"path": path, "line": line, "character": character},
        )
