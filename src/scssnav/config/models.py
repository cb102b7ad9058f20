"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SCSSNAV__SECTION__KEY)
3. Repo YAML (<workspace>/.scssnav/config.yaml)
4. Global YAML (~/.config/scssnav/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SCSSNAV__<SECTION>__<KEY>=<VALUE>

Examples:
    SCSSNAV__LOGGING__LEVEL=DEBUG
    SCSSNAV__DIAGNOSTICS__VALIDATE_SYMBOLS=false
    SCSSNAV__WATCHER__DEBOUNCE_SEC=0.2
"""

from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator

from scssnav.config.constants import CSS_BUILTIN_FUNCTIONS, DEFAULT_CONFIG_FILE_NAME

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SCSSNAV__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every file read and cache miss.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DirectoryRef(BaseModel):
    """Repository given as a directory (alias config auto-discovered).

    A path ending in ``.json`` names the alias configuration directly; the
    repository root is then the file's directory.
    """

    kind: Literal["directory"] = "directory"
    path: str


class ExplicitConfigRef(BaseModel):
    """Repository given as an explicit root plus alias configuration path."""

    kind: Literal["explicit"] = "explicit"
    root: str
    tsconfig: str


RepositoryEntry = Annotated[DirectoryRef | ExplicitConfigRef, Field(discriminator="kind")]


def _coerce_repository_entry(raw: Any) -> Any:
    """Turn the loose user-facing shapes into a tagged entry."""
    if isinstance(raw, str):
        return {"kind": "directory", "path": raw}
    if isinstance(raw, dict) and "kind" not in raw:
        if "root" not in raw:
            raise ValueError(f"Repository entry needs 'root': {raw}")
        if raw.get("tsconfig"):
            return {"kind": "explicit", "root": raw["root"], "tsconfig": raw["tsconfig"]}
        return {"kind": "directory", "path": raw["root"]}
    return raw


class ResolverConfig(BaseModel):
    """Alias configuration discovery.

    Env vars:
        SCSSNAV__RESOLVER__CONFIG_FILE_NAMES: JSON list of file names to probe
    """

    config_file_names: list[str] = Field(
        default_factory=lambda: [DEFAULT_CONFIG_FILE_NAME],
        description="File names probed, in order, when a repository entry is a directory.",
    )


class DiagnosticsConfig(BaseModel):
    """Reference validation.

    Env vars:
        SCSSNAV__DIAGNOSTICS__VALIDATE_IMPORTS: Report unresolved imports
        SCSSNAV__DIAGNOSTICS__VALIDATE_SYMBOLS: Report unresolved symbols
    """

    validate_imports: bool = Field(default=True, description="Report unresolved imports.")
    validate_symbols: bool = Field(
        default=True,
        description="Report unresolved variables, mixins and functions. "
        "Reads every reachable stylesheet, so it is the slowest check.",
    )
    ignored_functions: list[str] = Field(
        default_factory=lambda: list(CSS_BUILTIN_FUNCTIONS),
        description="Function-call names never reported (CSS built-ins).",
    )


class WatcherConfig(BaseModel):
    """File watcher configuration.

    Env vars:
        SCSSNAV__WATCHER__DEBOUNCE_SEC: Quiet window before a batch is delivered
        SCSSNAV__WATCHER__MAX_DEBOUNCE_WAIT_SEC: Upper bound on batching delay
    """

    debounce_sec: float = Field(
        default=0.3,
        description="Sliding debounce window. Lower values re-check more often during edits.",
    )
    max_debounce_wait_sec: float = Field(
        default=2.0,
        description="Maximum delay before a pending batch is flushed.",
    )

    @field_validator("debounce_sec", "max_debounce_wait_sec")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Must be positive, got {v}")
        return v


class NavigatorConfig(BaseModel):
    """Root configuration for scssnav."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    repositories: list[RepositoryEntry] = Field(default_factory=list)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)

    @field_validator("repositories", mode="before")
    @classmethod
    def coerce_repositories(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_coerce_repository_entry(item) for item in v]
        return v

    def repository_entries(self) -> list[DirectoryRef | ExplicitConfigRef]:
        """Configured entries, defaulting to the workspace root."""
        if self.repositories:
            return list(self.repositories)
        return [DirectoryRef(path=".")]
