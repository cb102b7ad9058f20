"""Config module exports."""

from scssnav.config.loader import load_config
from scssnav.config.models import (
    DiagnosticsConfig,
    DirectoryRef,
    ExplicitConfigRef,
    LoggingConfig,
    NavigatorConfig,
    ResolverConfig,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "NavigatorConfig",
    "DiagnosticsConfig",
    "DirectoryRef",
    "ExplicitConfigRef",
    "LoggingConfig",
    "ResolverConfig",
    "WatcherConfig",
]
