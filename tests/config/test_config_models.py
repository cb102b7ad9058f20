"""Tests for configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from scssnav.config.constants import CSS_BUILTIN_FUNCTIONS
from scssnav.config.models import (
    DirectoryRef,
    ExplicitConfigRef,
    LogOutputConfig,
    NavigatorConfig,
    WatcherConfig,
)


class TestRepositoryEntries:
    """Repository entries are tagged once at load time."""

    def test_given_bare_string_when_validated_then_directory_ref(self) -> None:
        config = NavigatorConfig(repositories=["packages/web"])
        assert config.repositories == [DirectoryRef(path="packages/web")]

    def test_given_root_and_tsconfig_when_validated_then_explicit_ref(self) -> None:
        config = NavigatorConfig(
            repositories=[{"root": "apps/admin", "tsconfig": "apps/admin/tsconfig.app.json"}]
        )
        entry = config.repositories[0]
        assert isinstance(entry, ExplicitConfigRef)
        assert entry.root == "apps/admin"
        assert entry.tsconfig == "apps/admin/tsconfig.app.json"

    def test_given_root_only_when_validated_then_directory_ref(self) -> None:
        config = NavigatorConfig(repositories=[{"root": "apps/site"}])
        assert config.repositories == [DirectoryRef(path="apps/site")]

    def test_given_tagged_entry_when_validated_then_kept(self) -> None:
        config = NavigatorConfig(repositories=[{"kind": "directory", "path": "x"}])
        assert config.repositories == [DirectoryRef(path="x")]

    def test_given_object_without_root_when_validated_then_rejects(self) -> None:
        with pytest.raises(ValidationError):
            NavigatorConfig(repositories=[{"tsconfig": "tsconfig.json"}])

    def test_given_no_entries_when_listed_then_defaults_to_workspace_root(self) -> None:
        assert NavigatorConfig().repository_entries() == [DirectoryRef(path=".")]

    def test_mixed_entries_keep_order(self) -> None:
        config = NavigatorConfig(repositories=["a", {"root": "b", "tsconfig": "b/ts.json"}])
        kinds = [e.kind for e in config.repository_entries()]
        assert kinds == ["directory", "explicit"]


class TestDefaults:
    """Built-in defaults."""

    def test_diagnostics_ignore_css_builtins(self) -> None:
        config = NavigatorConfig()
        assert config.diagnostics.ignored_functions == list(CSS_BUILTIN_FUNCTIONS)
        assert "calc" in config.diagnostics.ignored_functions

    def test_resolver_probes_tsconfig(self) -> None:
        assert NavigatorConfig().resolver.config_file_names == ["tsconfig.json"]

    def test_logging_defaults_to_warning_on_stderr(self) -> None:
        config = NavigatorConfig()
        assert config.logging.level == "WARNING"
        assert config.logging.outputs[0].destination == "stderr"


class TestValidation:
    """Field validators."""

    @pytest.mark.parametrize("value", [0, -0.5])
    def test_given_non_positive_debounce_when_validated_then_rejects(self, value: float) -> None:
        with pytest.raises(ValidationError):
            WatcherConfig(debounce_sec=value)

    def test_given_relative_log_file_when_validated_then_rejects(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/scssnav.log")

    def test_given_invalid_log_level_when_validated_then_rejects(self) -> None:
        with pytest.raises(ValidationError):
            NavigatorConfig(logging={"level": "LOUD"})
