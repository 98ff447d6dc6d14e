"""Tests for the exhaustive enumerator and the snapshot document."""

from __future__ import annotations

import json

import pytest

from ciseed.enumerator import dump_snapshot, manual_config, snapshot
from ciseed.scanners.registry import ScannerRegistry, default_registry
from ciseed.yamlio import load_yaml

_DEFAULT_CONFIGS = {
    "android": ["default-android-config"],
    "cordova": ["default-cordova-config"],
    "fastlane": ["default-fastlane-config"],
    "ios": ["default-ios-config"],
    "macos": ["default-macos-config"],
    "reactnative": ["default-reactnative-config"],
    "xamarin": ["default-xamarin-config"],
    "other": ["other-config"],
}


class TestManualConfig:
    """manual_config() over the default registry."""

    def test_every_platform_in_order(self, registry: ScannerRegistry) -> None:
        result = manual_config(registry)
        assert result.platforms == list(_DEFAULT_CONFIGS)

    def test_default_config_ids(self, registry: ScannerRegistry) -> None:
        result = manual_config(registry)
        for name, config_ids in _DEFAULT_CONFIGS.items():
            assert result.platform_trees[name].config_ids() == config_ids
            assert sorted(result.platform_templates[name]) == config_ids

    def test_no_warnings(self, registry: ScannerRegistry) -> None:
        assert manual_config(registry).platform_warnings == {}


class TestSnapshot:
    """Snapshot rendering."""

    def test_placeholder_keys(self, registry: ScannerRegistry) -> None:
        options = snapshot(manual_config(registry))["options"]
        ios = options["ios"]
        assert ios["title"] == "Project (or Workspace) path"
        assert ios["env_key"] == "BITRISE_PROJECT_PATH"
        assert list(ios["value_map"]) == ["_"]
        scheme = ios["value_map"]["_"]
        assert scheme["value_map"]["_"] == {"config": "default-ios-config"}

    def test_other_is_a_single_leaf(self, registry: ScannerRegistry) -> None:
        assert snapshot(manual_config(registry))["options"]["other"] == {"config": "other-config"}

    def test_yaml_templates_are_literal_blocks(self, registry: ScannerRegistry) -> None:
        text = dump_snapshot(manual_config(registry))
        assert "other-config: |\n" in text
        assert '"_":' not in text
        data = load_yaml(text)
        assert data["configs"]["other"]["other-config"].startswith("format_version:")

    def test_yaml_loads_back_to_snapshot(self, registry: ScannerRegistry) -> None:
        result = manual_config(registry)
        data = load_yaml(dump_snapshot(result))
        assert data == snapshot(result)
        assert list(data["options"]) == list(_DEFAULT_CONFIGS)
        assert list(data["options"])[-1] == "other"

    def test_byte_stable(self) -> None:
        first = dump_snapshot(manual_config(default_registry()))
        second = dump_snapshot(manual_config(default_registry()))
        assert first == second

    def test_json(self, registry: ScannerRegistry) -> None:
        result = manual_config(registry)
        assert json.loads(dump_snapshot(result, "json")) == snapshot(result)

    def test_unknown_format(self, registry: ScannerRegistry) -> None:
        with pytest.raises(ValueError, match="toml"):
            dump_snapshot(manual_config(registry), "toml")
