"""Tests for the config compiler."""

from __future__ import annotations

import pytest

from ciseed.compiler import compile_config
from ciseed.exceptions import TemplateError, UnknownConfigError
from ciseed.steps.catalog import StepCatalog
from ciseed.steps.templates import render_pipeline


class TestCompileConfig:
    """compile_config()."""

    def test_appends_envs(self, catalog: StepCatalog) -> None:
        templates = {
            "fastlane-config": render_pipeline(
                catalog,
                "fastlane",
                primary_steps=[],
                app_envs=[{"FASTLANE_XCODE_LIST_TIMEOUT": "120"}],
            )
        }
        document = compile_config(
            "fastlane",
            "fastlane-config",
            [{"FASTLANE_WORK_DIR": "./"}, {"FASTLANE_LANE": "ios beta"}],
            templates,
        )
        assert document.app_envs == [
            {"FASTLANE_XCODE_LIST_TIMEOUT": "120"},
            {"FASTLANE_WORK_DIR": "./"},
            {"FASTLANE_LANE": "ios beta"},
        ]

    def test_no_envs_leaves_template_unchanged(self, catalog: StepCatalog) -> None:
        template = render_pipeline(catalog, "other", primary_steps=[])
        document = compile_config("other", "other-config", [], {"other-config": template})
        assert document.to_yaml() == template

    def test_unknown_config(self) -> None:
        with pytest.raises(UnknownConfigError, match="unknown configuration 'x' for platform 'ios'"):
            compile_config("ios", "x", [], {"ios-config": "format_version: 1\n"})

    def test_invalid_template(self) -> None:
        with pytest.raises(TemplateError):
            compile_config("ios", "ios-config", [], {"ios-config": "workflows: [\n"})
