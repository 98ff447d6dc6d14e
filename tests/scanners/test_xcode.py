"""Tests for the iOS and macOS scanners."""

from __future__ import annotations

from pathlib import Path

from ciseed.models.options import PLACEHOLDER
from ciseed.models.pipeline import PipelineDocument
from ciseed.scanners.ios import IosScanner
from ciseed.scanners.macos import MacosScanner
from ciseed.scanners.xcode import SDK_IOS, SDK_MACOS, find_xcode_projects
from ciseed.steps.catalog import StepCatalog

_WORKSPACE_DATA = """\
<?xml version="1.0" encoding="UTF-8"?>
<Workspace version = "1.0">
   <FileRef location = "group:App.xcodeproj">
   </FileRef>
   <FileRef location = "group:Pods/Pods.xcodeproj">
   </FileRef>
</Workspace>
"""


class TestFindProjects:
    """Project discovery."""

    def test_sdk_and_schemes(self, ios_repo: Path) -> None:
        [project] = find_xcode_projects(ios_repo)
        assert project.sdk == SDK_IOS
        assert project.schemes == ["App", "AppTests"]
        assert not project.has_podfile

    def test_macos_project(self, tmp_path: Path, xcode_project) -> None:
        xcode_project(tmp_path, "Mac", sdk="macosx")
        [project] = find_xcode_projects(tmp_path)
        assert project.sdk == SDK_MACOS

    def test_workspace_claims_its_project(
        self, tmp_path: Path, xcode_project, make_file
    ) -> None:
        xcode_project(tmp_path, "App", schemes=("App",), podfile=True)
        make_file(tmp_path / "App.xcworkspace" / "contents.xcworkspacedata", _WORKSPACE_DATA)
        make_file(tmp_path / "Pods" / "Pods.xcodeproj" / "project.pbxproj", "")
        [project] = find_xcode_projects(tmp_path)
        assert project.is_workspace
        assert project.schemes == ["App"]
        assert project.has_podfile

    def test_nested_bundles_ignored(self, tmp_path: Path, xcode_project) -> None:
        outer = xcode_project(tmp_path, "App")
        xcode_project(outer, "Inner")
        assert len(find_xcode_projects(tmp_path)) == 1


class TestIosScanner:
    """iOS detection, options and templates."""

    def test_detects_ios_only(self, catalog: StepCatalog, ios_repo: Path) -> None:
        assert IosScanner(catalog).detect_platform(ios_repo)
        assert not MacosScanner(catalog).detect_platform(ios_repo)

    def test_options(self, catalog: StepCatalog, ios_repo: Path) -> None:
        scanner = IosScanner(catalog)
        scanner.detect_platform(ios_repo)
        tree, warnings = scanner.options()
        assert warnings == []
        assert list(tree.paths()) == [
            (["./App.xcodeproj", "App"], "ios-config"),
            (["./App.xcodeproj", "AppTests"], "ios-config"),
        ]
        assert list(scanner.configs()) == ["ios-config"]

    def test_no_shared_scheme(self, catalog: StepCatalog, tmp_path: Path, xcode_project) -> None:
        xcode_project(tmp_path, "App", schemes=())
        scanner = IosScanner(catalog)
        scanner.detect_platform(tmp_path)
        tree, warnings = scanner.options()
        assert "No shared scheme found" in warnings[0]
        assert list(tree.paths()) == [(["./App.xcodeproj", PLACEHOLDER], "ios-config")]

    def test_podfile_config(self, catalog: StepCatalog, tmp_path: Path, xcode_project) -> None:
        xcode_project(tmp_path, "App", podfile=True)
        scanner = IosScanner(catalog)
        scanner.detect_platform(tmp_path)
        assert scanner.options()[0].config_ids() == ["ios-pod-config"]
        document = PipelineDocument.from_yaml(scanner.configs()["ios-pod-config"])
        assert "cocoapods-install" in document.step_ids("primary")

    def test_template_workflows(self, catalog: StepCatalog) -> None:
        document = PipelineDocument.from_yaml(IosScanner(catalog).default_configs()["default-ios-config"])
        assert list(document.workflows) == ["deploy", "primary"]
        assert document.step_ids("primary")[-2] == "xcode-test"
        assert document.step_ids("deploy")[-2] == "xcode-archive"


class TestMacosScanner:
    """macOS uses the mac variants of the Xcode steps."""

    def test_options_and_template(
        self, catalog: StepCatalog, tmp_path: Path, xcode_project
    ) -> None:
        xcode_project(tmp_path, "Mac", sdk="macosx", schemes=("Mac",))
        scanner = MacosScanner(catalog)
        assert scanner.detect_platform(tmp_path)
        tree, _ = scanner.options()
        assert tree.config_ids() == ["macos-config"]
        document = PipelineDocument.from_yaml(scanner.configs()["macos-config"])
        assert document.step_ids("deploy")[-2] == "xcode-archive-mac"

    def test_default_tree(self, catalog: StepCatalog) -> None:
        tree = MacosScanner(catalog).default_options()
        assert list(tree.paths()) == [([PLACEHOLDER, PLACEHOLDER], "default-macos-config")]
