"""Tests for the Xamarin scanner."""

from __future__ import annotations

from pathlib import Path

from ciseed.models.options import PLACEHOLDER
from ciseed.models.pipeline import PipelineDocument
from ciseed.scanners.xamarin import CONFIG_NAME, XamarinScanner, parse_configurations
from ciseed.steps.catalog import StepCatalog


class TestParseConfigurations:
    """SolutionConfigurationPlatforms parsing."""

    def test_sections(self, xamarin_repo: Path) -> None:
        content = (xamarin_repo / "App.sln").read_text()
        assert parse_configurations(content) == {
            "Debug": ["iPhone"],
            "Release": ["iPhone", "iPhoneSimulator"],
        }

    def test_no_section(self) -> None:
        assert parse_configurations("Global\nEndGlobal\n") == {}


class TestXamarinScanner:
    """Detection and options."""

    def test_detects_through_csproj(self, catalog: StepCatalog, xamarin_repo: Path) -> None:
        assert XamarinScanner(catalog).detect_platform(xamarin_repo)

    def test_detects_through_project_guid(self, catalog: StepCatalog, tmp_path: Path, make_file) -> None:
        make_file(
            tmp_path / "App.sln",
            'Project("{EFBA0AD7-5A72-4C68-AF49-83D382785DCF}") = "App", "App.csproj", "{1}"\n',
        )
        assert XamarinScanner(catalog).detect_platform(tmp_path)

    def test_plain_dotnet_solution(self, catalog: StepCatalog, tmp_path: Path, make_file) -> None:
        make_file(
            tmp_path / "Lib.sln",
            'Project("{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}") = "Lib", "Lib.csproj", "{1}"\n',
        )
        make_file(tmp_path / "Lib.csproj", "<Project Sdk=\"Microsoft.NET.Sdk\"/>\n")
        assert not XamarinScanner(catalog).detect_platform(tmp_path)

    def test_options(self, catalog: StepCatalog, xamarin_repo: Path) -> None:
        scanner = XamarinScanner(catalog)
        scanner.detect_platform(xamarin_repo)
        tree, warnings = scanner.options()
        assert warnings == []
        assert [answers for answers, _ in tree.paths()] == [
            ["./App.sln", "Debug", "iPhone"],
            ["./App.sln", "Release", "iPhone"],
            ["./App.sln", "Release", "iPhoneSimulator"],
        ]

    def test_without_configurations(self, catalog: StepCatalog, tmp_path: Path, make_file) -> None:
        make_file(
            tmp_path / "App.sln",
            'Project("{EFBA0AD7-5A72-4C68-AF49-83D382785DCF}") = "App", "App.csproj", "{1}"\n',
        )
        scanner = XamarinScanner(catalog)
        scanner.detect_platform(tmp_path)
        tree, warnings = scanner.options()
        assert len(warnings) == 1
        assert list(tree.paths()) == [(["./App.sln", PLACEHOLDER, PLACEHOLDER], CONFIG_NAME)]

    def test_template(self, catalog: StepCatalog) -> None:
        document = PipelineDocument.from_yaml(XamarinScanner(catalog).configs()[CONFIG_NAME])
        assert document.step_ids("primary")[-2] == "xamarin-archive"
