"""Scanner for Xamarin solutions.

A ``.sln`` file is a Xamarin solution when one of its projects is a
Xamarin.iOS, Xamarin.Android or Xamarin.Mac project: either the project
type GUID says so, or the referenced ``.csproj`` / ``.fsproj`` imports a
Xamarin or Mono.Android target.

Configurations and platforms come from the solution's
``SolutionConfigurationPlatforms`` section (``Release|iPhone = ...``).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath

from ciseed.models.options import PLACEHOLDER, OptionTree
from ciseed.scanners.base import PlatformScanner
from ciseed.scanners.utility import DEFAULT_SKIP_DIRS, list_paths, read_text, relative_path
from ciseed.steps.catalog import StepCatalog
from ciseed.steps.templates import render_pipeline

logger = logging.getLogger(__name__)

SCANNER_NAME = "xamarin"

CONFIG_NAME = "xamarin-config"
DEFAULT_CONFIG_NAME = "default-xamarin-config"

SOLUTION_TITLE = "Path to the Xamarin Solution file"
SOLUTION_ENV_KEY = "BITRISE_PROJECT_PATH"
CONFIGURATION_TITLE = "Xamarin solution configuration"
CONFIGURATION_ENV_KEY = "BITRISE_XAMARIN_CONFIGURATION"
PLATFORM_TITLE = "Xamarin solution platform"
PLATFORM_ENV_KEY = "BITRISE_XAMARIN_PLATFORM"

_SKIP_DIRS = DEFAULT_SKIP_DIRS | {"bin", "obj", "packages", "Components"}

# Xamarin.iOS, Xamarin.Android, Xamarin.Mac project type GUIDs.
_XAMARIN_PROJECT_TYPES = {
    "FEACFBD2-3405-455C-9665-78FE426C6842",
    "EFBA0AD7-5A72-4C68-AF49-83D382785DCF",
    "A3F8F2AB-B479-4A4A-A458-A89E7DC349F1",
}
_XAMARIN_PROJECT_MARKERS = ("Xamarin.iOS", "Xamarin.Android", "Xamarin.Mac", "Mono.Android")

_PROJECT_PATTERN = re.compile(
    r'^Project\("\{[^}]+\}"\)\s*=\s*"[^"]*",\s*"([^"]+)"', re.MULTILINE
)
_CONFIG_SECTION_PATTERN = re.compile(
    r"GlobalSection\(SolutionConfigurationPlatforms\)[^\n]*\n(.*?)EndGlobalSection",
    re.DOTALL,
)
_CONFIG_LINE_PATTERN = re.compile(r"^\s*([^|=\s][^|=]*)\|([^=]+?)\s*=", re.MULTILINE)


@dataclass
class XamarinSolution:
    """A detected Xamarin solution.

    Attributes:
        path: The ``.sln`` file.
        configurations: Configuration name to sorted platform names.
    """

    path: Path
    configurations: dict[str, list[str]] = field(default_factory=dict)


def parse_configurations(content: str) -> dict[str, list[str]]:
    """Read ``configuration -> platforms`` from solution file content."""
    section = _CONFIG_SECTION_PATTERN.search(content)
    if not section:
        return {}
    configurations: dict[str, set[str]] = {}
    for configuration, platform in _CONFIG_LINE_PATTERN.findall(section.group(1)):
        configurations.setdefault(configuration.strip(), set()).add(platform.strip())
    return {
        configuration: sorted(platforms)
        for configuration, platforms in sorted(configurations.items())
    }


def is_xamarin_solution(solution: Path, content: str) -> bool:
    upper = content.upper()
    if any(guid in upper for guid in _XAMARIN_PROJECT_TYPES):
        return True
    for project_ref in _PROJECT_PATTERN.findall(content):
        project = solution.parent / Path(*PureWindowsPath(project_ref).parts)
        if project.suffix not in (".csproj", ".fsproj") or not project.is_file():
            continue
        project_content = read_text(project)
        if any(marker in project_content for marker in _XAMARIN_PROJECT_MARKERS):
            return True
    return False


class XamarinScanner(PlatformScanner):
    """Scanner for Xamarin solutions."""

    def __init__(self, catalog: StepCatalog) -> None:
        super().__init__(catalog)
        self.solutions: list[XamarinSolution] = []

    @property
    def name(self) -> str:
        return SCANNER_NAME

    def detect_platform(self, search_dir: Path) -> bool:
        self._reset(search_dir)
        logger.info("Searching for Xamarin solution files in %s", self.search_dir)
        self.solutions = []
        for path in list_paths(self.search_dir, skip_dirs=_SKIP_DIRS):
            if path.suffix != ".sln" or not path.is_file():
                continue
            content = read_text(path)
            if is_xamarin_solution(path, content):
                self.solutions.append(
                    XamarinSolution(path=path, configurations=parse_configurations(content))
                )
        if not self.solutions:
            logger.info("Platform not detected: %s", SCANNER_NAME)
            return False
        logger.info("%d Xamarin solution(s) detected", len(self.solutions))
        return True

    def options(self) -> tuple[OptionTree, list[str]]:
        warnings: list[str] = []
        tree = OptionTree()
        solution_option = tree.add_question(SOLUTION_TITLE, SOLUTION_ENV_KEY)
        leaf = tree.add_leaf(CONFIG_NAME)

        for solution in self.solutions:
            solution_path = relative_path(self.search_dir, solution.path)
            configuration_option = tree.add_question(CONFIGURATION_TITLE, CONFIGURATION_ENV_KEY)
            configurations = solution.configurations
            if not configurations:
                warnings.append(
                    f"No solution configurations found in {solution_path}, "
                    "configuration and platform have to be provided"
                )
                configurations = {PLACEHOLDER: [PLACEHOLDER]}
            for configuration, platforms in configurations.items():
                platform_option = tree.add_question(PLATFORM_TITLE, PLATFORM_ENV_KEY)
                for platform in platforms:
                    tree.add_answer(platform_option, platform, leaf)
                tree.add_answer(configuration_option, configuration, platform_option)
            tree.add_answer(solution_option, solution_path, configuration_option)

        return tree, warnings

    def default_options(self) -> OptionTree:
        tree = OptionTree()
        solution_option = tree.add_question(SOLUTION_TITLE, SOLUTION_ENV_KEY)
        configuration_option = tree.add_question(CONFIGURATION_TITLE, CONFIGURATION_ENV_KEY)
        platform_option = tree.add_question(PLATFORM_TITLE, PLATFORM_ENV_KEY)
        tree.add_answer(solution_option, PLACEHOLDER, configuration_option)
        tree.add_answer(configuration_option, PLACEHOLDER, platform_option)
        tree.add_answer(platform_option, PLACEHOLDER, tree.add_leaf(DEFAULT_CONFIG_NAME))
        return tree

    def configs(self) -> dict[str, str]:
        return {CONFIG_NAME: self._render()}

    def default_configs(self) -> dict[str, str]:
        return {DEFAULT_CONFIG_NAME: self._render()}

    def _render(self) -> str:
        catalog = self.catalog
        return render_pipeline(
            catalog,
            SCANNER_NAME,
            primary_steps=[
                catalog.step("certificate-and-profile-installer"),
                catalog.step("xamarin-user-management", run_if=".IsCI"),
                catalog.step("nuget-restore"),
                catalog.step("xamarin-components-restore"),
                catalog.step(
                    "xamarin-archive",
                    inputs=[
                        ("xamarin_solution", f"${SOLUTION_ENV_KEY}"),
                        ("xamarin_configuration", f"${CONFIGURATION_ENV_KEY}"),
                        ("xamarin_platform", f"${PLATFORM_ENV_KEY}"),
                    ],
                ),
            ],
        )
