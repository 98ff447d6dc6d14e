"""Shared detection for Xcode based platforms (iOS and macOS).

An Xcode project is a ``.xcodeproj`` directory; a workspace is a
``.xcworkspace`` directory grouping projects. When a workspace references
a project, only the workspace is offered, since that is what CocoaPods
users build.

Whether a project targets iOS or macOS is read from the ``SDKROOT`` build
setting in ``project.pbxproj``. Schemes are the *shared* schemes found in
``xcshareddata/xcschemes``; user schemes are not committed and therefore
not visible to a CI machine.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from ciseed.models.options import PLACEHOLDER, OptionTree
from ciseed.scanners.base import PlatformScanner
from ciseed.scanners.utility import (
    DEFAULT_SKIP_DIRS,
    list_paths,
    read_text,
    relative_path,
)
from ciseed.steps.catalog import StepCatalog
from ciseed.steps.templates import render_pipeline

logger = logging.getLogger(__name__)

SDK_IOS = "iphoneos"
SDK_MACOS = "macosx"

PROJECT_PATH_TITLE = "Project (or Workspace) path"
PROJECT_PATH_ENV_KEY = "BITRISE_PROJECT_PATH"
SCHEME_TITLE = "Scheme name"
SCHEME_ENV_KEY = "BITRISE_SCHEME"

_PROJECT_SUFFIX = ".xcodeproj"
_WORKSPACE_SUFFIX = ".xcworkspace"
_SKIP_DIRS = DEFAULT_SKIP_DIRS | {"Pods", "Carthage", "build", "DerivedData"}

_SDKROOT_PATTERN = re.compile(r"SDKROOT\s*=\s*\"?(\w+)\"?\s*;")
_FILE_REF_PATTERN = re.compile(r"<FileRef\s+location\s*=\s*\"(?:group|container):([^\"]+)\"")


@dataclass
class XcodeProject:
    """A detected project or workspace.

    Attributes:
        path: The ``.xcodeproj`` or ``.xcworkspace`` directory.
        sdk: ``iphoneos`` or ``macosx``.
        schemes: Shared scheme names, sorted.
        has_podfile: True when a ``Podfile`` sits next to the project.
    """

    path: Path
    sdk: str
    schemes: list[str] = field(default_factory=list)
    has_podfile: bool = False

    @property
    def is_workspace(self) -> bool:
        return self.path.suffix == _WORKSPACE_SUFFIX


def _is_nested(path: Path, root: Path) -> bool:
    """True when ``path`` sits inside another project or workspace bundle."""
    return any(
        part.endswith((_PROJECT_SUFFIX, _WORKSPACE_SUFFIX))
        for part in path.relative_to(root).parts[:-1]
    )


def _shared_schemes(bundle: Path) -> set[str]:
    scheme_dir = bundle / "xcshareddata" / "xcschemes"
    if not scheme_dir.is_dir():
        return set()
    return {scheme.stem for scheme in scheme_dir.glob("*.xcscheme")}


def _project_sdk(project: Path) -> str:
    pbxproj = project / "project.pbxproj"
    if not pbxproj.is_file():
        return SDK_IOS
    sdks = set(_SDKROOT_PATTERN.findall(read_text(pbxproj)))
    return SDK_MACOS if SDK_MACOS in sdks and SDK_IOS not in sdks else SDK_IOS


def _workspace_projects(workspace: Path) -> list[Path]:
    contents = workspace / "contents.xcworkspacedata"
    if not contents.is_file():
        return []
    projects: list[Path] = []
    for location in _FILE_REF_PATTERN.findall(read_text(contents)):
        if location.endswith(_PROJECT_SUFFIX):
            projects.append((workspace.parent / location).resolve())
    return projects


def find_xcode_projects(search_dir: Path) -> list[XcodeProject]:
    """Find projects and workspaces below ``search_dir``, shallowest first."""
    root = Path(search_dir).resolve()
    paths = list_paths(root, skip_dirs=_SKIP_DIRS)
    bundles = [
        path
        for path in paths
        if path.suffix in (_PROJECT_SUFFIX, _WORKSPACE_SUFFIX)
        and path.is_dir()
        and not _is_nested(path, root)
    ]
    workspaces = [path for path in bundles if path.suffix == _WORKSPACE_SUFFIX]
    members = {workspace: _workspace_projects(workspace) for workspace in workspaces}
    claimed = {project for projects in members.values() for project in projects}

    found: list[XcodeProject] = []
    for bundle in bundles:
        if bundle.suffix == _PROJECT_SUFFIX:
            if bundle in claimed:
                continue
            sdk = _project_sdk(bundle)
            schemes = _shared_schemes(bundle)
        else:
            projects = [p for p in members[bundle] if p.is_dir()]
            if not projects:
                continue
            sdk = _project_sdk(projects[0])
            schemes = _shared_schemes(bundle)
            for project in projects:
                schemes |= _shared_schemes(project)
        found.append(
            XcodeProject(
                path=bundle,
                sdk=sdk,
                schemes=sorted(schemes),
                has_podfile=(bundle.parent / "Podfile").is_file(),
            )
        )
    return found


class XcodeScanner(PlatformScanner):
    """Common base of the iOS and macOS scanners.

    Subclasses pick the SDK they accept and the test/archive steps their
    templates use.
    """

    scanner_name: str = ""
    sdk: str = SDK_IOS
    test_step: str = ""
    archive_step: str = ""

    def __init__(self, catalog: StepCatalog) -> None:
        super().__init__(catalog)
        self.projects: list[XcodeProject] = []

    @property
    def name(self) -> str:
        return self.scanner_name

    @property
    def config_name(self) -> str:
        return f"{self.scanner_name}-config"

    @property
    def pod_config_name(self) -> str:
        return f"{self.scanner_name}-pod-config"

    @property
    def default_config_name(self) -> str:
        return f"default-{self.scanner_name}-config"

    def detect_platform(self, search_dir: Path) -> bool:
        self._reset(search_dir)
        logger.info("Searching for %s Xcode projects in %s", self.name, self.search_dir)
        self.projects = [
            project
            for project in find_xcode_projects(self.search_dir)
            if project.sdk == self.sdk
        ]
        for project in self.projects:
            logger.debug("%s project: %s schemes=%s", self.name, project.path, project.schemes)
        if not self.projects:
            logger.info("Platform not detected: %s", self.name)
            return False
        logger.info("%d %s project(s) detected", len(self.projects), self.name)
        return True

    def options(self) -> tuple[OptionTree, list[str]]:
        warnings: list[str] = []
        tree = OptionTree()
        project_option = tree.add_question(PROJECT_PATH_TITLE, PROJECT_PATH_ENV_KEY)
        leaves: dict[str, int] = {}

        for project in self.projects:
            project_path = relative_path(self.search_dir, project.path)
            config_name = self.pod_config_name if project.has_podfile else self.config_name
            if config_name not in leaves:
                leaves[config_name] = tree.add_leaf(config_name)

            scheme_option = tree.add_question(SCHEME_TITLE, SCHEME_ENV_KEY)
            if project.schemes:
                for scheme in project.schemes:
                    tree.add_answer(scheme_option, scheme, leaves[config_name])
            else:
                warnings.append(
                    f"No shared scheme found for project: {project_path}. "
                    "Share your scheme(s) in Xcode, or provide the scheme name."
                )
                tree.add_answer(scheme_option, PLACEHOLDER, leaves[config_name])
            tree.add_answer(project_option, project_path, scheme_option)

        tree.root = project_option
        return tree, warnings

    def default_options(self) -> OptionTree:
        tree = OptionTree()
        project_option = tree.add_question(PROJECT_PATH_TITLE, PROJECT_PATH_ENV_KEY)
        scheme_option = tree.add_question(SCHEME_TITLE, SCHEME_ENV_KEY)
        tree.add_answer(project_option, PLACEHOLDER, scheme_option)
        tree.add_answer(scheme_option, PLACEHOLDER, tree.add_leaf(self.default_config_name))
        return tree

    def configs(self) -> dict[str, str]:
        configs: dict[str, str] = {}
        if any(not project.has_podfile for project in self.projects):
            configs[self.config_name] = self._render(use_cocoapods=False)
        if any(project.has_podfile for project in self.projects):
            configs[self.pod_config_name] = self._render(use_cocoapods=True)
        return configs

    def default_configs(self) -> dict[str, str]:
        return {self.default_config_name: self._render(use_cocoapods=True)}

    def _render(self, use_cocoapods: bool) -> str:
        catalog = self.catalog
        project_input = ("project_path", f"${PROJECT_PATH_ENV_KEY}")
        scheme_input = ("scheme", f"${SCHEME_ENV_KEY}")

        prepare = [
            catalog.step("certificate-and-profile-installer"),
            catalog.step("recreate-user-schemes", inputs=[project_input]),
        ]
        if use_cocoapods:
            prepare.append(catalog.step("cocoapods-install"))
        test = catalog.step(self.test_step, inputs=[project_input, scheme_input])
        archive = catalog.step(self.archive_step, inputs=[project_input, scheme_input])

        return render_pipeline(
            catalog,
            self.scanner_name,
            primary_steps=prepare + [test],
            deploy_steps=prepare + [test, archive],
        )
