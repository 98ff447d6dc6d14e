"""Scanner for React Native projects.

A React Native project is a ``package.json`` with the native projects
next to it: an Android Gradle project under ``android/`` and/or an Xcode
project under ``ios/``. The native directories are scanned by private
``AndroidScanner`` and ``IosScanner`` instances owned by this scanner, and
because their findings are already part of the React Native tree, the
standalone ``android`` and ``ios`` results are excluded from the scan.

Detection gives up (with a warning) when a ``package.json`` and native
``android/`` / ``ios/`` directories exist but under different roots: there
is no telling which JavaScript project the native code belongs to.

Option tree::

    React Native Task
      Build -> Build Platform
        Android       -> Project path (BITRISE_PROJECT_PATH)
                           -> react-native-android-config
        iOS           -> Project path (BITRISE_PROJECT_PATH)
                           -> Scheme name (BITRISE_SCHEME) -> react-native-ios-config
        iOS + Android -> Android project path (ANDROID_PROJECT_PATH)
                           -> Project path (BITRISE_PROJECT_PATH)
                             -> Scheme name (BITRISE_SCHEME)
                               -> react-native-ios-android-config
      Test -> react-native-test-config

``iOS + Android`` is only offered when both sides were detected.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ciseed.models.options import PLACEHOLDER, OptionTree
from ciseed.scanners import xcode
from ciseed.scanners.android import AndroidScanner
from ciseed.scanners.base import PlatformScanner
from ciseed.scanners.ios import IosScanner
from ciseed.scanners.utility import list_paths, relative_path
from ciseed.steps.catalog import StepCatalog
from ciseed.steps.templates import render_pipeline

logger = logging.getLogger(__name__)

SCANNER_NAME = "reactnative"

ANDROID_CONFIG_NAME = "react-native-android-config"
IOS_CONFIG_NAME = "react-native-ios-config"
IOS_ANDROID_CONFIG_NAME = "react-native-ios-android-config"
TEST_CONFIG_NAME = "react-native-test-config"
DEFAULT_CONFIG_NAME = "default-reactnative-config"

TASK_TITLE = "React Native Task"
BUILD_ANSWER = "Build"
TEST_ANSWER = "Test"

PLATFORM_TITLE = "Build Platform"
ANDROID_ANSWER = "Android"
IOS_ANSWER = "iOS"
IOS_ANDROID_ANSWER = "iOS + Android"

PROJECT_PATH_TITLE = "Project path"
PROJECT_PATH_ENV_KEY = xcode.PROJECT_PATH_ENV_KEY
ANDROID_PROJECT_PATH_TITLE = "Android project path"
ANDROID_PROJECT_PATH_ENV_KEY = "ANDROID_PROJECT_PATH"
SCHEME_TITLE = xcode.SCHEME_TITLE
SCHEME_ENV_KEY = xcode.SCHEME_ENV_KEY

ANDROID_GRADLE_TASK = "assembleRelease"
NPM_TEST_COMMANDS = ("install", "test")

_NATIVE_DIRS = ("android", "ios")


class ReactNativeScanner(PlatformScanner):
    """Composite scanner for React Native projects."""

    def __init__(self, catalog: StepCatalog) -> None:
        super().__init__(catalog)
        self._android = AndroidScanner(catalog)
        self._ios = IosScanner(catalog)
        self.package_json: Path | None = None
        self.has_android = False
        self.has_ios = False

    @property
    def name(self) -> str:
        return SCANNER_NAME

    def excluded_platforms(self) -> list[str]:
        return [self._android.name, self._ios.name]

    def detect_platform(self, search_dir: Path) -> bool:
        self._reset(search_dir)
        self.package_json = None
        self.has_android = False
        self.has_ios = False
        logger.info("Searching for React Native projects in %s", self.search_dir)

        paths = list_paths(self.search_dir)
        package_files = [path for path in paths if path.name == "package.json" and path.is_file()]
        for package_json in package_files:
            project_dir = package_json.parent
            android_dir = project_dir / "android"
            ios_dir = project_dir / "ios"
            has_android = android_dir.is_dir() and self._android.detect_platform(android_dir)
            has_ios = ios_dir.is_dir() and self._ios.detect_platform(ios_dir)
            if has_android or has_ios:
                self.package_json = package_json
                self.has_android = has_android
                self.has_ios = has_ios
                break

        if self.package_json is None:
            self._warn_on_split_layout(paths, package_files)
            logger.info("Platform not detected: %s", SCANNER_NAME)
            return False

        if self.has_android:
            self.detection_warnings.extend(self._android.detection_warnings)
        if self.has_ios:
            self.detection_warnings.extend(self._ios.detection_warnings)
        logger.info(
            "React Native project detected: %s (android=%s, ios=%s)",
            self.package_json,
            self.has_android,
            self.has_ios,
        )
        return True

    def _warn_on_split_layout(self, paths: list[Path], package_files: list[Path]) -> None:
        if not package_files:
            return
        js_roots = {package_json.parent for package_json in package_files}
        stray = [
            path
            for path in paths
            if path.name in _NATIVE_DIRS and path.is_dir() and path.parent not in js_roots
        ]
        if not stray:
            return
        self.detection_warnings.append(
            f"package.json found at {relative_path(self.search_dir, package_files[0])} "
            f"but native projects live under {relative_path(self.search_dir, stray[0])}; "
            "React Native project not detected"
        )

    def options(self) -> tuple[OptionTree, list[str]]:
        warnings: list[str] = []
        tree = OptionTree()
        task_option = tree.add_question(TASK_TITLE)
        platform_option = tree.add_question(PLATFORM_TITLE)
        tree.add_answer(task_option, BUILD_ANSWER, platform_option)

        if self.has_android:
            android_option = self._android_paths(
                tree, PROJECT_PATH_TITLE, PROJECT_PATH_ENV_KEY, tree.add_leaf(ANDROID_CONFIG_NAME)
            )
            tree.add_answer(platform_option, ANDROID_ANSWER, android_option)

        if self.has_ios:
            ios_tree, ios_warnings = self._ios.options()
            warnings.extend(ios_warnings)
            ios_option = self._graft_ios(tree, ios_tree, IOS_CONFIG_NAME)
            tree.add_answer(platform_option, IOS_ANSWER, ios_option)

            if self.has_android:
                both_ios_option = self._graft_ios(tree, ios_tree, IOS_ANDROID_CONFIG_NAME)
                both_option = self._android_paths(
                    tree, ANDROID_PROJECT_PATH_TITLE, ANDROID_PROJECT_PATH_ENV_KEY, both_ios_option
                )
                tree.add_answer(platform_option, IOS_ANDROID_ANSWER, both_option)

        tree.add_answer(task_option, TEST_ANSWER, tree.add_leaf(TEST_CONFIG_NAME))
        return tree, warnings

    def _android_paths(self, tree: OptionTree, title: str, env_key: str, child: int) -> int:
        """Add a question listing the Android project dirs, all leading to ``child``."""
        option = tree.add_question(title, env_key)
        for project in self._android.projects:
            tree.add_answer(option, relative_path(self.search_dir, project.project_dir), child)
        return option

    def _graft_ios(self, tree: OptionTree, ios_tree: OptionTree, config_name: str) -> int:
        """Copy the iOS scanner's tree, re-rooting paths at the search dir.

        The private iOS scanner ran on ``ios/``, so its project answers are
        relative to that directory.
        """
        ios_dir = self._ios.search_dir
        prefix = relative_path(self.search_dir, ios_dir).rstrip("/")
        project_option = tree.add_question(xcode.PROJECT_PATH_TITLE, PROJECT_PATH_ENV_KEY)
        source = ios_tree.node(ios_tree.root)
        for answer, child in source.children.items():
            scheme_option = tree.graft(ios_tree, child, rename=lambda _: config_name)
            tree.add_answer(project_option, f"{prefix}/{answer[2:]}", scheme_option)
        return project_option

    def default_options(self) -> OptionTree:
        tree = OptionTree()
        project_option = tree.add_question(PROJECT_PATH_TITLE, PROJECT_PATH_ENV_KEY)
        scheme_option = tree.add_question(SCHEME_TITLE, SCHEME_ENV_KEY)
        tree.add_answer(project_option, PLACEHOLDER, scheme_option)
        tree.add_answer(scheme_option, PLACEHOLDER, tree.add_leaf(DEFAULT_CONFIG_NAME))
        return tree

    def configs(self) -> dict[str, str]:
        configs: dict[str, str] = {}
        if self.has_android:
            configs[ANDROID_CONFIG_NAME] = render_pipeline(
                self.catalog, SCANNER_NAME, primary_steps=self._android_steps()
            )
        if self.has_ios:
            configs[IOS_CONFIG_NAME] = render_pipeline(
                self.catalog, SCANNER_NAME, primary_steps=self._ios_steps()
            )
        if self.has_android and self.has_ios:
            configs[IOS_ANDROID_CONFIG_NAME] = render_pipeline(
                self.catalog,
                SCANNER_NAME,
                primary_steps=self._android_steps(ANDROID_PROJECT_PATH_ENV_KEY) + self._ios_steps(),
            )
        configs[TEST_CONFIG_NAME] = render_pipeline(
            self.catalog, SCANNER_NAME, primary_steps=self._npm_steps()
        )
        return configs

    def default_configs(self) -> dict[str, str]:
        return {
            DEFAULT_CONFIG_NAME: render_pipeline(
                self.catalog,
                SCANNER_NAME,
                primary_steps=self._android_steps(),
                deploy_steps=self._ios_steps(),
            )
        }

    def _android_steps(self, project_env_key: str = PROJECT_PATH_ENV_KEY) -> list[dict]:
        return [
            self.catalog.step(
                "gradle-runner",
                inputs=[
                    ("gradle_file", f"${project_env_key}/build.gradle"),
                    ("gradle_task", ANDROID_GRADLE_TASK),
                    ("gradlew_path", f"${project_env_key}/gradlew"),
                ],
            )
        ]

    def _ios_steps(self) -> list[dict]:
        project_input = ("project_path", f"${PROJECT_PATH_ENV_KEY}")
        scheme_input = ("scheme", f"${SCHEME_ENV_KEY}")
        return [
            self.catalog.step("certificate-and-profile-installer"),
            self.catalog.step("cocoapods-install"),
            self.catalog.step("xcode-archive", inputs=[project_input, scheme_input]),
        ]

    def _npm_steps(self) -> list[dict]:
        # npm runs from the directory holding package.json.
        workdir = relative_path(self.search_dir, self.package_json.parent)
        return [
            self.catalog.step("npm", inputs=[("workdir", workdir), ("command", command)])
            for command in NPM_TEST_COMMANDS
        ]
