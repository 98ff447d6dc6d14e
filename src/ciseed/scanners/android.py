"""Scanner for Android (Gradle) projects.

Detection logic:
    1. List every ``build.gradle`` / ``build.gradle.kts`` outside build
       output directories.
    2. A gradle file belongs to an Android project when it mentions the
       Android Gradle plugin (``com.android.``), or when a module directly
       below it does (the usual ``app/build.gradle`` layout).
    3. Module gradle files below an accepted project are folded into that
       project, so a repository with ``build.gradle`` and
       ``app/build.gradle`` is one project, not two.

Option tree per detected project::

    Path to the gradle file to use (GRADLE_BUILD_FILE_PATH)
      -> Gradle task to run (GRADLE_TASK)
        -> Gradlew file path (GRADLEW_PATH)
          -> android-config
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ciseed.models.options import PLACEHOLDER, OptionTree
from ciseed.scanners.base import PlatformScanner
from ciseed.scanners.utility import (
    DEFAULT_SKIP_DIRS,
    is_relative_to,
    list_paths,
    read_text,
    relative_path,
)
from ciseed.steps.catalog import StepCatalog
from ciseed.steps.templates import render_pipeline

logger = logging.getLogger(__name__)

SCANNER_NAME = "android"

CONFIG_NAME = "android-config"
DEFAULT_CONFIG_NAME = "default-android-config"

GRADLE_FILE_TITLE = "Path to the gradle file to use"
GRADLE_FILE_ENV_KEY = "GRADLE_BUILD_FILE_PATH"
GRADLE_TASK_TITLE = "Gradle task to run"
GRADLE_TASK_ENV_KEY = "GRADLE_TASK"
GRADLEW_TITLE = "Gradlew file path"
GRADLEW_ENV_KEY = "GRADLEW_PATH"

GRADLE_TASKS: tuple[str, ...] = ("assemble", "assembleDebug", "assembleRelease")

_GRADLE_FILE_NAMES = {"build.gradle", "build.gradle.kts"}
_SKIP_DIRS = DEFAULT_SKIP_DIRS | {"build", ".gradle", ".idea"}
_ANDROID_PLUGIN_MARKER = "com.android."


@dataclass(frozen=True)
class GradleProject:
    """A detected Android Gradle project.

    Attributes:
        gradle_file: Root ``build.gradle`` of the project.
        gradlew: The ``gradlew`` wrapper next to it, if any.
    """

    gradle_file: Path
    gradlew: Path | None

    @property
    def project_dir(self) -> Path:
        return self.gradle_file.parent


def find_gradle_projects(search_dir: Path) -> list[GradleProject]:
    """Find Android Gradle projects below ``search_dir``, shallowest first."""
    paths = list_paths(search_dir, skip_dirs=_SKIP_DIRS)
    gradle_files = [path for path in paths if path.name in _GRADLE_FILE_NAMES]
    contents = {path: read_text(path) for path in gradle_files}

    def is_android(gradle_file: Path) -> bool:
        if _ANDROID_PLUGIN_MARKER in contents[gradle_file]:
            return True
        return any(
            other.parent.parent == gradle_file.parent
            and _ANDROID_PLUGIN_MARKER in contents[other]
            for other in gradle_files
        )

    projects: list[GradleProject] = []
    for gradle_file in gradle_files:
        if any(is_relative_to(gradle_file, p.project_dir) for p in projects):
            continue
        if not is_android(gradle_file):
            continue
        gradlew = gradle_file.parent / "gradlew"
        projects.append(
            GradleProject(
                gradle_file=gradle_file,
                gradlew=gradlew if gradlew.is_file() else None,
            )
        )
    return projects


class AndroidScanner(PlatformScanner):
    """Scanner for Android projects built with Gradle."""

    def __init__(self, catalog: StepCatalog) -> None:
        super().__init__(catalog)
        self.projects: list[GradleProject] = []

    @property
    def name(self) -> str:
        return SCANNER_NAME

    def detect_platform(self, search_dir: Path) -> bool:
        self._reset(search_dir)
        logger.info("Searching for Android gradle files in %s", self.search_dir)
        self.projects = find_gradle_projects(self.search_dir)
        for project in self.projects:
            logger.debug("Android project: %s", project.gradle_file)
        if not self.projects:
            logger.info("Platform not detected: %s", SCANNER_NAME)
            return False
        logger.info("%d Android project(s) detected", len(self.projects))
        return True

    def options(self) -> tuple[OptionTree, list[str]]:
        warnings: list[str] = []
        tree = OptionTree()
        gradle_file_option = tree.add_question(GRADLE_FILE_TITLE, GRADLE_FILE_ENV_KEY)
        leaf = tree.add_leaf(CONFIG_NAME)

        for project in self.projects:
            gradlew_option = tree.add_question(GRADLEW_TITLE, GRADLEW_ENV_KEY)
            if project.gradlew is not None:
                gradlew_answer = relative_path(self.search_dir, project.gradlew)
            else:
                gradlew_answer = PLACEHOLDER
                warnings.append(
                    "No gradlew found next to "
                    f"{relative_path(self.search_dir, project.gradle_file)}, "
                    "the gradlew path has to be provided"
                )
            tree.add_answer(gradlew_option, gradlew_answer, leaf)

            task_option = tree.add_question(GRADLE_TASK_TITLE, GRADLE_TASK_ENV_KEY)
            for task in GRADLE_TASKS:
                tree.add_answer(task_option, task, gradlew_option)

            tree.add_answer(
                gradle_file_option,
                relative_path(self.search_dir, project.gradle_file),
                task_option,
            )

        tree.root = gradle_file_option
        return tree, warnings

    def default_options(self) -> OptionTree:
        tree = OptionTree()
        gradlew_option = tree.add_question(GRADLEW_TITLE, GRADLEW_ENV_KEY)
        gradle_file_option = tree.add_question(GRADLE_FILE_TITLE, GRADLE_FILE_ENV_KEY)
        task_option = tree.add_question(GRADLE_TASK_TITLE, GRADLE_TASK_ENV_KEY)
        tree.add_answer(gradlew_option, PLACEHOLDER, gradle_file_option)
        tree.add_answer(gradle_file_option, PLACEHOLDER, task_option)
        tree.add_answer(task_option, PLACEHOLDER, tree.add_leaf(DEFAULT_CONFIG_NAME))
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
                catalog.step("install-missing-android-tools"),
                catalog.step(
                    "gradle-runner",
                    inputs=[
                        ("gradle_file", f"${GRADLE_FILE_ENV_KEY}"),
                        ("gradle_task", f"${GRADLE_TASK_ENV_KEY}"),
                        ("gradlew_path", f"${GRADLEW_ENV_KEY}"),
                    ],
                ),
            ],
        )
