"""Scanner for Cordova projects.

A Cordova project is identified by a ``config.xml`` whose root element is
``<widget>``. Generated native projects (``platforms/``) and installed
plugins are not scanned. Because a Cordova repository often carries the
generated Android and Xcode projects too, the Cordova scanner subsumes
the native scanners: when Cordova is detected, standalone Android, iOS and
macOS results are dropped.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ciseed.models.options import PLACEHOLDER, OptionTree
from ciseed.scanners.base import PlatformScanner
from ciseed.scanners.utility import DEFAULT_SKIP_DIRS, list_paths, read_text, relative_path
from ciseed.steps.catalog import StepCatalog
from ciseed.steps.templates import render_pipeline

logger = logging.getLogger(__name__)

SCANNER_NAME = "cordova"

CONFIG_NAME = "cordova-config"
DEFAULT_CONFIG_NAME = "default-cordova-config"

WORK_DIR_TITLE = "Directory of Cordova Config.xml"
WORK_DIR_ENV_KEY = "CORDOVA_WORK_DIR"
PLATFORM_TITLE = "Platform to use in cordova-cli commands"
PLATFORM_ENV_KEY = "CORDOVA_PLATFORM"

PLATFORMS: tuple[str, ...] = ("android", "ios", "ios,android")

_SKIP_DIRS = DEFAULT_SKIP_DIRS | {"platforms", "plugins", "www"}
_WIDGET_PATTERN = re.compile(r"<widget[\s>]")


class CordovaScanner(PlatformScanner):
    """Scanner for Cordova (and Ionic) projects."""

    def __init__(self, catalog: StepCatalog) -> None:
        super().__init__(catalog)
        self.config_files: list[Path] = []

    @property
    def name(self) -> str:
        return SCANNER_NAME

    def detect_platform(self, search_dir: Path) -> bool:
        self._reset(search_dir)
        logger.info("Searching for Cordova config.xml files in %s", self.search_dir)
        self.config_files = [
            path
            for path in list_paths(self.search_dir, skip_dirs=_SKIP_DIRS)
            if path.name == "config.xml"
            and path.is_file()
            and _WIDGET_PATTERN.search(read_text(path))
        ]
        if not self.config_files:
            logger.info("Platform not detected: %s", SCANNER_NAME)
            return False
        logger.info("%d Cordova project(s) detected", len(self.config_files))
        return True

    def excluded_platforms(self) -> list[str]:
        return ["android", "ios", "macos"]

    def options(self) -> tuple[OptionTree, list[str]]:
        tree = OptionTree()
        work_dir_option = tree.add_question(WORK_DIR_TITLE, WORK_DIR_ENV_KEY)
        platform_option = tree.add_question(PLATFORM_TITLE, PLATFORM_ENV_KEY)
        leaf = tree.add_leaf(CONFIG_NAME)
        for platform in PLATFORMS:
            tree.add_answer(platform_option, platform, leaf)
        for config_file in self.config_files:
            work_dir = relative_path(self.search_dir, config_file.parent)
            tree.add_answer(work_dir_option, work_dir, platform_option)
        return tree, []

    def default_options(self) -> OptionTree:
        tree = OptionTree()
        work_dir_option = tree.add_question(WORK_DIR_TITLE, WORK_DIR_ENV_KEY)
        platform_option = tree.add_question(PLATFORM_TITLE, PLATFORM_ENV_KEY)
        leaf = tree.add_leaf(DEFAULT_CONFIG_NAME)
        tree.add_answer(work_dir_option, PLACEHOLDER, platform_option)
        for platform in PLATFORMS:
            tree.add_answer(platform_option, platform, leaf)
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
                catalog.step("generate-cordova-build-configuration"),
                catalog.step(
                    "cordova-archive",
                    inputs=[
                        ("workdir", f"${WORK_DIR_ENV_KEY}"),
                        ("platform", f"${PLATFORM_ENV_KEY}"),
                        ("target", "emulator"),
                    ],
                ),
            ],
        )
