"""Scanner for fastlane setups.

A ``Fastfile`` inside a ``fastlane/`` directory marks a fastlane setup;
the working directory is the parent of ``fastlane/``. Lanes are read from
the Fastfile with a line-based scan: ``lane :name`` declarations, prefixed
with the enclosing ``platform :x`` block when there is one (the form
``fastlane ios beta`` expects).
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

SCANNER_NAME = "fastlane"

CONFIG_NAME = "fastlane-config"
DEFAULT_CONFIG_NAME = "default-fastlane-config"

WORK_DIR_TITLE = "Working directory"
WORK_DIR_ENV_KEY = "FASTLANE_WORK_DIR"
LANE_TITLE = "Fastlane lane"
LANE_ENV_KEY = "FASTLANE_LANE"

XCODE_LIST_TIMEOUT_ENV = {"FASTLANE_XCODE_LIST_TIMEOUT": "120"}

_SKIP_DIRS = DEFAULT_SKIP_DIRS | {"Pods", "Carthage"}
_PLATFORM_PATTERN = re.compile(r"^(\s*)platform\s+:(\w+)\s+do\b")
_LANE_PATTERN = re.compile(r"^\s*lane\s+:(\w+)\s+do\b")


@dataclass
class Fastfile:
    """A detected Fastfile and its lanes."""

    path: Path
    lanes: list[str] = field(default_factory=list)

    @property
    def work_dir(self) -> Path:
        return self.path.parent.parent


def parse_lanes(content: str) -> list[str]:
    """Extract public lane names from Fastfile content.

    Lanes inside a ``platform :ios do ... end`` block are returned as
    ``"ios <lane>"``.
    """
    lanes: list[str] = []
    platform: str | None = None
    platform_indent = ""
    for line in content.splitlines():
        platform_match = _PLATFORM_PATTERN.match(line)
        if platform_match:
            platform_indent, platform = platform_match.group(1), platform_match.group(2)
            continue
        if platform is not None and line.rstrip() == f"{platform_indent}end":
            platform = None
            continue
        lane_match = _LANE_PATTERN.match(line)
        if lane_match:
            lane = lane_match.group(1)
            lanes.append(f"{platform} {lane}" if platform else lane)
    return lanes


class FastlaneScanner(PlatformScanner):
    """Scanner for repositories driven by fastlane."""

    def __init__(self, catalog: StepCatalog) -> None:
        super().__init__(catalog)
        self.fastfiles: list[Fastfile] = []

    @property
    def name(self) -> str:
        return SCANNER_NAME

    def detect_platform(self, search_dir: Path) -> bool:
        self._reset(search_dir)
        logger.info("Searching for Fastfiles in %s", self.search_dir)
        self.fastfiles = [
            Fastfile(path=path, lanes=parse_lanes(read_text(path)))
            for path in list_paths(self.search_dir, skip_dirs=_SKIP_DIRS)
            if path.name == "Fastfile"
            and path.parent.name == "fastlane"
            and path.is_file()
        ]
        if not self.fastfiles:
            logger.info("Platform not detected: %s", SCANNER_NAME)
            return False
        logger.info("%d Fastfile(s) detected", len(self.fastfiles))
        return True

    def options(self) -> tuple[OptionTree, list[str]]:
        warnings: list[str] = []
        tree = OptionTree()
        work_dir_option = tree.add_question(WORK_DIR_TITLE, WORK_DIR_ENV_KEY)
        leaf = tree.add_leaf(CONFIG_NAME)

        for fastfile in self.fastfiles:
            work_dir = relative_path(self.search_dir, fastfile.work_dir)
            if work_dir in tree.node(work_dir_option).children:
                continue
            lane_option = tree.add_question(LANE_TITLE, LANE_ENV_KEY)
            if fastfile.lanes:
                for lane in sorted(set(fastfile.lanes)):
                    tree.add_answer(lane_option, lane, leaf)
            else:
                warnings.append(
                    f"No lanes found in {relative_path(self.search_dir, fastfile.path)}, "
                    "the lane has to be provided"
                )
                tree.add_answer(lane_option, PLACEHOLDER, leaf)
            tree.add_answer(work_dir_option, work_dir, lane_option)

        return tree, warnings

    def default_options(self) -> OptionTree:
        tree = OptionTree()
        work_dir_option = tree.add_question(WORK_DIR_TITLE, WORK_DIR_ENV_KEY)
        lane_option = tree.add_question(LANE_TITLE, LANE_ENV_KEY)
        tree.add_answer(work_dir_option, PLACEHOLDER, lane_option)
        tree.add_answer(lane_option, PLACEHOLDER, tree.add_leaf(DEFAULT_CONFIG_NAME))
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
                catalog.step(
                    "fastlane",
                    inputs=[
                        ("lane", f"${LANE_ENV_KEY}"),
                        ("work_dir", f"${WORK_DIR_ENV_KEY}"),
                    ],
                ),
            ],
            app_envs=[dict(XCODE_LIST_TIMEOUT_ENV)],
        )
