"""Fallback scanner for repositories no other scanner recognizes.

The ``other`` platform is never detected. ``ScannerRegistry.scan()`` uses
its default tree and template when every registered scanner came up empty,
so a scan always offers at least one config: clone the repository, run a
free-form script, deploy.
"""

from __future__ import annotations

from pathlib import Path

from ciseed.models.options import OptionTree
from ciseed.scanners.base import PlatformScanner
from ciseed.steps.templates import render_pipeline

SCANNER_NAME = "other"

CONFIG_NAME = "other-config"


class OtherScanner(PlatformScanner):
    """Generic scanner offering the minimal pipeline."""

    @property
    def name(self) -> str:
        return SCANNER_NAME

    def detect_platform(self, search_dir: Path) -> bool:
        self._reset(search_dir)
        return False

    def options(self) -> tuple[OptionTree, list[str]]:
        return self.default_options(), []

    def default_options(self) -> OptionTree:
        return OptionTree.single_leaf(CONFIG_NAME)

    def configs(self) -> dict[str, str]:
        return self.default_configs()

    def default_configs(self) -> dict[str, str]:
        return {CONFIG_NAME: render_pipeline(self.catalog, SCANNER_NAME, primary_steps=[])}
