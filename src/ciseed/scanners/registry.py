"""Scanner registry: runs every platform scanner and merges the results.

The ``ScannerRegistry`` keeps an ordered list of ``PlatformScanner``
instances and drives them against a repository. ``default_registry()``
pre-registers all built-in scanners, and custom scanners can be added via
``register()``.

Scan Algorithm
--------------
``scan(search_dir)`` runs in three strictly separated phases:

1. **Detect** -- call ``detect_platform()`` on every scanner in
   registration order. A ``DetectionError`` aborts the scan.
2. **Exclude** -- union the ``excluded_platforms()`` of every detected
   scanner and drop detected scanners named in that set. This happens
   only after all detections finished, so the outcome does not depend on
   whether a composite scanner is registered before or after the
   scanners it subsumes.
3. **Collect** -- call ``options()`` / ``configs()`` on the survivors
   only, and merge trees, templates and warnings into a ``ScanResult``.

If no scanner survives, the fallback ``other`` scanner contributes its
default tree and template, so a scan always yields a selectable config.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ciseed.models.scan_result import ScanResult
from ciseed.scanners.android import AndroidScanner
from ciseed.scanners.base import PlatformScanner
from ciseed.scanners.cordova import CordovaScanner
from ciseed.scanners.fastlane import FastlaneScanner
from ciseed.scanners.ios import IosScanner
from ciseed.scanners.macos import MacosScanner
from ciseed.scanners.other import OtherScanner
from ciseed.scanners.reactnative import ReactNativeScanner
from ciseed.scanners.xamarin import XamarinScanner
from ciseed.steps.catalog import StepCatalog, load_catalog

logger = logging.getLogger(__name__)


class ScannerRegistry:
    """Registry of platform scanners.

    Attributes:
        scanners: Ordered list of registered scanner instances.
        fallback: Scanner used when nothing is detected.
    """

    def __init__(self, fallback: PlatformScanner) -> None:
        self.scanners: list[PlatformScanner] = []
        self.fallback = fallback

    def register(self, scanner: PlatformScanner) -> None:
        """Add a scanner to the registry.

        Scanners are run in registration order during ``scan()``.

        Raises:
            ValueError: If a scanner with the same name is registered.
        """
        if scanner.name in self.names or scanner.name == self.fallback.name:
            raise ValueError(f"scanner {scanner.name!r} is already registered")
        self.scanners.append(scanner)

    @property
    def names(self) -> list[str]:
        return [scanner.name for scanner in self.scanners]

    def scan(self, search_dir: Path) -> ScanResult:
        """Scan a repository with every registered scanner.

        Args:
            search_dir: Repository root.

        Returns:
            A validated ``ScanResult`` with at least one platform.

        Raises:
            DetectionError: If a scanner cannot read the repository.
            UnknownConfigError: If a scanner's tree references a missing
                template.
        """
        search_dir = Path(search_dir)
        result = ScanResult()

        detected = self._detect(search_dir, result)
        survivors = self._exclude(detected)

        for scanner in survivors:
            tree, warnings = scanner.options()
            result.add_platform(scanner.name, tree, scanner.configs())
            result.add_warnings(scanner.name, warnings)

        if not survivors:
            logger.info("No known platform detected, falling back to %s", self.fallback.name)
            result.add_platform(
                self.fallback.name,
                self.fallback.default_options(),
                self.fallback.default_configs(),
            )

        result.validate()
        return result

    def _detect(self, search_dir: Path, result: ScanResult) -> list[PlatformScanner]:
        detected: list[PlatformScanner] = []
        for scanner in self.scanners:
            logger.info("Scanner: %s", scanner.name)
            found = scanner.detect_platform(search_dir)
            result.add_warnings(scanner.name, scanner.detection_warnings)
            if found:
                detected.append(scanner)
        return detected

    def _exclude(self, detected: list[PlatformScanner]) -> list[PlatformScanner]:
        excluded: set[str] = set()
        for scanner in detected:
            excluded.update(scanner.excluded_platforms())
        survivors = [scanner for scanner in detected if scanner.name not in excluded]
        for scanner in detected:
            if scanner.name in excluded:
                logger.info("Dropping %s: covered by another detected platform", scanner.name)
        return survivors


def default_registry(catalog: StepCatalog | None = None) -> ScannerRegistry:
    """Create a ScannerRegistry pre-loaded with all built-in scanners.

    Registration order: android, cordova, fastlane, ios, macos,
    reactnative, xamarin; ``other`` is the fallback.

    Args:
        catalog: Step catalog for the scanners; the packaged one when None.
    """
    catalog = catalog if catalog is not None else load_catalog()
    registry = ScannerRegistry(fallback=OtherScanner(catalog))
    registry.register(AndroidScanner(catalog))
    registry.register(CordovaScanner(catalog))
    registry.register(FastlaneScanner(catalog))
    registry.register(IosScanner(catalog))
    registry.register(MacosScanner(catalog))
    registry.register(ReactNativeScanner(catalog))
    registry.register(XamarinScanner(catalog))
    return registry
