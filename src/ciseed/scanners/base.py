"""Base interface for platform scanners.

Every platform ciseed knows about (Android, iOS, React Native, ...)
implements the ``PlatformScanner`` abstract base class. The interface is a
two-phase API, mirroring how the ``ScannerRegistry`` drives it:

- ``detect_platform(search_dir)`` -- Walk the repository and remember what
  was found. Cheap, read-only, and never an error when nothing is found.
- ``options()`` / ``configs()`` -- Turn the detection state into an option
  tree and the pipeline templates its leaves point at. Only called for
  scanners that survived exclusion.

Each scanner also offers an assumption-free ``default_options()`` /
``default_configs()`` pair, used for the exhaustive manual-config snapshot,
and may name platforms it subsumes via ``excluded_platforms()``.

Scanners receive the ``StepCatalog`` at construction and must not look up
step versions anywhere else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ciseed.models.options import OptionTree
from ciseed.steps.catalog import StepCatalog


class PlatformScanner(ABC):
    """Abstract base class for platform scanners.

    Attributes:
        catalog: Step catalog used to render pipeline templates.
        search_dir: Directory of the last ``detect_platform`` call.
        detection_warnings: Non-fatal findings from the last detection,
            kept even when the platform ends up not detected.
    """

    def __init__(self, catalog: StepCatalog) -> None:
        self.catalog = catalog
        self.search_dir: Path | None = None
        self.detection_warnings: list[str] = []

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique platform identifier (e.g. "android")."""

    @abstractmethod
    def detect_platform(self, search_dir: Path) -> bool:
        """Scan ``search_dir`` and remember the projects found.

        Must be idempotent: a second call with the same directory yields
        the same state. Never writes to the filesystem.

        Args:
            search_dir: Repository root to scan.

        Returns:
            True if at least one project of this platform was found.

        Raises:
            DetectionError: If the directory cannot be read.
        """

    @abstractmethod
    def options(self) -> tuple[OptionTree, list[str]]:
        """Build the option tree for what ``detect_platform`` found.

        Returns:
            The option tree and a list of warnings for this platform.
        """

    @abstractmethod
    def default_options(self) -> OptionTree:
        """Build the repository-independent option tree."""

    @abstractmethod
    def configs(self) -> dict[str, str]:
        """Return ``{config_id: template text}`` for ``options()`` leaves."""

    @abstractmethod
    def default_configs(self) -> dict[str, str]:
        """Return ``{config_id: template text}`` for ``default_options()``."""

    def excluded_platforms(self) -> list[str]:
        """Platform names whose own detection this scanner subsumes."""
        return []

    def _reset(self, search_dir: Path) -> None:
        """Forget the previous detection before scanning ``search_dir``."""
        self.search_dir = Path(search_dir).resolve()
        self.detection_warnings = []
