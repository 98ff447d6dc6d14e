"""Filesystem helpers shared by the platform scanners.

Scanners look at the repository through ``list_paths()``, which returns
every file and directory below the search root ordered by depth first and
path second. "Take the first match" therefore always means "the
shallowest match, alphabetically first among equals", independent of the
order the operating system lists directory entries in.
"""

from __future__ import annotations

import os
from pathlib import Path

from ciseed.exceptions import DetectionError

# Directories no scanner ever looks into.
DEFAULT_SKIP_DIRS: frozenset[str] = frozenset({".git", "node_modules"})


def list_paths(
    root: Path,
    skip_dirs: frozenset[str] = DEFAULT_SKIP_DIRS,
) -> list[Path]:
    """List files and directories below ``root``, shallowest first.

    Args:
        root: Directory to walk.
        skip_dirs: Directory names that are neither listed nor entered.

    Returns:
        Absolute paths sorted by component count, then lexically.

    Raises:
        DetectionError: If ``root`` or a directory below it cannot be read.
    """
    root = Path(root).resolve()
    if not root.is_dir():
        raise DetectionError(f"search directory does not exist: {root}")

    def fail(exc: OSError) -> None:
        raise DetectionError(f"failed to read {exc.filename}: {exc.strerror}") from exc

    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=fail):
        dirnames[:] = [name for name in dirnames if name not in skip_dirs]
        base = Path(dirpath)
        found.extend(base / name for name in dirnames)
        found.extend(base / name for name in filenames)
    found.sort(key=lambda path: (len(path.parts), str(path)))
    return found


def read_text(path: Path) -> str:
    """Read a project file, tolerating odd encodings.

    Raises:
        DetectionError: If the file cannot be read.
    """
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise DetectionError(f"failed to read {path}: {exc}") from exc


def relative_path(root: Path, path: Path) -> str:
    """Render ``path`` relative to ``root`` with a ``./`` prefix."""
    relative = Path(path).resolve().relative_to(Path(root).resolve()).as_posix()
    return "./" if relative == "." else f"./{relative}"


def is_relative_to(path: Path, parent: Path) -> bool:
    """True when ``path`` is ``parent`` or lies below it."""
    try:
        Path(path).relative_to(parent)
    except ValueError:
        return False
    return True
