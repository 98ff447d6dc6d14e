"""Exhaustive enumeration of every platform's default configuration.

``manual_config()`` never looks at a repository: it asks each registered
scanner (and the fallback) for its default option tree and templates,
which use placeholder answers instead of detected values. The resulting
snapshot lists every question and every template ciseed can produce,
and is what the ``manual-config`` command writes out.

Platforms are listed in registration order with the generic ``other``
platform last, and React Native is included. ``other`` is therefore not
in alphabetical position (between ``macos`` and ``xamarin``); consumers
of the ``manual-config`` document should look platforms up by name.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ciseed.models.scan_result import ScanResult
from ciseed.scanners.registry import ScannerRegistry
from ciseed.yamlio import dump_yaml

logger = logging.getLogger(__name__)

FORMATS = ("yaml", "json")


def manual_config(registry: ScannerRegistry) -> ScanResult:
    """Collect the default trees and templates of every scanner.

    Platforms appear in registration order with the fallback last.

    Raises:
        UnknownConfigError: If a default tree references a missing template.
    """
    result = ScanResult()
    for scanner in [*registry.scanners, registry.fallback]:
        logger.debug("Collecting default options of %s", scanner.name)
        result.add_platform(
            scanner.name, scanner.default_options(), scanner.default_configs()
        )
    result.validate()
    return result


def snapshot(result: ScanResult) -> dict[str, Any]:
    """Return the snapshot document of a scan result."""
    return result.to_dict()


def dump_snapshot(result: ScanResult, fmt: str = "yaml") -> str:
    """Serialize the snapshot document.

    Args:
        result: The scan result to render.
        fmt: ``"yaml"`` (templates as literal blocks) or ``"json"``.

    Raises:
        ValueError: If ``fmt`` is not a supported format.
    """
    data = snapshot(result)
    if fmt == "yaml":
        return dump_yaml(data)
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    raise ValueError(f"unsupported snapshot format: {fmt!r}")
