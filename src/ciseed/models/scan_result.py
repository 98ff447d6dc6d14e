"""Aggregate result of scanning a repository.

``ScanResult`` gathers, per platform, the option tree, the pipeline
templates its leaves point at and the non-fatal warnings raised while
detecting. It is built by ``ScannerRegistry.scan()`` (or by the exhaustive
``manual_config()``), handed to exactly one resolver pass and discarded.

Insertion order of the three mappings is the scanner registration order;
the snapshot document relies on it for byte-stable output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ciseed.exceptions import UnknownConfigError
from ciseed.models.options import OptionTree


@dataclass
class ScanResult:
    """Per-platform option trees, templates and warnings.

    Attributes:
        platform_trees: Platform name to option tree.
        platform_templates: Platform name to ``{config_id: template text}``.
        platform_warnings: Platform name to ordered diagnostic strings.
            May hold platforms that have no tree (e.g. a detector that
            gave up on an ambiguous layout).
    """

    platform_trees: dict[str, OptionTree] = field(default_factory=dict)
    platform_templates: dict[str, dict[str, str]] = field(default_factory=dict)
    platform_warnings: dict[str, list[str]] = field(default_factory=dict)

    @property
    def platforms(self) -> list[str]:
        """Platform names that offer a config, in registration order."""
        return list(self.platform_trees)

    def add_platform(
        self,
        name: str,
        tree: OptionTree,
        templates: dict[str, str],
        warnings: list[str] | None = None,
    ) -> None:
        self.platform_trees[name] = tree
        self.platform_templates[name] = dict(templates)
        if warnings:
            self.add_warnings(name, warnings)

    def add_warnings(self, name: str, warnings: list[str]) -> None:
        """Attach warnings to a platform, keeping their order."""
        if warnings:
            self.platform_warnings.setdefault(name, []).extend(warnings)

    def validate(self) -> None:
        """Check that every leaf config id has a template.

        Raises:
            OptionTreeError: If a tree is malformed.
            UnknownConfigError: If a leaf references a missing template.
        """
        for name, tree in self.platform_trees.items():
            tree.validate()
            templates = self.platform_templates.get(name, {})
            for config_id in tree.config_ids():
                if config_id not in templates:
                    raise UnknownConfigError(
                        f"platform {name!r}: config {config_id!r} has no template"
                    )

    def to_dict(self) -> dict[str, Any]:
        """Render the snapshot document (``options``, ``configs``, ``warnings``)."""
        data: dict[str, Any] = {
            "options": {
                name: tree.to_dict() for name, tree in self.platform_trees.items()
            },
            "configs": {
                name: {
                    config_id: templates[config_id] for config_id in sorted(templates)
                }
                for name, templates in self.platform_templates.items()
            },
        }
        warnings = {
            name: list(items) for name, items in self.platform_warnings.items() if items
        }
        if warnings:
            data["warnings"] = warnings
        return data
