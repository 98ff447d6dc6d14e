"""Step catalog: which steps exist and at which version.

The catalog is plain data shipped with the package (``steps.yml``). It is
loaded once by the CLI and handed to every platform scanner at
construction time, so a test (or a user with ``--steps-file``) can swap
versions without touching any scanner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from ciseed.exceptions import CatalogError
from ciseed.models.pipeline import DEFAULT_STEP_LIB_SOURCE, StepItem
from ciseed.yamlio import load_yaml

logger = logging.getLogger(__name__)

_CATALOG_RESOURCE = "steps.yml"


@dataclass(frozen=True)
class StepCatalog:
    """Step identifiers and their pinned versions.

    Attributes:
        format_version: Pipeline format version written into templates.
        step_lib_source: Default step library URL.
        versions: Step id to version string.
    """

    format_version: str
    step_lib_source: str = DEFAULT_STEP_LIB_SOURCE
    versions: dict[str, str] = field(default_factory=dict)

    def reference(self, step_id: str) -> str:
        """Return the versioned reference ``<id>@<version>``.

        Raises:
            CatalogError: If the step is not in the catalog.
        """
        try:
            version = self.versions[step_id]
        except KeyError:
            raise CatalogError(f"step {step_id!r} is not in the step catalog") from None
        return f"{step_id}@{version}"

    def step(
        self,
        step_id: str,
        *,
        title: str | None = None,
        run_if: str | None = None,
        inputs: list[tuple[str, str]] | None = None,
    ) -> StepItem:
        """Build a step list item.

        Args:
            step_id: Catalog step id (e.g. "gradle-runner").
            title: Optional step title override.
            run_if: Optional conditional guard expression.
            inputs: Ordered ``(key, value)`` input pairs; values may
                reference environment variables as ``$NAME``.
        """
        body: dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if run_if is not None:
            body["run_if"] = run_if
        if inputs:
            body["inputs"] = [{key: value} for key, value in inputs]
        return {self.reference(step_id): body}

    # -- Loading ------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Any) -> StepCatalog:
        if not isinstance(data, dict):
            raise CatalogError("step catalog must be a mapping")
        steps = data.get("steps")
        if not isinstance(steps, dict) or not steps:
            raise CatalogError("step catalog needs a non-empty 'steps' mapping")
        if "format_version" not in data:
            raise CatalogError("step catalog needs a 'format_version'")
        return cls(
            format_version=str(data["format_version"]),
            step_lib_source=str(
                data.get("default_step_lib_source", DEFAULT_STEP_LIB_SOURCE)
            ),
            versions={str(key): str(value) for key, value in steps.items()},
        )

    @classmethod
    def from_file(cls, path: Path) -> StepCatalog:
        """Load a catalog from a YAML file.

        Raises:
            CatalogError: If the file cannot be read or parsed.
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise CatalogError(f"cannot read step catalog {path}: {exc}") from exc
        return cls.from_text(text)

    @classmethod
    def from_text(cls, text: str) -> StepCatalog:
        try:
            data = load_yaml(text)
        except yaml.YAMLError as exc:
            raise CatalogError(f"invalid step catalog: {exc}") from exc
        return cls.from_dict(data)


def load_catalog(path: Path | None = None) -> StepCatalog:
    """Load the step catalog, defaulting to the packaged ``steps.yml``."""
    if path is not None:
        logger.debug("Loading step catalog from %s", path)
        return StepCatalog.from_file(path)
    text = resources.files("ciseed.steps").joinpath(_CATALOG_RESOURCE).read_text(
        encoding="utf-8"
    )
    return StepCatalog.from_text(text)
