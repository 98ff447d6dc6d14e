"""Step catalog and pipeline template builders."""

from ciseed.steps.catalog import StepCatalog, load_catalog
from ciseed.steps.templates import build_pipeline, render_pipeline

__all__ = ["StepCatalog", "build_pipeline", "load_catalog", "render_pipeline"]
