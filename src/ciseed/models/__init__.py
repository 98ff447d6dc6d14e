"""Data models: option trees, scan results and pipeline documents."""

from ciseed.models.options import (
    PLACEHOLDER,
    ConfigLeaf,
    OptionNode,
    OptionTree,
    Question,
)
from ciseed.models.pipeline import PipelineDocument
from ciseed.models.scan_result import ScanResult

__all__ = [
    "PLACEHOLDER",
    "ConfigLeaf",
    "OptionNode",
    "OptionTree",
    "PipelineDocument",
    "Question",
    "ScanResult",
]
