"""Run settings and logging setup for the ciseed CLI.

Every option can be given on the command line or through the
environment (``CISEED_<COMMAND>_<OPTION>``, e.g.
``CISEED_CONFIG_OUTPUT_DIR``); click resolves both before ``Settings``
is built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from ciseed.steps.catalog import StepCatalog, load_catalog

ENV_PREFIX = "CISEED"
DEFAULT_OUTPUT_DIR = Path("_defaults")
OUTPUT_FORMATS = ("yaml", "json")
RESULT_BASENAME = "result"
PIPELINE_FILENAME = "bitrise.yml"

_FORMAT_EXTENSIONS = {"yaml": "yml", "json": "json"}


@dataclass
class Settings:
    """Options of a single ciseed run.

    Attributes:
        output_dir: Directory receiving the result (and pipeline) files.
        output_format: Snapshot format, ``yaml`` or ``json``.
        ci: Skip the interactive questions.
        steps_file: Step catalog overriding the packaged one.
        verbose: Log at DEBUG level.
    """

    output_dir: Path = DEFAULT_OUTPUT_DIR
    output_format: str = "yaml"
    ci: bool = False
    steps_file: Path | None = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"unsupported output format: {self.output_format!r}")
        self.output_dir = Path(self.output_dir)
        if self.steps_file is not None:
            self.steps_file = Path(self.steps_file)

    @property
    def result_path(self) -> Path:
        return self.output_dir / f"{RESULT_BASENAME}.{_FORMAT_EXTENSIONS[self.output_format]}"

    @property
    def pipeline_path(self) -> Path:
        return self.output_dir / PIPELINE_FILENAME

    def load_catalog(self) -> StepCatalog:
        return load_catalog(self.steps_file)


def setup_logging(verbose: bool = False) -> None:
    """Route ciseed's module loggers to stderr through rich.

    Safe to call more than once; the previous handler is replaced.
    """
    logger = logging.getLogger("ciseed")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
