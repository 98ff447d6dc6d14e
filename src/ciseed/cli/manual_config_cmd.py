"""``ciseed manual-config`` -- Write every platform's default configs.

No repository is scanned. The snapshot lists each platform's default
questions, with ``_`` standing for a free-text answer, and every
template they lead to.

Exit Codes:
    0 -- Snapshot written.
    1 -- Step catalog or output file error.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from ciseed.cli.config_cmd import write_output
from ciseed.cli.output import print_error, print_written
from ciseed.config import DEFAULT_OUTPUT_DIR, OUTPUT_FORMATS, Settings
from ciseed.enumerator import dump_snapshot, manual_config
from ciseed.exceptions import CiseedError
from ciseed.scanners.registry import default_registry

logger = logging.getLogger(__name__)


@click.command("manual-config")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT_DIR,
    show_default=True,
    help="Directory for the result file.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="yaml",
    show_default=True,
    help="Result file format.",
)
@click.option(
    "--steps-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Step catalog to use instead of the packaged one.",
)
@click.pass_context
def manual_config_command(
    ctx: click.Context,
    output_dir: Path,
    output_format: str,
    steps_file: Path | None,
) -> None:
    """Write the default configs of every platform."""
    settings = Settings(
        output_dir=output_dir,
        output_format=output_format,
        ci=True,
        steps_file=steps_file,
        verbose=(ctx.obj or {}).get("verbose", False),
    )
    try:
        result = manual_config(default_registry(settings.load_catalog()))
        write_output(settings.result_path, dump_snapshot(result, settings.output_format))
    except CiseedError as exc:
        print_error(str(exc))
        sys.exit(1)
    logger.debug("Collected %d platforms", len(result.platforms))
    print_written("Result", settings.result_path)
