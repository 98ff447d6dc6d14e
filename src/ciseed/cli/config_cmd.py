"""``ciseed config [SEARCH_DIR]`` -- Scan a repository and build its config.

Runs every platform scanner over ``SEARCH_DIR`` and writes the scan
snapshot to ``<output-dir>/result.<ext>``. Unless ``--ci`` is given, the
remaining questions are then asked on the terminal and the compiled
pipeline is written to ``<output-dir>/bitrise.yml``.

Exit Codes:
    0 -- Result (and pipeline) written.
    1 -- Scan, resolution or output error.
    2 -- Usage error (bad option, missing directory).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from ciseed.answers import ConsoleAnswerSource
from ciseed.cli.output import print_error, print_scan_summary, print_written
from ciseed.config import DEFAULT_OUTPUT_DIR, OUTPUT_FORMATS, Settings
from ciseed.enumerator import dump_snapshot
from ciseed.exceptions import CiseedError
from ciseed.resolver import ask_for_config
from ciseed.scanners.registry import default_registry

logger = logging.getLogger(__name__)


def write_output(path: Path, text: str) -> None:
    """Write an output file, creating its directory.

    Raises:
        CiseedError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise CiseedError(f"cannot write {path}: {exc}") from exc


@click.command("config")
@click.argument(
    "search_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT_DIR,
    show_default=True,
    help="Directory for the result and pipeline files.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="yaml",
    show_default=True,
    help="Result file format.",
)
@click.option("--ci", is_flag=True, help="Only scan; do not ask questions.")
@click.option(
    "--steps-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Step catalog to use instead of the packaged one.",
)
@click.pass_context
def config_command(
    ctx: click.Context,
    search_dir: Path,
    output_dir: Path,
    output_format: str,
    ci: bool,
    steps_file: Path | None,
) -> None:
    """Scan SEARCH_DIR and generate a pipeline config for it."""
    settings = Settings(
        output_dir=output_dir,
        output_format=output_format,
        ci=ci,
        steps_file=steps_file,
        verbose=(ctx.obj or {}).get("verbose", False),
    )
    try:
        registry = default_registry(settings.load_catalog())
        result = registry.scan(search_dir)
        write_output(settings.result_path, dump_snapshot(result, settings.output_format))
        print_scan_summary(result)
        print_written("Result", settings.result_path)
        if settings.ci:
            logger.debug("CI mode, skipping questions")
            return
        document = ask_for_config(result, ConsoleAnswerSource())
        write_output(settings.pipeline_path, document.to_yaml())
    except CiseedError as exc:
        print_error(str(exc))
        sys.exit(1)
    print_written("Pipeline", settings.pipeline_path)
