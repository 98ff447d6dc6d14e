"""``ciseed platforms`` -- List the supported platforms.

Shows the scanners in the order they run, which platforms each one
subsumes when detected, and the config ids of its default templates.

Exit Codes:
    0 -- Always (informational command).
    1 -- The step catalog could not be loaded.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from ciseed.cli.output import print_error, print_platforms
from ciseed.exceptions import CiseedError
from ciseed.scanners.registry import default_registry
from ciseed.steps.catalog import load_catalog


@click.command("platforms")
@click.option(
    "--steps-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Step catalog to use instead of the packaged one.",
)
def platforms_command(steps_file: Path | None) -> None:
    """List the supported platforms and their default configs."""
    try:
        registry = default_registry(load_catalog(steps_file))
    except CiseedError as exc:
        print_error(str(exc))
        sys.exit(1)
    print_platforms(registry)
