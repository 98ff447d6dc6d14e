"""ciseed CLI: detect build platforms and seed a CI pipeline config.

Entry point for the ``ciseed`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    config         Scan a repository, ask the questions, write bitrise.yml.
    manual-config  Write every platform's default configs.
    platforms      List the supported platforms.

Every option can also be set through the environment, prefixed with
``CISEED_`` and the command name (e.g. ``CISEED_CONFIG_OUTPUT_DIR``).

Usage::

    ciseed config                      # scan the current directory
    ciseed config ./my-app --ci        # scan only, no questions
    ciseed manual-config --format json
    ciseed platforms
"""

from __future__ import annotations

import click

from ciseed import __version__
from ciseed.cli.config_cmd import config_command
from ciseed.cli.manual_config_cmd import manual_config_command
from ciseed.cli.platforms_cmd import platforms_command
from ciseed.config import ENV_PREFIX, setup_logging


@click.group(context_settings={"auto_envvar_prefix": ENV_PREFIX})
@click.version_option(version=__version__, prog_name="ciseed")
@click.option("--verbose", "-v", is_flag=True, help="Log debug details to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ciseed: Detect mobile build platforms and seed a CI config.

    Scans a repository for Android, iOS, macOS, Cordova, fastlane,
    React Native and Xamarin projects, asks the remaining questions and
    writes a ready-to-run pipeline file.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


cli.add_command(config_command)
cli.add_command(manual_config_command)
cli.add_command(platforms_command)
