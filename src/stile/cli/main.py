"""Stile CLI - design-system adherence scanning.

Entry point for the ``stile`` command-line tool. Registers all subcommands
under a single Click group.

Commands:
    scan      - Scan a source tree and produce an adherence report.
    init      - Write a starter ``stile.yaml``.
    validate  - Check a configuration file and its plugin references.
    plugins   - List the built-in plugins.

Usage::

    stile scan                          # Uses ./stile.yaml or built-in defaults
    stile scan ./src --format json
    stile scan -c stile.yaml -o stile-report.json
    stile scan --fail-under 90          # Exit 1 below 90% adherence
    stile init
    stile validate -c stile.yaml
    stile plugins
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from stile import __version__
from stile.cli.init_cmd import init_command
from stile.cli.plugins_cmd import plugins_command
from stile.cli.scan import scan_command
from stile.cli.validate_cmd import validate_command


def _configure_logging(verbose: bool, quiet: bool) -> None:
    """Route ``stile.*`` log records to stderr through Rich."""
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logger = logging.getLogger("stile")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


@click.group()
@click.version_option(version=__version__, prog_name="stile")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Only log errors.")
def cli(verbose: bool, quiet: bool) -> None:
    """Stile: design-system adherence analytics for front-end code.

    Scan a source tree with pluggable checks for inline styles, design
    tokens, spacing, accessibility and component usage, and get a
    structured report with an adherence score.
    """
    _configure_logging(verbose, quiet)


# Register all subcommands
cli.add_command(scan_command)
cli.add_command(init_command)
cli.add_command(validate_command)
cli.add_command(plugins_command)
