"""``stile validate`` - Check a configuration file.

Loads the configuration, then resolves every referenced plugin. Plugins
that cannot be resolved are listed as warnings; they would be skipped by a
scan, so they do not make the configuration invalid.

Exit Codes:
    0 - Configuration is valid.
    1 - Configuration error.
"""

from __future__ import annotations

import sys

import click

from stile.config import load_config
from stile.exceptions import ConfigError
from stile.plugins.registry import default_registry


@click.command("validate")
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (default: ./stile.yaml if present).",
)
def validate_command(config_path: str | None) -> None:
    """Validate configuration and plugin references."""
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        click.echo("Configuration is invalid:")
        click.echo(f"  {exc}")
        sys.exit(1)

    unresolved = default_registry().resolve(config.plugin_names())
    click.echo("Configuration is valid!")
    click.echo(f"  Root directory: {config.root_dir}")
    click.echo(f"  Rules: {len(config.rules)}")
    if not config.root_dir.is_dir():
        click.echo(f"  Warning: root directory does not exist yet: {config.root_dir}")
    for name in unresolved:
        click.echo(f"  Warning: plugin {name} could not be resolved and will be skipped")
