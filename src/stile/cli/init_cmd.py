"""``stile init`` - Write a starter configuration file.

Exit Codes:
    0 - Configuration written, or one already exists.
"""

from __future__ import annotations

from pathlib import Path

import click

from stile.config import DEFAULT_CONFIG_FILENAME, DEFAULT_CONFIG_YAML


@click.command("init")
@click.option(
    "-p", "--path",
    type=click.Path(file_okay=False),
    default=".",
    help="Project directory to write stile.yaml into.",
)
def init_command(path: str) -> None:
    """Create a stile.yaml with the default rule set."""
    target = Path(path) / DEFAULT_CONFIG_FILENAME
    if target.exists():
        click.echo(f"Configuration file already exists: {target}")
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
    click.echo("Stile configuration created!")
    click.echo(f"Configuration file: {target}")
