"""``stile plugins`` - List the built-in plugins.

Prints each plugin's name, legacy alias, file matcher and description.

Exit Codes:
    0 - Always (informational command, cannot fail).
"""

from __future__ import annotations

import click
from rich.table import Table

from stile import __version__
from stile.plugins.registry import BUILTIN_PLUGINS


def build_plugins_table() -> Table:
    """Rich table describing every built-in plugin."""
    table = Table(
        title=f"Stile v{__version__} -- {len(BUILTIN_PLUGINS)} Built-in Plugins",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Plugin", style="bold", no_wrap=True)
    table.add_column("Alias", style="dim")
    table.add_column("Files")
    table.add_column("Checks")
    for name, cls in BUILTIN_PLUGINS.items():
        files = cls.test.pattern if cls.test is not None else "all"
        table.add_row(name, ", ".join(cls.aliases), files, cls.description)
    return table


@click.command("plugins")
def plugins_command() -> None:
    """List built-in plugins."""
    from stile.cli.output import console

    console.print(build_plugins_table())
