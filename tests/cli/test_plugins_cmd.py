"""Tests for ``stile plugins`` command."""

from __future__ import annotations

from click.testing import CliRunner

from stile.cli.main import cli
from stile.cli.plugins_cmd import build_plugins_table


def test_plugins_command(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["plugins"])
    assert result.exit_code == 0
    assert "Built-in Plugins" in result.output


def test_table_lists_every_builtin() -> None:
    table = build_plugins_table()
    assert table.row_count == 6
    assert list(table.columns[0].cells) == [
        "no-inline-style",
        "ds-usage",
        "unused-components",
        "inconsistent-spacing",
        "accessibility",
        "react-component-analysis",
    ]
