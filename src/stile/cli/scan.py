"""``stile scan [path]`` - Scan a source tree for design-system adherence.

The configuration comes from ``--config``, else ``./stile.yaml``, else the
built-in defaults. PATH, when given, replaces the configured root.

Output:
    text    - Rich summary and findings table (default).
    json    - Full report document on stdout.
    ndjson  - Meta line plus one finding per line on stdout.
With ``--output`` the report is written to a file (in ``--format``, or the
configured ``output.format``) and a text summary is printed.

Exit Codes:
    0 - Scan completed (and met ``--fail-under`` when given).
    1 - Adherence score below ``--fail-under``.
    2 - Configuration error.
"""

from __future__ import annotations

import sys

import click

from stile.config import load_config
from stile.core.engine import StileEngine
from stile.core.serialization import render_report, write_report
from stile.exceptions import ConfigError


@click.command("scan")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False),
    required=False,
    default=None,
)
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (default: ./stile.yaml if present).",
)
@click.option(
    "-o", "--output", "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the report to this file.",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json", "ndjson"]),
    default=None,
    help="Output format: text (default), json, or ndjson.",
)
@click.option(
    "--commit",
    default=None,
    help="Revision to record instead of asking git.",
)
@click.option(
    "--fail-under",
    type=click.IntRange(0, 100),
    default=None,
    help="Exit with code 1 when the adherence score is below this value.",
)
def scan_command(
    path: str | None,
    config_path: str | None,
    output_path: str | None,
    output_format: str | None,
    commit: str | None,
    fail_under: int | None,
) -> None:
    """Scan a source tree and report design-system adherence.

    PATH overrides the configured root directory.
    """
    try:
        config = load_config(config_path, root_dir=path)
        engine = StileEngine(commit=commit)
        report = engine.scan(config)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    from stile.cli.output import print_scan_report

    destination = output_path or config.output.file
    if destination:
        file_format = output_format if output_format in ("json", "ndjson") else config.output.format
        written = write_report(report, destination, file_format)
        print_scan_report(report)
        click.echo(f"Report written to: {written.resolve()}")
    elif output_format in ("json", "ndjson"):
        click.echo(render_report(report, output_format), nl=False)
        if output_format == "json":
            click.echo("")
    else:
        print_scan_report(report)

    if fail_under is not None and report.summary.adherence_score < fail_under:
        sys.exit(1)
