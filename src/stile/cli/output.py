"""Rich output formatting helpers for the Stile CLI.

Provides consistent, severity-colored terminal output for scan reports:
a summary panel, a findings table and a component usage breakdown.

Severity Color Mapping:
    ERROR = bold red, WARN = yellow, INFO = cyan
Adherence Score Color:
    >= 90 green, >= 70 yellow, below red
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from stile.core.models import ScanReport, Severity

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARN: "yellow",
    Severity.INFO: "cyan",
}

_MAX_FINDING_ROWS = 200

console = Console()


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def score_style(score: int) -> str:
    """Return the Rich style string for an adherence score."""
    if score >= 90:
        return "bold green"
    if score >= 70:
        return "yellow"
    return "bold red"


def _display_path(file: str, project: str) -> str:
    try:
        return Path(file).relative_to(project).as_posix()
    except ValueError:
        return file


def print_scan_report(report: ScanReport) -> None:
    """Print the summary, findings and component usage of a scan."""
    _print_summary(report)
    if report.findings:
        _print_findings(report)
    else:
        console.print("[green]No findings. Every scanned file adheres.[/green]")
    if report.components:
        _print_components(report)


def _print_summary(report: ScanReport) -> None:
    summary = report.summary
    score = Text(f"{summary.adherence_score}%", style=score_style(summary.adherence_score))
    header = Text.assemble(
        ("Project: ", "bold"), (report.meta.project, ""),
        ("\nCommit: ", "bold"), (report.meta.commit, "dim"),
        ("\nAdherence: ", "bold"), score,
    )
    console.print(Panel(header, title="Stile Scan Summary"))

    counts = summary.severity_counts
    parts = [
        f"[bold]{summary.files_scanned}[/bold] files scanned",
        f"{summary.violations} violations",
        f"[red]{counts.get('error', 0)} error[/red]",
        f"[yellow]{counts.get('warn', 0)} warn[/yellow]",
        f"[cyan]{counts.get('info', 0)} info[/cyan]",
        f"{summary.duration_ms}ms",
    ]
    console.print(" | ".join(parts))


def _print_findings(report: ScanReport) -> None:
    table = Table(title="Findings", show_header=True, header_style="bold")
    table.add_column("Severity", justify="center")
    table.add_column("File")
    table.add_column("Line", justify="right")
    table.add_column("Plugin", style="dim")
    table.add_column("Message")

    for finding in report.findings[:_MAX_FINDING_ROWS]:
        table.add_row(
            Text(finding.severity.label.upper(), style=severity_style(finding.severity)),
            _display_path(finding.file, report.meta.project),
            str(finding.line) if finding.line is not None else "-",
            finding.plugin,
            finding.message,
        )
    console.print(table)
    hidden = len(report.findings) - _MAX_FINDING_ROWS
    if hidden > 0:
        console.print(f"[dim]... {hidden} more findings in the full report.[/dim]")


def _print_components(report: ScanReport) -> None:
    metrics = report.metrics
    console.print(
        f"Components analyzed: [bold]{metrics.components_analyzed}[/bold] | "
        f"design-system: [green]{metrics.design_system_components}[/green] | "
        f"custom: [yellow]{metrics.custom_components}[/yellow]"
    )

    totals: dict[tuple[str, str, str], int] = {}
    for usage in report.components:
        category = usage.category.value if usage.category is not None else "-"
        key = (usage.component, usage.source, category)
        totals[key] = totals.get(key, 0) + usage.occurrences

    table = Table(title="Component Usage", show_header=True, header_style="bold")
    table.add_column("Component", style="bold")
    table.add_column("Source", style="dim")
    table.add_column("Category")
    table.add_column("Uses", justify="right")
    for (component, source, category), uses in sorted(totals.items(), key=lambda kv: (-kv[1], kv[0])):
        table.add_row(component, source, category, str(uses))
    console.print(table)
