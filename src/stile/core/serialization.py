"""Report serialization for downstream consumers.

The JSON produced here is the hand-off contract to exporters, loaders and
dashboards, so keys follow that contract's camelCase names
(``filesScanned``, ``adherenceScore``...) rather than Python attribute
names. Two formats are supported:

- ``json`` -- one indented document.
- ``ndjson`` -- the ``meta`` object on the first line, then one finding per
  line.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from stile.core.models import ComponentUsage, Finding, ScanReport


def finding_to_dict(finding: Finding) -> dict[str, Any]:
    data: dict[str, Any] = {
        "plugin": finding.plugin,
        "project": finding.project,
        "file": finding.file,
        "message": finding.message,
        "severity": finding.severity.label,
        "timestamp": finding.timestamp,
        "commit": finding.commit,
    }
    if finding.line is not None:
        data["line"] = finding.line
    if finding.column is not None:
        data["column"] = finding.column
    if finding.metadata:
        data["metadata"] = finding.metadata
    return data


def component_to_dict(usage: ComponentUsage) -> dict[str, Any]:
    return {
        "component": usage.component,
        "source": usage.source,
        "category": usage.category.value if usage.category is not None else None,
        "occurrences": usage.occurrences,
        "props": sorted(usage.props),
        "project": usage.project,
        "file": usage.file,
        "commit": usage.commit,
        "framework": usage.framework,
    }


def report_to_dict(report: ScanReport) -> dict[str, Any]:
    """Convert a report into JSON-serializable primitives."""
    return {
        "meta": {
            "project": report.meta.project,
            "commit": report.meta.commit,
            "timestamp": report.meta.timestamp,
            "version": report.meta.version,
        },
        "findings": [finding_to_dict(f) for f in report.findings],
        "components": [component_to_dict(c) for c in report.components],
        "summary": {
            "filesScanned": report.summary.files_scanned,
            "violations": report.summary.violations,
            "adherenceScore": report.summary.adherence_score,
            "duration": report.summary.duration_ms,
            "severityCounts": dict(report.summary.severity_counts),
        },
        "metrics": {
            "componentsAnalyzed": report.metrics.components_analyzed,
            "designSystemComponents": report.metrics.design_system_components,
            "customComponents": report.metrics.custom_components,
        },
    }


def render_report(report: ScanReport, fmt: str = "json") -> str:
    """Render a report as ``json`` or ``ndjson`` text.

    Raises:
        ValueError: For any other format.
    """
    data = report_to_dict(report)
    if fmt == "json":
        return json.dumps(data, indent=2)
    if fmt == "ndjson":
        lines = [json.dumps(data["meta"])]
        lines.extend(json.dumps(f) for f in data["findings"])
        return "\n".join(lines) + "\n"
    raise ValueError(f"Unsupported report format: {fmt!r}")


def write_report(report: ScanReport, path: str | Path, fmt: str = "json") -> Path:
    """Write a rendered report to *path*, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(render_report(report, fmt), encoding="utf-8")
    return out
