"""Adherence scoring and report metrics.

The adherence score is a per-file violation-rate proxy::

    score = 100                                        if files == 0
    score = max(0, round(100 * (files - violations) / files))  otherwise

``violations`` counts every finding whose severity is not INFO, so a file
with three errors contributes three. The severity histogram is published
next to the score so consumers can derive weighted scores of their own.
"""

from __future__ import annotations

import math
from typing import Iterable

from stile.core.models import (
    ComponentCategory,
    ComponentUsage,
    Finding,
    ScanMetrics,
    Severity,
)


def count_violations(findings: Iterable[Finding]) -> int:
    """Number of findings with severity other than INFO."""
    return sum(1 for f in findings if f.is_violation)


def severity_histogram(findings: Iterable[Finding]) -> dict[str, int]:
    """Findings per severity label. Every label is present, possibly 0."""
    counts = {severity.label: 0 for severity in Severity}
    for finding in findings:
        counts[finding.severity.label] += 1
    return counts


def adherence_score(files_scanned: int, violations: int) -> int:
    """Compute the 0-100 adherence score.

    Halves round up (62.5 -> 63) rather than to even.
    """
    if files_scanned <= 0:
        return 100
    raw = 100 * (files_scanned - violations) / files_scanned
    return max(0, min(100, math.floor(raw + 0.5)))


def component_metrics(components: Iterable[ComponentUsage]) -> ScanMetrics:
    analyzed = design_system = custom = 0
    for usage in components:
        analyzed += 1
        if usage.category == ComponentCategory.DESIGN_SYSTEM:
            design_system += 1
        elif usage.category == ComponentCategory.CUSTOM:
            custom += 1
    return ScanMetrics(
        components_analyzed=analyzed,
        design_system_components=design_system,
        custom_components=custom,
    )
