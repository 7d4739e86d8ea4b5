"""Tests for Rich output formatting helpers."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from stile.cli import output
from stile.config import default_config
from stile.core.engine import StileEngine
from stile.core.models import Severity


@pytest.fixture
def recorded(monkeypatch: pytest.MonkeyPatch) -> io.StringIO:
    """Swap the module console for a wide, uncoloured one writing to a buffer."""
    buffer = io.StringIO()
    monkeypatch.setattr(output, "console", Console(file=buffer, width=200, color_system=None))
    return buffer


def test_severity_styles() -> None:
    assert output.severity_style(Severity.ERROR) == "bold red"
    assert output.severity_style(Severity.WARN) == "yellow"
    assert output.severity_style(Severity.INFO) == "cyan"


@pytest.mark.parametrize(("score", "style"), [(100, "bold green"), (90, "bold green"), (75, "yellow"), (10, "bold red")])
def test_score_style(score: int, style: str) -> None:
    assert output.score_style(score) == style


def test_report_lists_findings_with_relative_paths(recorded: io.StringIO, sample_project: Path) -> None:
    report = StileEngine(commit="test-sha").scan(default_config(sample_project))
    output.print_scan_report(report)
    text = recorded.getvalue()
    assert "Legacy.jsx" in text
    assert str(sample_project.resolve() / "Legacy.jsx") not in text
    assert "Inline style detected" in text
    assert "no-inline-style" in text
    assert "WARN" in text
    assert "Adherence: 0%" in text


def test_report_component_breakdown(recorded: io.StringIO, clean_project: Path) -> None:
    report = StileEngine(commit="test-sha").scan(default_config(clean_project))
    output.print_scan_report(report)
    text = recorded.getvalue()
    assert "Adherence: 100%" in text
    assert "Components analyzed: 1" in text
    assert "@design-system/core" in text
