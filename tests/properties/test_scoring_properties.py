"""Property-based tests for adherence scoring and the severity histogram.

The score is a clamped, rounded violation rate; these properties hold for
every file and violation count, not just the worked examples in
tests/core/test_scoring.py.
"""
from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from stile.core.models import Finding, Severity
from stile.core.scoring import adherence_score, count_violations, severity_histogram


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

file_counts = st.integers(min_value=0, max_value=10_000)
violation_counts = st.integers(min_value=0, max_value=50_000)
severities = st.sampled_from(list(Severity))
findings = st.lists(severities.map(lambda s: Finding("m", s)), max_size=50)


class TestAdherenceScoreProperties:
    """Range and monotonicity of adherence_score()."""

    @given(files=file_counts, violations=violation_counts)
    def test_bounded(self, files: int, violations: int) -> None:
        assert 0 <= adherence_score(files, violations) <= 100

    @given(files=file_counts)
    def test_no_violations_is_perfect(self, files: int) -> None:
        assert adherence_score(files, 0) == 100

    @given(files=st.integers(min_value=1, max_value=10_000), violations=violation_counts)
    def test_monotonic_in_violations(self, files: int, violations: int) -> None:
        assert adherence_score(files, violations + 1) <= adherence_score(files, violations)

    @given(files=st.integers(min_value=1, max_value=10_000), violations=violation_counts)
    def test_at_least_as_many_violations_as_files_is_zero(self, files: int, violations: int) -> None:
        assert adherence_score(files, files + violations) == 0


class TestHistogramProperties:
    """Consistency of the histogram with the violation count."""

    @given(items=findings)
    def test_histogram_sums_to_total(self, items: list[Finding]) -> None:
        assert sum(severity_histogram(items).values()) == len(items)

    @given(items=findings)
    def test_violations_are_warn_plus_error(self, items: list[Finding]) -> None:
        counts = severity_histogram(items)
        assert count_violations(items) == counts["warn"] + counts["error"]
