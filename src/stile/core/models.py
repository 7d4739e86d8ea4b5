"""Data models for the scanning engine: Severity, Finding, ComponentUsage,
ScanContext and ScanReport.

These are the types produced and consumed by the scan pipeline. They are
intentionally decoupled from the engine so that plugins, serializers and
CLI formatters can import them without pulling in file selection or plugin
resolution logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Iterable

# Import-source prefixes treated as the design system when nothing else is
# configured.
DEFAULT_DESIGN_SYSTEM_PREFIXES: tuple[str, ...] = ("@design-system", "@ui", "@components")

# Recorded in ``ComponentUsage.props`` when an element spreads its props.
SPREAD_PROP = "..."

# ``ComponentUsage.source`` for components defined in the scanned file.
LOCAL_SOURCE = "."


def utc_timestamp() -> str:
    """Return the current instant as an ISO-8601 string in UTC."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Severity: Ordered finding severity levels
# ---------------------------------------------------------------------------


class Severity(IntEnum):
    """Three-level severity scale for findings.

    The integer encoding enables direct comparison: INFO < WARN < ERROR.
    Only INFO findings are excluded from the violation count.
    """

    INFO = 1
    WARN = 2
    ERROR = 3

    @property
    def label(self) -> str:
        """Lower-case wire name ("info", "warn", "error")."""
        return self.name.lower()

    @classmethod
    def parse(cls, value: Severity | str) -> Severity:
        """Convert a wire name (or an existing member) into a Severity.

        ``"warning"`` is accepted as a synonym for ``"warn"``.

        Raises:
            ValueError: If the value does not name a severity.
        """
        if isinstance(value, Severity):
            return value
        text = str(value).strip().lower()
        if text == "warning":
            text = "warn"
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {value!r}") from None


class ComponentCategory(str, Enum):
    """Where a component comes from, derived from its import source."""

    DESIGN_SYSTEM = "design-system"
    CUSTOM = "custom"
    THIRD_PARTY = "third-party"


def classify_source(source: str, prefixes: Iterable[str] = DEFAULT_DESIGN_SYSTEM_PREFIXES) -> ComponentCategory:
    """Classify a component's import source by prefix.

    Locally defined (``"."``), relative and absolute-path sources are
    custom. A source equal to a design-system prefix, or continuing it
    with a ``/`` segment, is design-system. Everything else is third-party.
    """
    if not source or source == LOCAL_SOURCE or source.startswith(("./", "../", "/")):
        return ComponentCategory.CUSTOM
    for prefix in prefixes:
        if not prefix:
            continue
        if prefix.endswith("/"):
            if source.startswith(prefix):
                return ComponentCategory.DESIGN_SYSTEM
        elif source == prefix or source.startswith(prefix + "/"):
            return ComponentCategory.DESIGN_SYSTEM
    return ComponentCategory.THIRD_PARTY


# ---------------------------------------------------------------------------
# Finding: A single design-system observation
# ---------------------------------------------------------------------------


@dataclass
class Finding:
    """One issue detected by a plugin in one file.

    Identity fields a plugin leaves empty (``plugin``, ``file``,
    ``project``, ``timestamp``, ``commit``) are filled in by the engine
    right after the producing invocation returns. Nothing else mutates a
    finding.

    Attributes:
        message: Human-readable description.
        severity: INFO, WARN or ERROR.
        plugin: Name of the producing plugin.
        file: Absolute path of the file the finding refers to.
        project: Identity of the scanned root.
        timestamp: ISO-8601 instant of detection.
        line: 1-based line number, when known.
        column: 1-based column number, when known.
        commit: VCS revision the scan ran against.
        metadata: Free-form plugin-specific details.
    """

    message: str
    severity: Severity = Severity.WARN
    plugin: str = ""
    file: str = ""
    project: str = ""
    timestamp: str = ""
    line: int | None = None
    column: int | None = None
    commit: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_violation(self) -> bool:
        """True for every severity except INFO."""
        return self.severity != Severity.INFO


# ---------------------------------------------------------------------------
# ComponentUsage: Aggregated component sightings in one file
# ---------------------------------------------------------------------------


@dataclass
class ComponentUsage:
    """Observed use of one UI component in one file.

    Records sharing ``(project, file, component, source)`` are merged by
    the engine: occurrences add up and props are unioned.

    Attributes:
        component: Component name as written in markup (e.g. "Button").
        source: Import origin, or "." for components defined locally.
        category: design-system, custom or third-party. Derived from
            ``source`` by the engine when left as None.
        occurrences: Number of sightings.
        props: Attribute names observed, including ``SPREAD_PROP``.
        project: Identity of the scanned root.
        file: Absolute path of the file.
        commit: VCS revision the scan ran against.
        framework: UI framework the usage was detected in (e.g. "react").
    """

    component: str
    source: str = LOCAL_SOURCE
    category: ComponentCategory | None = None
    occurrences: int = 1
    props: set[str] = field(default_factory=set)
    project: str = ""
    file: str = ""
    commit: str | None = None
    framework: str | None = None

    @property
    def merge_key(self) -> tuple[str, str, str, str]:
        return (self.project, self.file, self.component, self.source)

    def absorb(self, other: ComponentUsage) -> None:
        """Fold a repeat sighting of the same component into this record."""
        self.occurrences += other.occurrences
        self.props |= other.props
        if self.framework is None:
            self.framework = other.framework


# ---------------------------------------------------------------------------
# ScanContext: What a plugin sees for one file
# ---------------------------------------------------------------------------


@dataclass
class ScanContext:
    """Per-file execution environment handed to plugins.

    The engine builds one context per file and gives every plugin
    invocation a copy with empty ``findings`` / ``components`` buffers
    (see ``fresh()``), so a plugin only ever sees its own output.

    Attributes:
        file_path: Absolute path of the file.
        relative_path: POSIX path relative to the scan root.
        project: Identity of the scanned root.
        source: Raw file text.
        commit: Resolved VCS revision.
        design_system_prefixes: Import prefixes counted as design-system.
        findings: Findings appended by the current invocation.
        components: Component usages appended by the current invocation.
    """

    file_path: Path
    relative_path: str
    project: str
    source: str
    commit: str
    design_system_prefixes: tuple[str, ...] = DEFAULT_DESIGN_SYSTEM_PREFIXES
    findings: list[Finding] = field(default_factory=list)
    components: list[ComponentUsage] = field(default_factory=list)

    @property
    def file(self) -> str:
        return self.file_path.as_posix()

    @property
    def suffix(self) -> str:
        return self.file_path.suffix.lower()

    def fresh(self) -> ScanContext:
        """Copy of this context with empty output buffers."""
        return replace(self, findings=[], components=[])

    def position(self, offset: int) -> tuple[int, int]:
        """Translate a character offset in ``source`` to (line, column), 1-based."""
        line = self.source.count("\n", 0, offset) + 1
        column = offset - (self.source.rfind("\n", 0, offset) + 1) + 1
        return line, column

    def report(
        self,
        message: str,
        severity: Severity | str = Severity.WARN,
        *,
        line: int | None = None,
        column: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Finding:
        """Append a finding for this file and return it."""
        finding = Finding(
            message=message,
            severity=Severity.parse(severity),
            file=self.file,
            project=self.project,
            line=line,
            column=column,
            commit=self.commit,
            metadata=dict(metadata or {}),
        )
        self.findings.append(finding)
        return finding

    def record_component(
        self,
        component: str,
        source: str = LOCAL_SOURCE,
        *,
        props: Iterable[str] = (),
        occurrences: int = 1,
        framework: str | None = None,
        category: ComponentCategory | None = None,
    ) -> ComponentUsage:
        """Append a component sighting for this file and return it."""
        usage = ComponentUsage(
            component=component,
            source=source,
            category=category,
            occurrences=occurrences,
            props=set(props),
            project=self.project,
            file=self.file,
            commit=self.commit,
            framework=framework,
        )
        self.components.append(usage)
        return usage


# ---------------------------------------------------------------------------
# ScanReport: Complete output of one scan
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScanMeta:
    project: str
    commit: str
    timestamp: str
    version: str


@dataclass(frozen=True)
class ScanSummary:
    """Headline numbers of a scan.

    Attributes:
        files_scanned: Files whose content could be read.
        violations: Findings with severity other than INFO.
        adherence_score: 0-100 violation-rate proxy.
        duration_ms: Wall-clock scan time in milliseconds.
        severity_counts: Findings per severity label, all labels present.
    """

    files_scanned: int
    violations: int
    adherence_score: int
    duration_ms: int
    severity_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ScanMetrics:
    components_analyzed: int
    design_system_components: int
    custom_components: int


@dataclass(frozen=True)
class ScanReport:
    """The terminal artifact of a scan. Built once, never modified."""

    meta: ScanMeta
    findings: tuple[Finding, ...]
    components: tuple[ComponentUsage, ...]
    summary: ScanSummary
    metrics: ScanMetrics
