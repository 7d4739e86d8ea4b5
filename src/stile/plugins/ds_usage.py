"""Check that a file draws on the design system.

Two checks:

- A JSX/TSX file that imports nothing from a design-system prefix is
  reported once (``warn``).
- Hardcoded colour literals (hex, ``rgb()``, ``rgba()``, ``hsl()``,
  ``hsla()``) are counted and reported once per file (``warn``) with the
  line of the first one. In stylesheets, custom property declarations
  (``--brand-primary: #0af;``) define tokens and are not counted.

Options:
    severity: Severity of both findings (default ``warn``).
    prefixes: Design-system import prefixes (default: the scan's).
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from stile.core.models import ComponentCategory, ScanContext, Severity, classify_source
from stile.plugins._markup import JSX_FILE, STYLESHEET_FILE, import_sources
from stile.plugins.base import Plugin, severity_option

_COLOR_RE = re.compile(r"#[0-9a-fA-F]{3,8}\b|\b(?:rgba?|hsla?)\(")
_CUSTOM_PROPERTY_RE = re.compile(r"^\s*--[\w-]+\s*:")


class DesignSystemUsagePlugin(Plugin):
    """Report files that bypass design-system components and colour tokens."""

    name = "ds-usage"
    aliases = ("@stile/plugin-ds-usage",)
    test = re.compile(r"\.(j|t)sx?$|\.(css|scss|sass|less)$")
    description = "Missing design-system imports and hardcoded colours"

    def run(self, context: ScanContext, options: Mapping[str, Any] | None = None) -> None:
        severity = severity_option(options, Severity.WARN)
        prefixes = tuple((options or {}).get("prefixes") or context.design_system_prefixes)

        if JSX_FILE.search(context.relative_path):
            uses_design_system = any(
                classify_source(src, prefixes) == ComponentCategory.DESIGN_SYSTEM
                for src in import_sources(context.source)
            )
            if not uses_design_system:
                context.report(
                    "No design system imports detected",
                    severity,
                    metadata={"prefixes": list(prefixes)},
                )

        is_stylesheet = STYLESHEET_FILE.search(context.relative_path) is not None
        first_line: int | None = None
        count = 0
        for lineno, line in enumerate(context.source.splitlines(), start=1):
            if is_stylesheet and _CUSTOM_PROPERTY_RE.match(line):
                continue
            hits = len(_COLOR_RE.findall(line))
            if hits and first_line is None:
                first_line = lineno
            count += hits
        if count:
            context.report(
                f"Hardcoded colors detected: {count} instances",
                severity,
                line=first_line,
                metadata={"count": count},
            )
