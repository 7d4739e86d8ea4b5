"""Whitespace and spacing-scale consistency.

Checks, per line:

- indentation that mixes tabs and spaces (``warn``);
- trailing whitespace (``info``);
- in stylesheets, ``px`` values of spacing properties (margin, padding, gap,
  inset and offsets) that are not a multiple of the spacing scale base
  (``warn``).

When some lines indent with tabs and others with spaces, one extra ``warn``
finding is raised for the file at the first line of the minority style.

Options:
    base: Spacing scale step in px (default 4). ``0`` disables the check.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from stile.core.models import ScanContext, Severity
from stile.plugins._markup import STYLESHEET_FILE
from stile.plugins.base import Plugin

DEFAULT_SPACING_BASE = 4

_INDENT_RE = re.compile(r"^[ \t]+")
_TRAILING_RE = re.compile(r"[ \t]+$")
_SPACING_DECL_RE = re.compile(
    r"(?<![\w-])(?P<prop>(?:margin|padding|inset)(?:-(?:top|right|bottom|left|inline|block)(?:-(?:start|end))?)?"
    r"|(?:row-|column-)?gap|top|right|bottom|left)\s*:\s*(?P<value>[^;{}]+)"
)
_PX_RE = re.compile(r"(?<![\w.])(-?\d+(?:\.\d+)?)px\b")


class InconsistentSpacingPlugin(Plugin):
    """Report indentation, whitespace and spacing-scale inconsistencies."""

    name = "inconsistent-spacing"
    aliases = ("@stile/plugin-inconsistent-spacing",)
    description = "Mixed indentation, trailing whitespace, off-scale spacing"

    def run(self, context: ScanContext, options: Mapping[str, Any] | None = None) -> None:
        base = int((options or {}).get("base", DEFAULT_SPACING_BASE))
        check_scale = base > 0 and STYLESHEET_FILE.search(context.relative_path) is not None
        tab_lines: list[int] = []
        space_lines: list[int] = []

        for lineno, line in enumerate(context.source.splitlines(), start=1):
            indent = _INDENT_RE.match(line)
            if indent and line.strip():
                text = indent.group(0)
                if "\t" in text and " " in text:
                    context.report("Mixed tabs and spaces detected", Severity.WARN, line=lineno, column=1)
                elif "\t" in text:
                    tab_lines.append(lineno)
                else:
                    space_lines.append(lineno)

            trailing = _TRAILING_RE.search(line)
            if trailing:
                context.report(
                    "Trailing whitespace detected",
                    Severity.INFO,
                    line=lineno,
                    column=trailing.start() + 1,
                )

            if check_scale:
                self._check_scale(context, line, lineno, base)

        if tab_lines and space_lines:
            minority = tab_lines if len(tab_lines) <= len(space_lines) else space_lines
            context.report(
                f"Inconsistent indentation: {len(tab_lines)} lines use tabs, {len(space_lines)} use spaces",
                Severity.WARN,
                line=minority[0],
                metadata={"tab_lines": len(tab_lines), "space_lines": len(space_lines)},
            )

    def _check_scale(self, context: ScanContext, line: str, lineno: int, base: int) -> None:
        for decl in _SPACING_DECL_RE.finditer(line):
            for px in _PX_RE.finditer(decl.group("value")):
                value = float(px.group(1))
                if value % base == 0:
                    continue
                context.report(
                    f"Spacing value {px.group(0)} for {decl.group('prop')} is off the {base}px scale",
                    Severity.WARN,
                    line=lineno,
                    column=decl.start("value") + px.start() + 1,
                    metadata={"property": decl.group("prop"), "value": px.group(0), "base": base},
                )
