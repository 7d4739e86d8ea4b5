"""Flag inline ``style`` attributes in JSX.

Inline styles bypass design tokens and theming. Every ``style={...}`` (or
``style="..."``) attribute on an element produces one finding, located at
the attribute.

Options:
    severity: Finding severity (default ``warn``).
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from stile.core.models import ScanContext, Severity
from stile.plugins._markup import JSX_FILE
from stile.plugins.base import Plugin, severity_option

_INLINE_STYLE_RE = re.compile(r"(?<![\w-])style\s*=\s*(?=[{\"'])")
_SNIPPET_LENGTH = 50


class NoInlineStylePlugin(Plugin):
    """Report inline style attributes in JSX/TSX files."""

    name = "no-inline-style"
    aliases = ("@stile/plugin-no-inline-style",)
    test = JSX_FILE
    description = "Inline style attributes instead of design tokens"

    def run(self, context: ScanContext, options: Mapping[str, Any] | None = None) -> None:
        severity = severity_option(options, Severity.WARN)
        for match in _INLINE_STYLE_RE.finditer(context.source):
            line, column = context.position(match.start())
            snippet = context.source[match.start():match.start() + _SNIPPET_LENGTH].split("\n", 1)[0]
            context.report(
                f"Inline style detected: {snippet}",
                severity,
                line=line,
                column=column,
                metadata={"snippet": snippet},
            )
