"""Flag exported components that the file never renders.

This is a single-file heuristic: an exported capitalised declaration with
no ``<Name`` usage in the same file is reported at ``info`` severity, so it
never counts as a violation. Cross-file usage is not tracked.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from stile.core.models import ScanContext, Severity
from stile.plugins._markup import SCRIPT_FILE, exported_components
from stile.plugins.base import Plugin, severity_option


class UnusedComponentsPlugin(Plugin):
    """Report exported components with no in-file usage."""

    name = "unused-components"
    aliases = ("@stile/plugin-unused-components",)
    test = SCRIPT_FILE
    description = "Exported components never rendered in their own file"

    def run(self, context: ScanContext, options: Mapping[str, Any] | None = None) -> None:
        severity = severity_option(options, Severity.INFO)
        for name, offset in exported_components(context.source):
            if re.search(rf"<{re.escape(name)}[\s/>]", context.source):
                continue
            line, column = context.position(offset)
            context.report(
                f"Unused component detected: {name}",
                severity,
                line=line,
                column=column,
                metadata={"component": name},
            )
