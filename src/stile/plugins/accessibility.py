"""Accessibility conventions for images and buttons.

- ``<img>`` without an ``alt`` attribute: ``error``.
- ``<button>`` with no visible text and no ``aria-label``,
  ``aria-labelledby`` or ``title``: ``warn``.

Elements that spread props are given the benefit of the doubt, since the
spread may carry the missing attribute.
"""

from __future__ import annotations

from typing import Any, Mapping

from stile.core.models import ScanContext, Severity
from stile.plugins._markup import MARKUP_FILE, has_visible_text, inner_markup, iter_elements
from stile.plugins.base import Plugin

_LABEL_ATTRIBUTES = ("aria-label", "aria-labelledby", "title")


class AccessibilityPlugin(Plugin):
    """Report images without alt text and unlabeled buttons."""

    name = "accessibility"
    aliases = ("@stile/plugin-accessibility",)
    test = MARKUP_FILE
    description = "Images without alt text, buttons without labels"

    def run(self, context: ScanContext, options: Mapping[str, Any] | None = None) -> None:
        for element in iter_elements(context.source):
            if element.spread:
                continue
            tag = element.name.lower() if context.suffix in (".html", ".htm") else element.name
            if tag == "img" and not element.has_attribute("alt"):
                line, column = context.position(element.start)
                context.report(
                    "Image without alt attribute detected",
                    Severity.ERROR,
                    line=line,
                    column=column,
                )
            elif tag == "button" and not element.has_attribute(*_LABEL_ATTRIBUTES):
                inner = inner_markup(context.source, element)
                if inner is None or has_visible_text(inner):
                    continue
                line, column = context.position(element.start)
                context.report(
                    "Button without proper labeling detected",
                    Severity.WARN,
                    line=line,
                    column=column,
                )
