"""Component usage records for React markup.

Every capitalised JSX element (``<Button>``, ``<UI.Card>``) becomes a
``ComponentUsage`` with:

- ``source`` -- the module the element's leading identifier is imported
  from, or ``"."`` when it is defined in the file (or not imported at all);
- ``props`` -- attribute names on the element, plus ``"..."`` for spreads;
- ``category`` -- derived from ``source`` and the design-system prefixes.

Repeat sightings are merged by the engine. Records are returned rather than
buffered on the context.

Options:
    designSystemPrefixes: Overrides the scan's design-system prefixes.
"""

from __future__ import annotations

from typing import Any, Mapping

from stile.core.models import LOCAL_SOURCE, SPREAD_PROP, ComponentUsage, ScanContext, classify_source
from stile.plugins._markup import JSX_FILE, iter_elements, parse_imports
from stile.plugins.base import Plugin

FRAMEWORK = "react"


class ReactComponentAnalysisPlugin(Plugin):
    """Record which components a JSX/TSX file renders and where they come from."""

    name = "react-component-analysis"
    aliases = ("@stile/plugin-react-component-analysis",)
    test = JSX_FILE
    description = "Component usage statistics (design-system, custom, third-party)"

    def run(self, context: ScanContext, options: Mapping[str, Any] | None = None) -> list[ComponentUsage]:
        prefixes = tuple((options or {}).get("designSystemPrefixes") or context.design_system_prefixes)
        sources = {binding.local: binding.source for binding in parse_imports(context.source)}

        usages: list[ComponentUsage] = []
        for element in iter_elements(context.source):
            if not element.is_component:
                continue
            source = sources.get(element.root, LOCAL_SOURCE)
            props = set(element.attributes)
            if element.spread:
                props.add(SPREAD_PROP)
            usages.append(ComponentUsage(
                component=element.name,
                source=source,
                category=classify_source(source, prefixes),
                props=props,
                project=context.project,
                file=context.file,
                commit=context.commit,
                framework=FRAMEWORK,
            ))
        return usages
