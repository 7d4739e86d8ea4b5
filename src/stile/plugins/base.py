"""Base interface for Stile plugins.

Every plugin implements the ``Plugin`` abstract base class:

- ``name`` -- registry key; also stamped on the findings it produces.
- ``test`` -- optional regex narrowing the files the plugin runs on, on top
  of whatever the configuring rule already selected.
- ``run(context, options)`` -- inspect one file. Output goes either into the
  context's buffers (``context.report()``, ``context.record_component()``)
  or is returned as an iterable of ``Finding`` / ``ComponentUsage`` records.
  ``run`` may be a coroutine function; the engine awaits it.

Plugins must not raise on content they do not understand -- report nothing
instead. An exception is contained by the engine, but the plugin then
contributes nothing further for that file.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Iterable, Mapping, Union

from stile.core.models import ComponentUsage, Finding, ScanContext, Severity

PluginRecord = Union[Finding, ComponentUsage]
PluginOutput = Union[Iterable[PluginRecord], None]


class Plugin(ABC):
    """Abstract base class for design-system plugins.

    Attributes:
        name: Unique registry name (e.g. "no-inline-style").
        test: Optional secondary file matcher, searched against the path
            relative to the scan root.
        description: One-line summary shown by ``stile plugins``.
        aliases: Additional names the plugin answers to.
    """

    name: str = ""
    test: re.Pattern[str] | None = None
    description: str = ""
    aliases: tuple[str, ...] = ()

    def accepts(self, relative_path: str) -> bool:
        """True if the plugin's own matcher admits the path."""
        return self.test is None or self.test.search(relative_path) is not None

    @abstractmethod
    def run(
        self,
        context: ScanContext,
        options: Mapping[str, Any] | None = None,
    ) -> PluginOutput | Awaitable[PluginOutput]:
        """Analyze one file.

        Args:
            context: The file being scanned, with fresh output buffers.
            options: Per-reference options from the configuration, or None.

        Returns:
            None, or an iterable of records to add to the buffered output.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def severity_option(options: Mapping[str, Any] | None, default: Severity) -> Severity:
    """Read the ``severity`` option, falling back to *default*."""
    if not options or "severity" not in options:
        return default
    return Severity.parse(options["severity"])
