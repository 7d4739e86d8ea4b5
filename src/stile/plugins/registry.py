"""Plugin registry: name -> plugin lookup for one engine.

The ``PluginRegistry`` is an explicit value owned by a ``StileEngine`` (no
process-wide state), so two engines never see each other's plugins. A
``default_registry()`` factory pre-registers the built-in plugins.

Resolution Algorithm
--------------------
``resolve(names)`` makes sure every configured name can be looked up:

1. Names already registered (directly or via an alias) are skipped.
2. Built-in names and their ``@stile/plugin-*`` aliases are instantiated
   from ``BUILTIN_PLUGINS``.
3. Anything else goes through the external loader (``stile.plugins.loader``)
   and is registered under its own name with the reference as an alias.
4. A name that cannot be resolved is logged as a warning and returned to
   the caller. It never aborts a scan.

Conflicts
---------
``register()`` refuses a *different* plugin under a name that is already
taken; re-registering the same object is a no-op. Replacing a plugin on
purpose (test doubles, local forks of a built-in) goes through
``override()``.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Iterator

from stile.exceptions import PluginConflictError, PluginResolutionError
from stile.plugins.accessibility import AccessibilityPlugin
from stile.plugins.base import Plugin
from stile.plugins.component_analysis import ReactComponentAnalysisPlugin
from stile.plugins.ds_usage import DesignSystemUsagePlugin
from stile.plugins.inconsistent_spacing import InconsistentSpacingPlugin
from stile.plugins.loader import load_external_plugin
from stile.plugins.no_inline_style import NoInlineStylePlugin
from stile.plugins.unused_components import UnusedComponentsPlugin

logger = logging.getLogger(__name__)

BUILTIN_PLUGINS: dict[str, type[Plugin]] = {
    cls.name: cls
    for cls in (
        NoInlineStylePlugin,
        DesignSystemUsagePlugin,
        UnusedComponentsPlugin,
        InconsistentSpacingPlugin,
        AccessibilityPlugin,
        ReactComponentAnalysisPlugin,
    )
}

BUILTIN_ALIASES: dict[str, str] = {
    alias: name for name, cls in BUILTIN_PLUGINS.items() for alias in cls.aliases
}


class PluginRegistry:
    """Registry of plugins available to one engine.

    Attributes:
        loader: Callable resolving non-built-in references. Injectable so
            tests and embedders can restrict or replace external loading.
    """

    def __init__(self, loader: Callable[[str], Plugin] | None = load_external_plugin) -> None:
        self.loader = loader
        self._plugins: dict[str, Plugin] = {}
        self._aliases: dict[str, str] = {}
        self._lock = threading.RLock()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._plugins)

    def __iter__(self) -> Iterator[Plugin]:
        return iter(list(self._plugins.values()))

    def names(self) -> list[str]:
        return list(self._plugins)

    def get(self, name: str) -> Plugin | None:
        """Look a plugin up by name or alias."""
        with self._lock:
            plugin = self._plugins.get(name)
            if plugin is None and name in self._aliases:
                plugin = self._plugins.get(self._aliases[name])
            return plugin

    def register(self, plugin: Plugin, aliases: Iterable[str] = ()) -> None:
        """Add a plugin under ``plugin.name`` and the given aliases.

        Args:
            plugin: The plugin instance.
            aliases: Extra lookup names (in addition to ``plugin.aliases``).

        Raises:
            PluginConflictError: If a different plugin holds the name.
        """
        with self._lock:
            existing = self._plugins.get(plugin.name)
            if existing is not None and existing is not plugin:
                raise PluginConflictError(
                    f"Plugin {plugin.name!r} is already registered; use override() to replace it"
                )
            self._store(plugin, aliases)

    def override(self, plugin: Plugin, aliases: Iterable[str] = ()) -> None:
        """Register *plugin*, replacing any plugin holding its name."""
        with self._lock:
            if plugin.name in self._plugins:
                logger.debug("Overriding plugin %s", plugin.name)
            self._store(plugin, aliases)

    def _store(self, plugin: Plugin, aliases: Iterable[str]) -> None:
        if not plugin.name:
            raise PluginResolutionError(f"{plugin!r} has an empty name")
        self._plugins[plugin.name] = plugin
        for alias in (*plugin.aliases, *aliases):
            if alias and alias != plugin.name:
                self._aliases[alias] = plugin.name

    def resolve(self, names: Iterable[str]) -> list[str]:
        """Make every name resolvable, loading built-ins or externals.

        Args:
            names: Plugin references from the configuration.

        Returns:
            The references that could not be resolved (already logged).
        """
        unresolved: list[str] = []
        for name in dict.fromkeys(names):
            if name in self:
                continue
            try:
                self._resolve_one(name)
            except PluginResolutionError as exc:
                logger.warning("Failed to load plugin %s: %s", name, exc)
                unresolved.append(name)
            except Exception:
                logger.warning("Failed to load plugin %s", name, exc_info=True)
                unresolved.append(name)
        return unresolved

    def _resolve_one(self, name: str) -> None:
        canonical = BUILTIN_ALIASES.get(name, name)
        builtin = BUILTIN_PLUGINS.get(canonical)
        if builtin is not None:
            self.register(builtin())
            return
        if self.loader is None:
            raise PluginResolutionError("unknown plugin and external loading is disabled")
        plugin = self.loader(name)
        self.register(plugin, aliases=[name])
        logger.info("Loaded external plugin %s as %s", name, plugin.name)


def default_registry() -> PluginRegistry:
    """Create a PluginRegistry pre-loaded with every built-in plugin.

    The default registry includes:
    1. ``no-inline-style`` -- inline ``style`` attributes in JSX
    2. ``ds-usage`` -- missing design-system imports, hardcoded colours
    3. ``unused-components`` -- exported components never rendered
    4. ``inconsistent-spacing`` -- indentation, whitespace, spacing scale
    5. ``accessibility`` -- images without alt, unlabeled buttons
    6. ``react-component-analysis`` -- component usage records

    Returns:
        A PluginRegistry with all built-in plugins registered.
    """
    registry = PluginRegistry()
    for cls in BUILTIN_PLUGINS.values():
        registry.register(cls())
    return registry
