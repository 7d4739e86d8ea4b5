"""Resolution of plugins that are not built in.

This is the single place where Stile imports code it does not ship. A
reference string is resolved, in order, as:

1. The name of an entry point in the ``stile.plugins`` group.
2. ``package.module:attribute`` -- the attribute is the plugin.
3. ``package.module`` -- the module's ``plugin`` attribute, or else the first
   ``Plugin`` instance or concrete subclass it defines.

Whatever comes back is checked against the plugin contract. ``Plugin``
subclasses are instantiated; other objects with a string ``name`` and a
callable ``run`` are wrapped in ``ExternalPlugin``. Anything else raises
``PluginResolutionError``.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import re
from importlib.metadata import entry_points
from types import ModuleType
from typing import Any, Mapping

from stile.core.models import ScanContext
from stile.exceptions import PluginResolutionError
from stile.plugins.base import Plugin, PluginOutput

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "stile.plugins"


class ExternalPlugin(Plugin):
    """Adapter giving a duck-typed plugin object the ``Plugin`` interface."""

    def __init__(self, target: Any) -> None:
        self._target = target
        self.name = str(target.name)
        self.description = str(getattr(target, "description", "") or "")
        raw_test = getattr(target, "test", None)
        if isinstance(raw_test, str):
            try:
                raw_test = re.compile(raw_test)
            except re.error as exc:
                raise PluginResolutionError(f"Plugin {self.name!r} has an invalid test pattern: {exc}") from exc
        elif raw_test is not None and not isinstance(raw_test, re.Pattern):
            raise PluginResolutionError(f"Plugin {self.name!r} has a test that is not a regex")
        self.test = raw_test

    def run(self, context: ScanContext, options: Mapping[str, Any] | None = None) -> PluginOutput:
        return self._target.run(context, options)


def coerce_plugin(obj: Any, reference: str) -> Plugin:
    """Validate a loaded object against the plugin contract.

    Raises:
        PluginResolutionError: If the object cannot act as a plugin.
    """
    if inspect.isclass(obj) and issubclass(obj, Plugin):
        if inspect.isabstract(obj):
            raise PluginResolutionError(f"{reference}: {obj.__name__} is abstract")
        obj = obj()
    if isinstance(obj, Plugin):
        plugin = obj
    elif isinstance(getattr(obj, "name", None), str) and callable(getattr(obj, "run", None)):
        plugin = ExternalPlugin(obj)
    else:
        raise PluginResolutionError(f"{reference} does not export a Stile plugin")
    if not plugin.name:
        raise PluginResolutionError(f"{reference}: plugin has an empty name")
    return plugin


def _from_entry_points(reference: str) -> Any | None:
    for ep in entry_points(group=ENTRY_POINT_GROUP):
        if ep.name == reference:
            logger.debug("Loading plugin %s from entry point %s", reference, ep.value)
            return ep.load()
    return None


def _find_export(module: ModuleType) -> Any:
    exported = getattr(module, "plugin", None)
    if exported is not None:
        return exported
    for value in vars(module).values():
        if isinstance(value, Plugin):
            return value
        if (
            inspect.isclass(value)
            and issubclass(value, Plugin)
            and not inspect.isabstract(value)
            and value.__module__ == module.__name__
        ):
            return value
    raise PluginResolutionError(f"Module {module.__name__} does not export a Stile plugin")


def _from_import(reference: str) -> Any:
    module_name, _, attribute = reference.partition(":")
    try:
        module = importlib.import_module(module_name)
    except (ImportError, ValueError) as exc:
        raise PluginResolutionError(f"Cannot import plugin module {module_name!r}: {exc}") from exc
    if not attribute:
        return _find_export(module)
    obj: Any = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise PluginResolutionError(f"{module_name} has no attribute {attribute!r}") from None
    return obj


def load_external_plugin(reference: str) -> Plugin:
    """Resolve a plugin reference that is not a built-in.

    Raises:
        PluginResolutionError: If nothing usable is found.
    """
    obj = _from_entry_points(reference)
    if obj is None:
        obj = _from_import(reference)
    return coerce_plugin(obj, reference)
