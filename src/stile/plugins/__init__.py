"""Built-in design-system plugins and the plugin registry."""

from stile.plugins.accessibility import AccessibilityPlugin
from stile.plugins.base import Plugin, PluginOutput, PluginRecord
from stile.plugins.component_analysis import ReactComponentAnalysisPlugin
from stile.plugins.ds_usage import DesignSystemUsagePlugin
from stile.plugins.inconsistent_spacing import InconsistentSpacingPlugin
from stile.plugins.no_inline_style import NoInlineStylePlugin
from stile.plugins.registry import BUILTIN_PLUGINS, PluginRegistry, default_registry
from stile.plugins.unused_components import UnusedComponentsPlugin

__all__ = [
    "AccessibilityPlugin",
    "BUILTIN_PLUGINS",
    "DesignSystemUsagePlugin",
    "InconsistentSpacingPlugin",
    "NoInlineStylePlugin",
    "Plugin",
    "PluginOutput",
    "PluginRecord",
    "PluginRegistry",
    "ReactComponentAnalysisPlugin",
    "UnusedComponentsPlugin",
    "default_registry",
]
