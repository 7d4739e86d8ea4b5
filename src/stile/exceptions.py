"""Stile exception hierarchy.

All public exceptions inherit from StileError, giving callers a single base
class to catch when they want to handle any Stile-specific failure without
swallowing unrelated errors.
"""


class StileError(Exception):
    """Base exception for all Stile errors."""


class ConfigError(StileError):
    """Raised when a scan cannot start because its configuration is unusable.

    Covers missing or unreadable configuration files, invalid YAML,
    malformed rule test patterns and a root directory that does not exist.
    This is the only error that propagates out of a scan.
    """


class PluginResolutionError(StileError):
    """Raised when a plugin reference cannot be turned into a plugin.

    Covers unknown names, modules that fail to import and modules that do
    not export an object satisfying the plugin contract. The engine
    downgrades it to a warning.
    """


class PluginConflictError(StileError):
    """Raised when a different plugin is registered under a taken name.

    Intentional replacement goes through ``PluginRegistry.override()``.
    """
