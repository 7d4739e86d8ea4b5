"""Scan configuration: YAML loading and validation.

A configuration file looks like::

    root_dir: ./src
    rules:
      - test: '\\.(t|j)sx?$'
        plugins:
          - no-inline-style
          - name: ds-usage
            options: {severity: error}
      - test: '\\.(css|scss|sass)$'
        plugins: [inconsistent-spacing]
    exclude:
      - node_modules/**
    output:
      format: json

Everything that can be wrong with a configuration is reported as a
``ConfigError`` before any file is touched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from stile.core.models import DEFAULT_DESIGN_SYSTEM_PREFIXES
from stile.exceptions import ConfigError

DEFAULT_CONFIG_FILENAME = "stile.yaml"
OUTPUT_FORMATS: tuple[str, ...] = ("json", "ndjson")

DEFAULT_CONFIG_YAML = """\
# Stile configuration
root_dir: ./src
rules:
  - test: '\\.(t|j)sx$'
    plugins:
      - no-inline-style
      - ds-usage
      - accessibility
      - react-component-analysis
  - test: '\\.(css|scss|sass|less)$'
    plugins:
      - inconsistent-spacing
exclude:
  - node_modules/**
  - dist/**
  - build/**
  - '**/*.test.*'
  - '**/*.spec.*'
design_system:
  prefixes:
    - '@design-system'
    - '@ui'
    - '@components'
output:
  format: json
"""


@dataclass(frozen=True)
class PluginReference:
    """A plugin named by a rule, with optional per-reference options."""

    name: str
    options: dict[str, Any] | None = None


@dataclass
class Rule:
    """A file matcher paired with the plugins to run on matching files.

    Attributes:
        plugins: Plugin references, run in order.
        test: Regex searched against the POSIX path relative to the scan
            root. None accepts every file.
    """

    plugins: list[PluginReference] = field(default_factory=list)
    test: re.Pattern[str] | None = None

    def matches(self, relative_path: str) -> bool:
        return self.test is None or self.test.search(relative_path) is not None


@dataclass
class OutputConfig:
    format: str = "json"
    file: str | None = None


@dataclass
class StileConfig:
    """Everything one scan needs to know.

    Attributes:
        root_dir: Directory to scan.
        rules: Ordered rule set.
        exclude: Glob patterns (relative to ``root_dir``) never scanned.
        output: Report format and destination, used by the CLI only.
        project: Project identity stamped on records. Defaults to the
            resolved root path.
        design_system_prefixes: Import prefixes counted as design-system.
        plugin_timeout: Seconds one plugin invocation may take, or None.
        source: Configuration file this was loaded from, if any.
    """

    root_dir: Path
    rules: list[Rule] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)
    project: str | None = None
    design_system_prefixes: tuple[str, ...] = DEFAULT_DESIGN_SYSTEM_PREFIXES
    plugin_timeout: float | None = None
    source: Path | None = None

    def plugin_names(self) -> list[str]:
        """Every referenced plugin name, first-seen order, no duplicates."""
        names: dict[str, None] = {}
        for rule in self.rules:
            for ref in rule.plugins:
                names.setdefault(ref.name, None)
        return list(names)


def compile_test(pattern: str | re.Pattern[str] | None) -> re.Pattern[str] | None:
    """Compile a rule test pattern.

    Raises:
        ConfigError: If the pattern is not a valid regular expression.
    """
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str) or not pattern:
        raise ConfigError(f"Rule test must be a non-empty regex string, got {pattern!r}")
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"Malformed rule test pattern {pattern!r}: {exc}") from exc


def _parse_reference(entry: Any, index: int) -> PluginReference:
    if isinstance(entry, str) and entry.strip():
        return PluginReference(name=entry.strip())
    if isinstance(entry, Mapping):
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"Rule #{index}: plugin entry is missing a name: {entry!r}")
        options = entry.get("options")
        if options is not None and not isinstance(options, Mapping):
            raise ConfigError(f"Rule #{index}: options for {name!r} must be a mapping")
        return PluginReference(name=name.strip(), options=dict(options) if options is not None else None)
    raise ConfigError(f"Rule #{index}: invalid plugin reference {entry!r}")


def _parse_rule(raw: Any, index: int) -> Rule:
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Rule #{index} must be a mapping, got {type(raw).__name__}")
    entries = raw.get("plugins", raw.get("use"))
    if entries is None:
        entries = []
    if isinstance(entries, str):
        entries = [entries]
    if not isinstance(entries, list):
        raise ConfigError(f"Rule #{index}: 'plugins' must be a list")
    return Rule(
        plugins=[_parse_reference(entry, index) for entry in entries],
        test=compile_test(raw.get("test")),
    )


def _string_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


def parse_config(payload: Mapping[str, Any], base_dir: Path, root_dir: str | Path | None = None) -> StileConfig:
    """Build a ``StileConfig`` from an already-parsed mapping.

    Args:
        payload: Parsed configuration document.
        base_dir: Directory relative ``root_dir`` values are resolved against.
        root_dir: Overrides the document's ``root_dir`` when given.

    Raises:
        ConfigError: On any structural or value problem.
    """
    if not isinstance(payload, Mapping):
        raise ConfigError("Configuration document must be a mapping")

    raw_root = root_dir if root_dir is not None else payload.get("root_dir", payload.get("rootDir", "./src"))
    if not isinstance(raw_root, (str, Path)):
        raise ConfigError("'root_dir' must be a path string")
    root = Path(raw_root).expanduser()
    if not root.is_absolute():
        root = base_dir / root

    raw_rules = payload.get("rules") or []
    if not isinstance(raw_rules, list):
        raise ConfigError("'rules' must be a list")
    rules = [_parse_rule(raw, i) for i, raw in enumerate(raw_rules, start=1)]

    output_raw = payload.get("output") or {}
    if not isinstance(output_raw, Mapping):
        raise ConfigError("'output' must be a mapping")
    output = OutputConfig(format=str(output_raw.get("format", "json")), file=output_raw.get("file"))
    if output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Unknown output format {output.format!r}; expected one of {', '.join(OUTPUT_FORMATS)}")

    design_system = payload.get("design_system") or {}
    if not isinstance(design_system, Mapping):
        raise ConfigError("'design_system' must be a mapping")
    prefixes = design_system.get("prefixes")
    design_system_prefixes = (
        tuple(_string_list(prefixes, "design_system.prefixes"))
        if prefixes is not None
        else DEFAULT_DESIGN_SYSTEM_PREFIXES
    )

    timeout = payload.get("plugin_timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ConfigError(f"'plugin_timeout' must be a number, got {timeout!r}") from None
        if timeout <= 0:
            raise ConfigError("'plugin_timeout' must be positive")

    project = payload.get("project")
    if project is not None and not isinstance(project, str):
        raise ConfigError("'project' must be a string")

    return StileConfig(
        root_dir=root,
        rules=rules,
        exclude=_string_list(payload.get("exclude"), "exclude"),
        output=output,
        project=project or None,
        design_system_prefixes=design_system_prefixes,
        plugin_timeout=timeout,
    )


def default_config(root_dir: str | Path | None = None) -> StileConfig:
    """The configuration ``stile init`` writes, resolved against the cwd."""
    return parse_config(yaml.safe_load(DEFAULT_CONFIG_YAML), Path.cwd(), root_dir=root_dir)


def load_config(path: str | Path | None = None, root_dir: str | Path | None = None) -> StileConfig:
    """Load and validate a YAML configuration file.

    With no *path*, ``stile.yaml`` in the working directory is used when it
    exists; otherwise the built-in defaults apply.

    Args:
        path: Configuration file to read.
        root_dir: Overrides the configured root directory.

    Raises:
        ConfigError: If an explicit file is missing or unreadable, or the
            document is invalid.
    """
    if root_dir is not None:
        root_dir = Path(root_dir).resolve()
    if path is None:
        candidate = Path(DEFAULT_CONFIG_FILENAME)
        if not candidate.is_file():
            return default_config(root_dir)
        path = candidate

    cfg_path = Path(path)
    if not cfg_path.is_file():
        raise ConfigError(f"Configuration file not found: {cfg_path}")
    try:
        text = cfg_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {cfg_path}: {exc}") from exc
    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {exc}") from exc
    if payload is None:
        payload = {}

    config = parse_config(payload, cfg_path.resolve().parent, root_dir=root_dir)
    config.source = cfg_path
    return config
