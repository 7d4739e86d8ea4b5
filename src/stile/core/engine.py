"""The scanning engine: selection, per-file plugin execution, aggregation.

``StileEngine.scan(config)`` runs four phases:

1. **Resolution** -- every plugin named by the rules is resolved in the
   engine's registry. Unresolvable names are logged and ignored.
2. **Selection** -- ``FileSelector`` lists the files to visit.
3. **Execution** -- files are processed one at a time, in selection order.
   For each file, every matching rule's plugins run in configuration order,
   each on a fresh copy of the file's ``ScanContext``. The records an
   invocation produces are stamped with any missing identity fields and
   merged into the file's results.
4. **Assembly** -- violations, the adherence score, the severity histogram
   and component metrics are computed and frozen into a ``ScanReport``.

Only configuration problems escape ``scan()``. Unreadable files and failing
or timed-out plugins are logged and skipped.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from stile import __version__
from stile.config import PluginReference, StileConfig
from stile.core.models import (
    ComponentUsage,
    Finding,
    ScanContext,
    ScanMeta,
    ScanReport,
    ScanSummary,
    Severity,
    classify_source,
    utc_timestamp,
)
from stile.core.scoring import adherence_score, component_metrics, count_violations, severity_histogram
from stile.core.selector import FileSelector, relative_posix
from stile.core.vcs import resolve_commit
from stile.exceptions import ConfigError
from stile.plugins.base import Plugin
from stile.plugins.registry import PluginRegistry, default_registry

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    """Everything the plugins produced for one file."""

    findings: list[Finding] = field(default_factory=list)
    components: dict[tuple[str, str, str, str], ComponentUsage] = field(default_factory=dict)

    def add_component(self, usage: ComponentUsage) -> None:
        existing = self.components.get(usage.merge_key)
        if existing is None:
            self.components[usage.merge_key] = usage
        else:
            existing.absorb(usage)


class StileEngine:
    """Runs design-system scans.

    Each engine owns its plugin registry, so independent engines never
    interfere. ``scan()`` holds no state between calls.

    Usage::

        engine = StileEngine()
        report = engine.scan(load_config("stile.yaml"))
        print(report.summary.adherence_score)

    Args:
        registry: Plugin registry to use. Defaults to ``default_registry()``.
        commit: Revision to stamp on records instead of asking git.
        plugin_timeout: Seconds one plugin invocation may take. Overridden
            by ``StileConfig.plugin_timeout`` when that is set.
    """

    def __init__(
        self,
        registry: PluginRegistry | None = None,
        *,
        commit: str | None = None,
        plugin_timeout: float | None = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.commit = commit
        self.plugin_timeout = plugin_timeout

    def register_plugin(self, plugin: Plugin) -> None:
        """Register a plugin with this engine's registry."""
        self.registry.register(plugin)

    def ensure_plugins(self, names: Iterable[str]) -> list[str]:
        """Resolve plugin names; return those that could not be resolved."""
        return self.registry.resolve(names)

    def scan(self, config: StileConfig) -> ScanReport:
        """Run a scan to completion and return its report.

        Raises:
            ConfigError: If the root directory does not exist.
        """
        return asyncio.run(self.scan_async(config))

    async def scan_async(self, config: StileConfig) -> ScanReport:
        """Coroutine form of ``scan()`` for callers already in an event loop."""
        started = time.perf_counter()
        root = config.root_dir
        if not root.is_dir():
            raise ConfigError(f"Root directory does not exist: {root}")
        root = root.resolve()

        self.ensure_plugins(config.plugin_names())

        project = config.project or root.as_posix()
        commit = self.commit or resolve_commit(root)
        timeout = config.plugin_timeout if config.plugin_timeout is not None else self.plugin_timeout

        logger.info("Starting Stile scan of %s", root)
        files = FileSelector(root, config.exclude, config.rules).select()
        logger.info("Found %d files to scan", len(files))

        findings: list[Finding] = []
        components: list[ComponentUsage] = []
        files_scanned = 0
        threads = _PluginThread()
        try:
            for path in files:
                try:
                    source = await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
                except OSError as exc:
                    logger.warning("Failed to read %s: %s", path, exc)
                    continue
                files_scanned += 1
                context = ScanContext(
                    file_path=path,
                    relative_path=relative_posix(path, root),
                    project=project,
                    source=source,
                    commit=commit,
                    design_system_prefixes=config.design_system_prefixes,
                )
                result = await self._scan_file(context, config, timeout, threads)
                findings.extend(result.findings)
                components.extend(result.components.values())
        finally:
            threads.abandon()

        violations = count_violations(findings)
        duration_ms = int((time.perf_counter() - started) * 1000)
        report = ScanReport(
            meta=ScanMeta(project=project, commit=commit, timestamp=utc_timestamp(), version=__version__),
            findings=tuple(findings),
            components=tuple(components),
            summary=ScanSummary(
                files_scanned=files_scanned,
                violations=violations,
                adherence_score=adherence_score(files_scanned, violations),
                duration_ms=duration_ms,
                severity_counts=severity_histogram(findings),
            ),
            metrics=component_metrics(components),
        )
        logger.info(
            "Scan completed in %dms: %d files, %d violations, adherence %d%%",
            duration_ms, files_scanned, violations, report.summary.adherence_score,
        )
        return report

    async def _scan_file(
        self,
        context: ScanContext,
        config: StileConfig,
        timeout: float | None,
        threads: _PluginThread,
    ) -> FileResult:
        result = FileResult()
        for rule in config.rules:
            if not rule.matches(context.relative_path):
                continue
            for ref in rule.plugins:
                plugin = self.registry.get(ref.name)
                if plugin is None:
                    continue
                if not plugin.accepts(context.relative_path):
                    continue
                await self._invoke(plugin, ref, context, result, timeout, threads)
        return result

    async def _invoke(
        self,
        plugin: Plugin,
        ref: PluginReference,
        base: ScanContext,
        result: FileResult,
        timeout: float | None,
        threads: _PluginThread,
    ) -> None:
        context = base.fresh()
        records: list[Any] = []
        try:
            await self._call(plugin, context, ref.options, timeout, threads, records)
        except Exception as exc:
            if timeout is not None and isinstance(exc, asyncio.TimeoutError):
                logger.warning("Plugin %s timed out after %ss for %s", plugin.name, timeout, base.file)
                threads.abandon()
                return
            logger.warning("Plugin %s failed for %s: %s", plugin.name, base.file, exc, exc_info=True)

        produced_findings = list(context.findings)
        produced_components = list(context.components)
        for record in records:
            if isinstance(record, Finding):
                produced_findings.append(record)
            elif isinstance(record, ComponentUsage):
                produced_components.append(record)
            else:
                logger.warning("Plugin %s returned an unsupported record: %r", plugin.name, record)

        stamp = utc_timestamp()
        for finding in produced_findings:
            try:
                finding.severity = Severity.parse(finding.severity)
            except ValueError:
                logger.warning("Plugin %s produced a finding with invalid severity %r", plugin.name, finding.severity)
                continue
            finding.plugin = finding.plugin or plugin.name
            finding.project = finding.project or base.project
            finding.file = finding.file or base.file
            finding.timestamp = finding.timestamp or stamp
            finding.commit = finding.commit or base.commit
            result.findings.append(finding)
        for usage in produced_components:
            usage.project = usage.project or base.project
            usage.file = usage.file or base.file
            usage.commit = usage.commit or base.commit
            if usage.category is None:
                usage.category = classify_source(usage.source, base.design_system_prefixes)
            result.add_component(usage)
        logger.debug(
            "%s on %s: %d findings, %d component records",
            plugin.name, base.relative_path, len(produced_findings), len(produced_components),
        )

    async def _call(
        self,
        plugin: Plugin,
        context: ScanContext,
        options: dict[str, Any] | None,
        timeout: float | None,
        threads: _PluginThread,
        sink: list[Any],
    ) -> None:
        """Run *plugin* and drain whatever it returns into *sink*.

        Returned iterables (generators included) are consumed here, inside
        the failure and timeout boundary, so records yielded before an
        exception stay in *sink*.
        """
        if timeout is None:
            returned = plugin.run(context, options)
            if inspect.isawaitable(returned):
                returned = await returned
            _drain(returned, sink, plugin.name)
            return

        if inspect.iscoroutinefunction(plugin.run):

            async def _awaited() -> None:
                _drain(await plugin.run(context, options), sink, plugin.name)

            await asyncio.wait_for(_awaited(), timeout)
            return

        async def _bounded() -> None:
            returned = await threads.run(_run_and_drain, plugin, context, options, sink)
            if inspect.isawaitable(returned):
                _drain(await returned, sink, plugin.name)

        await asyncio.wait_for(_bounded(), timeout)


def _drain(returned: Any, sink: list[Any], plugin_name: str) -> None:
    if returned is None:
        return
    try:
        iterator = iter(returned)
    except TypeError:
        logger.warning("Plugin %s returned a non-iterable result: %r", plugin_name, returned)
        return
    for record in iterator:
        sink.append(record)


def _run_and_drain(plugin: Plugin, context: ScanContext, options: dict[str, Any] | None, sink: list[Any]) -> Any:
    returned = plugin.run(context, options)
    if inspect.isawaitable(returned):
        return returned
    _drain(returned, sink, plugin.name)
    return None


class _PluginThread:
    """Worker thread for sync plugins running under a timeout.

    A timed-out plugin cannot be interrupted, so its worker is abandoned
    rather than joined and the next sync plugin gets a fresh one.
    """

    def __init__(self) -> None:
        self._executor: ThreadPoolExecutor | None = None

    async def run(self, func: Callable[..., Any], *args: Any) -> Any:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="stile-plugin")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, *args))

    def abandon(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None
