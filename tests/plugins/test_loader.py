"""Tests for loading plugins that are not built in.

Each test writes a throwaway module into ``tmp_path`` and puts it on
``sys.path``, so module names are unique per test.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from stile.core.models import ScanContext
from stile.exceptions import PluginResolutionError
from stile.plugins.loader import ExternalPlugin, coerce_plugin, load_external_plugin


def _module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, name: str, body: str) -> str:
    (tmp_path / f"{name}.py").write_text(textwrap.dedent(body), encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


SUBCLASS_MODULE = """\
from stile.plugins.base import Plugin


class TodoPlugin(Plugin):
    name = "todo-comments"

    def run(self, context, options=None):
        for lineno, line in enumerate(context.source.splitlines(), start=1):
            if "TODO" in line:
                context.report("TODO left in code", "info", line=lineno)
"""


class TestLoadExternalPlugin:
    """Reference forms accepted by load_external_plugin()."""

    def test_module_with_plugin_subclass(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        ref = _module(tmp_path, monkeypatch, "stile_ext_subclass", SUBCLASS_MODULE)
        plugin = load_external_plugin(ref)
        assert plugin.name == "todo-comments"
        assert type(plugin).__name__ == "TodoPlugin"

    def test_module_attribute_reference(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        ref = _module(tmp_path, monkeypatch, "stile_ext_attr", SUBCLASS_MODULE + "\n\ninstance = TodoPlugin()\n")
        plugin = load_external_plugin(f"{ref}:instance")
        assert plugin.name == "todo-comments"

    def test_duck_typed_plugin_is_wrapped(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        ref = _module(tmp_path, monkeypatch, "stile_ext_duck", """\
            class _Checker:
                name = "no-console"
                test = r"\\.js$"

                def run(self, context, options=None):
                    if "console.log" in context.source:
                        context.report("console.log call")


            plugin = _Checker()
            """)
        plugin = load_external_plugin(ref)
        assert isinstance(plugin, ExternalPlugin)
        assert plugin.accepts("src/index.js")
        assert not plugin.accepts("src/index.ts")

        context = ScanContext(
            file_path=Path("/p/index.js"),
            relative_path="index.js",
            project="/p",
            source="console.log(1)",
            commit="c",
        )
        plugin.run(context)
        assert [f.message for f in context.findings] == ["console.log call"]

    def test_missing_module(self) -> None:
        with pytest.raises(PluginResolutionError, match="Cannot import"):
            load_external_plugin("stile_ext_definitely_missing")

    def test_scoped_package_name(self) -> None:
        with pytest.raises(PluginResolutionError):
            load_external_plugin("@acme/stile-plugin-tokens")

    def test_missing_attribute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        ref = _module(tmp_path, monkeypatch, "stile_ext_noattr", SUBCLASS_MODULE)
        with pytest.raises(PluginResolutionError, match="no attribute"):
            load_external_plugin(f"{ref}:missing")

    def test_module_without_plugin(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        ref = _module(tmp_path, monkeypatch, "stile_ext_empty", "VALUE = 1\n")
        with pytest.raises(PluginResolutionError, match="does not export"):
            load_external_plugin(ref)

    def test_invalid_test_pattern(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        ref = _module(tmp_path, monkeypatch, "stile_ext_badtest", """\
            class _Bad:
                name = "bad"
                test = "([unclosed"

                def run(self, context, options=None):
                    return None


            plugin = _Bad()
            """)
        with pytest.raises(PluginResolutionError, match="invalid test pattern"):
            load_external_plugin(ref)


class TestCoercePlugin:
    """Contract checks on loaded objects."""

    def test_rejects_object_without_run(self) -> None:
        class NoRun:
            name = "x"

        with pytest.raises(PluginResolutionError, match="does not export"):
            coerce_plugin(NoRun(), "ref")

    def test_rejects_empty_name(self) -> None:
        class Nameless:
            name = ""

            def run(self, context, options=None):
                return None

        with pytest.raises(PluginResolutionError, match="empty name"):
            coerce_plugin(Nameless(), "ref")
