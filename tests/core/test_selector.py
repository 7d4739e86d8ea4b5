"""Tests for FileSelector: exclude globs, rule acceptance and ordering."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable

import pytest

from stile.config import PluginReference, Rule, compile_test
from stile.core.selector import FileSelector, glob_matches, relative_posix


def _rule(pattern: str | None) -> Rule:
    return Rule(plugins=[PluginReference("x")], test=compile_test(pattern))


def _names(root: Path, paths: list[Path]) -> list[str]:
    return [p.relative_to(root.resolve()).as_posix() for p in paths]


class TestGlobMatches:
    """Exclude glob semantics."""

    @pytest.mark.parametrize(
        ("path", "pattern", "expected"),
        [
            ("node_modules/react/index.js", "node_modules/**", True),
            ("src/node_modules/x.js", "node_modules/**", False),
            ("Button.test.tsx", "**/*.test.*", True),
            ("components/Button.test.tsx", "**/*.test.*", True),
            ("components/Button.tsx", "**/*.test.*", False),
            ("legacy/old/App.jsx", "legacy/*", True),
            ("App.jsx", "*.jsx", True),
        ],
    )
    def test_patterns(self, path: str, pattern: str, expected: bool) -> None:
        assert glob_matches(path, pattern) is expected


class TestFileSelector:
    """Selection over a real directory tree."""

    @pytest.fixture
    def tree(self, make_tree: Callable[..., Path]) -> Path:
        return make_tree({
            "b.tsx": "",
            "a.tsx": "",
            "styles.css": "",
            "components/Card.tsx": "",
            "components/Card.test.tsx": "",
            "node_modules/pkg/index.tsx": "",
            "dist/bundle.tsx": "",
        })

    def test_selection_is_sorted_and_filtered(self, tree: Path) -> None:
        selector = FileSelector(tree, ["node_modules/**", "dist/**", "**/*.test.*"], [_rule(r"\.tsx$")])
        assert _names(tree, selector.select()) == ["a.tsx", "b.tsx", "components/Card.tsx"]

    def test_exclude_wins_over_rule(self, tree: Path) -> None:
        selector = FileSelector(tree, ["components/**"], [_rule(r"Card")])
        assert selector.select() == []

    def test_no_rules_selects_nothing(self, tree: Path) -> None:
        assert FileSelector(tree, [], []).select() == []

    def test_rule_without_test_accepts_everything(self, tree: Path) -> None:
        selector = FileSelector(tree, ["node_modules/**", "dist/**"], [_rule(None)])
        assert _names(tree, selector.select()) == [
            "a.tsx",
            "b.tsx",
            "styles.css",
            "components/Card.test.tsx",
            "components/Card.tsx",
        ]

    def test_rule_tests_see_relative_paths(self, tree: Path) -> None:
        selector = FileSelector(tree, [], [_rule(r"^components/")])
        assert _names(tree, selector.select()) == ["components/Card.test.tsx", "components/Card.tsx"]

    def test_any_rule_is_enough(self, tree: Path) -> None:
        selector = FileSelector(tree, ["node_modules/**", "dist/**", "components/**"], [_rule(r"\.css$"), _rule(r"^a\.")])
        assert _names(tree, selector.select()) == ["a.tsx", "styles.css"]

    def test_results_are_absolute(self, tree: Path) -> None:
        paths = FileSelector(tree, [], [_rule(r"\.css$")]).select()
        assert paths == [tree.resolve() / "styles.css"]

    def test_selection_is_deterministic(self, tree: Path) -> None:
        selector = FileSelector(tree, [], [_rule(None)])
        assert selector.select() == selector.select()



class TestUnreadableEntries:
    """Unreadable directories and files are logged and skipped."""

    @pytest.fixture
    def tree(self, make_tree: Callable[..., Path]) -> Path:
        return make_tree({"a.tsx": "", "locked/hidden.tsx": "", "open/b.tsx": ""})

    def test_unreadable_directory_is_skipped(
        self, tree: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        scandir = os.scandir

        def _scandir(path: Any) -> Any:
            if os.path.basename(os.fspath(path)) == "locked":
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return scandir(path)

        monkeypatch.setattr(os, "scandir", _scandir)
        caplog.set_level(logging.WARNING, logger="stile")
        paths = FileSelector(tree, [], [_rule(None)]).select()
        assert _names(tree, paths) == ["a.tsx", "open/b.tsx"]
        assert any(
            "Skipping unreadable directory" in r.getMessage() and "locked" in r.getMessage()
            for r in caplog.records
        )

    def test_unreadable_file_is_skipped(
        self, tree: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        access = os.access
        monkeypatch.setattr(os, "access", lambda path, mode: Path(path).name != "a.tsx" and access(path, mode))
        caplog.set_level(logging.WARNING, logger="stile")
        paths = FileSelector(tree, [], [_rule(None)]).select()
        assert _names(tree, paths) == ["locked/hidden.tsx", "open/b.tsx"]
        assert any("Skipping unreadable file" in r.getMessage() for r in caplog.records)

def test_relative_posix(tmp_path: Path) -> None:
    assert relative_posix(tmp_path / "a" / "b.tsx", tmp_path) == "a/b.tsx"
    assert relative_posix(Path("/elsewhere/x.tsx"), tmp_path) == "/elsewhere/x.tsx"
