"""Shared fixtures for stile tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from stile.config import StileConfig, parse_config
from stile.core.models import ScanContext

APP_TSX = """\
import React from 'react';
import { Button } from '@design-system/core';

export function App() {
  return (
    <div>
      <Button variant="primary">Save</Button>
      <img src="logo.png" alt="Logo" />
    </div>
  );
}
"""

LEGACY_JSX = """\
import React from 'react';

export const Legacy = () => (
  <div style={{ color: '#ff0000' }}>
    <button></button>
  </div>
);
"""

STYLES_CSS = """\
.card {
  padding: 10px;
  margin: 8px;
}
"""


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative path: content}`` under *root* and return it."""
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """A small front-end source tree.

    Selected by the default rules: ``App.tsx`` (clean), ``Legacy.jsx``
    (inline style, hardcoded colour, no design-system import, unlabeled
    button) and ``styles.css`` (off-scale padding). The test file and
    ``node_modules`` are excluded; ``README.md`` matches no rule.
    """
    return write_tree(tmp_path / "src", {
        "App.tsx": APP_TSX,
        "Legacy.jsx": LEGACY_JSX,
        "styles.css": STYLES_CSS,
        "Button.test.tsx": "<div style={{ margin: 3 }} />\n",
        "node_modules/lib/index.jsx": "<div style={{}} />\n",
        "README.md": "# Sample\n",
    })


@pytest.fixture
def clean_project(tmp_path: Path) -> Path:
    """A source tree with a single file that passes every default check."""
    return write_tree(tmp_path / "clean", {"App.tsx": APP_TSX})


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a file tree under ``tmp_path / name``."""

    def _make(files: dict[str, str], name: str = "src") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        return write_tree(root, files)

    return _make


@pytest.fixture
def make_config() -> Callable[..., StileConfig]:
    """Factory building a StileConfig from rule tuples.

    Usage::

        config = make_config(root, [(r"\\.tsx$", ["no-inline-style"])])
    """

    def _make(
        root: Path,
        rules: list[tuple[str | None, list[Any]]],
        **extra: Any,
    ) -> StileConfig:
        payload: dict[str, Any] = {"rules": []}
        for test, plugins in rules:
            rule: dict[str, Any] = {"plugins": plugins}
            if test is not None:
                rule["test"] = test
            payload["rules"].append(rule)
        payload.update(extra)
        return parse_config(payload, root, root_dir=root)

    return _make


@pytest.fixture
def make_context() -> Callable[..., ScanContext]:
    """Factory building a ScanContext for a file that is never read."""

    def _make(relative_path: str, source: str, **extra: Any) -> ScanContext:
        return ScanContext(
            file_path=Path("/project/src") / relative_path,
            relative_path=relative_path,
            project="/project/src",
            source=source,
            commit="abc123",
            **extra,
        )

    return _make
