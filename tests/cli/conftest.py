"""Shared fixtures for CLI tests.

Every CLI test runs with the working directory set to ``tmp_path`` so an
implicit ``stile.yaml`` lookup never picks up a file from the developer's
checkout.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path: Path, sample_project: Path) -> Path:
    """A stile.yaml next to the sample project, running two plugins."""
    cfg = tmp_path / "stile.yaml"
    cfg.write_text(
        "root_dir: ./src\n"
        "rules:\n"
        "  - test: '\\.(t|j)sx$'\n"
        "    plugins:\n"
        "      - no-inline-style\n"
        "      - name: accessibility\n"
        "exclude:\n"
        "  - '**/*.test.*'\n"
        "  - node_modules/**\n",
        encoding="utf-8",
    )
    return cfg
