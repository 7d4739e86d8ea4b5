"""Tests for commit resolution."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

from stile.core.vcs import UNKNOWN_COMMIT, resolve_commit


def test_resolves_head(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[Any] = []

    def fake_run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        calls.append((args, kwargs["cwd"]))
        return subprocess.CompletedProcess(args, 0, stdout="0123abcd\n", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert resolve_commit(tmp_path) == "0123abcd"
    assert calls == [(["git", "rev-parse", "HEAD"], tmp_path)]


def test_git_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(*args: Any, **kwargs: Any) -> None:
        raise FileNotFoundError("git")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert resolve_commit(tmp_path) == UNKNOWN_COMMIT


def test_not_a_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(args: list[str], **kwargs: Any) -> None:
        raise subprocess.CalledProcessError(128, args, stderr="fatal: not a git repository")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert resolve_commit(tmp_path) == UNKNOWN_COMMIT
