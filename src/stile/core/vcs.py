"""Commit resolution for scan metadata."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

UNKNOWN_COMMIT = "unknown"


def resolve_commit(root: Path) -> str:
    """Return the ``HEAD`` revision of the git checkout containing *root*.

    Any failure (git missing, not a repository, timeout) yields
    ``"unknown"``.
    """
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            cwd=root,
            capture_output=True,
            text=True,
            timeout=10,
            check=True,
        )
    except (OSError, subprocess.SubprocessError):
        logger.debug("Could not resolve git commit for %s", root)
        return UNKNOWN_COMMIT
    return completed.stdout.strip() or UNKNOWN_COMMIT
