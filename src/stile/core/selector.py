"""File selection: expand a root directory into the files a scan visits.

Selection is purely syntactic. A file is selected when no exclude glob
matches its root-relative path and at least one rule's test accepts it.
Excludes always win over rule tests. Traversal is sorted so the selection
order, and with it the report order, is deterministic.
"""

from __future__ import annotations

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Sequence

from stile.config import Rule

logger = logging.getLogger(__name__)


def glob_matches(relative_path: str, pattern: str) -> bool:
    """Match a POSIX relative path against an exclude glob.

    ``*`` may cross directory separators, and a leading ``**/`` also
    matches at the root (``**/*.test.*`` excludes ``a.test.js``).
    """
    if fnmatchcase(relative_path, pattern):
        return True
    return pattern.startswith("**/") and fnmatchcase(relative_path, pattern[3:])


class FileSelector:
    """Selects candidate files under a root directory.

    Usage::

        selector = FileSelector(root, exclude=["node_modules/**"], rules=rules)
        for path in selector.select():
            ...
    """

    def __init__(self, root: Path, exclude: Sequence[str] = (), rules: Sequence[Rule] = ()) -> None:
        self.root = root
        self.exclude = list(exclude)
        self.rules = list(rules)

    def is_excluded(self, relative_path: str) -> bool:
        return any(glob_matches(relative_path, pattern) for pattern in self.exclude)

    def is_accepted(self, relative_path: str) -> bool:
        """True when at least one rule's test accepts the path."""
        return any(rule.matches(relative_path) for rule in self.rules)

    def _prune_dir(self, relative_dir: str) -> bool:
        # Only patterns covering a whole subtree can prune a directory.
        return any(
            pattern.endswith("/**") and glob_matches(relative_dir + "/", pattern)
            for pattern in self.exclude
        )

    def select(self) -> list[Path]:
        """Return selected absolute paths in traversal order, de-duplicated."""
        root = self.root.resolve()
        selected: list[Path] = []
        seen: set[Path] = set()

        def _on_error(exc: OSError) -> None:
            logger.warning("Skipping unreadable directory: %s (%s)", exc.filename, exc.strerror)

        for dirpath, dirnames, filenames in os.walk(root, topdown=True, onerror=_on_error, followlinks=False):
            dir_path = Path(dirpath)
            dirnames[:] = sorted(
                name for name in dirnames
                if not self._prune_dir((dir_path / name).relative_to(root).as_posix())
            )
            for filename in sorted(filenames):
                file_path = dir_path / filename
                relative = file_path.relative_to(root).as_posix()
                if self.is_excluded(relative) or not self.is_accepted(relative):
                    continue
                if file_path in seen:
                    continue
                if not os.access(file_path, os.R_OK):
                    logger.warning("Skipping unreadable file: %s", file_path)
                    continue
                seen.add(file_path)
                selected.append(file_path)
        return selected


def relative_posix(path: Path, root: Path) -> str:
    """Root-relative POSIX path, falling back to the absolute path."""
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()
