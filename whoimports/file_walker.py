"""File walking utilities."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterable


logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = {".ts", ".tsx", ".js", ".jsx"}
DECLARATION_PATTERN = ".d.ts"
DEFAULT_EXCLUDES = {"node_modules"}


def matches_pattern(filename: str, pattern: str) -> bool:
    """Match a file name's ending against a glob-like pattern (``*`` is a wildcard)."""
    regex = re.escape(pattern).replace(r"\*", ".*")
    return re.search(regex + "$", filename) is not None


def iter_typescript_files(
    root: str | Path,
    ignore_patterns: Iterable[str] | None = None,
    excludes: Iterable[str] | None = None,
) -> list[str]:
    root_path = Path(root)
    if not root_path.is_dir():
        logger.warning("Directory not found: %s", root_path)
        return []

    patterns = list(ignore_patterns or ())
    exclude_set = set(excludes or DEFAULT_EXCLUDES)
    matches: list[str] = []

    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames[:] = sorted(
            name for name in dirnames if name not in exclude_set and not name.startswith(".")
        )
        for filename in sorted(filenames):
            if Path(filename).suffix.lower() not in SOURCE_SUFFIXES:
                continue
            if any(matches_pattern(filename, pattern) for pattern in patterns):
                continue
            matches.append(str(Path(dirpath) / filename))

    return matches


def ignore_patterns_for(
    extra: Iterable[str] | None = None, include_declarations: bool = False
) -> list[str]:
    patterns = list(extra or ())
    if not include_declarations:
        patterns.append(DECLARATION_PATTERN)
    return patterns


def find_common_ancestor(paths: Iterable[str | Path]) -> Path:
    resolved = [Path(path).resolve() for path in paths]
    if not resolved:
        return Path("/")
    if len(resolved) == 1:
        return resolved[0]
    return Path(os.path.commonpath([str(path) for path in resolved]))


def is_within_folders(path: str | Path, folders: Iterable[str | Path]) -> bool:
    target = Path(path).resolve()
    for folder in folders:
        folder_path = Path(folder).resolve()
        if target == folder_path or folder_path in target.parents:
            return True
    return False


def module_key(path: str | Path, base_path: str | Path) -> str:
    """Return the ``/``-separated path of ``path`` relative to ``base_path``."""
    relative = os.path.relpath(Path(path).resolve(), Path(base_path).resolve())
    return Path(relative).as_posix()
