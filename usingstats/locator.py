"""Resolution of the user supplied path to a solution or project file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, Optional

from .errors import InvalidPathError, PathNotFoundError, WorkItemNotFoundError
from .models import TargetReference

ALLOWED_SUFFIXES = (".sln", ".csproj")

_EXCLUDED_DIRS = {
    "bin",
    "obj",
    "node_modules",
    "packages",
    "TestResults",
}


def path_exists(path: str) -> bool:
    return os.path.isdir(path) or os.path.isfile(path)


def is_valid_file(path: str) -> bool:
    return path.lower().endswith(ALLOWED_SUFFIXES)


def is_valid(path: str) -> bool:
    return os.path.isdir(path) or is_valid_file(path)


def try_locate(path: str) -> Optional[Path]:
    """Return the descriptor to load for ``path``, or None.

    Solutions win over projects anywhere in the tree: every ``.sln`` is
    considered before the first ``.csproj``.
    """
    if is_valid_file(path):
        return Path(path)

    root = Path(path)
    for suffix in ALLOWED_SUFFIXES:
        for candidate in _iter_files(root):
            if candidate.name.lower().endswith(suffix):
                return candidate
    return None


def resolve_target(path: str) -> TargetReference:
    """Validate ``path`` and locate the work item, raising on failure."""
    if not path_exists(path):
        raise PathNotFoundError(path)
    if not is_valid(path):
        raise InvalidPathError(path)

    located = try_locate(path)
    if located is None:
        raise WorkItemNotFoundError(path)
    return TargetReference(
        raw=path,
        resolved=located.expanduser().resolve(),
        kind="directory" if os.path.isdir(path) else "file",
    )


def _iter_files(root: Path) -> Iterator[Path]:
    # Sorted walk so repeated runs on the same tree pick the same file.
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            name for name in dirnames if name not in _EXCLUDED_DIRS and not name.startswith(".")
        )
        current = Path(dirpath)
        for filename in sorted(filenames):
            yield current / filename


__all__ = [
    "ALLOWED_SUFFIXES",
    "is_valid",
    "is_valid_file",
    "path_exists",
    "resolve_target",
    "try_locate",
]
