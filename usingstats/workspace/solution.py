"""Reader for Visual Studio solution (.sln) files."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List

SOLUTION_FOLDER_TYPE = "2150E333-8FDC-42A3-9474-1A3956D46DE8"

_PROJECT_LINE = re.compile(
    r'^\s*Project\("\{(?P<type>[0-9A-Fa-f-]+)\}"\)\s*=\s*'
    r'"(?P<name>[^"]*)"\s*,\s*"(?P<path>[^"]*)"\s*,\s*"\{(?P<guid>[0-9A-Fa-f-]+)\}"',
    re.MULTILINE,
)


@dataclass(frozen=True)
class SolutionEntry:
    """A ``Project(...)`` line from a solution file."""

    name: str
    path: Path
    type_guid: str
    guid: str

    @property
    def is_folder(self) -> bool:
        return self.type_guid.upper() == SOLUTION_FOLDER_TYPE


def parse_solution(path: Path) -> List[SolutionEntry]:
    """Return the entries declared in ``path`` in file order.

    Project paths are stored with backslashes and relative to the solution
    directory; they are returned absolute and normalised for this platform.
    """
    text = path.read_text(encoding="utf-8-sig", errors="replace")
    base = path.parent
    entries: List[SolutionEntry] = []
    for match in _PROJECT_LINE.finditer(text):
        relative = match.group("path").replace("\\", "/")
        entries.append(
            SolutionEntry(
                name=match.group("name"),
                path=Path(os.path.normpath(base / relative)),
                type_guid=match.group("type"),
                guid=match.group("guid"),
            )
        )
    return entries


__all__ = ["SOLUTION_FOLDER_TYPE", "SolutionEntry", "parse_solution"]
