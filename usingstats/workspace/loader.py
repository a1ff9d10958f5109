"""Loads a solution or project into an in-memory workspace."""

from __future__ import annotations

import os
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Deque, Iterable, List, Optional, Set

from ..logging import get_logger
from ..models import Project
from .project import ProjectEvaluationError, evaluate_project
from .solution import parse_solution

WarningHandler = Callable[[str], None]


@dataclass
class Workspace:
    """The projects reachable from a loaded solution or project file."""

    path: Path
    projects: List[Project] = field(default_factory=list)


class WorkspaceLoader:
    """Opens ``.sln`` and project files, reporting problems as warnings.

    Warnings go to ``on_warning``; nothing short of an unreadable target is
    fatal, and even that only produces an empty workspace.
    """

    def __init__(self, on_warning: Optional[WarningHandler] = None) -> None:
        self._on_warning = on_warning
        self.logger = get_logger("workspace")

    def open(self, path: Path) -> Workspace:
        if path.suffix.lower() == ".sln":
            return self.open_solution(path)
        return self.open_project(path)

    def open_solution(self, path: Path) -> Workspace:
        try:
            entries = parse_solution(path)
        except OSError as exc:
            self._warn(f"Failed to read solution '{path}': {exc}")
            entries = []
        projects = [entry.path for entry in entries if not entry.is_folder]
        self.logger.debug("Solution %s declares %d projects", path.name, len(projects))
        return self._load(path, projects)

    def open_project(self, path: Path) -> Workspace:
        return self._load(path, [path])

    def _load(self, descriptor: Path, initial: Iterable[Path]) -> Workspace:
        workspace = Workspace(path=descriptor)
        queue: Deque[Path] = deque(initial)
        seen: Set[str] = set()
        while queue:
            project_path = queue.popleft()
            key = os.path.normcase(os.path.normpath(project_path.absolute()))
            if key in seen:
                continue
            seen.add(key)

            if not project_path.is_file():
                self._warn(f"Project file not found: {project_path}")
                continue
            try:
                project = evaluate_project(project_path, self._warn)
            except ProjectEvaluationError as exc:
                self._warn(str(exc))
                continue

            self.logger.debug(
                "Loaded %s (%s, %d documents)",
                project.name,
                project.language,
                len(project.documents),
            )
            workspace.projects.append(project)
            queue.extend(project.references)
        return workspace

    def _warn(self, message: str) -> None:
        self.logger.debug("Workspace warning: %s", message)
        if self._on_warning is not None:
            self._on_warning(message)


__all__ = ["Workspace", "WorkspaceLoader"]
