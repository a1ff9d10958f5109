"""Solution and project loading."""

from .loader import Workspace, WorkspaceLoader
from .project import ProjectEvaluationError, evaluate_project
from .solution import SolutionEntry, parse_solution

__all__ = [
    "ProjectEvaluationError",
    "SolutionEntry",
    "Workspace",
    "WorkspaceLoader",
    "evaluate_project",
    "parse_solution",
]
