"""Exceptions and exit codes for usingstats runs."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit statuses. 2 is left to argparse usage errors."""

    SUCCESS = 0
    PATH_NOT_FOUND = 1
    PATH_INVALID = 3
    WORK_ITEM_NOT_FOUND = 4
    TOOLCHAIN_NOT_FOUND = 5
    CONFIG_INVALID = 6
    CANCELLED = 130


class UsingStatsError(Exception):
    """Base exception for failures that end a run."""

    exit_code: ExitCode = ExitCode.SUCCESS


class PathNotFoundError(UsingStatsError):
    """Raised when the target path is neither a file nor a directory."""

    exit_code = ExitCode.PATH_NOT_FOUND

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__("File or folder do not exist. Cannot continue.")


class InvalidPathError(UsingStatsError):
    """Raised when the target is a file without a recognised descriptor suffix."""

    exit_code = ExitCode.PATH_INVALID

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__("File or folder not valid. Cannot continue.")


class WorkItemNotFoundError(UsingStatsError):
    """Raised when a directory holds no .sln or .csproj file."""

    exit_code = ExitCode.WORK_ITEM_NOT_FOUND

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            "Unable to locate any .sln or MSBuild project file (such as .csproj). Cannot continue."
        )


class ToolchainNotFoundError(UsingStatsError):
    """Raised when the C# grammar cannot be loaded."""

    exit_code = ExitCode.TOOLCHAIN_NOT_FOUND

    def __init__(self, grammar: str, reason: str) -> None:
        self.grammar = grammar
        self.reason = reason
        super().__init__(f"Unable to locate the C# grammar '{grammar}' ({reason}). Cannot continue.")


class OperationCancelledError(UsingStatsError):
    """Raised when a run is cancelled between phases or documents."""

    exit_code = ExitCode.CANCELLED

    def __init__(self) -> None:
        super().__init__("Operation cancelled.")


__all__ = [
    "ExitCode",
    "InvalidPathError",
    "OperationCancelledError",
    "PathNotFoundError",
    "ToolchainNotFoundError",
    "UsingStatsError",
    "WorkItemNotFoundError",
]
