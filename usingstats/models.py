"""Core data models shared across usingstats components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

CSHARP = "C#"


@dataclass
class TargetReference:
    """The path a user asked to analyze."""

    raw: str
    resolved: Path
    kind: str  # "file" | "directory"


@dataclass(frozen=True)
class Document:
    """A single source file belonging to a loaded project."""

    path: Path
    project: str


@dataclass
class Project:
    """An evaluated project descriptor and the source files it compiles."""

    path: Path
    name: str
    language: Optional[str]
    documents: List[Document] = field(default_factory=list)
    references: List[Path] = field(default_factory=list)


@dataclass
class NamespaceCount:
    """One row of the frequency table."""

    name: str
    count: int
