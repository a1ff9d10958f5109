"""Evaluation of the MSBuild items that decide a project's source files."""

from __future__ import annotations

import glob
import os
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from ..models import CSHARP, Document, Project

WarningHandler = Callable[[str], None]

_LANGUAGE_BY_SUFFIX = {
    ".csproj": CSHARP,
    ".vbproj": "Visual Basic",
    ".fsproj": "F#",
}

# Output folders directly under the project directory, left out of the SDK
# default globs.
_DEFAULT_EXCLUDED_DIRS = {"bin", "obj"}

_UNEVALUATED = re.compile(r"[$@%]\(")


class ProjectEvaluationError(RuntimeError):
    """Raised when a project file cannot be opened at all."""


def language_for(path: Path) -> Optional[str]:
    return _LANGUAGE_BY_SUFFIX.get(path.suffix.lower())


def evaluate_project(path: Path, on_warning: Optional[WarningHandler] = None) -> Project:
    """Evaluate ``path`` into a :class:`Project`.

    Only the parts of MSBuild that decide membership are honoured: SDK default
    compile globs, ``Compile`` Include/Exclude/Remove items and
    ``ProjectReference`` items. Conditions are not evaluated.
    """
    warn = on_warning or (lambda message: None)
    path = Path(os.path.normpath(path.absolute()))

    language = language_for(path)
    if language is None:
        raise ProjectEvaluationError(
            f"Cannot open project '{path}' because the file extension "
            f"'{path.suffix}' is not associated with a language."
        )

    try:
        root = ET.parse(path).getroot()
    except (ET.ParseError, OSError) as exc:
        raise ProjectEvaluationError(
            f"Msbuild failed when processing the file '{path}' with message: {exc}"
        ) from exc

    namespace = _detect_xml_namespace(root)

    def tag(name: str) -> str:
        return f"{{{namespace}}}{name}" if namespace else name

    project_dir = path.parent
    included: Dict[Path, None] = {}

    if language == CSHARP and _is_sdk_style(root, tag) and _default_items_enabled(root, tag):
        for source in _default_compile_items(project_dir):
            included[source] = None

    for item in root.iter(tag("Compile")):
        include = item.get("Include")
        if include:
            excluded = set(_expand(project_dir, item.get("Exclude") or "", path, warn))
            for source in _expand(project_dir, include, path, warn):
                if source not in excluded:
                    included[source] = None
        remove = item.get("Remove")
        if remove:
            for source in _expand(project_dir, remove, path, warn):
                included.pop(source, None)

    references: List[Path] = []
    for item in root.iter(tag("ProjectReference")):
        include = item.get("Include")
        if not include:
            continue
        references.extend(_expand(project_dir, include, path, warn))

    return Project(
        path=path,
        name=path.stem,
        language=language,
        documents=[Document(path=source, project=path.stem) for source in sorted(included)],
        references=references,
    )


def _detect_xml_namespace(element: ET.Element) -> str | None:
    match = re.match(r"\{(.+)}", element.tag)
    return match.group(1) if match else None


def _is_sdk_style(root: ET.Element, tag: Callable[[str], str]) -> bool:
    if root.get("Sdk"):
        return True
    if root.find(tag("Sdk")) is not None:
        return True
    return any(item.get("Sdk") for item in root.iter(tag("Import")))


def _default_items_enabled(root: ET.Element, tag: Callable[[str], str]) -> bool:
    for name in ("EnableDefaultItems", "EnableDefaultCompileItems"):
        for element in root.iter(tag(name)):
            if (element.text or "").strip().lower() == "false":
                return False
    return True


def _default_compile_items(project_dir: Path) -> Iterator[Path]:
    top = os.path.normpath(project_dir)
    for dirpath, dirnames, filenames in os.walk(project_dir):
        at_top = os.path.normpath(dirpath) == top
        dirnames[:] = sorted(
            name
            for name in dirnames
            if not name.startswith(".")
            and not (at_top and name.lower() in _DEFAULT_EXCLUDED_DIRS)
        )
        for filename in sorted(filenames):
            if filename.lower().endswith(".cs"):
                yield Path(os.path.normpath(os.path.join(dirpath, filename)))


def _expand(
    project_dir: Path, items: str, project_path: Path, warn: WarningHandler
) -> Iterator[Path]:
    for part in items.split(";"):
        part = part.strip().replace("\\", "/")
        if not part:
            continue
        if _UNEVALUATED.search(part):
            warn(f"Skipping unevaluated item '{part}' in {project_path}")
            continue
        if "*" in part or "?" in part:
            pattern = part if os.path.isabs(part) else os.path.join(project_dir, part)
            for match in sorted(glob.glob(pattern, recursive=True)):
                if os.path.isfile(match):
                    yield Path(os.path.normpath(match))
        else:
            yield Path(os.path.normpath(os.path.join(project_dir, part)))


__all__ = ["ProjectEvaluationError", "evaluate_project", "language_for"]
