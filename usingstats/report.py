"""Ordering and rendering of namespace frequency tables."""

from __future__ import annotations

import sys
from typing import Iterable, List, Mapping, Optional, TextIO

from .models import NamespaceCount

COUNT_WIDTH = 6


def rank(entries: Mapping[str, int], limit: Optional[int] = None) -> List[NamespaceCount]:
    """Sort by count descending then name ascending, keeping ``limit`` rows."""
    if limit is not None and limit < 0:
        raise ValueError("limit must not be negative")
    ordered = sorted(entries.items(), key=lambda item: (-item[1], item[0]))
    if limit is not None:
        ordered = ordered[:limit]
    return [NamespaceCount(name=name, count=count) for name, count in ordered]


def format_row(row: NamespaceCount) -> str:
    return f"{row.count:<{COUNT_WIDTH}} {row.name}"


def render_table(rows: Iterable[NamespaceCount], stream: TextIO) -> None:
    for row in rows:
        stream.write(format_row(row) + "\n")


def render_warnings(warnings: Iterable[str], stream: TextIO) -> int:
    written = 0
    for message in warnings:
        stream.write(f"{message}\n")
        written += 1
    return written


class Reporter:
    """Writes warnings to the error stream and the table to the output stream."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

    def report(
        self,
        rows: Iterable[NamespaceCount],
        warnings: Iterable[str] = (),
        *,
        show_warnings: bool = True,
    ) -> None:
        written = render_warnings(warnings, self.err) if show_warnings else 0
        if written:
            self.err.flush()
            self.out.write("\n")
        render_table(rows, self.out)
        self.out.flush()


__all__ = ["COUNT_WIDTH", "Reporter", "format_row", "rank", "render_table", "render_warnings"]
