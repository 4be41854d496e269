"""Plain-text table output with per-column width limits."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

_ELLIPSIS = "\u2026"


def truncate_string(s: str, width: int) -> str:
    """Shorten s to at most width characters, ending in an ellipsis when cut."""
    if width <= 0:
        return ""
    if len(s) <= width:
        return s
    if width > 1:
        return s[: width - 1] + _ELLIPSIS
    return s[:width]


def pretty_print_table(
    rows: Sequence[Sequence[str]],
    max_widths: Sequence[int] | None = None,
    out: TextIO | None = None,
) -> None:
    """Print rows sorted by their first column, padded into aligned columns.

    max_widths limits each column when it has one entry per column.
    """
    if not rows:
        return
    out = sys.stdout if out is None else out

    ordered = sorted(rows, key=lambda row: row[0].lower())
    num_columns = len(ordered[0])
    widths = [0] * num_columns
    for row in ordered:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    if max_widths is not None and len(max_widths) == num_columns:
        widths = [min(width, limit) for width, limit in zip(widths, max_widths)]

    for row in ordered:
        line = []
        for i, cell in enumerate(row):
            line.append(truncate_string(cell, widths[i]).ljust(widths[i]))
            if i < num_columns - 1:
                line.append(" | ")
        out.write("".join(line) + "\n")