"""Combine two subjects' reports of the same category."""

from __future__ import annotations

import pathlib
from typing import List, Sequence

from .io import PathLike, read_report, write_report

SEPARATOR = "**************"


def merge_reports(
    report_a: Sequence[str],
    report_b: Sequence[str],
    *,
    separator: str = SEPARATOR,
) -> List[str]:
    """Return the lines of ``report_a``, ``separator``, then ``report_b``.

    The inputs are not modified.  The result always has
    ``len(report_a) + len(report_b) + 1`` lines with the separator at index
    ``len(report_a)``.
    """

    return [*report_a, separator, *report_b]


def merge_report_files(
    destination: PathLike,
    source_a: PathLike,
    source_b: PathLike,
    *,
    separator: str = SEPARATOR,
) -> pathlib.Path:
    """Merge two report files into ``destination``.

    Both sources are read completely before the destination is opened.  A
    missing source raises :class:`~ecgrhythm.report.io.ReportIOError`; it is
    never treated as an empty report.
    """

    lines_a = read_report(source_a)
    lines_b = read_report(source_b)
    return write_report(destination, merge_reports(lines_a, lines_b, separator=separator))
