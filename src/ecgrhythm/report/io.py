"""Reading and writing plain-text rhythm reports.

A report is a sequence of lines, one per :class:`~ecgrhythm.types.IntervalLabel`::

   Tachycardia detected between peaks at 1.2 and 1.7

Numbers use the general ``%g`` form (six significant digits, no padding).
"""

from __future__ import annotations

import logging
import pathlib
from typing import Iterable, List, Union

from ..types import IntervalLabel

logger = logging.getLogger(__name__)

PathLike = Union[str, pathlib.Path]


class ReportIOError(OSError):
    """Raised when a report file cannot be read or written."""

    def __init__(self, message: str, *, path: PathLike):
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")


def format_time(value: float) -> str:
    return f"{value:g}"


def format_label(label: IntervalLabel) -> str:
    return (
        f"{label.category.label} detected between peaks at "
        f"{format_time(label.start)} and {format_time(label.end)}"
    )


def format_labels(labels: Iterable[IntervalLabel]) -> List[str]:
    return [format_label(label) for label in labels]


def write_report(path: PathLike, lines: Iterable[str]) -> pathlib.Path:
    """Write ``lines`` to ``path``, replacing any existing content."""

    p = pathlib.Path(path)
    try:
        with open(p, "w", encoding="utf8") as fh:
            for line in lines:
                fh.write(f"{line}\n")
    except OSError as exc:
        logger.error("Failed to open output file: %s", p)
        raise ReportIOError(f"failed to write report: {exc}", path=p) from exc
    logger.info("Results written to %s", p)
    return p


def read_report(path: PathLike) -> List[str]:
    """Return the lines of the report at ``path`` without line terminators."""

    p = pathlib.Path(path)
    try:
        with open(p, "r", encoding="utf8") as fh:
            return fh.read().splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to open file: %s", p)
        raise ReportIOError(f"failed to read report: {exc}", path=p) from exc
