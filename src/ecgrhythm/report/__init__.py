"""Per-subject and merged rhythm reports."""

from .io import (
    ReportIOError,
    format_label,
    format_labels,
    format_time,
    read_report,
    write_report,
)
from .merge import SEPARATOR, merge_report_files, merge_reports

__all__ = [
    "ReportIOError",
    "format_label",
    "format_labels",
    "format_time",
    "read_report",
    "write_report",
    "SEPARATOR",
    "merge_report_files",
    "merge_reports",
]
