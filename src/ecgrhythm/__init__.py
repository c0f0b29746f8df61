"""ECG peak detection and heart-rate rhythm reports."""

from .config import Settings, load_settings
from .core import PeakDetector, RhythmClassifier, classify_peaks, detect_peaks
from .ingest import SignalLoadError, SignalStore, load_signal
from .report import (
    SEPARATOR,
    ReportIOError,
    merge_report_files,
    merge_reports,
    read_report,
    write_report,
)
from .types import Category, Classification, IntervalLabel, Peak, Sample

__all__ = [
    "Settings",
    "load_settings",
    "PeakDetector",
    "RhythmClassifier",
    "classify_peaks",
    "detect_peaks",
    "SignalLoadError",
    "SignalStore",
    "load_signal",
    "SEPARATOR",
    "ReportIOError",
    "merge_report_files",
    "merge_reports",
    "read_report",
    "write_report",
    "Category",
    "Classification",
    "IntervalLabel",
    "Peak",
    "Sample",
]
