"""Core algorithms for ecgrhythm."""

from .peaks import DEFAULT_THRESHOLD, PeakDetector, detect_peaks
from .rhythm import (
    DEFAULT_FAST_INTERVAL,
    DEFAULT_SLOW_INTERVAL,
    RhythmClassifier,
    classify_peaks,
)

__all__ = [
    "DEFAULT_THRESHOLD",
    "PeakDetector",
    "detect_peaks",
    "DEFAULT_FAST_INTERVAL",
    "DEFAULT_SLOW_INTERVAL",
    "RhythmClassifier",
    "classify_peaks",
]
