"""Common type helpers for ecgrhythm.

This module defines the lightweight containers exchanged between the
loading, detection, classification and reporting stages.  All of them are
immutable so that each stage returns new values instead of mutating the
output of the previous one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Tuple


class Sample(NamedTuple):
    """A single ``(time, amplitude)`` reading."""

    time: float
    amplitude: float


class Peak(NamedTuple):
    """Detected peak: sample index in the owning store and its time."""

    index: int
    time: float


class Category(Enum):
    """Heart-rate category assigned to an inter-peak interval."""

    FAST = "fast"
    SLOW = "slow"
    NORMAL = "normal"

    @property
    def label(self) -> str:
        """Text used at the start of a report line."""

        return _LABELS[self]

    @property
    def tag(self) -> str:
        """Name component used for report files."""

        return _TAGS[self]


_LABELS = {
    Category.FAST: "Tachycardia",
    Category.SLOW: "Bradycardia",
    Category.NORMAL: "Normal heart rate",
}

_TAGS = {
    Category.FAST: "Tachycardia",
    Category.SLOW: "Bradycardia",
    Category.NORMAL: "Normal",
}


@dataclass(frozen=True)
class IntervalLabel:
    """Category of the interval between two adjacent peaks.

    ``start`` and ``end`` are the exact peak timestamps, not rounded.
    """

    category: Category
    start: float
    end: float

    @property
    def duration(self) -> float:
        """Return the interval length in seconds."""

        return self.end - self.start


class Classification(NamedTuple):
    """Labels of a peak sequence split by category, in peak order."""

    fast: Tuple[IntervalLabel, ...] = ()
    slow: Tuple[IntervalLabel, ...] = ()
    normal: Tuple[IntervalLabel, ...] = ()

    def for_category(self, category: Category) -> Tuple[IntervalLabel, ...]:
        if category is Category.FAST:
            return self.fast
        if category is Category.SLOW:
            return self.slow
        return self.normal

    @property
    def total(self) -> int:
        return len(self.fast) + len(self.slow) + len(self.normal)
