from __future__ import annotations

"""Heart-rate classification from inter-peak intervals."""

from dataclasses import dataclass
from typing import List, Sequence

from ..config import Settings
from ..types import Category, Classification, IntervalLabel, Peak

DEFAULT_SLOW_INTERVAL = 1.0
DEFAULT_FAST_INTERVAL = 0.6


@dataclass(frozen=True)
class RhythmClassifier:
    """Classify the interval between each pair of adjacent peaks.

    Attributes
    ----------
    slow_interval:
        Intervals strictly longer than this (seconds) are Bradycardia.
    fast_interval:
        Intervals strictly shorter than this (seconds) are Tachycardia.

    Intervals equal to either cutoff are normal.  The slow test runs first.
    """

    slow_interval: float = DEFAULT_SLOW_INTERVAL
    fast_interval: float = DEFAULT_FAST_INTERVAL

    def __post_init__(self) -> None:
        if self.fast_interval > self.slow_interval:
            raise ValueError(
                f"fast_interval ({self.fast_interval}) must not exceed "
                f"slow_interval ({self.slow_interval})"
            )

    def classify_interval(self, interval: float) -> Category:
        if interval > self.slow_interval:
            return Category.SLOW
        if interval < self.fast_interval:
            return Category.FAST
        return Category.NORMAL

    def classify(self, peaks: Sequence[Peak]) -> Classification:
        """Return ``(fast, slow, normal)`` label sequences in peak order.

        Fewer than two peaks give three empty sequences.
        """
        buckets: dict[Category, List[IntervalLabel]] = {c: [] for c in Category}
        for prev, cur in zip(peaks, peaks[1:]):
            category = self.classify_interval(cur.time - prev.time)
            buckets[category].append(IntervalLabel(category, prev.time, cur.time))
        return Classification(
            fast=tuple(buckets[Category.FAST]),
            slow=tuple(buckets[Category.SLOW]),
            normal=tuple(buckets[Category.NORMAL]),
        )


def classify_peaks(
    peaks: Sequence[Peak],
    *,
    slow_interval: float | None = None,
    fast_interval: float | None = None,
    settings: Settings | None = None,
) -> Classification:
    """Classify ``peaks``; explicit cutoffs override ``settings.rhythm``."""
    if settings is None:
        settings = Settings()
    classifier = RhythmClassifier(
        slow_interval=slow_interval if slow_interval is not None else settings.rhythm.slow_interval,
        fast_interval=fast_interval if fast_interval is not None else settings.rhythm.fast_interval,
    )
    return classifier.classify(peaks)
