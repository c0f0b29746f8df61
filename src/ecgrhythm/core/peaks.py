"""Amplitude peak detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..config import Settings
from ..ingest import SignalStore
from ..types import Peak

DEFAULT_THRESHOLD = 0.1


@dataclass(frozen=True)
class PeakDetector:
    """Strict local-maximum detector with a fixed amplitude floor.

    A sample ``i`` with ``1 <= i <= n - 2`` is a peak when its amplitude is
    above ``threshold`` and strictly greater than both neighbours.  The first
    and last samples are never peaks, and two equal adjacent maxima are both
    rejected.
    """

    threshold: float = DEFAULT_THRESHOLD

    def detect(self, store: SignalStore) -> Tuple[Peak, ...]:
        amp = store.amplitudes
        if amp.shape[0] < 3:
            return ()
        mid = amp[1:-1]
        mask = (mid > self.threshold) & (mid > amp[:-2]) & (mid > amp[2:])
        indices = np.flatnonzero(mask) + 1
        return tuple(Peak(int(i), float(store.times[i])) for i in indices)


def detect_peaks(
    store: SignalStore,
    *,
    threshold: float | None = None,
    settings: Settings | None = None,
) -> Tuple[Peak, ...]:
    """Detect peaks in ``store``.

    ``threshold`` takes precedence over ``settings.detection.threshold``.
    """
    if threshold is None:
        if settings is None:
            settings = Settings()
        threshold = settings.detection.threshold
    return PeakDetector(threshold=threshold).detect(store)
