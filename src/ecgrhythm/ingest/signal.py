# src/ecgrhythm/ingest/signal.py
"""Loader for raw ECG signal files.

The input is a stream of whitespace separated numbers read two at a time::

   <time> <amplitude>
   <time> <amplitude> <time> <amplitude>

Newlines carry no meaning.  Reading stops at the first token that is not a
plain decimal number made of ASCII digits (or at a time value with no
amplitude after it); the pairs read up to that point form the signal.  Tokens
are judged whole: a number followed by a suffix, such as ``3abc``, is
unparsable and its numeric prefix is not used.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, TextIO, Tuple, Union
import logging
import pathlib
import re

import numpy as np

from ..types import Sample

logger = logging.getLogger(__name__)

# Optional sign, ASCII digits with optional fraction (or a bare fraction), optional exponent
NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)


class SignalLoadError(OSError):
    """Raised when a signal file cannot be opened or read."""

    def __init__(self, message: str, *, path: Union[str, pathlib.Path]):
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")


@dataclass(frozen=True, eq=False)
class SignalStore:
    """Ordered samples of one subject.

    ``times`` and ``amplitudes`` are read-only ``float64`` arrays of equal
    length.  Ordering by time is assumed, never re-sorted.
    """

    subject: str
    times: np.ndarray
    amplitudes: np.ndarray

    def __post_init__(self) -> None:
        times = np.array(self.times, dtype=float).reshape(-1)
        amps = np.array(self.amplitudes, dtype=float).reshape(-1)
        if times.shape != amps.shape:
            raise ValueError("times and amplitudes must have the same length")
        times.flags.writeable = False
        amps.flags.writeable = False
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "amplitudes", amps)

    def __len__(self) -> int:
        return int(self.times.shape[0])

    def sample(self, index: int) -> Sample:
        return Sample(float(self.times[index]), float(self.amplitudes[index]))

    @property
    def samples(self) -> Tuple[Sample, ...]:
        return tuple(Sample(float(t), float(a)) for t, a in zip(self.times, self.amplitudes))

    @classmethod
    def from_samples(cls, samples, subject: str = "") -> "SignalStore":
        """Build a store from ``(time, amplitude)`` pairs."""

        pairs = [(float(t), float(a)) for t, a in samples]
        times = [t for t, _ in pairs]
        amps = [a for _, a in pairs]
        return cls(subject=subject, times=np.asarray(times), amplitudes=np.asarray(amps))


def _tokens(fh: TextIO) -> Iterator[str]:
    for raw in fh:
        yield from raw.split()


def _read_pairs(fh: TextIO, *, path: Union[str, pathlib.Path] = "<stream>") -> Tuple[list, list]:
    times: list = []
    amps: list = []
    pending: Optional[float] = None
    for token in _tokens(fh):
        if not NUMBER_RE.match(token):
            logger.warning("Stopped reading %s at unparsable token %r", path, token)
            break
        value = float(token)
        if pending is None:
            pending = value
            continue
        times.append(pending)
        amps.append(value)
        pending = None
    else:
        if pending is not None:
            logger.warning("Ignoring trailing time value without amplitude in %s", path)
    return times, amps


def load_signal(
    source: Union[str, pathlib.Path, TextIO],
    *,
    subject: Optional[str] = None,
) -> SignalStore:
    """Load a :class:`SignalStore` from a path or an open text stream.

    ``subject`` defaults to the file stem (or ``""`` for streams).
    :class:`SignalLoadError` is raised when the file cannot be opened or read.
    """
    if isinstance(source, (str, pathlib.Path)):
        p = pathlib.Path(source)
        try:
            with open(p, "r", encoding="utf8") as fh:
                times, amps = _read_pairs(fh, path=p)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to open file: %s", p)
            raise SignalLoadError(f"failed to read signal: {exc}", path=p) from exc
        name = subject if subject is not None else p.stem
        label = str(p)
    else:
        times, amps = _read_pairs(source)
        name = subject if subject is not None else ""
        label = getattr(source, "name", "<stream>")

    store = SignalStore(subject=name, times=np.asarray(times, dtype=float), amplitudes=np.asarray(amps, dtype=float))
    logger.info("Data loaded from %s. Total records: %d", label, len(store))
    return store
