"""Utilities for ingesting raw ECG signal files."""

from .signal import load_signal, SignalStore, SignalLoadError

__all__ = [
    "load_signal",
    "SignalStore",
    "SignalLoadError",
]
