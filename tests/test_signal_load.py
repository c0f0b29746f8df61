import io
import logging

import numpy as np
import pytest

from ecgrhythm.ingest import SignalLoadError, SignalStore, load_signal
from ecgrhythm.types import Sample


def test_load_signal_pairs_per_line(tmp_path):
    path = tmp_path / "person1.txt"
    path.write_text("0 0\n1 0.5\n2 0.05\n3 0.6\n4 0.05\n")

    store = load_signal(path)

    assert store.subject == "person1"
    assert len(store) == 5
    assert store.samples[1] == Sample(1.0, 0.5)
    np.testing.assert_array_equal(store.times, [0, 1, 2, 3, 4])


def test_load_signal_ignores_newline_layout():
    stream = io.StringIO("0.0 0.1 0.004\n0.2\n\n0.008 -0.3e-1")

    store = load_signal(stream, subject="s")

    assert store.samples == (Sample(0.0, 0.1), Sample(0.004, 0.2), Sample(0.008, -0.03))


def test_load_signal_stops_at_first_bad_token(caplog):
    stream = io.StringIO("0 1\n1 2\n2 oops\n3 4\n")

    with caplog.at_level(logging.WARNING, logger="ecgrhythm"):
        store = load_signal(stream)

    assert store.samples == (Sample(0.0, 1.0), Sample(1.0, 2.0))
    assert "oops" in caplog.text


def test_load_signal_drops_dangling_time():
    store = load_signal(io.StringIO("0 1 1 2 5"))
    assert len(store) == 2


@pytest.mark.parametrize("token", ["nan", "inf", "1,5", "0x10", "3abc", "\u0663"])
def test_load_signal_rejects_non_decimal_tokens(token):
    store = load_signal(io.StringIO(f"0 1 {token} 2 3 4"))
    assert len(store) == 1


def test_load_signal_empty_source():
    store = load_signal(io.StringIO(""))
    assert len(store) == 0


def test_load_signal_missing_file(tmp_path):
    missing = tmp_path / "missing.txt"
    with pytest.raises(SignalLoadError) as excinfo:
        load_signal(missing)
    assert isinstance(excinfo.value, OSError)
    assert excinfo.value.path == str(missing)
    assert str(missing) in str(excinfo.value)


def test_load_signal_logs_record_count(tmp_path, caplog):
    path = tmp_path / "p.txt"
    path.write_text("0 0 1 1")
    with caplog.at_level(logging.INFO, logger="ecgrhythm"):
        load_signal(path)
    assert f"Data loaded from {path}. Total records: 2" in caplog.text


def test_store_is_read_only():
    store = SignalStore.from_samples([(0, 1), (1, 2)], subject="s")
    with pytest.raises(ValueError):
        store.amplitudes[0] = 5.0
    with pytest.raises(AttributeError):
        store.subject = "other"  # type: ignore[misc]


def test_store_length_mismatch():
    with pytest.raises(ValueError):
        SignalStore(subject="s", times=np.array([0.0, 1.0]), amplitudes=np.array([1.0]))


def test_load_signal_numeric_prefix_is_not_used():
    store = load_signal(io.StringIO("0 1 2 3abc 4 5"))
    assert store.samples == (Sample(0.0, 1.0),)
