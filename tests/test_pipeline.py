import io

import pytest

from ecgrhythm.config import Settings
from ecgrhythm.pipeline import (
    analyse_subject,
    check_subject_names,
    combine_subjects,
    merged_report_paths,
    process_subject,
    run_pair,
    subject_report_paths,
)
from ecgrhythm.report import SEPARATOR, read_report
from ecgrhythm.types import Category

# peaks at 1.0, 1.5, 2.2, 3.5 -> fast, normal, slow
SIGNAL_A = "0 0 1.0 0.9 1.2 0.0 1.5 0.8 1.8 0.0 2.2 0.7 2.6 0.0 3.5 0.9 4.0 0.0\n"
# peaks at 0.5, 1.3, 2.1 -> normal, normal
SIGNAL_B = "0 0\n0.5 0.5\n0.9 0\n1.3 0.4\n1.7 0\n2.1 0.6\n2.5 0\n"


def write_signals(tmp_path):
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text(SIGNAL_A)
    b.write_text(SIGNAL_B)
    return a, b


def test_report_paths_follow_naming():
    settings = Settings()
    paths = subject_report_paths("out", "Person-1", settings)
    assert {c: p.name for c, p in paths.items()} == {
        Category.NORMAL: "Person-1-Normal.txt",
        Category.FAST: "Person-1-Tachycardia.txt",
        Category.SLOW: "Person-1-Bradycardia.txt",
    }
    merged = merged_report_paths("out", "Person-1", "Person-2", settings)
    assert merged[Category.SLOW].name == "Bradycardia-Person-1-Person-2.txt"


def test_analyse_subject():
    analysis = analyse_subject(io.StringIO(SIGNAL_A), "a", Settings())
    assert [p.time for p in analysis.peaks] == [1.0, 1.5, 2.2, 3.5]
    assert len(analysis.classification.fast) == 1
    assert len(analysis.classification.normal) == 1
    assert len(analysis.classification.slow) == 1


def test_process_subject_writes_three_reports(tmp_path):
    a, _ = write_signals(tmp_path)
    result = process_subject(a, "Person-1", tmp_path)

    assert result.ok
    assert set(result.written) == set(Category)
    assert read_report(tmp_path / "Person-1-Tachycardia.txt") == [
        "Tachycardia detected between peaks at 1 and 1.5"
    ]
    assert read_report(tmp_path / "Person-1-Normal.txt") == [
        "Normal heart rate detected between peaks at 1.5 and 2.2"
    ]
    assert read_report(tmp_path / "Person-1-Bradycardia.txt") == [
        "Bradycardia detected between peaks at 2.2 and 3.5"
    ]


def test_process_subject_missing_signal(tmp_path):
    result = process_subject(tmp_path / "missing.txt", "Person-1", tmp_path)
    assert not result.ok
    assert result.analysis is None
    assert result.written == {}
    assert not (tmp_path / "Person-1-Normal.txt").exists()


def test_process_subject_unwritable_output(tmp_path):
    a, _ = write_signals(tmp_path)
    result = process_subject(a, "Person-1", tmp_path / "missing-dir")
    assert result.analysis is not None
    assert len(result.failures) == 3


def test_combine_subjects_reports_missing_category(tmp_path):
    a, b = write_signals(tmp_path)
    process_subject(a, "A", tmp_path)
    process_subject(b, "B", tmp_path)
    (tmp_path / "B-Bradycardia.txt").unlink()

    result = combine_subjects("A", "B", tmp_path)

    assert set(result.written) == {Category.NORMAL, Category.FAST}
    assert len(result.failures) == 1
    assert not (tmp_path / "Bradycardia-A-B.txt").exists()


def test_run_pair(tmp_path):
    a, b = write_signals(tmp_path)
    subjects, merged = run_pair(a, b, tmp_path)

    assert all(s.ok for s in subjects) and merged.ok
    assert read_report(tmp_path / "Normal-Person-1-Person-2.txt") == [
        "Normal heart rate detected between peaks at 1.5 and 2.2",
        SEPARATOR,
        "Normal heart rate detected between peaks at 0.5 and 1.3",
        "Normal heart rate detected between peaks at 1.3 and 2.1",
    ]
    assert read_report(tmp_path / "Bradycardia-Person-1-Person-2.txt") == [
        "Bradycardia detected between peaks at 2.2 and 3.5",
        SEPARATOR,
    ]


def test_run_pair_with_missing_subject_skips_merge(tmp_path):
    a, _ = write_signals(tmp_path)
    # Stale reports from an earlier run
    for path in subject_report_paths(tmp_path, "Y", Settings()).values():
        path.write_text("stale\n")

    subjects, merged = run_pair(a, tmp_path / "missing.txt", tmp_path, names=["X", "Y"])

    assert subjects[0].ok and not subjects[1].ok
    assert not merged.ok and merged.written == {}
    assert not (tmp_path / "Normal-X-Y.txt").exists()


def test_run_pair_uses_configured_names_and_patterns(tmp_path):
    a, b = write_signals(tmp_path)
    settings = Settings()
    settings.dataset.subjects = ["left", "right"]
    settings.report.merged_pattern = "merged_{category}.log"
    settings.report.separator = "====="

    _, merged = run_pair(a, b, tmp_path, settings)
    assert merged.written[Category.FAST].name == "merged_Tachycardia.log"

    assert (tmp_path / "left-Normal.txt").exists()
    assert read_report(tmp_path / "merged_Tachycardia.log") == [
        "Tachycardia detected between peaks at 1 and 1.5",
        "=====",
    ]


@pytest.mark.parametrize("names", [["only"], ["same", "same"]])
def test_run_pair_rejects_bad_names(tmp_path, names):
    a, b = write_signals(tmp_path)
    with pytest.raises(ValueError):
        run_pair(a, b, tmp_path, names=names)


def test_check_subject_names():
    assert check_subject_names(["a", "b"]) == ("a", "b")
    with pytest.raises(ValueError):
        check_subject_names(["a", "b", "c"])
