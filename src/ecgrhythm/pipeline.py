"""End-to-end processing of subjects: load, detect, classify, report, merge.

Each file operation is independent.  A failure to read or write one file is
logged and recorded on the returned result, and the remaining subjects and
categories are still processed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, TextIO, Tuple, Union
import logging

from .config import Settings
from .core import PeakDetector, RhythmClassifier
from .ingest import SignalLoadError, SignalStore, load_signal
from .report import ReportIOError, format_labels, merge_report_files, write_report
from .types import Category, Classification, Peak

logger = logging.getLogger(__name__)

Source = Union[str, Path, TextIO]

# Order in which per-subject reports are written and merged
CATEGORY_ORDER: Tuple[Category, ...] = (Category.NORMAL, Category.FAST, Category.SLOW)


@dataclass(frozen=True)
class SubjectAnalysis:
    """In-memory result of analysing one subject's signal."""

    store: SignalStore
    peaks: Tuple[Peak, ...]
    classification: Classification


@dataclass
class SubjectResult:
    """Outcome of :func:`process_subject`."""

    subject: str
    analysis: Optional[SubjectAnalysis] = None
    written: Dict[Category, Path] = field(default_factory=dict)
    failures: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass
class MergeResult:
    """Outcome of :func:`combine_subjects`."""

    written: Dict[Category, Path] = field(default_factory=dict)
    failures: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def subject_report_paths(
    output_dir: Union[str, Path], subject: str, settings: Settings
) -> Dict[Category, Path]:
    """Return the per-category report path for ``subject``."""

    out = Path(output_dir)
    pattern = settings.report.subject_pattern
    return {c: out / pattern.format(subject=subject, category=c.tag) for c in CATEGORY_ORDER}


def merged_report_paths(
    output_dir: Union[str, Path], subject_a: str, subject_b: str, settings: Settings
) -> Dict[Category, Path]:
    """Return the per-category merged report path for two subjects."""

    out = Path(output_dir)
    pattern = settings.report.merged_pattern
    return {
        c: out / pattern.format(category=c.tag, subject_a=subject_a, subject_b=subject_b)
        for c in CATEGORY_ORDER
    }


def analyse_subject(source: Source, subject: str, settings: Settings) -> SubjectAnalysis:
    """Load ``source`` and run peak detection and classification."""

    store = load_signal(source, subject=subject)
    peaks = PeakDetector(threshold=settings.detection.threshold).detect(store)
    classifier = RhythmClassifier(
        slow_interval=settings.rhythm.slow_interval,
        fast_interval=settings.rhythm.fast_interval,
    )
    classification = classifier.classify(peaks)
    logger.debug(
        "%s: %d peaks, %d fast, %d slow, %d normal intervals",
        subject,
        len(peaks),
        len(classification.fast),
        len(classification.slow),
        len(classification.normal),
    )
    return SubjectAnalysis(store=store, peaks=peaks, classification=classification)


def process_subject(
    source: Source,
    subject: str,
    output_dir: Union[str, Path],
    settings: Optional[Settings] = None,
) -> SubjectResult:
    """Analyse one subject and write its three category reports."""

    if settings is None:
        settings = Settings()
    result = SubjectResult(subject=subject)
    try:
        result.analysis = analyse_subject(source, subject, settings)
    except SignalLoadError as exc:
        logger.error("Skipping subject %s: %s", subject, exc)
        result.failures.append(str(exc))
        return result

    for category, path in subject_report_paths(output_dir, subject, settings).items():
        lines = format_labels(result.analysis.classification.for_category(category))
        try:
            result.written[category] = write_report(path, lines)
        except ReportIOError as exc:
            logger.error("Could not write %s report for %s: %s", category.tag, subject, exc)
            result.failures.append(str(exc))
    return result


def combine_subjects(
    subject_a: str,
    subject_b: str,
    output_dir: Union[str, Path],
    settings: Optional[Settings] = None,
) -> MergeResult:
    """Merge the per-category reports of two subjects already in ``output_dir``."""

    if settings is None:
        settings = Settings()
    result = MergeResult()
    sources_a = subject_report_paths(output_dir, subject_a, settings)
    sources_b = subject_report_paths(output_dir, subject_b, settings)
    destinations = merged_report_paths(output_dir, subject_a, subject_b, settings)
    for category, destination in destinations.items():
        try:
            result.written[category] = merge_report_files(
                destination,
                sources_a[category],
                sources_b[category],
                separator=settings.report.separator,
            )
        except ReportIOError as exc:
            logger.error("Could not merge %s reports: %s", category.tag, exc)
            result.failures.append(str(exc))
    return result


def check_subject_names(names: Sequence[str]) -> Tuple[str, str]:
    """Return the two subject names, rejecting any other count or duplicates."""

    if len(names) != 2:
        raise ValueError(f"exactly two subject names are required, got {len(names)}")
    name_a, name_b = names
    if name_a == name_b:
        raise ValueError("subject names must differ")
    return name_a, name_b


def run_pair(
    source_a: Source,
    source_b: Source,
    output_dir: Union[str, Path],
    settings: Optional[Settings] = None,
    names: Optional[Sequence[str]] = None,
) -> Tuple[List[SubjectResult], MergeResult]:
    """Process two subjects and merge their reports category by category.

    ``names`` defaults to ``settings.dataset.subjects``.  When either signal
    cannot be loaded no category is merged at all, even where both subjects'
    report files exist in ``output_dir``: those files may be left over from an
    earlier run.  The skipped merge is recorded as a failure on the returned
    :class:`MergeResult`.  Call :func:`combine_subjects` directly to merge
    whatever reports are present.
    """

    if settings is None:
        settings = Settings()
    if names is None:
        names = settings.dataset.subjects
    name_a, name_b = check_subject_names(names)

    subjects = [
        process_subject(source_a, name_a, output_dir, settings),
        process_subject(source_b, name_b, output_dir, settings),
    ]
    missing = [s.subject for s in subjects if s.analysis is None]
    if missing:
        # Reports left in output_dir by an earlier run must not be merged
        merged = MergeResult(failures=[f"merge skipped, no signal for: {', '.join(missing)}"])
        logger.error(merged.failures[0])
    else:
        merged = combine_subjects(name_a, name_b, output_dir, settings)
    return subjects, merged
