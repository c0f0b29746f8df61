from __future__ import annotations

"""Command line interface for ecgrhythm using Typer."""

from pathlib import Path
from typing import Dict, List, Optional

import json
import logging

import typer
from pydantic import ValidationError

from .config import Settings, load_settings
from .ingest import SignalLoadError
from .pipeline import (
    CATEGORY_ORDER,
    analyse_subject,
    check_subject_names,
    process_subject,
    run_pair,
)
from .report import ReportIOError, format_labels, merge_report_files
from .utils.logging import get_logger

app = typer.Typer(help="ECG peak detection and heart-rate rhythm reports")
logger = logging.getLogger(__name__)


def _parse_override_value(raw: str) -> object:
    lower = raw.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"null", "none"}:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    if raw.startswith("[") or raw.startswith("{"):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            raise typer.BadParameter(f"invalid JSON override value: {raw}") from None
    return raw


def _ensure_path(settings: Settings, keys: List[str]) -> None:
    current: object = settings
    for key in keys[:-1]:
        if not hasattr(current, key):
            raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")
        current = getattr(current, key)
    if not hasattr(current, keys[-1]):
        raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}")


def _apply_override(data: Dict[str, object], keys: List[str], value: object) -> None:
    target = data
    for key in keys[:-1]:
        existing = target.get(key)
        if not isinstance(existing, dict):
            existing = {}
            target[key] = existing
        target = existing
    target[keys[-1]] = value


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings()


@app.callback()
def init(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        dir_okay=False,
        file_okay=True,
        exists=False,
        help="Path to a YAML or JSON configuration file.",
    ),
    set_overrides: List[str] = typer.Option(
        [],
        "--set",
        help="Override configuration values using dotted paths, e.g. rhythm.slow_interval=0.85",
    ),
) -> None:
    """Initialise the Typer context with validated settings."""

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}")

    try:
        if config is not None:
            settings = load_settings(config)
        elif isinstance(ctx.obj, Settings):
            settings = ctx.obj
        else:
            settings = Settings()
    except (RuntimeError, TypeError, ValidationError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}") from exc

    if set_overrides:
        data = settings.model_dump()
        for override in set_overrides:
            if "=" not in override:
                raise typer.BadParameter(
                    "overrides must be of the form --set section.key=value"
                )
            key, raw_value = override.split("=", 1)
            if not key:
                raise typer.BadParameter("override key cannot be empty")
            keys = key.split(".")
            _ensure_path(settings, keys)
            value = _parse_override_value(raw_value)
            _apply_override(data, keys, value)
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}") from exc

    try:
        logging.getLogger("ecgrhythm").setLevel(settings.logging.level.upper())
    except ValueError as exc:
        raise typer.BadParameter(f"invalid logging level: {settings.logging.level}") from exc
    logger.debug("Using configuration %s", config or "<defaults>")

    ctx.obj = settings


@app.command()
def detect(ctx: typer.Context, signal: Path) -> None:
    """Print the peaks detected in SIGNAL as ``index time`` pairs."""

    cfg = _settings(ctx)
    try:
        analysis = analyse_subject(signal, signal.stem, cfg)
    except SignalLoadError as exc:
        typer.secho(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Samples: {len(analysis.store)}, peaks: {len(analysis.peaks)}")
    for peak in analysis.peaks:
        typer.echo(f"{peak.index} {peak.time:g}")


@app.command()
def classify(ctx: typer.Context, signal: Path) -> None:
    """Print the rhythm report lines for SIGNAL grouped by category."""

    cfg = _settings(ctx)
    try:
        analysis = analyse_subject(signal, signal.stem, cfg)
    except SignalLoadError as exc:
        typer.secho(str(exc), err=True)
        raise typer.Exit(code=1)
    for category in CATEGORY_ORDER:
        labels = analysis.classification.for_category(category)
        typer.echo(f"[{category.tag}] {len(labels)}")
        for line in format_labels(labels):
            typer.echo(line)


@app.command()
def process(
    ctx: typer.Context,
    signal: Path,
    subject: Optional[str] = typer.Option(None, "--subject", "-s", help="Defaults to the file stem."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", file_okay=False),
) -> None:
    """Write the Normal, Tachycardia and Bradycardia reports for one subject."""

    cfg = _settings(ctx)
    out = output_dir if output_dir is not None else Path(cfg.dataset.output_dir)
    result = process_subject(signal, subject or signal.stem, out, cfg)
    for path in result.written.values():
        typer.echo(f"Results written to {path}")
    for failure in result.failures:
        typer.secho(failure, err=True)
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def merge(
    ctx: typer.Context,
    report_a: Path,
    report_b: Path,
    output: Path = typer.Option(..., "--output", "-o", dir_okay=False),
) -> None:
    """Write REPORT_A, a separator line, then REPORT_B to OUTPUT."""

    cfg = _settings(ctx)
    try:
        merge_report_files(output, report_a, report_b, separator=cfg.report.separator)
    except ReportIOError as exc:
        typer.secho(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Results written to {output}")


@app.command()
def run(
    ctx: typer.Context,
    signal_a: Path,
    signal_b: Path,
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", file_okay=False),
    names: Optional[str] = typer.Option(
        None, "--names", help="Comma separated subject names, e.g. Person-1,Person-2"
    ),
) -> None:
    """Process two subjects and merge their reports per category.

    Per-subject reports are named ``<Subject>-<Category>.txt`` and merged
    reports ``<Category>-<SubjectA>-<SubjectB>.txt`` unless the ``report``
    configuration section says otherwise.
    """

    cfg = _settings(ctx)
    out = output_dir if output_dir is not None else Path(cfg.dataset.output_dir)
    subject_names = (
        [n.strip() for n in names.split(",") if n.strip()] if names else cfg.dataset.subjects
    )
    try:
        check_subject_names(subject_names)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--names") from exc
    subjects, merged = run_pair(signal_a, signal_b, out, cfg, names=subject_names)

    failures = [f for s in subjects for f in s.failures] + merged.failures
    for failure in failures:
        typer.secho(failure, err=True)
    for subject in subjects:
        if subject.analysis is not None:
            c = subject.analysis.classification
            typer.echo(
                f"{subject.subject}: {len(subject.analysis.peaks)} peaks, "
                f"{len(c.normal)} normal, {len(c.fast)} tachycardia, {len(c.slow)} bradycardia"
            )
    for path in merged.written.values():
        typer.echo(f"Results written to {path}")
    typer.echo("Processing completed!")
    if failures:
        raise typer.Exit(code=1)


def main() -> None:  # pragma: no cover - console entry point
    get_logger("ecgrhythm")
    app()
