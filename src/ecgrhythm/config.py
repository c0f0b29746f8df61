from __future__ import annotations

"""Configuration utilities for ecgrhythm.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the detection and classification
thresholds, report formatting options, dataset defaults and logging options.
Instances can be populated from environment variables or from YAML/JSON files
with matching nested keys.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import EnvSettingsSource

try:  # pragma: no cover - optional dependency
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_strings(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class DetectionSettings(SectionModel):
    """Peak detection parameters."""

    threshold: float = 0.1


class RhythmSettings(SectionModel):
    """Inter-peak interval cutoffs in seconds.

    Intervals above ``slow_interval`` are Bradycardia, intervals below
    ``fast_interval`` are Tachycardia, anything in between (inclusive) is a
    normal heart rate.
    """

    slow_interval: float = 1.0
    fast_interval: float = 0.6

    @model_validator(mode="after")
    def _check_order(self) -> "RhythmSettings":
        if self.fast_interval > self.slow_interval:
            raise ValueError(
                f"fast_interval ({self.fast_interval}) must not exceed "
                f"slow_interval ({self.slow_interval})"
            )
        return self


class ReportSettings(SectionModel):
    """Report formatting and file naming."""

    separator: str = "**************"
    subject_pattern: str = "{subject}-{category}.txt"
    merged_pattern: str = "{category}-{subject_a}-{subject_b}.txt"


class DatasetSettings(SectionModel):
    """Defaults for where reports go and how subjects are named."""

    output_dir: str = "."
    subjects: list[str] = Field(default_factory=lambda: ["Person-1", "Person-2"])

    @field_validator("subjects", mode="before")
    @classmethod
    def _coerce_subjects(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_strings(value)
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        return value


class LoggingSettings(SectionModel):
    """Logging options for the command line tools."""

    level: str = "INFO"


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    rhythm: RhythmSettings = Field(default_factory=RhythmSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)
    dataset: DatasetSettings = Field(default_factory=DatasetSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="ECGRHYTHM_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        class LegacyEnvSettingsSource(EnvSettingsSource):
            def decode_complex_value(self, field_name, target_field, value):  # type: ignore[override]
                try:
                    return super().decode_complex_value(field_name, target_field, value)
                except json.JSONDecodeError:
                    return value

        env_settings.__class__ = LegacyEnvSettingsSource
        return init_settings, env_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``ECGRHYTHM_*`` environment variables only."""

        return cls()


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("PyYAML is required to load YAML files")
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)
