"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from buildgraph.analysis.engine import DETECTORS
from buildgraph.models.config import AnalysisConfig, BuildGraphConfig, LogConfig, OutputConfig

_DEFAULT_DETECTORS = "unpushable,circular"


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"BUILDGRAPH_{key}", default)


def _env_list(key: str, default: str) -> list[str]:
    return [item.strip() for item in _env(key, default).split(",") if item.strip()]


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_output_format(value: str) -> str:
    valid = {"text", "json"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid output format: {value}. Must be one of {valid}")
    return value.lower()


def _validate_detectors(values: list[str]) -> list[str]:
    if not values:
        raise ValueError("At least one detector must be enabled")
    unknown = [v for v in values if v not in DETECTORS]
    if unknown:
        raise ValueError(f"Invalid detectors: {unknown}. Must be among {sorted(DETECTORS)}")
    return values


def load_config() -> BuildGraphConfig:
    """Load configuration from BUILDGRAPH_* environment variables."""
    return BuildGraphConfig(
        analysis=AnalysisConfig(
            detectors=_validate_detectors(_env_list("DETECTORS", _DEFAULT_DETECTORS)),
        ),
        output=OutputConfig(
            format=_validate_output_format(_env("OUTPUT_FORMAT", "text")),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "warning")),
        ),
    )
