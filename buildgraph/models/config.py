"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class AnalysisConfig:
    """Which detectors an analysis pass runs, in order."""

    detectors: list[str] = field(default_factory=lambda: ["unpushable", "circular"])


@dataclass
class OutputConfig:
    """CLI output configuration."""

    format: str = "text"


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "warning"


@dataclass
class BuildGraphConfig:
    """Top-level buildgraph configuration."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log: LogConfig = field(default_factory=LogConfig)
