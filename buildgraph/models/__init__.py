"""Core data structures for buildgraph."""

from buildgraph.models.config import AnalysisConfig, BuildGraphConfig, LogConfig, OutputConfig
from buildgraph.models.markers import Marker, MarkerKey, Severity
from buildgraph.models.objects import (
    BuildConfig,
    Image,
    ImageStream,
    Inventory,
    ObjectReference,
    TagEvent,
)

__all__ = [
    "AnalysisConfig",
    "BuildConfig",
    "BuildGraphConfig",
    "Image",
    "ImageStream",
    "Inventory",
    "LogConfig",
    "Marker",
    "MarkerKey",
    "ObjectReference",
    "OutputConfig",
    "Severity",
    "TagEvent",
]
