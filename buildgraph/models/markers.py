"""Diagnostic markers emitted by the detectors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from buildgraph.graph.models import GraphNode


class Severity(StrEnum):
    """Marker severity level."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class MarkerKey(StrEnum):
    """Problem taxonomy. Consumers match on these values; never rename them."""

    MISSING_REQUIRED_REGISTRY = "MissingRequiredRegistryErr"
    MISSING_IMAGE_STREAM = "MissingImageStreamErr"
    CIRCULAR_BUILD = "CircularBuildErr"


@dataclass(frozen=True)
class Marker:
    """A structural problem anchored to a node of the graph.

    Contract between the detectors and every consumer (CLI text, JSON output).
    """

    key: MarkerKey
    node: GraphNode
    related_nodes: tuple[GraphNode, ...] = ()
    severity: Severity = Severity.ERROR
    message: str = ""
    suggestion: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "key": str(self.key),
            "severity": str(self.severity),
            "node": self.node.unique_name,
            "related_nodes": [n.unique_name for n in self.related_nodes],
            "message": self.message,
            "suggestion": self.suggestion,
        }
