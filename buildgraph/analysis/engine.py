"""Detector registry and the analysis pass.

``DETECTORS`` lists the built-in detectors by name. An ``AnalysisEngine`` is
built from an explicit selection (usually ``config.analysis.detectors``) and
runs them in that order over one fully projected graph.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from buildgraph.analysis.circular import find_circular_builds
from buildgraph.analysis.unpushable import find_unpushable_build_configs
from buildgraph.graph.dependency_graph import DependencyGraph
from buildgraph.graph.projectors import add_all_image_stream_ref_edges, add_all_input_output_edges
from buildgraph.inventory.builder import build_graph
from buildgraph.models.markers import Marker
from buildgraph.models.objects import Inventory
from buildgraph.observability.logging import get_logger

Detector = Callable[[DependencyGraph], list[Marker]]

DETECTORS: dict[str, Detector] = {
    "unpushable": find_unpushable_build_configs,
    "circular": find_circular_builds,
}

_logger = get_logger("analysis.engine")


@dataclass
class AnalysisMeta:
    """Bookkeeping returned alongside the markers of one pass."""

    detectors_run: int = 0
    markers_found: int = 0
    duration_ms: float = 0.0
    warnings: list[str] = field(default_factory=list)


@dataclass
class AnalysisReport:
    """Everything one analysis pass produced."""

    graph: DependencyGraph
    markers: list[Marker]
    meta: AnalysisMeta


class AnalysisEngine:
    """Runs a fixed, ordered list of detectors over a graph."""

    def __init__(self, detectors: Sequence[tuple[str, Detector]]) -> None:
        self._detectors = list(detectors)

    @classmethod
    def from_names(cls, names: Sequence[str]) -> AnalysisEngine:
        """Select built-in detectors by name, keeping the given order.

        Raises:
            ValueError: for a name not in ``DETECTORS``.
        """
        unknown = [name for name in names if name not in DETECTORS]
        if unknown:
            raise ValueError(f"Unknown detectors: {', '.join(unknown)}. Must be among {sorted(DETECTORS)}")
        return cls([(name, DETECTORS[name]) for name in names])

    @property
    def detector_names(self) -> list[str]:
        return [name for name, _ in self._detectors]

    def evaluate(self, graph: DependencyGraph) -> tuple[list[Marker], AnalysisMeta]:
        """Run every detector and concatenate their markers in run order.

        A detector that raises is logged and skipped; the others still run.
        """
        t_start = time.monotonic()
        meta = AnalysisMeta()
        markers: list[Marker] = []

        for name, detector in self._detectors:
            try:
                found = detector(graph)
            except Exception as exc:
                _logger.error("detector_failed", detector=name, error=str(exc), exc_info=True)
                meta.warnings.append(f"detector {name} failed: {exc}")
                continue
            meta.detectors_run += 1
            markers.extend(found)
            _logger.debug("detector_complete", detector=name, markers=len(found))

        meta.markers_found = len(markers)
        meta.duration_ms = (time.monotonic() - t_start) * 1000.0
        return markers, meta


def project_edges(graph: DependencyGraph) -> DependencyGraph:
    """Run both edge projectors; returns ``graph`` for chaining."""
    add_all_input_output_edges(graph)
    add_all_image_stream_ref_edges(graph)
    return graph


def analyze_inventory(inventory: Inventory, engine: AnalysisEngine) -> AnalysisReport:
    """Build the graph for ``inventory``, project its edges and run ``engine``."""
    graph = project_edges(build_graph(inventory))
    markers, meta = engine.evaluate(graph)
    _logger.info(
        "analysis_complete",
        detectors=engine.detector_names,
        markers=meta.markers_found,
        duration_ms=round(meta.duration_ms, 2),
    )
    return AnalysisReport(graph=graph, markers=markers, meta=meta)
