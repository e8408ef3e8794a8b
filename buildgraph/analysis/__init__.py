"""Detectors for structural build/image problems.

Submodules:
    unpushable  -- build outputs that cannot be pushed.
    circular    -- build configs that depend on their own output.
    images      -- managed images produced by a build config.
    engine      -- detector registry and the full analysis pass.
"""

from buildgraph.analysis.circular import find_circular_build_cycles, find_circular_builds
from buildgraph.analysis.engine import (
    DETECTORS,
    AnalysisEngine,
    AnalysisMeta,
    AnalysisReport,
    analyze_inventory,
    project_edges,
)
from buildgraph.analysis.images import produced_images
from buildgraph.analysis.unpushable import find_unpushable_build_configs

__all__ = [
    "DETECTORS",
    "AnalysisEngine",
    "AnalysisMeta",
    "AnalysisReport",
    "analyze_inventory",
    "find_circular_build_cycles",
    "find_circular_builds",
    "find_unpushable_build_configs",
    "produced_images",
    "project_edges",
]
