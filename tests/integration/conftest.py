"""Shared fixtures for buildgraph integration tests.

Inventories live as YAML files under ``tests/fixtures`` and are run through
the same loader, graph builder and projectors the CLI uses.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from buildgraph.analysis.engine import project_edges
from buildgraph.graph.dependency_graph import DependencyGraph
from buildgraph.graph.projectors import add_all_input_output_edges
from buildgraph.inventory.builder import build_graph
from buildgraph.inventory.loader import load_inventory

FIXTURES_DIR = Path(__file__).resolve().parent.parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def fixture_graph() -> Callable[[str], DependencyGraph]:
    """Return a loader: fixture file name -> graph with every edge projected."""

    def _load(name: str) -> DependencyGraph:
        return project_edges(build_graph(load_inventory(FIXTURES_DIR / name)))

    return _load


@pytest.fixture
def fixture_build_graph() -> Callable[[str], DependencyGraph]:
    """Return a loader that projects build input/output edges only."""

    def _load(name: str) -> DependencyGraph:
        graph = build_graph(load_inventory(FIXTURES_DIR / name))
        add_all_input_output_edges(graph)
        return graph

    return _load
