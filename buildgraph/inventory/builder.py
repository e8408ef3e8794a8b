"""Insert inventory objects into a fresh dependency graph."""

from __future__ import annotations

from buildgraph.graph.dependency_graph import DependencyGraph
from buildgraph.graph.nodes import build_config_node, image_node, image_stream_node
from buildgraph.models.objects import Inventory
from buildgraph.observability.logging import get_logger

_logger = get_logger("inventory.builder")


def build_graph(inventory: Inventory) -> DependencyGraph:
    """Return a graph holding one node per inventory object and no edges.

    Objects are inserted before any projector runs so that projectors find
    the real stream/image nodes instead of synthesizing placeholders.
    """
    graph = DependencyGraph()
    for bc in inventory.build_configs:
        graph.add_node(build_config_node(bc))
    for stream in inventory.image_streams:
        graph.add_node(image_stream_node(stream))
    for image in inventory.images:
        graph.add_node(image_node(image))

    _logger.debug("graph_built", nodes=len(graph))
    return graph
