"""Build/image dependency graph.

Provides the in-memory typed graph, node factories and the edge projectors
that derive build input/output and image stream reference edges from the
objects inserted as nodes.
"""

from buildgraph.graph.dependency_graph import DependencyGraph, GraphError, MissingNodeError
from buildgraph.graph.models import EdgeKind, GraphEdge, GraphNode, NodeKind
from buildgraph.graph.projectors import add_all_image_stream_ref_edges, add_all_input_output_edges

__all__ = [
    "DependencyGraph",
    "EdgeKind",
    "GraphEdge",
    "GraphError",
    "GraphNode",
    "MissingNodeError",
    "NodeKind",
    "add_all_image_stream_ref_edges",
    "add_all_input_output_edges",
]
