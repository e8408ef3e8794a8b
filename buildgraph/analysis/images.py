"""Images a build config has produced."""

from __future__ import annotations

from buildgraph.graph.dependency_graph import DependencyGraph
from buildgraph.graph.models import EdgeKind, GraphNode, NodeKind
from buildgraph.graph.nodes import owning_image_stream


def produced_images(graph: DependencyGraph, bc_node: GraphNode) -> list[GraphNode]:
    """Return the managed images stored in the repository a build writes to.

    Only RepositoryImage edges count, so externally managed images and images
    pushed to another namespace or stream are never included. Builds writing
    to an external pull spec have no managed images.
    """
    images: list[GraphNode] = []
    for output in graph.successors(bc_node, EdgeKind.BUILD_OUTPUT):
        if output.kind != NodeKind.IMAGE_STREAM_TAG:
            continue
        stream_node = owning_image_stream(graph, output)
        if stream_node is None:
            continue
        images.extend(graph.successors(stream_node, EdgeKind.REPOSITORY_IMAGE))
    return images
