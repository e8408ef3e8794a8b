"""Node factories and unique-name helpers.

Each ``*_node`` function builds a detached node; ``ensure_*`` variants insert
it into a graph (or return the node already there).
"""

from __future__ import annotations

from buildgraph.graph.dependency_graph import DependencyGraph
from buildgraph.graph.models import EdgeKind, GraphNode, NodeKind
from buildgraph.models.objects import BuildConfig, Image, ImageStream


def unique_name(kind: NodeKind, namespace: str, name: str) -> str:
    return GraphNode(kind=kind, namespace=namespace, name=name).unique_name


def build_config_node(bc: BuildConfig) -> GraphNode:
    return GraphNode(kind=NodeKind.BUILD_CONFIG, namespace=bc.namespace, name=bc.name, obj=bc)


def image_stream_node(stream: ImageStream) -> GraphNode:
    return GraphNode(kind=NodeKind.IMAGE_STREAM, namespace=stream.namespace, name=stream.name, obj=stream)


def image_node(image: Image) -> GraphNode:
    return GraphNode(kind=NodeKind.IMAGE, namespace="", name=image.name, obj=image)


def image_stream_tag_node(namespace: str, stream: str, tag: str) -> GraphNode:
    return GraphNode(kind=NodeKind.IMAGE_STREAM_TAG, namespace=namespace, name=f"{stream}:{tag}")


def image_stream_image_node(namespace: str, stream: str, digest: str) -> GraphNode:
    return GraphNode(kind=NodeKind.IMAGE_STREAM_IMAGE, namespace=namespace, name=f"{stream}@{digest}")


def docker_image_node(pull_spec: str) -> GraphNode:
    return GraphNode(kind=NodeKind.DOCKER_IMAGE, namespace="", name=pull_spec)


def ensure_image_stream_node(graph: DependencyGraph, namespace: str, name: str) -> GraphNode:
    """Return the stream node, inserting a synthetic one if it is unknown."""
    return graph.add_node(GraphNode(kind=NodeKind.IMAGE_STREAM, namespace=namespace, name=name))


def ensure_image_node(graph: DependencyGraph, name: str) -> GraphNode:
    """Return the image node, inserting a synthetic one if it is unknown."""
    return graph.add_node(GraphNode(kind=NodeKind.IMAGE, namespace="", name=name))


def find_image_stream(graph: DependencyGraph, node: GraphNode) -> GraphNode | None:
    """Return the image stream that owns a tag or digest view, if present."""
    return graph.find(unique_name(NodeKind.IMAGE_STREAM, node.namespace, node.stream_name))


def owning_image_stream(graph: DependencyGraph, node: GraphNode) -> GraphNode | None:
    """Return the stream a tag view refers to.

    Follows the ImageStreamRef edge, falling back to lookup by name when
    reference edges were not projected.
    """
    for target in graph.successors(node, EdgeKind.IMAGE_STREAM_REF):
        if target.kind == NodeKind.IMAGE_STREAM:
            return target
    return find_image_stream(graph, node)
