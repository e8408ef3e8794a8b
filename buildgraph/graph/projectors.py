"""Edge projectors: derive typed edges from the objects already in the graph.

Projectors only add edges (and the reference nodes those edges need). Running
one twice is a no-op because the graph deduplicates identical edges.
"""

from __future__ import annotations

from buildgraph.graph.dependency_graph import DependencyGraph, GraphError
from buildgraph.graph.models import EdgeKind, GraphNode, NodeKind
from buildgraph.graph.nodes import (
    docker_image_node,
    ensure_image_node,
    ensure_image_stream_node,
    image_node,
    image_stream_image_node,
    image_stream_tag_node,
)
from buildgraph.inventory.references import (
    DEFAULT_TAG,
    InvalidDigestError,
    InvalidReferenceError,
    parse_digest,
    parse_docker_image_reference,
    split_image_stream_image,
    split_image_stream_tag,
)
from buildgraph.inventory.repository import index_repository_images
from buildgraph.models.objects import BuildConfig, Image, ImageStream, ObjectReference
from buildgraph.observability.logging import get_logger

_logger = get_logger("graph.projectors")

# A build can only write to a tag or to an external pull spec.
_OUTPUT_KINDS = frozenset({NodeKind.IMAGE_STREAM_TAG, NodeKind.DOCKER_IMAGE})


def reference_node(ref: ObjectReference, default_namespace: str) -> GraphNode | None:
    """Map an image reference onto a (detached) view node.

    Returns None when the reference cannot be resolved to a known kind.
    """
    if not ref.name:
        return None
    namespace = ref.namespace or default_namespace

    if ref.kind == "ImageStreamTag":
        stream, tag = split_image_stream_tag(ref.name)
        if not stream:
            return None
        return image_stream_tag_node(namespace, stream, tag)
    if ref.kind == "ImageStream":
        return image_stream_tag_node(namespace, ref.name, DEFAULT_TAG)
    if ref.kind == "ImageStreamImage":
        try:
            stream, digest = split_image_stream_image(ref.name)
            parse_digest(digest)
        except (InvalidReferenceError, InvalidDigestError):
            return None
        return image_stream_image_node(namespace, stream, digest)
    if ref.kind == "DockerImage":
        try:
            parse_docker_image_reference(ref.name)
        except InvalidReferenceError:
            return None
        return docker_image_node(ref.name)
    return None


def add_input_output_edges(graph: DependencyGraph, bc_node: GraphNode) -> None:
    """Add BuildInput edges for every declared input and one BuildOutput edge."""
    bc = bc_node.obj
    if not isinstance(bc, BuildConfig):
        return

    inputs = [(f"spec.source.images[{i}].from", ref) for i, ref in enumerate(bc.source_images)]
    if bc.strategy_from is not None:
        inputs.insert(0, ("spec.strategy.from", bc.strategy_from))

    for field_path, ref in inputs:
        target = reference_node(ref, bc.namespace)
        if target is None:
            _logger.debug("input_unresolved", build_config=bc_node.unique_name, kind=ref.kind, name=ref.name)
            continue
        graph.add_edge(bc_node, graph.add_node(target), EdgeKind.BUILD_INPUT, field_path)

    if bc.output_to is None:
        return
    target = reference_node(bc.output_to, bc.namespace)
    if target is None or target.kind not in _OUTPUT_KINDS:
        _logger.debug(
            "output_unresolved",
            build_config=bc_node.unique_name,
            kind=bc.output_to.kind,
            name=bc.output_to.name,
        )
        return
    graph.add_edge(bc_node, graph.add_node(target), EdgeKind.BUILD_OUTPUT, "spec.output.to")


def add_all_input_output_edges(graph: DependencyGraph) -> None:
    """Project build inputs and outputs for every build config in the graph."""
    for bc_node in graph.nodes(NodeKind.BUILD_CONFIG):
        try:
            add_input_output_edges(graph, bc_node)
        except GraphError as exc:
            _logger.warning("build_projection_failed", build_config=bc_node.unique_name, error=str(exc))


def add_image_stream_tag_ref_edge(graph: DependencyGraph, ist_node: GraphNode) -> None:
    """Link a tag view to its image stream, synthesizing the stream if absent."""
    stream_node = ensure_image_stream_node(graph, ist_node.namespace, ist_node.stream_name)
    graph.add_edge(ist_node, stream_node, EdgeKind.IMAGE_STREAM_REF, "metadata.name")


def add_image_stream_ref_edges(
    graph: DependencyGraph,
    is_node: GraphNode,
    repository_images: list[Image] | None = None,
) -> None:
    """Record a stream's tags, the images they resolve to and its repository images."""
    stream = is_node.obj
    if not isinstance(stream, ImageStream):
        return

    for tag in stream.tags:
        ist_node = graph.add_node(image_stream_tag_node(stream.namespace, stream.name, tag))
        graph.add_edge(is_node, ist_node, EdgeKind.CONTAINS, "status.tags")
        graph.add_edge(ist_node, is_node, EdgeKind.IMAGE_STREAM_REF, "metadata.name")

        event = stream.latest_event(tag)
        if event is not None and event.image:
            target = ensure_image_node(graph, event.image)
            graph.add_edge(is_node, target, EdgeKind.IMAGE_STREAM_REF, f"status.tags[{tag}].items[0].image")

    for image in repository_images or []:
        target = graph.add_node(image_node(image))
        graph.add_edge(is_node, target, EdgeKind.REPOSITORY_IMAGE, "dockerImageReference")


def add_all_image_stream_ref_edges(graph: DependencyGraph) -> None:
    """Project image stream references for the whole graph.

    Streams from the inventory are expanded first; afterwards every tag view
    in the graph (including build outputs pointing at missing streams) gets
    its ImageStreamRef edge.
    """
    images = [n.obj for n in graph.nodes(NodeKind.IMAGE) if isinstance(n.obj, Image)]
    index = index_repository_images(images)

    for is_node in graph.nodes(NodeKind.IMAGE_STREAM):
        if not is_node.found:
            continue
        try:
            add_image_stream_ref_edges(graph, is_node, index.get((is_node.namespace, is_node.name)))
        except GraphError as exc:
            _logger.warning("image_stream_projection_failed", image_stream=is_node.unique_name, error=str(exc))

    for ist_node in graph.nodes(NodeKind.IMAGE_STREAM_TAG):
        try:
            add_image_stream_tag_ref_edge(graph, ist_node)
        except GraphError as exc:
            _logger.warning("image_stream_tag_projection_failed", image_stream_tag=ist_node.unique_name, error=str(exc))
