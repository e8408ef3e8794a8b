"""Build configs that depend on themselves through their images.

Build A feeds build B when an image A writes is an image B reads. The
derived build-to-build view is a separate networkx DiGraph; the dependency
graph itself is left untouched. Every strongly connected component with more
than one member, or a single member with a self-loop, is a cycle.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace

import networkx as nx

from buildgraph.graph.dependency_graph import DependencyGraph
from buildgraph.graph.models import EdgeKind, GraphNode, NodeKind
from buildgraph.graph.nodes import owning_image_stream
from buildgraph.inventory.references import DEFAULT_TAG, InvalidReferenceError, parse_docker_image_reference
from buildgraph.models.markers import Marker, MarkerKey, Severity
from buildgraph.models.objects import ImageStream
from buildgraph.observability.logging import get_logger

_logger = get_logger("analysis.circular")


def image_identities(graph: DependencyGraph, node: GraphNode) -> set[str]:
    """Return every identity under which ``node`` names an image.

    A tag also names the image its stream currently resolves it to, so a
    build reading ``stream@digest`` depends on the build writing the tag.
    A pull spec without tag or digest names its ``latest`` tag.
    """
    identities = {node.unique_name}
    if node.kind == NodeKind.IMAGE_STREAM_TAG:
        stream_node = owning_image_stream(graph, node)
        if stream_node is not None and isinstance(stream_node.obj, ImageStream):
            event = stream_node.obj.latest_event(node.tag)
            if event is not None and event.image:
                identities.add(f"{node.namespace}/{node.stream_name}@{event.image}")
    elif node.kind == NodeKind.IMAGE_STREAM_IMAGE:
        identities.add(f"{node.namespace}/{node.name}")
    elif node.kind == NodeKind.DOCKER_IMAGE:
        try:
            ref = parse_docker_image_reference(node.name)
        except InvalidReferenceError:
            return identities
        if not ref.tag and not ref.id:
            ref = replace(ref, tag=DEFAULT_TAG)
        identities.add(f"{NodeKind.DOCKER_IMAGE}|{ref}")
    return identities


def build_dependency_view(graph: DependencyGraph) -> nx.DiGraph:
    """Contract image nodes away, leaving producer -> consumer build edges."""
    view = nx.DiGraph()
    producers: dict[str, list[str]] = defaultdict(list)
    bc_nodes = graph.nodes(NodeKind.BUILD_CONFIG)

    for bc_node in bc_nodes:
        view.add_node(bc_node.unique_name)
        for output in graph.successors(bc_node, EdgeKind.BUILD_OUTPUT):
            for identity in image_identities(graph, output):
                producers[identity].append(bc_node.unique_name)

    for bc_node in bc_nodes:
        for source in graph.successors(bc_node, EdgeKind.BUILD_INPUT):
            for identity in image_identities(graph, source):
                for producer in producers.get(identity, ()):
                    view.add_edge(producer, bc_node.unique_name)

    return view


def find_circular_build_cycles(graph: DependencyGraph) -> list[list[GraphNode]]:
    """Return each build cycle as a list of build config nodes.

    Members and cycles are ordered by build config insertion order.
    """
    view = build_dependency_view(graph)
    order = {name: index for index, name in enumerate(view.nodes)}

    cycles: list[list[str]] = []
    for component in nx.strongly_connected_components(view):
        if len(component) == 1:
            (member,) = component
            if not view.has_edge(member, member):
                continue
        cycles.append(sorted(component, key=order.__getitem__))
    cycles.sort(key=lambda members: order[members[0]])

    return [[node for node in map(graph.find, members) if node is not None] for members in cycles]


def find_circular_builds(graph: DependencyGraph) -> list[Marker]:
    """Return one marker per build config that takes part in a cycle."""
    membership: dict[str, list[GraphNode]] = {}
    for members in find_circular_build_cycles(graph):
        for node in members:
            membership[node.unique_name] = members

    markers: list[Marker] = []
    for bc_node in graph.nodes(NodeKind.BUILD_CONFIG):
        members = membership.get(bc_node.unique_name)
        if members is None:
            continue
        others = tuple(n for n in members if n.unique_name != bc_node.unique_name)
        if others:
            message = f"{bc_node.display_name} is part of a build cycle with {', '.join(n.display_name for n in others)}."
        else:
            message = f"{bc_node.display_name} consumes the image it produces."
        markers.append(
            Marker(
                key=MarkerKey.CIRCULAR_BUILD,
                node=graph.top_level_container(bc_node),
                related_nodes=others,
                severity=Severity.ERROR,
                message=message,
                suggestion="Change the input or output image of one of these build configs to break the cycle.",
            )
        )

    _logger.debug("circular_scan_complete", markers=len(markers))
    return markers
