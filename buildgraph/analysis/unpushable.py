"""Build configs whose output can never be pushed.

A build pushing to an image stream tag needs the stream to exist and the
integrated registry to have assigned it a pull address. External pull specs
are assumed reachable.
"""

from __future__ import annotations

from buildgraph.graph.dependency_graph import DependencyGraph
from buildgraph.graph.models import EdgeKind, NodeKind
from buildgraph.graph.nodes import owning_image_stream
from buildgraph.models.markers import Marker, MarkerKey, Severity
from buildgraph.models.objects import ImageStream
from buildgraph.observability.logging import get_logger

_logger = get_logger("analysis.unpushable")


def find_unpushable_build_configs(graph: DependencyGraph) -> list[Marker]:
    """Return one marker per build config whose output tag cannot be pushed."""
    markers: list[Marker] = []

    for bc_node in graph.nodes(NodeKind.BUILD_CONFIG):
        outputs = graph.successors(bc_node, EdgeKind.BUILD_OUTPUT)
        if not outputs or outputs[0].kind != NodeKind.IMAGE_STREAM_TAG:
            continue

        ist_node = outputs[0]
        stream_node = owning_image_stream(graph, ist_node)
        stream_display = stream_node.display_name if stream_node else f"is/{ist_node.stream_name}"
        anchor = graph.top_level_container(bc_node)
        related = (ist_node,) if stream_node is None else (ist_node, stream_node)

        if stream_node is None or not isinstance(stream_node.obj, ImageStream):
            markers.append(
                Marker(
                    key=MarkerKey.MISSING_IMAGE_STREAM,
                    node=anchor,
                    related_nodes=related,
                    severity=Severity.ERROR,
                    message=(
                        f"{bc_node.display_name} is pushing to {ist_node.display_name} that is using "
                        f"{stream_display}, but that image stream does not exist."
                    ),
                    suggestion=f"oc create imagestream {ist_node.stream_name}",
                )
            )
            continue

        if not stream_node.obj.docker_image_repository:
            markers.append(
                Marker(
                    key=MarkerKey.MISSING_REQUIRED_REGISTRY,
                    node=anchor,
                    related_nodes=related,
                    severity=Severity.ERROR,
                    message=(
                        f"{bc_node.display_name} is pushing to {ist_node.display_name} that is using "
                        f"{stream_display}, but the administrator has not configured the integrated "
                        "Docker registry."
                    ),
                    suggestion="oc adm registry -h",
                )
            )

    _logger.debug("unpushable_scan_complete", markers=len(markers))
    return markers
