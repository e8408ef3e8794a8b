"""Tests for find_unpushable_build_configs."""

from __future__ import annotations

from buildgraph.analysis.engine import project_edges
from buildgraph.analysis.unpushable import find_unpushable_build_configs
from buildgraph.graph.dependency_graph import DependencyGraph
from buildgraph.graph.models import EdgeKind
from buildgraph.graph.nodes import build_config_node, image_stream_node, image_stream_tag_node
from buildgraph.graph.projectors import add_all_input_output_edges
from buildgraph.models.markers import MarkerKey, Severity
from buildgraph.models.objects import BuildConfig, ImageStream, ObjectReference

_REGISTRY = "172.30.1.1:5000"


def _make_bc(name: str, output_to: ObjectReference | None, namespace: str = "ns") -> BuildConfig:
    return BuildConfig(
        namespace=namespace,
        name=name,
        strategy_from=ObjectReference(kind="DockerImage", name="centos/ruby-22-centos7"),
        output_to=output_to,
    )


def _to_tag(name: str) -> ObjectReference:
    return ObjectReference(kind="ImageStreamTag", name=name)


def _make_stream(name: str, registry: bool = True, namespace: str = "ns") -> ImageStream:
    repo = f"{_REGISTRY}/{namespace}/{name}" if registry else ""
    return ImageStream(namespace=namespace, name=name, docker_image_repository=repo)


def _graph(build_configs: list[BuildConfig], streams: list[ImageStream]) -> DependencyGraph:
    graph = DependencyGraph()
    for bc in build_configs:
        graph.add_node(build_config_node(bc))
    for stream in streams:
        graph.add_node(image_stream_node(stream))
    return project_edges(graph)


class TestMissingImageStream:
    def test_single_marker_anchored_at_build_config(self) -> None:
        graph = _graph([_make_bc("app", _to_tag("app:latest"))], [])
        markers = find_unpushable_build_configs(graph)

        assert len(markers) == 1
        marker = markers[0]
        assert marker.key == MarkerKey.MISSING_IMAGE_STREAM
        assert marker.key == "MissingImageStreamErr"
        assert marker.severity == Severity.ERROR
        assert marker.node is graph.find("BuildConfig|ns/app")
        assert marker.related_nodes[0] is graph.find("ImageStreamTag|ns/app:latest")
        assert "does not exist" in marker.message

    def test_detected_without_reference_edges(self) -> None:
        graph = DependencyGraph()
        graph.add_node(build_config_node(_make_bc("app", _to_tag("app:latest"))))
        add_all_input_output_edges(graph)

        markers = find_unpushable_build_configs(graph)
        assert [m.key for m in markers] == [MarkerKey.MISSING_IMAGE_STREAM]


class TestMissingRegistry:
    def test_stream_without_registry(self) -> None:
        graph = _graph([_make_bc("app", _to_tag("app:latest"))], [_make_stream("app", registry=False)])
        markers = find_unpushable_build_configs(graph)

        assert len(markers) == 1
        assert markers[0].key == "MissingRequiredRegistryErr"
        assert markers[0].suggestion == "oc adm registry -h"
        assert [n.unique_name for n in markers[0].related_nodes] == [
            "ImageStreamTag|ns/app:latest",
            "ImageStream|ns/app",
        ]

    def test_each_build_gets_its_own_marker(self) -> None:
        graph = _graph(
            [_make_bc("one", _to_tag("shared:latest")), _make_bc("two", _to_tag("shared:v2"))],
            [_make_stream("shared", registry=False)],
        )
        markers = find_unpushable_build_configs(graph)
        assert [m.node.name for m in markers] == ["one", "two"]
        assert {m.key for m in markers} == {MarkerKey.MISSING_REQUIRED_REGISTRY}


class TestPushable:
    def test_configured_stream_is_not_flagged(self) -> None:
        graph = _graph([_make_bc("app", _to_tag("app:latest"))], [_make_stream("app")])
        assert find_unpushable_build_configs(graph) == []

    def test_docker_image_output_is_not_flagged(self) -> None:
        output = ObjectReference(kind="DockerImage", name="docker.io/example/app:latest")
        graph = _graph([_make_bc("app", output)], [])
        assert find_unpushable_build_configs(graph) == []

    def test_no_output_is_not_flagged(self) -> None:
        graph = _graph([_make_bc("app", None)], [])
        assert find_unpushable_build_configs(graph) == []

    def test_other_namespace_stream_does_not_satisfy_output(self) -> None:
        graph = _graph([_make_bc("app", _to_tag("app:latest"))], [_make_stream("app", namespace="other")])
        assert [m.key for m in find_unpushable_build_configs(graph)] == [MarkerKey.MISSING_IMAGE_STREAM]


def test_anchor_follows_containment() -> None:
    graph = _graph([_make_bc("app", _to_tag("app:latest"))], [])
    bc_node = graph.find("BuildConfig|ns/app")
    owner = graph.add_node(image_stream_tag_node("ns", "owner", "latest"))
    assert bc_node is not None
    graph.add_edge(owner, bc_node, EdgeKind.CONTAINS)

    markers = find_unpushable_build_configs(graph)
    assert markers[0].node is owner


def test_empty_graph() -> None:
    assert find_unpushable_build_configs(DependencyGraph()) == []
