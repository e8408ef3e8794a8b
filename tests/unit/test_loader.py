"""Tests for inventory parsing and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildgraph.inventory.builder import build_graph
from buildgraph.inventory.loader import InventoryError, load_inventory, parse_inventory
from buildgraph.models.objects import ObjectReference, TagEvent

_BUILD_CONFIG = {
    "kind": "BuildConfig",
    "metadata": {"name": "ruby-hello-world", "namespace": "example"},
    "spec": {
        "source": {
            "type": "Git",
            "images": [{"from": {"kind": "ImageStreamTag", "name": "assets:v1"}, "paths": []}],
        },
        "strategy": {
            "type": "Source",
            "sourceStrategy": {"from": {"kind": "DockerImage", "name": "centos/ruby-22-centos7"}},
        },
        "output": {"to": {"kind": "ImageStreamTag", "name": "ruby-hello-world:latest"}},
    },
}

_IMAGE_STREAM = {
    "kind": "ImageStream",
    "metadata": {"name": "ruby-hello-world", "namespace": "example"},
    "status": {
        "dockerImageRepository": "172.30.1.1:5000/example/ruby-hello-world",
        "tags": [
            {"tag": "latest", "items": [{"image": "sha256:new"}, {"image": "sha256:old"}]},
            {"tag": "", "items": []},
        ],
    },
}


class TestParseInventory:
    def test_build_config_fields(self) -> None:
        inventory = parse_inventory([_BUILD_CONFIG])
        (bc,) = inventory.build_configs
        assert (bc.namespace, bc.name, bc.strategy_type) == ("example", "ruby-hello-world", "Source")
        assert bc.strategy_from == ObjectReference(kind="DockerImage", name="centos/ruby-22-centos7")
        assert bc.source_images == [ObjectReference(kind="ImageStreamTag", name="assets:v1")]
        assert bc.output_to == ObjectReference(kind="ImageStreamTag", name="ruby-hello-world:latest")

    def test_build_config_without_output(self) -> None:
        raw = {"kind": "BuildConfig", "metadata": {"name": "x"}, "spec": {"strategy": {"dockerStrategy": {}}}}
        (bc,) = parse_inventory([raw]).build_configs
        assert bc.output_to is None
        assert bc.strategy_from is None
        assert bc.namespace == ""

    def test_image_stream_tags_newest_first(self) -> None:
        (stream,) = parse_inventory([_IMAGE_STREAM]).image_streams
        assert stream.docker_image_repository == "172.30.1.1:5000/example/ruby-hello-world"
        assert list(stream.tags) == ["latest"]
        assert stream.latest_event("latest") == TagEvent(image="sha256:new")
        assert stream.latest_event("missing") is None

    def test_lists_are_flattened(self) -> None:
        image = {"kind": "Image", "metadata": {"name": "sha256:abc"}, "dockerImageReference": "x/y@sha256:abc"}
        documents = [{"kind": "List", "items": [_BUILD_CONFIG, {"kind": "ImageList", "items": [image]}]}]
        inventory = parse_inventory(documents)
        assert len(inventory.build_configs) == 1
        assert [i.name for i in inventory.images] == ["sha256:abc"]

    def test_unknown_kinds_ignored(self) -> None:
        inventory = parse_inventory([{"kind": "Pod", "metadata": {"name": "p"}}])
        assert inventory.build_configs == [] and inventory.image_streams == [] and inventory.images == []

    def test_missing_name_raises(self) -> None:
        with pytest.raises(InventoryError, match="metadata.name"):
            parse_inventory([{"kind": "ImageStream", "metadata": {}}])

    def test_non_mapping_document_raises(self) -> None:
        with pytest.raises(InventoryError):
            parse_inventory([["not", "a", "mapping"]])

    @pytest.mark.parametrize(
        ("raw", "message"),
        [
            ({"kind": "BuildConfig", "metadata": "x"}, "metadata must be a mapping"),
            (
                {"kind": "ImageStream", "metadata": {"name": "s"}, "status": {"tags": ["latest"]}},
                r"status.tags\[0\] must be a mapping",
            ),
            (
                {"kind": "ImageStream", "metadata": {"name": "s"}, "status": {"tags": "latest"}},
                "status.tags must be a list",
            ),
            (
                {"kind": "BuildConfig", "metadata": {"name": "b"}, "spec": {"source": {"images": ["assets:v1"]}}},
                r"spec.source.images\[0\] must be a mapping",
            ),
            (
                {"kind": "BuildConfig", "metadata": {"name": "b"}, "spec": {"output": "ruby:latest"}},
                "spec.output must be a mapping",
            ),
            (
                {"kind": "Image", "metadata": {"name": "sha256:abc", "annotations": ["managed"]}},
                "metadata.annotations must be a mapping",
            ),
        ],
    )
    def test_malformed_nested_fields_raise(self, raw: dict[str, object], message: str) -> None:
        with pytest.raises(InventoryError, match=message):
            parse_inventory([raw])


class TestLoadInventory:
    def test_multi_document_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "inventory.yaml"
        path.write_text(
            "kind: ImageStream\nmetadata:\n  name: a\n---\n---\nkind: ImageStream\nmetadata:\n  name: b\n",
            encoding="utf-8",
        )
        inventory = load_inventory(path)
        assert [s.name for s in inventory.image_streams] == ["a", "b"]

    def test_json_is_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "inventory.json"
        path.write_text('{"kind": "Image", "metadata": {"name": "sha256:abc"}}', encoding="utf-8")
        assert [i.name for i in load_inventory(path).images] == ["sha256:abc"]

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("kind: [unclosed\n", encoding="utf-8")
        with pytest.raises(InventoryError, match="not valid YAML"):
            load_inventory(path)

    def test_scalar_metadata_in_file(self, tmp_path: Path) -> None:
        path = tmp_path / "inventory.yaml"
        path.write_text("kind: BuildConfig\nmetadata: x\n", encoding="utf-8")
        with pytest.raises(InventoryError, match="metadata must be a mapping"):
            load_inventory(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InventoryError, match="cannot read"):
            load_inventory(tmp_path / "absent.yaml")


def test_build_graph_inserts_objects_only() -> None:
    graph = build_graph(parse_inventory([_BUILD_CONFIG, _IMAGE_STREAM]))
    assert [n.unique_name for n in graph.nodes()] == [
        "BuildConfig|example/ruby-hello-world",
        "ImageStream|example/ruby-hello-world",
    ]
    assert graph.edges() == []
    assert all(n.found for n in graph.nodes())
