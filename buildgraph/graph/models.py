"""Data structures for the build/image dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class NodeKind(StrEnum):
    """Kinds of objects (or references to objects) held by the graph."""

    BUILD_CONFIG = "BuildConfig"
    IMAGE_STREAM = "ImageStream"
    IMAGE_STREAM_TAG = "ImageStreamTag"
    IMAGE_STREAM_IMAGE = "ImageStreamImage"
    DOCKER_IMAGE = "DockerImage"
    IMAGE = "Image"


class EdgeKind(StrEnum):
    """Types of relationships between nodes."""

    BUILD_INPUT = "BuildInput"
    BUILD_OUTPUT = "BuildOutput"
    IMAGE_STREAM_REF = "ImageStreamRef"
    REPOSITORY_IMAGE = "RepositoryImage"
    CONTAINS = "Contains"


# Kinds whose unique name is not namespaced.
_CLUSTER_SCOPED = frozenset({NodeKind.DOCKER_IMAGE, NodeKind.IMAGE})

_SHORT_KIND = {
    NodeKind.BUILD_CONFIG: "bc",
    NodeKind.IMAGE_STREAM: "is",
    NodeKind.IMAGE_STREAM_TAG: "istag",
    NodeKind.IMAGE_STREAM_IMAGE: "isimage",
    NodeKind.DOCKER_IMAGE: "dockerimage",
    NodeKind.IMAGE: "image",
}


@dataclass(frozen=True)
class GraphNode:
    """A node in the dependency graph.

    ``obj`` is the wrapped cluster object for BuildConfig, ImageStream and
    Image nodes. A node without one is synthetic: something referenced but
    absent from the inventory. Tag, digest and pull-spec nodes are views and
    never carry an object.
    """

    kind: NodeKind
    namespace: str
    name: str
    obj: object | None = field(default=None, compare=False, repr=False)

    @property
    def unique_name(self) -> str:
        """Return the graph-wide identity of this node."""
        if self.kind in _CLUSTER_SCOPED:
            return f"{self.kind}|{self.name}"
        return f"{self.kind}|{self.namespace}/{self.name}"

    @property
    def found(self) -> bool:
        return self.obj is not None

    @property
    def display_name(self) -> str:
        """Short human form, e.g. ``bc/ruby-hello-world``."""
        return f"{_SHORT_KIND[self.kind]}/{self.name}"

    @property
    def stream_name(self) -> str:
        """Owning image stream name of a tag or digest view."""
        if self.kind == NodeKind.IMAGE_STREAM_TAG:
            return self.name.rpartition(":")[0]
        if self.kind == NodeKind.IMAGE_STREAM_IMAGE:
            return self.name.partition("@")[0]
        if self.kind == NodeKind.IMAGE_STREAM:
            return self.name
        return ""

    @property
    def tag(self) -> str:
        if self.kind != NodeKind.IMAGE_STREAM_TAG:
            return ""
        return self.name.rpartition(":")[2]

    @property
    def digest(self) -> str:
        if self.kind != NodeKind.IMAGE_STREAM_IMAGE:
            return ""
        return self.name.partition("@")[2]


@dataclass(frozen=True)
class GraphEdge:
    """A typed, directed edge between two nodes in the dependency graph."""

    source: GraphNode
    target: GraphNode
    kind: EdgeKind
    source_field: str = ""  # object field that creates this relationship

    @property
    def key(self) -> tuple[str, str, EdgeKind]:
        return (self.source.unique_name, self.target.unique_name, self.kind)
