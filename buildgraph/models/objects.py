"""Cluster object snapshots consumed by the analysis.

These mirror the fields of the BuildConfig, ImageStream and Image API objects
that the graph needs. They are produced by the inventory loader and are never
mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ObjectReference:
    """A reference to an image-like object (``from``/``to`` fields)."""

    kind: str
    name: str
    namespace: str = ""


@dataclass
class BuildConfig:
    """A build definition: ordered image inputs and at most one output."""

    namespace: str
    name: str
    strategy_type: str = ""
    strategy_from: ObjectReference | None = None
    source_images: list[ObjectReference] = field(default_factory=list)
    output_to: ObjectReference | None = None


@dataclass(frozen=True)
class TagEvent:
    """One entry of an image stream tag's history."""

    image: str
    docker_image_reference: str = ""
    created: str = ""


@dataclass
class ImageStream:
    """A named mapping from tags to images.

    ``docker_image_repository`` is the pull address assigned by the integrated
    registry; it stays empty when no registry was configured for the cluster.
    """

    namespace: str
    name: str
    docker_image_repository: str = ""
    tags: dict[str, list[TagEvent]] = field(default_factory=dict)  # newest event first

    def latest_event(self, tag: str) -> TagEvent | None:
        events = self.tags.get(tag)
        if not events:
            return None
        return events[0]


@dataclass
class Image:
    """A concrete image known to the cluster."""

    name: str
    docker_image_reference: str = ""
    annotations: dict[str, str] = field(default_factory=dict)


@dataclass
class Inventory:
    """A snapshot of every object one analysis pass looks at."""

    build_configs: list[BuildConfig] = field(default_factory=list)
    image_streams: list[ImageStream] = field(default_factory=list)
    images: list[Image] = field(default_factory=list)

    def find_image_stream(self, namespace: str, name: str) -> ImageStream | None:
        for stream in self.image_streams:
            if stream.namespace == namespace and stream.name == name:
                return stream
        return None
