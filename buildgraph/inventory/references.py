"""Parsing of image pull specs, digests and image stream tag names."""

from __future__ import annotations

import re
from dataclasses import dataclass

DEFAULT_TAG = "latest"

_DIGEST_HEX_LENGTHS = {"sha256": 64, "sha384": 96, "sha512": 128}
_RE_HEX = re.compile(r"^[a-f0-9]+$")
_RE_COMPONENT = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._:-]*$")


class InvalidReferenceError(ValueError):
    """Raised when a pull spec cannot be parsed."""


class InvalidDigestError(ValueError):
    """Raised when a string is not an ``algorithm:hex`` digest."""


@dataclass(frozen=True)
class DockerImageReference:
    """The parts of a pull spec: ``[registry/][namespace/]name[:tag][@id]``."""

    registry: str = ""
    namespace: str = ""
    name: str = ""
    tag: str = ""
    id: str = ""

    @property
    def repository(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    def __str__(self) -> str:
        ref = self.repository
        if self.registry:
            ref = f"{self.registry}/{ref}"
        if self.tag:
            ref = f"{ref}:{self.tag}"
        if self.id:
            ref = f"{ref}@{self.id}"
        return ref


def parse_digest(value: str) -> str:
    """Validate ``value`` as a content digest and return it unchanged.

    Raises:
        InvalidDigestError: on anything but ``sha256|sha384|sha512:<hex>``.
    """
    algorithm, sep, hex_part = value.partition(":")
    if not sep:
        raise InvalidDigestError(f"digest {value!r} must be of the form algorithm:hex")
    expected = _DIGEST_HEX_LENGTHS.get(algorithm)
    if expected is None:
        raise InvalidDigestError(f"digest {value!r} uses unsupported algorithm {algorithm!r}")
    if len(hex_part) != expected or not _RE_HEX.match(hex_part):
        raise InvalidDigestError(f"digest {value!r} has an invalid {algorithm} hex part")
    return value


def _looks_like_registry(segment: str) -> bool:
    return "." in segment or ":" in segment or segment == "localhost"


def parse_docker_image_reference(spec: str) -> DockerImageReference:
    """Split a pull spec into its parts.

    Raises:
        InvalidReferenceError: for empty specs, more than three path segments,
            empty segments or a malformed digest.
    """
    if not spec:
        raise InvalidReferenceError("pull spec is empty")

    repo, _, image_id = spec.partition("@")
    if image_id:
        try:
            parse_digest(image_id)
        except InvalidDigestError as exc:
            raise InvalidReferenceError(f"pull spec {spec!r}: {exc}") from exc

    tag = ""
    slash = repo.rfind("/")
    colon = repo.rfind(":")
    if colon > slash:
        repo, tag = repo[:colon], repo[colon + 1 :]
        if not tag:
            raise InvalidReferenceError(f"pull spec {spec!r} has an empty tag")

    segments = repo.split("/")
    if any(not _RE_COMPONENT.match(s) for s in segments):
        raise InvalidReferenceError(f"pull spec {spec!r} has an invalid path segment")

    if len(segments) == 1:
        return DockerImageReference(name=segments[0], tag=tag, id=image_id)
    if len(segments) == 2:
        if _looks_like_registry(segments[0]):
            return DockerImageReference(registry=segments[0], name=segments[1], tag=tag, id=image_id)
        return DockerImageReference(namespace=segments[0], name=segments[1], tag=tag, id=image_id)
    if len(segments) == 3:
        return DockerImageReference(
            registry=segments[0],
            namespace=segments[1],
            name=segments[2],
            tag=tag,
            id=image_id,
        )
    raise InvalidReferenceError(f"pull spec {spec!r} must be one to three segments separated by slashes")


def split_image_stream_tag(value: str) -> tuple[str, str]:
    """Split ``stream:tag``; the tag defaults to ``latest``."""
    name, sep, tag = value.rpartition(":")
    if not sep:
        return value, DEFAULT_TAG
    return name, tag or DEFAULT_TAG


def split_image_stream_image(value: str) -> tuple[str, str]:
    """Split ``stream@digest``.

    Raises:
        InvalidReferenceError: if either half is missing.
    """
    name, sep, digest = value.partition("@")
    if not sep or not name or not digest:
        raise InvalidReferenceError(f"image stream image {value!r} must be of the form name@digest")
    return name, digest
