"""Which images belong to an image stream's repository.

An image belongs to repository ``namespace/name`` when the cluster manages it
(annotation ``openshift.io/image.managed: "true"``) and its pull spec points
at that namespace and name. Externally managed images and images pushed to
another repository never count.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from buildgraph.inventory.references import (
    InvalidDigestError,
    InvalidReferenceError,
    parse_digest,
    parse_docker_image_reference,
)
from buildgraph.models.objects import Image, Inventory
from buildgraph.observability.logging import get_logger

MANAGED_BY_ANNOTATION = "openshift.io/image.managed"

_logger = get_logger("inventory.repository")


class RepositoryUnknownError(LookupError):
    """Raised when no image stream backs the requested repository."""

    def __init__(self, repository: str) -> None:
        super().__init__(f"repository {repository!r} is not known")
        self.repository = repository


def is_managed(image: Image) -> bool:
    return image.annotations.get(MANAGED_BY_ANNOTATION) == "true"


def index_repository_images(images: Iterable[Image]) -> dict[tuple[str, str], list[Image]]:
    """Group managed images by the ``(namespace, name)`` of their pull spec."""
    index: dict[tuple[str, str], list[Image]] = defaultdict(list)
    for image in images:
        if not is_managed(image):
            continue
        try:
            ref = parse_docker_image_reference(image.docker_image_reference)
        except InvalidReferenceError:
            _logger.debug("image_reference_unparsable", image=image.name, reference=image.docker_image_reference)
            continue
        index[(ref.namespace, ref.name)].append(image)
    return dict(index)


def repository_images(images: Iterable[Image], namespace: str, name: str) -> list[Image]:
    """Return the managed images stored in repository ``namespace/name``."""
    return index_repository_images(images).get((namespace, name), [])


def enumerate_digests(inventory: Inventory, namespace: str, name: str) -> list[str]:
    """Return the digests of every image in repository ``namespace/name``.

    Image names that are not digests are skipped with a warning.

    Raises:
        RepositoryUnknownError: if the inventory has no such image stream.
    """
    if inventory.find_image_stream(namespace, name) is None:
        raise RepositoryUnknownError(f"{namespace}/{name}")

    digests: list[str] = []
    for image in repository_images(inventory.images, namespace, name):
        try:
            digests.append(parse_digest(image.name))
        except InvalidDigestError as exc:
            _logger.warning("image_name_not_digest", image=image.name, error=str(exc))
    return digests
