"""Load an inventory snapshot from a YAML (or JSON) file.

The file holds API objects the way ``oc get -o yaml`` prints them: either
individual documents or ``List`` documents wrapping ``items``. Only
BuildConfig, ImageStream and Image objects are kept.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import yaml

from buildgraph.models.objects import (
    BuildConfig,
    Image,
    ImageStream,
    Inventory,
    ObjectReference,
    TagEvent,
)
from buildgraph.observability.logging import get_logger

_logger = get_logger("inventory.loader")

_STRATEGY_KEYS = ("dockerStrategy", "sourceStrategy", "customStrategy")


class InventoryError(Exception):
    """Raised when an inventory file or object is malformed."""


def load_inventory(path: Path) -> Inventory:
    """Read and parse an inventory file.

    Raises:
        InventoryError: if the file cannot be read, is not valid YAML or
            contains a malformed object.
    """
    try:
        with path.open(encoding="utf-8") as f:
            documents = [doc for doc in yaml.safe_load_all(f) if doc]
    except OSError as exc:
        raise InventoryError(f"cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise InventoryError(f"{path} is not valid YAML: {exc}") from exc

    inventory = parse_inventory(documents)
    _logger.info(
        "inventory_loaded",
        path=str(path),
        build_configs=len(inventory.build_configs),
        image_streams=len(inventory.image_streams),
        images=len(inventory.images),
    )
    return inventory


def parse_inventory(documents: Iterable[Any]) -> Inventory:
    """Build an Inventory from already decoded API objects."""
    inventory = Inventory()
    for raw in _flatten(documents):
        kind = raw.get("kind", "")
        if kind == "BuildConfig":
            inventory.build_configs.append(parse_build_config(raw))
        elif kind == "ImageStream":
            inventory.image_streams.append(parse_image_stream(raw))
        elif kind == "Image":
            inventory.images.append(parse_image(raw))
        else:
            _logger.debug("object_ignored", kind=kind)
    return inventory


def _flatten(documents: Iterable[Any]) -> Iterator[dict[str, Any]]:
    for doc in documents:
        if not isinstance(doc, dict):
            raise InventoryError(f"expected a mapping, got {type(doc).__name__}")
        if str(doc.get("kind", "")).endswith("List"):
            yield from _flatten(doc.get("items") or [])
        else:
            yield doc


def _mapping(value: Any, field_path: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InventoryError(f"{field_path} must be a mapping, got {type(value).__name__}")
    return value


def _sequence(value: Any, field_path: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InventoryError(f"{field_path} must be a list, got {type(value).__name__}")
    return value


def _metadata(raw: dict[str, Any]) -> tuple[str, str, dict[str, str]]:
    meta = _mapping(raw.get("metadata"), "metadata")
    name = meta.get("name")
    if not name:
        raise InventoryError(f"{raw.get('kind', 'object')} without metadata.name")
    annotations = _mapping(meta.get("annotations"), "metadata.annotations")
    return meta.get("namespace") or "", str(name), dict(annotations)


def _reference(raw: Any) -> ObjectReference | None:
    if not isinstance(raw, dict):
        return None
    return ObjectReference(
        kind=str(raw.get("kind") or ""),
        name=str(raw.get("name") or ""),
        namespace=str(raw.get("namespace") or ""),
    )


def parse_build_config(raw: dict[str, Any]) -> BuildConfig:
    namespace, name, _ = _metadata(raw)
    spec = _mapping(raw.get("spec"), "spec")
    strategy = _mapping(spec.get("strategy"), "spec.strategy")

    strategy_from = None
    for key in _STRATEGY_KEYS:
        if key in strategy:
            strategy_from = _reference(_mapping(strategy.get(key), f"spec.strategy.{key}").get("from"))
            break

    source_images = []
    images = _sequence(_mapping(spec.get("source"), "spec.source").get("images"), "spec.source.images")
    for i, entry in enumerate(images):
        ref = _reference(_mapping(entry, f"spec.source.images[{i}]").get("from"))
        if ref is not None:
            source_images.append(ref)

    return BuildConfig(
        namespace=namespace,
        name=name,
        strategy_type=str(strategy.get("type") or ""),
        strategy_from=strategy_from,
        source_images=source_images,
        output_to=_reference(_mapping(spec.get("output"), "spec.output").get("to")),
    )


def parse_image_stream(raw: dict[str, Any]) -> ImageStream:
    namespace, name, _ = _metadata(raw)
    status = _mapping(raw.get("status"), "status")

    tags: dict[str, list[TagEvent]] = {}
    for i, entry in enumerate(_sequence(status.get("tags"), "status.tags")):
        entry = _mapping(entry, f"status.tags[{i}]")
        tag = entry.get("tag")
        if not tag:
            continue
        tags[str(tag)] = [
            TagEvent(
                image=str(item.get("image") or ""),
                docker_image_reference=str(item.get("dockerImageReference") or ""),
                created=str(item.get("created") or ""),
            )
            for item in _sequence(entry.get("items"), f"status.tags[{i}].items")
            if isinstance(item, dict)
        ]

    return ImageStream(
        namespace=namespace,
        name=name,
        docker_image_repository=str(status.get("dockerImageRepository") or ""),
        tags=tags,
    )


def parse_image(raw: dict[str, Any]) -> Image:
    _, name, annotations = _metadata(raw)
    return Image(
        name=name,
        docker_image_reference=str(raw.get("dockerImageReference") or ""),
        annotations={str(k): str(v) for k, v in annotations.items()},
    )
