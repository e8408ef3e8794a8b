"""Inventory snapshots: loading, image reference parsing and repository membership.

Submodules:
    loader      -- YAML/JSON inventory files to domain objects.
    builder     -- domain objects to graph nodes.
    references  -- pull spec, digest and tag parsing.
    repository  -- managed-image filtering and digest enumeration.
"""

from buildgraph.inventory.builder import build_graph
from buildgraph.inventory.loader import InventoryError, load_inventory, parse_inventory
from buildgraph.inventory.repository import RepositoryUnknownError, enumerate_digests

__all__ = [
    "InventoryError",
    "RepositoryUnknownError",
    "build_graph",
    "enumerate_digests",
    "load_inventory",
    "parse_inventory",
]
