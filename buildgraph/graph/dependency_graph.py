"""In-memory typed graph of build configurations, image streams and images.

One graph is built per analysis pass and discarded afterwards. All mutation
(node and edge insertion) happens before any detector runs; the read methods
do not lock and are safe to share between concurrent readers after that point.
"""

from __future__ import annotations

from collections.abc import Iterable

from buildgraph.graph.models import EdgeKind, GraphEdge, GraphNode, NodeKind


class GraphError(Exception):
    """Raised for structural errors in graph operations."""


class MissingNodeError(GraphError):
    """Raised when an edge endpoint is not present in the graph."""

    def __init__(self, unique_name: str) -> None:
        super().__init__(f"node {unique_name!r} is not in the graph")
        self.unique_name = unique_name


class DependencyGraph:
    """Directed multigraph keyed by node unique name.

    Edges are deduplicated on ``(source, target, kind)``; re-adding an
    identical edge returns the existing one, which keeps the edge projectors
    idempotent. Every listing is in insertion order.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._out: dict[str, list[GraphEdge]] = {}
        self._in: dict[str, list[GraphEdge]] = {}
        self._edges: dict[tuple[str, str, EdgeKind], GraphEdge] = {}

    def __contains__(self, node: object) -> bool:
        if isinstance(node, GraphNode):
            return node.unique_name in self._nodes
        return node in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"<DependencyGraph nodes={len(self._nodes)} edges={len(self._edges)}>"

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_node(self, node: GraphNode) -> GraphNode:
        """Insert ``node`` unless a node with the same unique name exists.

        Returns the canonical instance held by the graph.
        """
        name = node.unique_name
        existing = self._nodes.get(name)
        if existing is not None:
            return existing
        self._nodes[name] = node
        self._out[name] = []
        self._in[name] = []
        return node

    def add_edge(
        self,
        source: GraphNode,
        target: GraphNode,
        kind: EdgeKind,
        source_field: str = "",
    ) -> GraphEdge:
        """Insert a directed edge between two nodes already in the graph.

        Raises:
            MissingNodeError: if either endpoint has not been added.
        """
        src = self._nodes.get(source.unique_name)
        if src is None:
            raise MissingNodeError(source.unique_name)
        dst = self._nodes.get(target.unique_name)
        if dst is None:
            raise MissingNodeError(target.unique_name)

        key = (src.unique_name, dst.unique_name, kind)
        existing = self._edges.get(key)
        if existing is not None:
            return existing

        edge = GraphEdge(source=src, target=dst, kind=kind, source_field=source_field)
        self._edges[key] = edge
        self._out[src.unique_name].append(edge)
        self._in[dst.unique_name].append(edge)
        return edge

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find(self, unique_name: str) -> GraphNode | None:
        """Return the node called ``unique_name`` or None."""
        return self._nodes.get(unique_name)

    def nodes(self, *kinds: NodeKind) -> list[GraphNode]:
        if not kinds:
            return list(self._nodes.values())
        return [n for n in self._nodes.values() if n.kind in kinds]

    def edges(self, *kinds: EdgeKind) -> list[GraphEdge]:
        if not kinds:
            return list(self._edges.values())
        return [e for e in self._edges.values() if e.kind in kinds]

    def out_edges(self, node: GraphNode, *kinds: EdgeKind) -> list[GraphEdge]:
        edges = self._out.get(node.unique_name, [])
        if not kinds:
            return list(edges)
        return [e for e in edges if e.kind in kinds]

    def in_edges(self, node: GraphNode, *kinds: EdgeKind) -> list[GraphEdge]:
        edges = self._in.get(node.unique_name, [])
        if not kinds:
            return list(edges)
        return [e for e in edges if e.kind in kinds]

    def successors(self, node: GraphNode, *kinds: EdgeKind) -> list[GraphNode]:
        return _unique(e.target for e in self.out_edges(node, *kinds))

    def predecessors(self, node: GraphNode, *kinds: EdgeKind) -> list[GraphNode]:
        return _unique(e.source for e in self.in_edges(node, *kinds))

    def top_level_container(self, node: GraphNode) -> GraphNode:
        """Walk ``Contains`` edges upward and return the outermost owner.

        A node nobody contains is its own top-level container.
        """
        current = self._nodes.get(node.unique_name, node)
        seen = {current.unique_name}
        while True:
            owners = self.predecessors(current, EdgeKind.CONTAINS)
            if not owners or owners[0].unique_name in seen:
                return current
            current = owners[0]
            seen.add(current.unique_name)


def _unique(nodes: Iterable[GraphNode]) -> list[GraphNode]:
    seen: set[str] = set()
    result: list[GraphNode] = []
    for node in nodes:
        if node.unique_name not in seen:
            seen.add(node.unique_name)
            result.append(node)
    return result
