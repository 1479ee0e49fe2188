"""
Way-Point Graph.

Arena-style spatial model: a mapping from stable node id to node data,
with adjacency stored as sets of neighbor ids (no live references between
nodes). Edges added through add_edge() are symmetric by default; records
loaded with from_records() keep whatever adjacency they declare.

Dangling neighbor ids are tolerated: neighbors() skips ids that are not
in the graph.
"""

from typing import Dict, Hashable, Iterable, Iterator, List, Optional
from dataclasses import dataclass, field, replace
import logging

from nav_core.proto.geometry import Point2D

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphNode:
    """
    Way-point in the graph.

    Attributes:
        node_id: Stable node identifier
        position: Node position in the floor-plan frame
        neighbor_ids: Ids of nodes reachable in one step
    """

    node_id: Hashable
    position: Point2D
    neighbor_ids: frozenset = field(default_factory=frozenset)

    def to_record(self) -> dict:
        """Convert to the {id, x, y, connectedNodes} record shape."""
        return {
            'id': self.node_id,
            'x': self.position.x,
            'y': self.position.y,
            'connectedNodes': sorted(self.neighbor_ids, key=str),
        }


class WaypointGraph:
    """
    Sparse way-point graph.

    Usage:
        graph = WaypointGraph()
        graph.add_node("lobby", 0.0, 0.0)
        graph.add_node("hall", 5.0, 0.0)
        graph.add_edge("lobby", "hall")

        node = graph.nearest_node(Point2D(0.4, 0.2))

    Notes:
        - Iteration order is insertion order
        - Nodes are immutable; add_edge replaces the stored node value
    """

    def __init__(self, nodes: Iterable[GraphNode] = ()):
        """
        Initialize graph.

        Args:
            nodes: Initial nodes (ids must be unique)
        """
        self._nodes: Dict[Hashable, GraphNode] = {}
        self._order: Dict[Hashable, int] = {}

        for node in nodes:
            self._insert(node)

    def _insert(self, node: GraphNode):
        if node.node_id in self._nodes:
            raise ValueError(f"Duplicate node id: {node.node_id!r}")
        self._order[node.node_id] = len(self._order)
        self._nodes[node.node_id] = node

    def add_node(
        self,
        node_id: Hashable,
        x: float,
        y: float,
        neighbor_ids: Iterable[Hashable] = (),
    ) -> GraphNode:
        """
        Add a way-point.

        Args:
            node_id: Unique node id
            x, y: Node position
            neighbor_ids: Initial (one-directional) adjacency

        Returns:
            The stored GraphNode
        """
        node = GraphNode(node_id, Point2D(float(x), float(y)), frozenset(neighbor_ids))
        self._insert(node)
        return node

    def add_edge(self, a: Hashable, b: Hashable, bidirectional: bool = True):
        """
        Connect two existing nodes.

        Args:
            a: First node id
            b: Second node id
            bidirectional: Also add b -> a (default)

        Raises:
            KeyError: If either node is missing
        """
        for node_id in (a, b):
            if node_id not in self._nodes:
                raise KeyError(f"Unknown node id: {node_id!r}")

        self._link(a, b)
        if bidirectional:
            self._link(b, a)

    def _link(self, src: Hashable, dst: Hashable):
        node = self._nodes[src]
        self._nodes[src] = replace(node, neighbor_ids=node.neighbor_ids | {dst})

    def get(self, node_id: Hashable) -> Optional[GraphNode]:
        return self._nodes.get(node_id)

    def __getitem__(self, node_id: Hashable) -> GraphNode:
        return self._nodes[node_id]

    def __contains__(self, node_id: Hashable) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self._nodes.values())

    @property
    def node_ids(self) -> List[Hashable]:
        return list(self._nodes.keys())

    def index_of(self, node_id: Hashable) -> int:
        """Insertion index of a node (used as a deterministic tie-break)."""
        return self._order[node_id]

    def neighbors(self, node_id: Hashable) -> List[GraphNode]:
        """
        Neighbors of a node that exist in the graph.

        Args:
            node_id: Node id

        Returns:
            Neighbor nodes, in insertion order; dangling ids are skipped
        """
        node = self._nodes[node_id]
        present = [n for n in node.neighbor_ids if n in self._nodes]
        if len(present) != len(node.neighbor_ids):
            logger.debug("Node %r has dangling neighbor ids", node_id)
        return sorted((self._nodes[n] for n in present), key=lambda n: self._order[n.node_id])

    def edge_length(self, a: Hashable, b: Hashable) -> float:
        """Euclidean length of the edge a-b."""
        return self._nodes[a].position.distance_to(self._nodes[b].position)

    def nearest_node(self, point: Point2D) -> Optional[GraphNode]:
        """
        Snap a point to the closest node.

        Linear scan; on an exact distance tie the first node in insertion
        order wins.

        Args:
            point: Query point

        Returns:
            Closest node, or None for an empty graph
        """
        closest = None
        min_distance = float('inf')

        for node in self._nodes.values():
            distance = point.distance_to(node.position)
            if distance < min_distance:
                min_distance = distance
                closest = node

        return closest

    def is_symmetric(self) -> bool:
        """Check that every edge is present in both directions."""
        for node in self._nodes.values():
            for neighbor_id in node.neighbor_ids:
                neighbor = self._nodes.get(neighbor_id)
                if neighbor is not None and node.node_id not in neighbor.neighbor_ids:
                    return False
        return True

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "WaypointGraph":
        """
        Build a graph from {id, x, y, connectedNodes} records.

        Args:
            records: Node records; 'neighbor_ids' is accepted in place of
                'connectedNodes'

        Returns:
            WaypointGraph with adjacency exactly as declared
        """
        graph = cls()
        for record in records:
            neighbors = record.get('connectedNodes', record.get('neighbor_ids', ()))
            graph.add_node(record['id'], record['x'], record['y'], neighbors)
        return graph

    def to_records(self) -> List[dict]:
        """Serialize to {id, x, y, connectedNodes} records."""
        return [node.to_record() for node in self._nodes.values()]
