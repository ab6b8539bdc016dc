"""
Read-only sequence graph used by the variant caller.

Nodes own a single forward sequence; edges join oriented handles. The
topology is kept in a NetworkX DiGraph over handles, and every link is
stored together with its complement so the graph can be walked from either
strand.
"""
import logging
from typing import Dict, Iterable, Iterator, List, Tuple

import networkx as nx

from bubblevcf.core.models import Direction, Handle, Orientation, oriented_sequence

logger = logging.getLogger(__name__)


class SequenceGraph:
    """
    Bidirected sequence graph with per-node sequences.

    Neighbor queries are made from the forward handle of a node: the right
    side follows outgoing edges and the left side incoming ones.
    """

    def __init__(self):
        self.graph = nx.DiGraph()
        self._sequences: Dict[int, str] = {}

    def add_node(self, node: int, sequence: str) -> None:
        self._sequences[node] = sequence
        self.graph.add_node(Handle(node, Orientation.FORWARD))
        self.graph.add_node(Handle(node, Orientation.REVERSE))

    def add_edge(self, from_node: int, from_orient: Orientation,
                 to_node: int, to_orient: Orientation) -> None:
        """
        Add a link between two oriented nodes.

        Args:
            from_node: Node id the link leaves from
            from_orient: Orientation of the source node
            to_node: Node id the link enters
            to_orient: Orientation of the target node

        Raises:
            KeyError: If either node has no sequence
        """
        for node in (from_node, to_node):
            if node not in self._sequences:
                raise KeyError(node)
        source = Handle(from_node, from_orient)
        target = Handle(to_node, to_orient)
        self.graph.add_edge(source, target)
        self.graph.add_edge(target.flip(), source.flip())

    def has_node(self, node: int) -> bool:
        return node in self._sequences

    def node_ids(self) -> List[int]:
        return sorted(self._sequences)

    def __len__(self) -> int:
        return len(self._sequences)

    def __contains__(self, node: int) -> bool:
        return self.has_node(node)

    def sequence(self, node: int, orientation: Orientation = Orientation.FORWARD) -> str:
        """Sequence of a node in the requested orientation. Raises KeyError for unknown nodes."""
        return oriented_sequence(self._sequences[node], orientation)

    def sequence_length(self, node: int) -> int:
        return len(self._sequences[node])

    def neighbors(self, node: int, direction: Direction = Direction.RIGHT) -> List[int]:
        """
        Distinct node ids adjacent to the forward handle of a node.

        Orientation is dropped: a link into 4- is reported as node 4, and walks
        built from these ids continue from the forward handle of 4. Branches
        that need a reverse traversal are therefore not followed.
        """
        handle = Handle(node, Orientation.FORWARD)
        if handle not in self.graph:
            return []
        if direction is Direction.RIGHT:
            handles = self.graph.successors(handle)
        else:
            handles = self.graph.predecessors(handle)
        return sorted({h.node for h in handles})

    def degree(self, node: int, direction: Direction = Direction.RIGHT) -> int:
        """Number of distinct neighbors on one side, consistent with neighbors()."""
        return len(self.neighbors(node, direction))

    def edge_counts(self) -> Iterator[Tuple[int, int, int, int]]:
        """Yield (node, inbound, outbound, total) for every node, in id order."""
        for node in self.node_ids():
            inbound = self.degree(node, Direction.LEFT)
            outbound = self.degree(node, Direction.RIGHT)
            yield node, inbound, outbound, inbound + outbound

    def forward_view(self) -> nx.DiGraph:
        """Node-id DiGraph of the right-side adjacency of every forward handle."""
        view = nx.DiGraph()
        view.add_nodes_from(self._sequences)
        for node in self._sequences:
            for neighbor in self.neighbors(node, Direction.RIGHT):
                view.add_edge(node, neighbor)
        return view

    @classmethod
    def from_edges(cls, sequences: Dict[int, str],
                   edges: Iterable[Tuple[int, int]]) -> "SequenceGraph":
        """Build a graph from forward-only (from, to) links."""
        graph = cls()
        for node, sequence in sequences.items():
            graph.add_node(node, sequence)
        for from_node, to_node in edges:
            graph.add_edge(from_node, Orientation.FORWARD, to_node, Orientation.FORWARD)
        logger.debug(f"Built graph with {len(graph)} nodes and {graph.graph.number_of_edges()} handle edges")
        return graph
