"""
Enumeration of candidate paths through a bubble.

Expansion is breadth-first over (prefix, terminal node) work items. Prefixes
live in a shared arena of (parent index, node) entries, so extending a
prefix by one node costs one entry instead of a copy of the whole path.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set, Tuple

from bubblevcf.core.graph import SequenceGraph
from bubblevcf.core.models import Direction

logger = logging.getLogger(__name__)

DEFAULT_MAX_EDGES = 100

CandidatePath = Tuple[int, ...]


@dataclass
class EnumerationResult:
    """Simple paths found between two nodes, and whether the edge budget ran out."""
    start: int
    end: int
    paths: List[CandidatePath] = field(default_factory=list)
    edges_traversed: int = 0
    budget_exhausted: bool = False

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self):
        return iter(self.paths)


class _PrefixArena:
    """Parent-pointer storage for path prefixes."""

    def __init__(self):
        self._parents: List[int] = []
        self._nodes: List[int] = []

    def add(self, parent: int, node: int) -> int:
        self._parents.append(parent)
        self._nodes.append(node)
        return len(self._nodes) - 1

    def node(self, index: int) -> int:
        return self._nodes[index]

    def contains(self, index: int, node: int) -> bool:
        while index >= 0:
            if self._nodes[index] == node:
                return True
            index = self._parents[index]
        return False

    def path(self, index: int) -> CandidatePath:
        nodes = []
        while index >= 0:
            nodes.append(self._nodes[index])
            index = self._parents[index]
        nodes.reverse()
        return tuple(nodes)


class BubblePathEnumerator:
    """
    Finds the distinct simple paths from a bubble's start to its end.

    Every call gets its own edge budget. When the budget is used up the
    paths completed so far are returned and the result is flagged; this is
    reported as a warning, never raised.
    """

    def __init__(self, graph: SequenceGraph, max_edges: int = DEFAULT_MAX_EDGES):
        if max_edges < 0:
            raise ValueError(f"max_edges must be non-negative, got {max_edges}")
        self.graph = graph
        self.max_edges = max_edges

    def enumerate(self, start: int, end: int, max_edges: Optional[int] = None) -> EnumerationResult:
        """
        Enumerate simple paths from start to end.

        Args:
            start: Bubble entry node
            end: Bubble exit node
            max_edges: Edge traversal budget for this call, defaults to the enumerator's

        Returns:
            EnumerationResult with paths in discovery order
        """
        budget = self.max_edges if max_edges is None else max_edges
        result = EnumerationResult(start=start, end=end)

        if start == end:
            result.paths.append((start,))
            return result

        arena = _PrefixArena()
        frontier: Deque[int] = deque([arena.add(-1, start)])
        adjacency: Dict[int, List[int]] = {}
        expanded: Set[int] = set()
        seen_paths: Set[CandidatePath] = set()

        while frontier:
            prefix = frontier.popleft()
            current = arena.node(prefix)

            if current == end:
                path = arena.path(prefix)
                if path not in seen_paths:
                    seen_paths.add(path)
                    result.paths.append(path)
                continue

            # nodes reached again through another prefix reuse their adjacency
            if current not in adjacency:
                adjacency[current] = self.graph.neighbors(current, Direction.RIGHT)
            expanded.add(current)

            for neighbor in adjacency[current]:
                if arena.contains(prefix, neighbor):
                    continue
                if result.edges_traversed >= budget:
                    result.budget_exhausted = True
                    break
                result.edges_traversed += 1
                frontier.append(arena.add(prefix, neighbor))

            if result.budget_exhausted:
                break

        if result.budget_exhausted:
            for prefix in frontier:
                if arena.node(prefix) == end:
                    path = arena.path(prefix)
                    if path not in seen_paths:
                        seen_paths.add(path)
                        result.paths.append(path)
            logger.warning(
                f"Edge budget of {budget} exhausted between {start} and {end} "
                f"after expanding {len(expanded)} nodes; keeping {len(result.paths)} complete paths"
            )
        else:
            logger.debug(f"Found {len(result.paths)} paths between {start} and {end}")
        return result


def find_all_paths_between(graph: SequenceGraph, start: int, end: int,
                           max_edges: int = DEFAULT_MAX_EDGES) -> List[CandidatePath]:
    """Convenience wrapper returning only the paths."""
    return BubblePathEnumerator(graph, max_edges).enumerate(start, end).paths
