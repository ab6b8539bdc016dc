"""
Reference path indexing and bubble sub-path extraction.
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from bubblevcf.core.graph import SequenceGraph
from bubblevcf.core.models import Bubble, Path, Step, SubPath

logger = logging.getLogger(__name__)


class ReferencePathIndex:
    """
    Locates nodes inside the designated reference paths.

    For every reference path this keeps the 0-based base offset at which
    each step begins and, per node, the step indices where the node occurs.
    A node missing from a path simply has no occurrences there.
    """

    def __init__(self, graph: SequenceGraph, paths: Dict[str, Path],
                 reference_names: Optional[Sequence[str]] = None):
        """
        Initialize the index.

        Args:
            graph: Graph providing node sequence lengths
            paths: All input paths keyed by name
            reference_names: Paths to index; all paths when None

        Raises:
            KeyError: If a reference name is not among the paths
        """
        names = list(reference_names) if reference_names is not None else sorted(paths)
        missing = [name for name in names if name not in paths]
        if missing:
            raise KeyError(f"Reference paths not found: {', '.join(missing)}")

        self.graph = graph
        self.reference_names: List[str] = names
        self._steps: Dict[str, List[Step]] = {}
        self._offsets: Dict[str, List[int]] = {}
        self._occurrences: Dict[str, Dict[int, List[int]]] = {}

        for name in names:
            self._index_path(paths[name])
        logger.info(f"Indexed {len(names)} reference paths")

    def _index_path(self, path: Path) -> None:
        offsets = []
        occurrences = defaultdict(list)
        offset = 0
        for index, step in enumerate(path.steps):
            offsets.append(offset)
            occurrences[step.node].append(index)
            offset += self.graph.sequence_length(step.node)
        offsets.append(offset)

        self._steps[path.name] = list(path.steps)
        self._offsets[path.name] = offsets
        self._occurrences[path.name] = dict(occurrences)

    def occurrences(self, path_name: str, node: int) -> List[int]:
        """All step indices of a node in a reference path (empty if absent)."""
        found = self._occurrences[path_name].get(node, [])
        if not found:
            logger.debug(f"Node {node} not found in reference path {path_name}")
        return list(found)

    def first_occurrence(self, path_name: str, node: int) -> Optional[int]:
        found = self._occurrences[path_name].get(node)
        return found[0] if found else None

    def offset(self, path_name: str, step_index: int) -> int:
        """Base offset (0-based) at which the given step starts."""
        return self._offsets[path_name][step_index]

    def path_length(self, path_name: str) -> int:
        return self._offsets[path_name][-1]

    def steps_from(self, path_name: str, step_index: int) -> List[Step]:
        return self._steps[path_name][step_index:]

    def first_boundary(self, path_name: str, bubble: Bubble) -> Optional[int]:
        """The bubble boundary this path reaches first, or None if it touches neither."""
        starts = self.first_occurrence(path_name, bubble.start)
        ends = self.first_occurrence(path_name, bubble.end)
        if starts is None and ends is None:
            return None
        if ends is None or (starts is not None and starts <= ends):
            return bubble.start
        return bubble.end


def bubble_sub_paths(paths: Iterable[Path], bubble: Bubble) -> List[SubPath]:
    """
    Cut every path down to its first traversal of the bubble.

    A path starts at whichever boundary it reaches first and runs up to and
    including the other boundary, or to its own end if it never reaches it.
    Paths touching neither boundary are left out.
    """
    sub_paths = []
    for path in paths:
        first = None
        for index, step in enumerate(path.steps):
            if step.node == bubble.start or step.node == bubble.end:
                first = index
                break
        if first is None:
            continue

        end = bubble.other(path.steps[first].node)
        steps = [path.steps[first]]
        if end != path.steps[first].node:
            for step in path.steps[first + 1:]:
                steps.append(step)
                if step.node == end:
                    break
        sub_paths.append(SubPath(path_name=path.name, steps=steps))
    return sub_paths
