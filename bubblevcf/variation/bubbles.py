"""
Dominator-based bubble detection.

Used when no bubble file is given. A node u with several successors and its
immediate post-dominator v form a bubble when u is also the immediate
dominator of v, i.e. every walk leaving u reaches v and every walk reaching
v came through u. Only the forward strand is considered.
"""
import logging
from typing import List

import networkx as nx

from bubblevcf.core.graph import SequenceGraph
from bubblevcf.core.models import Bubble

logger = logging.getLogger(__name__)

_SOURCE = "__source__"
_SINK = "__sink__"


def detect_bubbles(graph: SequenceGraph) -> List[Bubble]:
    """
    Find (entry, exit) bubble pairs in the forward view of the graph.

    Returns:
        Bubbles sorted by entry node
    """
    forward = graph.forward_view()
    if forward.number_of_nodes() == 0:
        return []

    sources = [n for n in forward if forward.in_degree(n) == 0]
    sinks = [n for n in forward if forward.out_degree(n) == 0]
    # fully cyclic components have no natural source or sink
    if not sources:
        sources = [min(forward.nodes)]
    if not sinks:
        sinks = [max(forward.nodes)]

    rooted = forward.copy()
    rooted.add_edges_from((_SOURCE, n) for n in sources)
    rooted.add_edges_from((n, _SINK) for n in sinks)

    dominators = nx.immediate_dominators(rooted, _SOURCE)
    post_dominators = nx.immediate_dominators(rooted.reverse(copy=False), _SINK)

    bubbles = []
    for node in forward.nodes:
        if forward.out_degree(node) < 2 or node not in dominators:
            continue
        exit_node = post_dominators.get(node)
        if exit_node is None or exit_node in (_SINK, node):
            continue
        if dominators.get(exit_node) == node:
            bubbles.append(Bubble(node, exit_node))

    bubbles.sort()
    logger.info(f"Detected {len(bubbles)} bubbles")
    return bubbles
