"""
Run-level orchestration of bubble variant calling.

For every bubble and every reference path that touches it, candidate
traversals are enumerated from the graph (and optionally taken from the
other input paths), diffed against the reference, and folded into a
VariantAggregator. Bubbles are independent, so chunks of them can be
processed by separate workers, each with a private aggregator that the
caller merges at the end.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from bubblevcf.config import Config
from bubblevcf.core.graph import SequenceGraph
from bubblevcf.core.models import Bubble, Path, Step
from bubblevcf.parallel import TaskChunker, iter_parallel
from bubblevcf.reporting.vcf import VCFRecord, records_from_aggregate
from bubblevcf.variation.aggregator import VariantAggregator
from bubblevcf.variation.differ import VariantDiffer
from bubblevcf.variation.enumerator import BubblePathEnumerator, DEFAULT_MAX_EDGES, EnumerationResult
from bubblevcf.variation.paths import ReferencePathIndex, bubble_sub_paths

logger = logging.getLogger(__name__)


@dataclass
class CallSummary:
    """Counters collected over a run."""
    bubbles: int = 0
    bubbles_without_reference: int = 0
    budget_exhausted: List[Bubble] = field(default_factory=list)
    comparisons: int = 0

    def merge(self, other: "CallSummary") -> "CallSummary":
        self.bubbles += other.bubbles
        self.bubbles_without_reference += other.bubbles_without_reference
        self.budget_exhausted.extend(other.budget_exhausted)
        self.comparisons += other.comparisons
        return self


class BubbleVariantCaller:
    """
    Calls SNVs and indels inside bubbles against one or more reference paths.
    """

    def __init__(self,
                 graph: SequenceGraph,
                 paths: Dict[str, Path],
                 reference_paths: Optional[Sequence[str]] = None,
                 max_edges: int = DEFAULT_MAX_EDGES,
                 ignore_inverted_paths: bool = False,
                 compare_paths: bool = True,
                 all_occurrences: bool = False,
                 workers: int = 1,
                 pool_type: str = "process",
                 show_progress: bool = False):
        """
        Initialize the caller.

        Args:
            graph: The sequence graph
            paths: All input paths keyed by name
            reference_paths: Paths to call against; every path when None
            max_edges: Edge traversal budget per bubble enumeration
            ignore_inverted_paths: Skip pairs whose boundary orientations disagree
            compare_paths: Also use the other input paths as candidates
            all_occurrences: Compare from every occurrence of the entry node, not just the first
            workers: Number of workers; 1 processes bubbles in this process
            pool_type: 'process' or 'thread'
            show_progress: Show a tqdm progress bar over bubbles

        Raises:
            KeyError: If a reference path is not among the paths
        """
        self.graph = graph
        self.paths = paths
        self.index = ReferencePathIndex(graph, paths, reference_paths)
        self.enumerator = BubblePathEnumerator(graph, max_edges)
        self.differ = VariantDiffer(graph, ignore_inverted_paths)
        self.compare_paths = compare_paths
        self.all_occurrences = all_occurrences
        self.workers = workers
        self.pool_type = pool_type
        self.show_progress = show_progress

    @classmethod
    def from_config(cls, graph: SequenceGraph, paths: Dict[str, Path], config: Config,
                    show_progress: bool = False) -> "BubbleVariantCaller":
        return cls(
            graph,
            paths,
            reference_paths=config.get("reference_paths"),
            max_edges=config.get("max_edges"),
            ignore_inverted_paths=config.get("ignore_inverted_paths"),
            compare_paths=config.get("compare_paths"),
            all_occurrences=config.get("all_occurrences"),
            workers=config.get("workers"),
            pool_type=config.get("pool_type"),
            show_progress=show_progress,
        )

    @property
    def reference_names(self) -> List[str]:
        return self.index.reference_names

    def contig_lengths(self) -> Dict[str, int]:
        return {name: self.index.path_length(name) for name in self.reference_names}

    def process_bubble(self, bubble: Bubble, aggregator: VariantAggregator,
                       summary: Optional[CallSummary] = None) -> CallSummary:
        """
        Call variants in one bubble and fold them into the given aggregator.
        """
        summary = summary if summary is not None else CallSummary()
        summary.bubbles += 1
        enumerations: Dict[Tuple[int, int], EnumerationResult] = {}
        sub_paths = bubble_sub_paths(self.paths.values(), bubble) if self.compare_paths else []
        touched = False

        for ref_name in self.reference_names:
            entry = self.index.first_boundary(ref_name, bubble)
            if entry is None:
                continue
            touched = True
            exit_node = bubble.other(entry)

            if (entry, exit_node) not in enumerations:
                enumeration = self.enumerator.enumerate(entry, exit_node)
                enumerations[(entry, exit_node)] = enumeration
                if enumeration.budget_exhausted:
                    summary.budget_exhausted.append(bubble)
            candidates: List[List[Step]] = [
                [Step(node) for node in path] for path in enumerations[(entry, exit_node)].paths
            ]
            candidates.extend(
                sub.steps for sub in sub_paths
                if sub.path_name != ref_name and sub.steps[0].node == entry
            )

            occurrences = self.index.occurrences(ref_name, entry)
            if not self.all_occurrences:
                occurrences = occurrences[:1]

            for step_index in occurrences:
                ref_steps = self.index.steps_from(ref_name, step_index)
                offset = self.index.offset(ref_name, step_index)
                for candidate in candidates:
                    aggregator.update(self.differ.detect_variants(ref_name, ref_steps, candidate, offset))
                    summary.comparisons += 1

        if not touched:
            summary.bubbles_without_reference += 1
            logger.debug(f"Bubble {bubble.start}-{bubble.end} is not on any reference path")
        return summary

    def process_bubbles(self, bubbles: Sequence[Bubble]) -> Tuple[VariantAggregator, CallSummary]:
        """Process a batch of bubbles into a fresh aggregator."""
        aggregator = VariantAggregator()
        summary = CallSummary()
        for bubble in bubbles:
            self.process_bubble(bubble, aggregator, summary)
        return aggregator, summary

    def aggregate(self, bubbles: Sequence[Bubble]) -> Tuple[VariantAggregator, CallSummary]:
        """
        Process all bubbles, in parallel when more than one worker is configured.

        Returns:
            The merged aggregator and run counters
        """
        bubbles = list(bubbles)
        aggregator = VariantAggregator()
        summary = CallSummary()
        logger.info(
            f"Calling variants in {len(bubbles)} bubbles against "
            f"{len(self.reference_names)} reference paths"
        )

        if self.workers <= 1 or len(bubbles) < 2:
            for bubble in tqdm(bubbles, desc="Calling bubbles", unit=" bubbles",
                               disable=not self.show_progress):
                self.process_bubble(bubble, aggregator, summary)
        else:
            chunks = TaskChunker.chunk_tasks(bubbles, self.workers * 4)
            with tqdm(total=len(bubbles), desc="Calling bubbles", unit=" bubbles",
                      disable=not self.show_progress) as pbar:
                for chunk_aggregator, chunk_summary in iter_parallel(
                        self.process_bubbles, chunks, self.workers, self.pool_type):
                    aggregator.merge(chunk_aggregator)
                    summary.merge(chunk_summary)
                    pbar.update(chunk_summary.bubbles)

        if summary.budget_exhausted:
            logger.warning(
                f"Edge budget exhausted in {len(summary.budget_exhausted)} bubbles; "
                f"their calls may be incomplete"
            )
        if summary.bubbles_without_reference:
            logger.info(f"{summary.bubbles_without_reference} bubbles were not on any reference path")
        counts = aggregator.type_counts()
        logger.info(
            f"Found {len(aggregator)} variant sites "
            + ", ".join(f"{variant_type.value}={count}" for variant_type, count in counts.items())
        )
        return aggregator, summary

    def call(self, bubbles: Sequence[Bubble]) -> List[VCFRecord]:
        """Run the whole pipeline and return sorted VCF records."""
        aggregator, _ = self.aggregate(bubbles)
        return records_from_aggregate(aggregator)
