"""
Node-level comparison of a candidate path against a reference path.

Bubbles are short, so instead of aligning sequences the differ walks both
node lists side by side with one node of lookahead:

- same node on both sides: shared sequence, advance both;
- candidate is at the reference's next node: the reference node was deleted;
- reference is at the candidate's next node: the candidate node was inserted;
- otherwise: the nodes are substituted (SNV).

Indels are left-anchored on the last reference base walked before the
event, so REF and ALT are never empty. Zero-length nodes contribute no
bases: deleting or inserting one is not a variant, and a substitution whose
base matches the reference is not reported either.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from bubblevcf.core.graph import SequenceGraph
from bubblevcf.core.models import Orientation, Step, Variant, VariantKey, VariantType

logger = logging.getLogger(__name__)

StepLike = Union[Step, int]


def _as_step(step: StepLike) -> Step:
    if isinstance(step, Step):
        return step
    return Step(step, Orientation.FORWARD)


def is_inverted_pair(reference: Sequence[Step], candidate: Sequence[Step]) -> bool:
    """
    True when the pair disagrees on orientation at its first step or at the
    last candidate step that the reference also visits.
    """
    if not reference or not candidate:
        return False
    if reference[0].orientation != candidate[0].orientation:
        return True

    reference_orients: Dict[int, Orientation] = {}
    for step in reference:
        reference_orients.setdefault(step.node, step.orientation)
    for step in reversed(candidate):
        if step.node in reference_orients:
            return reference_orients[step.node] != step.orientation
    return False


class VariantDiffer:
    """
    Detects variants between reference steps and candidate steps.

    Reference steps start at the bubble entry and may run on past the bubble
    exit; the walk ends as soon as either side runs out of steps.
    """

    def __init__(self, graph: SequenceGraph, ignore_inverted_paths: bool = False):
        """
        Initialize the VariantDiffer.

        Args:
            graph: Graph providing node sequences
            ignore_inverted_paths: Skip pairs whose orientations disagree at the boundaries
        """
        self.graph = graph
        self.ignore_inverted_paths = ignore_inverted_paths

    def _sequence(self, step: Step) -> Optional[str]:
        try:
            return self.graph.sequence(step.node, step.orientation)
        except KeyError:
            logger.debug(f"No sequence for node {step.node}")
            return None

    def detect_variants(self,
                        contig: str,
                        reference: Sequence[StepLike],
                        candidate: Sequence[StepLike],
                        reference_offset: int = 0) -> List[Tuple[VariantKey, Variant]]:
        """
        Compare one candidate path against the reference.

        Args:
            contig: Name of the reference path, used as CHROM
            reference: Reference steps beginning at the bubble entry occurrence
            candidate: Candidate steps (or bare node ids) beginning at the bubble entry
            reference_offset: 0-based base offset of the first reference step

        Returns:
            (key, variant) pairs in walk order; empty if nothing differs
        """
        ref_steps = [_as_step(s) for s in reference]
        cand_steps = [_as_step(s) for s in candidate]
        variants: List[Tuple[VariantKey, Variant]] = []

        if not ref_steps or not cand_steps:
            return variants
        if self.ignore_inverted_paths and is_inverted_pair(ref_steps, cand_steps):
            logger.debug(f"Skipping inverted candidate against {contig}")
            return variants
        if ref_steps[0].node != cand_steps[0].node:
            return variants

        ref_ix = 0
        cand_ix = 0
        ref_pos = reference_offset
        # last reference base walked so far, the anchor for indels
        anchor: Optional[str] = None

        while ref_ix < len(ref_steps) and cand_ix < len(cand_steps):
            ref_step = ref_steps[ref_ix]
            cand_step = cand_steps[cand_ix]
            ref_seq = self._sequence(ref_step)
            cand_seq = self._sequence(cand_step)
            if ref_seq is None or cand_seq is None:
                break

            if ref_step.node == cand_step.node:
                ref_ix += 1
                cand_ix += 1
                ref_pos += len(ref_seq)
                anchor = ref_seq[-1] if ref_seq else anchor
                continue

            next_ref = ref_steps[ref_ix + 1].node if ref_ix + 1 < len(ref_steps) else None
            next_cand = cand_steps[cand_ix + 1].node if cand_ix + 1 < len(cand_steps) else None

            if next_ref is not None and cand_step.node == next_ref:
                if ref_seq and anchor is not None:
                    key = VariantKey(contig, ref_pos, anchor + ref_seq)
                    variants.append((key, Variant(VariantType.DELETION, anchor)))
                ref_ix += 1
                ref_pos += len(ref_seq)
                anchor = ref_seq[-1] if ref_seq else anchor
            elif next_cand is not None and ref_step.node == next_cand:
                if cand_seq and anchor is not None:
                    key = VariantKey(contig, ref_pos, anchor)
                    variants.append((key, Variant(VariantType.INSERTION, anchor + cand_seq)))
                cand_ix += 1
            else:
                if ref_seq and cand_seq and ref_seq != cand_seq[-1]:
                    key = VariantKey(contig, ref_pos + 1, ref_seq)
                    variants.append((key, Variant(VariantType.SNV, cand_seq[-1])))
                ref_ix += 1
                cand_ix += 1
                ref_pos += len(ref_seq)
                anchor = ref_seq[-1] if ref_seq else anchor

        return variants
