import logging
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Set, Tuple

from bubblevcf.core.models import Variant, VariantKey, VariantType

logger = logging.getLogger(__name__)


def _key_order(key: VariantKey):
    return (key.contig.encode('utf-8'), key.position, key.reference.encode('utf-8'))


def _variant_order(variant: Variant):
    return (variant.alternate, variant.variant_type.value)


class VariantAggregator:
    """
    Collects distinct alternates per VariantKey.

    The aggregator only grows. Workers fill private aggregators which are
    merged into the run-level one with merge().
    """

    def __init__(self):
        self._alts: Dict[VariantKey, Set[Variant]] = defaultdict(set)

    def add(self, key: VariantKey, variant: Variant) -> None:
        self._alts[key].add(variant)

    def update(self, variants: Iterable[Tuple[VariantKey, Variant]]) -> None:
        for key, variant in variants:
            self.add(key, variant)

    def merge(self, other: "VariantAggregator") -> "VariantAggregator":
        for key, alts in other._alts.items():
            self._alts[key].update(alts)
        return self

    def alternates(self, key: VariantKey) -> Set[Variant]:
        return set(self._alts.get(key, ()))

    def items(self) -> Iterator[Tuple[VariantKey, List[Variant]]]:
        """Keys in output order with their alternates sorted."""
        for key in sorted(self._alts, key=_key_order):
            yield key, sorted(self._alts[key], key=_variant_order)

    def as_dict(self) -> Dict[VariantKey, Set[Variant]]:
        return {key: set(alts) for key, alts in self._alts.items()}

    def type_counts(self) -> Dict[VariantType, int]:
        counts = {variant_type: 0 for variant_type in VariantType}
        for alts in self._alts.values():
            for variant in alts:
                counts[variant.variant_type] += 1
        return counts

    def __len__(self) -> int:
        return len(self._alts)

    def __contains__(self, key: VariantKey) -> bool:
        return key in self._alts
