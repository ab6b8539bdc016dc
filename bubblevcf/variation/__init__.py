"""
Bubble variation analysis: path enumeration, reference indexing, diffing
and aggregation.
"""

from .paths import ReferencePathIndex, bubble_sub_paths
from .enumerator import BubblePathEnumerator, EnumerationResult, find_all_paths_between
from .differ import VariantDiffer, is_inverted_pair
from .aggregator import VariantAggregator
from .bubbles import detect_bubbles

__all__ = [
    'ReferencePathIndex', 'bubble_sub_paths',
    'BubblePathEnumerator', 'EnumerationResult', 'find_all_paths_between',
    'VariantDiffer', 'is_inverted_pair',
    'VariantAggregator',
    'detect_bubbles',
]
