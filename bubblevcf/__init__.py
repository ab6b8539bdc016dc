"""
bubblevcf: bubble-based variant calling over sequence graphs.
"""

__version__ = "0.3.2"

from .core.graph import SequenceGraph
from .core.io import GFAReader, MalformedInputError, load_bubbles
from .variation.enumerator import BubblePathEnumerator
from .variation.differ import VariantDiffer
from .variation.aggregator import VariantAggregator
from .caller import BubbleVariantCaller

__all__ = [
    "SequenceGraph",
    "GFAReader",
    "MalformedInputError",
    "load_bubbles",
    "BubblePathEnumerator",
    "VariantDiffer",
    "VariantAggregator",
    "BubbleVariantCaller",
]
