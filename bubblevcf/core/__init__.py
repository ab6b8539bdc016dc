from .models import Bubble, Direction, Handle, Orientation, Path, Step, SubPath, Variant, VariantKey, VariantType
from .graph import SequenceGraph

__all__ = [
    'Bubble', 'Direction', 'Handle', 'Orientation', 'Path', 'Step', 'SubPath',
    'Variant', 'VariantKey', 'VariantType', 'SequenceGraph',
]
