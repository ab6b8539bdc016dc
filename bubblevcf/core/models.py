from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from Bio.Seq import reverse_complement


class Orientation(Enum):
    """Traversal direction of a node reference."""
    FORWARD = "+"
    REVERSE = "-"

    @classmethod
    def from_symbol(cls, symbol: str) -> "Orientation":
        return cls(symbol)

    def flip(self) -> "Orientation":
        return Orientation.REVERSE if self is Orientation.FORWARD else Orientation.FORWARD

    @property
    def is_reverse(self) -> bool:
        return self is Orientation.REVERSE

    def __str__(self) -> str:
        return self.value


class Direction(Enum):
    """Side of a forward handle that neighbors are read from."""
    LEFT = "left"
    RIGHT = "right"


class Handle(NamedTuple):
    node: int
    orientation: Orientation = Orientation.FORWARD

    def flip(self) -> "Handle":
        return Handle(self.node, self.orientation.flip())


class Step(NamedTuple):
    """One step of a path: an oriented node plus the optional overlap CIGAR."""
    node: int
    orientation: Orientation = Orientation.FORWARD
    overlap: Optional[str] = None


def oriented_sequence(sequence: str, orientation: Orientation) -> str:
    """Return the sequence as read in the given orientation."""
    if orientation.is_reverse:
        return reverse_complement(sequence)
    return sequence


@dataclass
class Path:
    """A named traversal of oriented nodes (one contig or sample)."""
    name: str
    steps: List[Step] = field(default_factory=list)

    def node_ids(self) -> List[int]:
        return [step.node for step in self.steps]

    def __len__(self) -> int:
        return len(self.steps)


@dataclass
class SubPath:
    """A path restricted to the inclusive stretch between two bubble boundaries."""
    path_name: str
    steps: List[Step] = field(default_factory=list)

    def node_ids(self) -> Tuple[int, ...]:
        return tuple(step.node for step in self.steps)


class Bubble(NamedTuple):
    """Boundary pair of a bubble. The pair is unordered; paths decide which end is the start."""
    start: int
    end: int

    def other(self, node: int) -> int:
        return self.end if node == self.start else self.start

    def canonical(self) -> Tuple[int, int]:
        return (min(self.start, self.end), max(self.start, self.end))


class VariantType(Enum):
    """Kinds of variants called inside a bubble."""
    DELETION = "del"
    INSERTION = "ins"
    SNV = "snv"


class VariantKey(NamedTuple):
    """Aggregation identity: contig, 1-based anchor position and reference allele."""
    contig: str
    position: int
    reference: str


class Variant(NamedTuple):
    """One alternate observation for a VariantKey."""
    variant_type: VariantType
    alternate: str
