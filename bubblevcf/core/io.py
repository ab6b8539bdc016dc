"""
Input adapters: GFA1 graphs with paths, and bubble lists.
"""
import logging
import os
from typing import Dict, Iterable, List, Optional, TextIO

import gfapy

from bubblevcf.core.graph import SequenceGraph
from bubblevcf.core.models import Bubble, Orientation, Path, Step


class MalformedInputError(Exception):
    """Raised when an input file cannot be parsed. Aborts the run."""
    pass


def _segment_id(name: str, filepath: str, line_num: int) -> int:
    try:
        return int(name)
    except (TypeError, ValueError):
        raise MalformedInputError(
            f"{filepath}:{line_num}: segment name '{name}' is not an integer id; "
            f"convert segment names to integers first"
        )


def _overlap_text(overlap) -> Optional[str]:
    if overlap is None or gfapy.is_placeholder(overlap):
        return None
    return str(overlap)


class GFAReader:
    """
    Reads segments, links and paths of a GFA1 file into a SequenceGraph.

    Lines are parsed one at a time with gfapy, so a path may reference
    links that are not present in the file.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.graph = SequenceGraph()
        self._paths: Dict[str, Path] = {}
        self._links: List[tuple] = []

    def parse(self, filepath: str) -> SequenceGraph:
        """
        Parse a GFA file and return the graph.

        Args:
            filepath: Path to the GFA file

        Returns:
            The populated SequenceGraph; paths are available from get_paths()

        Raises:
            FileNotFoundError: If the file doesn't exist
            MalformedInputError: If a line is rejected or references unknown segments
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"GFA file not found: {filepath}")

        self.logger.info(f"Parsing GFA file: {filepath}")
        self.graph = SequenceGraph()
        self._paths = {}
        self._links = []
        raw_paths = []

        with open(filepath, 'r') as gfa_file:
            for line_num, line_str in enumerate(gfa_file, 1):
                line_str = line_str.rstrip('\r\n')
                if not line_str or line_str.startswith('#'):
                    continue

                record_type = line_str.split('\t', 1)[0]
                if record_type not in ('S', 'L', 'P'):
                    self.logger.debug(f"Skipping {record_type} record on line {line_num}")
                    continue

                try:
                    record = gfapy.Line(line_str, version="gfa1")
                except (gfapy.error.Error, ValueError) as e:
                    raise MalformedInputError(f"{filepath}:{line_num}: {e}") from e

                if record_type == 'S':
                    sequence = record.sequence
                    if gfapy.is_placeholder(sequence):
                        sequence = ""
                    node = _segment_id(record.name, filepath, line_num)
                    self.graph.add_node(node, str(sequence).upper())
                elif record_type == 'L':
                    self._links.append((
                        _segment_id(record.from_segment, filepath, line_num),
                        Orientation.from_symbol(record.from_orient),
                        _segment_id(record.to_segment, filepath, line_num),
                        Orientation.from_symbol(record.to_orient),
                        line_num,
                    ))
                else:
                    raw_paths.append((record, line_num))

        # links and paths may precede the segments they name
        for from_node, from_orient, to_node, to_orient, line_num in self._links:
            try:
                self.graph.add_edge(from_node, from_orient, to_node, to_orient)
            except KeyError as e:
                raise MalformedInputError(f"{filepath}:{line_num}: link references unknown segment {e}")

        for record, line_num in raw_paths:
            path = self._build_path(record, filepath, line_num)
            if path.name in self._paths:
                self.logger.warning(f"Duplicate path name '{path.name}' on line {line_num}, keeping the last one")
            self._paths[path.name] = path

        self.logger.info(
            f"Successfully parsed GFA with {len(self.graph)} segments, "
            f"{len(self._links)} links and {len(self._paths)} paths"
        )
        return self.graph

    def _build_path(self, record, filepath: str, line_num: int) -> Path:
        overlaps = record.overlaps
        if overlaps is None or gfapy.is_placeholder(overlaps):
            overlaps = []

        steps = []
        for index, oriented in enumerate(record.segment_names):
            node = _segment_id(oriented.name, filepath, line_num)
            if not self.graph.has_node(node):
                raise MalformedInputError(
                    f"{filepath}:{line_num}: path {record.path_name} references unknown segment {node}"
                )
            overlap = overlaps[index] if index < len(overlaps) else None
            steps.append(Step(node, Orientation.from_symbol(oriented.orient), _overlap_text(overlap)))
        return Path(name=str(record.path_name), steps=steps)

    def get_paths(self) -> Dict[str, Path]:
        """Return all paths in the GFA file, keyed by name."""
        return self._paths


def read_bubbles(handle: TextIO, source: str = "<stream>") -> List[Bubble]:
    """
    Parse `start<TAB>end` bubble lines.

    Blank lines and '#' comments are skipped. Repeated pairs (in either
    order) are kept once, in first-seen order.

    Raises:
        MalformedInputError: On any line that is not two integer columns
    """
    bubbles = []
    seen = set()
    for line_num, line in enumerate(handle, 1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        fields = line.split('\t')
        if len(fields) != 2:
            raise MalformedInputError(
                f"{source}:{line_num}: expected 2 tab-separated columns, found {len(fields)}"
            )
        try:
            bubble = Bubble(int(fields[0]), int(fields[1]))
        except ValueError:
            raise MalformedInputError(f"{source}:{line_num}: bubble ends must be integer node ids: {line!r}")
        if bubble.canonical() in seen:
            continue
        seen.add(bubble.canonical())
        bubbles.append(bubble)
    return bubbles


def load_bubbles(filepath: str) -> List[Bubble]:
    """Load a bubble list from a two-column TSV file."""
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Bubble file not found: {filepath}")
    with open(filepath, 'r') as f:
        bubbles = read_bubbles(f, source=filepath)
    logging.getLogger(__name__).info(f"Loaded {len(bubbles)} bubbles from {filepath}")
    return bubbles


def write_bubbles(bubbles: Iterable[Bubble], handle: TextIO) -> None:
    for bubble in bubbles:
        handle.write(f"{bubble.start}\t{bubble.end}\n")
