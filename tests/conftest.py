import pytest

from bubblevcf.core.graph import SequenceGraph
from bubblevcf.core.models import Orientation, Path, Step


def make_path(name, nodes, orientation=Orientation.FORWARD):
    return Path(name=name, steps=[Step(node, orientation) for node in nodes])


@pytest.fixture
def snv_graph():
    """A("AC") -> B("G") | D("C") -> C("T"), plus a direct A -> C edge."""
    sequences = {1: "AC", 2: "G", 3: "T", 4: "C"}
    edges = [(1, 2), (2, 3), (1, 4), (4, 3), (1, 3)]
    return SequenceGraph.from_edges(sequences, edges)


@pytest.fixture
def snv_paths():
    return {
        "ref": make_path("ref", [1, 2, 3]),
        "alt": make_path("alt", [1, 4, 3]),
    }


@pytest.fixture
def example_gfa(tmp_path):
    """Small GFA1 file with one bubble and two paths."""
    p = tmp_path / "example.gfa"
    content = """H\tVN:Z:1.0
S\t1\tAC
S\t2\tG
S\t3\tT
S\t4\tC
L\t1\t+\t2\t+\t0M
L\t2\t+\t3\t+\t0M
L\t1\t+\t4\t+\t0M
L\t4\t+\t3\t+\t0M
P\tref\t1+,2+,3+\t*
P\talt\t1+,4+,3+\t0M,0M
"""
    with open(p, "w") as f:
        f.write(content)
    return p


@pytest.fixture
def bubble_file(tmp_path):
    p = tmp_path / "bubbles.tsv"
    with open(p, "w") as f:
        f.write("# start\tend\n1\t3\n\n3\t1\n")
    return p
