import pytest

from bubblevcf.caller import BubbleVariantCaller, CallSummary
from bubblevcf.config import Config
from bubblevcf.core.graph import SequenceGraph
from bubblevcf.core.models import Bubble, Orientation, Path, Step
from bubblevcf.variation.aggregator import VariantAggregator


def _lines(records):
    return [record.to_line() for record in records]


def test_single_reference(snv_graph, snv_paths):
    caller = BubbleVariantCaller(snv_graph, snv_paths, reference_paths=["ref"])

    records = caller.call([Bubble(1, 3)])

    assert _lines(records) == [
        "ref\t2\t.\tCG\tC\t.\t.\tTYPE=del\tGT\t0|1",
        "ref\t3\t.\tG\tC\t.\t.\tTYPE=snv\tGT\t0|1",
    ]


def test_every_path_is_a_reference_by_default(snv_graph, snv_paths):
    caller = BubbleVariantCaller(snv_graph, snv_paths)
    records = caller.call([Bubble(1, 3)])

    assert caller.reference_names == ["alt", "ref"]
    assert [(r.chromosome, r.position, r.reference, r.alternate) for r in records] == [
        ("alt", 2, "CC", "C"),
        ("alt", 3, "C", "G"),
        ("ref", 2, "CG", "C"),
        ("ref", 3, "G", "C"),
    ]
    assert caller.contig_lengths() == {"alt": 4, "ref": 4}


def test_bubble_given_in_reverse_order(snv_graph, snv_paths):
    forward = BubbleVariantCaller(snv_graph, snv_paths, ["ref"]).call([Bubble(1, 3)])
    backward = BubbleVariantCaller(snv_graph, snv_paths, ["ref"]).call([Bubble(3, 1)])
    assert _lines(forward) == _lines(backward)


def test_other_paths_are_candidates_without_enumeration(snv_graph, snv_paths):
    caller = BubbleVariantCaller(snv_graph, snv_paths, ["ref"], max_edges=0)
    records = caller.call([Bubble(1, 3)])
    assert _lines(records) == ["ref\t3\t.\tG\tC\t.\t.\tTYPE=snv\tGT\t0|1"]

    caller = BubbleVariantCaller(snv_graph, snv_paths, ["ref"], max_edges=0, compare_paths=False)
    aggregator, summary = caller.aggregate([Bubble(1, 3)])
    assert len(aggregator) == 0
    assert summary.budget_exhausted == [Bubble(1, 3)]


def test_bubble_off_the_reference(snv_graph, snv_paths):
    caller = BubbleVariantCaller(snv_graph, snv_paths, ["ref"])
    aggregator = VariantAggregator()

    summary = caller.process_bubble(Bubble(4, 4), aggregator)

    assert len(aggregator) == 0
    assert summary.bubbles == 1
    assert summary.bubbles_without_reference == 1


def test_unknown_reference(snv_graph, snv_paths):
    with pytest.raises(KeyError):
        BubbleVariantCaller(snv_graph, snv_paths, ["chrX"])


def test_all_occurrences(snv_graph):
    paths = {"ref": Path(name="ref", steps=[Step(n) for n in [1, 2, 3, 4, 1, 2, 3]])}

    first_only = BubbleVariantCaller(snv_graph, paths).call([Bubble(1, 3)])
    every = BubbleVariantCaller(snv_graph, paths, all_occurrences=True).call([Bubble(1, 3)])

    assert [r.position for r in first_only] == [2, 3]
    assert [r.position for r in every] == [2, 3, 7, 8]


def test_thread_workers_match_serial(snv_graph, snv_paths):
    bubbles = [Bubble(1, 3), Bubble(3, 1), Bubble(4, 4), Bubble(1, 2)]
    serial = BubbleVariantCaller(snv_graph, snv_paths).call(bubbles)
    parallel = BubbleVariantCaller(snv_graph, snv_paths, workers=2, pool_type="thread").call(bubbles)

    assert _lines(parallel) == _lines(serial)


def test_process_workers_match_serial(snv_graph, snv_paths):
    bubbles = [Bubble(1, 3), Bubble(3, 1), Bubble(4, 4), Bubble(1, 2)]
    serial = BubbleVariantCaller(snv_graph, snv_paths).call(bubbles)
    parallel = BubbleVariantCaller(snv_graph, snv_paths, workers=2, pool_type="process").call(bubbles)

    assert _lines(parallel) == _lines(serial)


def test_reverse_branch_found_through_other_paths():
    graph = SequenceGraph.from_edges({1: "AC", 2: "G", 3: "T", 4: "G"}, [(1, 2), (2, 3)])
    graph.add_edge(1, Orientation.FORWARD, 4, Orientation.REVERSE)
    graph.add_edge(4, Orientation.REVERSE, 3, Orientation.FORWARD)
    paths = {
        "ref": Path(name="ref", steps=[Step(1), Step(2), Step(3)]),
        "alt": Path(name="alt", steps=[Step(1), Step(4, Orientation.REVERSE), Step(3)]),
    }

    records = BubbleVariantCaller(graph, paths, ["ref"]).call([Bubble(1, 3)])
    assert _lines(records) == ["ref\t3\t.\tG\tC\t.\t.\tTYPE=snv\tGT\t0|1"]

    records = BubbleVariantCaller(graph, paths, ["ref"], compare_paths=False).call([Bubble(1, 3)])
    assert records == []


def test_from_config(snv_graph, snv_paths):
    config = Config({"reference_paths": "ref", "compare_paths": False, "max_edges": 10})
    caller = BubbleVariantCaller.from_config(snv_graph, snv_paths, config)

    assert caller.reference_names == ["ref"]
    assert caller.compare_paths is False
    assert caller.enumerator.max_edges == 10


def test_summary_merge():
    left = CallSummary(bubbles=2, comparisons=3, budget_exhausted=[Bubble(1, 2)])
    right = CallSummary(bubbles=1, bubbles_without_reference=1)
    merged = left.merge(right)
    assert merged.bubbles == 3
    assert merged.bubbles_without_reference == 1
    assert merged.budget_exhausted == [Bubble(1, 2)]
