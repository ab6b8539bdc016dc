import io

import pytest

from bubblevcf.core.io import GFAReader, MalformedInputError, load_bubbles, read_bubbles, write_bubbles
from bubblevcf.core.models import Bubble, Direction, Orientation


def _write(tmp_path, name, content):
    p = tmp_path / name
    with open(p, "w") as f:
        f.write(content)
    return str(p)


class TestGFAReader:

    def test_parse_example(self, example_gfa):
        reader = GFAReader()
        graph = reader.parse(str(example_gfa))

        assert graph.node_ids() == [1, 2, 3, 4]
        assert graph.sequence(1) == "AC"
        assert graph.neighbors(1, Direction.RIGHT) == [2, 4]
        assert graph.neighbors(3, Direction.LEFT) == [2, 4]

        paths = reader.get_paths()
        assert sorted(paths) == ["alt", "ref"]
        assert paths["ref"].node_ids() == [1, 2, 3]
        assert paths["alt"].node_ids() == [1, 4, 3]

    def test_path_orientation_and_overlaps(self, tmp_path):
        gfa = _write(tmp_path, "rev.gfa", "S\t1\tacg\nS\t2\t*\nL\t1\t+\t2\t-\t0M\nP\tp\t1+,2-\t0M\n")
        reader = GFAReader()
        graph = reader.parse(gfa)

        assert graph.sequence(1) == "ACG"
        assert graph.sequence(2) == ""
        steps = reader.get_paths()["p"].steps
        assert [s.orientation for s in steps] == [Orientation.FORWARD, Orientation.REVERSE]
        assert steps[0].overlap == "0M"
        assert steps[1].overlap is None

    def test_lines_in_any_order(self, tmp_path):
        gfa = _write(tmp_path, "order.gfa", "P\tp\t1+,2+\t*\nL\t1\t+\t2\t+\t*\nS\t1\tA\nS\t2\tC\n")
        reader = GFAReader()
        graph = reader.parse(gfa)
        assert graph.neighbors(1) == [2]
        assert reader.get_paths()["p"].node_ids() == [1, 2]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GFAReader().parse(str(tmp_path / "missing.gfa"))

    def test_non_integer_segment_name(self, tmp_path):
        gfa = _write(tmp_path, "named.gfa", "S\tchr1_a\tACGT\n")
        with pytest.raises(MalformedInputError, match="not an integer"):
            GFAReader().parse(gfa)

    def test_link_to_unknown_segment(self, tmp_path):
        gfa = _write(tmp_path, "link.gfa", "S\t1\tA\nL\t1\t+\t2\t+\t0M\n")
        with pytest.raises(MalformedInputError, match="unknown segment"):
            GFAReader().parse(gfa)

    def test_path_over_unknown_segment(self, tmp_path):
        gfa = _write(tmp_path, "path.gfa", "S\t1\tA\nP\tp\t1+,5+\t*\n")
        with pytest.raises(MalformedInputError, match="unknown segment 5"):
            GFAReader().parse(gfa)

    def test_broken_line(self, tmp_path):
        gfa = _write(tmp_path, "broken.gfa", "S\t1\tA\nL\t1\t+\n")
        with pytest.raises(MalformedInputError):
            GFAReader().parse(gfa)


class TestBubbleFiles:

    def test_load_skips_comments_and_duplicates(self, bubble_file):
        assert load_bubbles(str(bubble_file)) == [Bubble(1, 3)]

    def test_missing_bubble_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_bubbles(str(tmp_path / "none.tsv"))

    @pytest.mark.parametrize("line", ["1\n", "1\t2\t3\n", "a\t2\n", "1 2\n"])
    def test_malformed_lines(self, line):
        with pytest.raises(MalformedInputError):
            read_bubbles(io.StringIO(line))

    def test_write_bubbles(self):
        out = io.StringIO()
        write_bubbles([Bubble(1, 4), Bubble(4, 7)], out)
        assert out.getvalue() == "1\t4\n4\t7\n"
