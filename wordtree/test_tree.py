"""Tests for decision tree serialization and replay."""

import pytest

from wordtree.params import SearchParams
from wordtree.search import TreeSearch
from wordtree.tree import DecisionNode, format_summary, iter_paths, read_paths, verify_tree, write_tree


TOY = ["fghij", "fghik", "jklma", "fghil", "fghim"]


@pytest.fixture
def toy_tree():
    return TreeSearch(TOY, TOY, SearchParams(progress=False, use_matrix=False)).run()


class TestPaths:
    """Test root-to-answer path enumeration."""

    def test_leaf_path(self):
        assert list(iter_paths(DecisionNode.leaf("crane"))) == [["crane"]]

    def test_toy_paths(self, toy_tree):
        assert list(iter_paths(toy_tree)) == [
            ["jklma"],
            ["jklma", "fghim"],
            ["jklma", "fghil"],
            ["jklma", "fghik"],
            ["jklma", "fghij"],
        ]

    def test_one_path_per_answer(self, toy_tree):
        paths = list(iter_paths(toy_tree))
        assert len(paths) == toy_tree.leaf_count
        assert sorted(path[-1] for path in paths) == sorted(TOY)


class TestWriter:
    """Test the flat output file."""

    def test_round_trip(self, toy_tree, tmp_path):
        out = tmp_path / "out.txt"
        assert write_tree(toy_tree, out) == 5

        lines = out.read_text().splitlines()
        assert lines[0] == "jklma"
        assert "jklma,fghij" in lines
        assert read_paths(out) == list(iter_paths(toy_tree))

    def test_summary(self, toy_tree):
        assert format_summary(toy_tree, len(TOY)) == "jklma, total: 9, avg: 1.8000, max: 2"


class TestVerify:
    """Test replaying answers through a tree."""

    def test_counts(self, toy_tree):
        counts = verify_tree(toy_tree, TOY)
        assert counts == {"fghij": 2, "fghik": 2, "jklma": 1, "fghil": 2, "fghim": 2}
        assert sum(counts.values()) == toy_tree.total_guesses

    def test_unknown_answer(self, toy_tree):
        with pytest.raises(ValueError, match="no branch"):
            verify_tree(toy_tree, ["zzzzz"])
