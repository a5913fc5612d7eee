"""Tests for the recursive tree search."""

import numpy as np
import pytest

from wordtree.memo import MemoStore
from wordtree.params import SearchParams
from wordtree.patterns import score
from wordtree.search import TreeSearch, select_best
from wordtree.state import ConstraintState
from wordtree.tree import DecisionNode, verify_tree


# jklma gives each of the other four words its own feedback pattern; the
# fgh* words only tell each other apart one letter at a time.
TOY = ["fghij", "fghik", "jklma", "fghil", "fghim"]

SMALL = [
    "crane", "slate", "trace", "crate", "react", "cater", "later", "alert",
    "alter", "stare", "tears", "rates", "aster", "least", "steal", "tales",
]


def make_search(words=SMALL, **kwargs):
    kwargs.setdefault("progress", False)
    kwargs.setdefault("use_matrix", False)
    kwargs.setdefault("n_guesses", 5)
    return TreeSearch(words, words, SearchParams(**kwargs))


class TestLeavesAndBounds:
    """Test the terminal cases of solve()."""

    def test_singleton_is_leaf(self):
        search = make_search()
        for depth in range(search.params.max_depth):
            node = search.solve(depth, [3])
            assert node.guess == SMALL[3]
            assert node.is_leaf
            assert node.solved
            assert node.total_guesses == 1
            assert node.max_guesses == 1
            assert node.leaf_count == 1

    def test_singleton_at_bound_fails(self):
        search = make_search(max_depth=3)
        assert search.solve(3, [0]) is None

    def test_depth_bound_one(self):
        search = make_search(max_depth=1)
        assert search.solve(0, np.arange(len(SMALL))) is None
        assert search.run() is None

    def test_empty_candidates_is_a_contract_violation(self):
        search = make_search()
        with pytest.raises(AssertionError):
            search.solve(0, np.array([], dtype=np.int64))


class TestToyVocabulary:
    """Test the full search on a vocabulary with an obvious opener."""

    def test_best_separator_chosen(self):
        tree = make_search(TOY).run()

        assert tree.guess == "jklma"
        assert tree.max_guesses == 2
        assert tree.total_guesses == 9
        assert tree.leaf_count == 5
        assert tree.solved
        assert len(tree.children) == 4

    def test_every_other_word_takes_two(self):
        tree = make_search(TOY).run()
        counts = verify_tree(tree, TOY)

        assert counts.pop("jklma") == 1
        assert set(counts.values()) == {2}

    def test_worse_opener_costs_more(self):
        search = make_search(TOY)
        forced = search.evaluate(0, TOY.index("fghij"), np.arange(len(TOY)))
        assert forced.total_guesses > 9


class TestSearch:
    """Test the general recursive step."""

    def test_resolves_every_answer(self):
        search = make_search()
        tree = search.run()

        assert tree is not None
        counts = verify_tree(tree, SMALL)
        assert sum(counts.values()) == tree.total_guesses
        assert max(counts.values()) == tree.max_guesses
        assert tree.leaf_count == len(SMALL)
        assert tree.max_guesses <= search.params.max_depth

    def test_deterministic(self):
        first = make_search().run()
        second = make_search().run()
        assert first == second

    def test_matrix_toggle_gives_same_tree(self):
        assert make_search(use_matrix=True).run() == make_search(use_matrix=False).run()

    def test_picks_cheapest_ranked_guess(self):
        search = make_search()
        candidates = np.arange(len(SMALL))
        tree = search.solve(0, candidates)

        totals = [
            node.total_guesses
            for node in (search.evaluate(0, g, candidates) for g in search.candidate_guesses(0, candidates))
            if node is not None
        ]
        assert tree.total_guesses == min(totals)

    def test_starting_word_forced(self):
        search = make_search(starting_word="tales")
        assert search.candidate_guesses(0, np.arange(len(SMALL))).tolist() == [SMALL.index("tales")]
        assert search.run().guess == "tales"

    def test_unknown_starting_word(self):
        with pytest.raises(ValueError, match="not found"):
            make_search(starting_word="zebra")

    def test_malformed_starting_word(self):
        with pytest.raises(ValueError):
            make_search(starting_word="zebras")

    def test_children_partition_candidates(self):
        tree = make_search().run()
        assert all(score(tree.guess, answer) in tree.children or answer == tree.guess for answer in SMALL)


class TestSelectBest:
    """Test the reduction over evaluated guesses."""

    def test_first_wins_ties(self):
        a = DecisionNode("crane", total_guesses=5)
        b = DecisionNode("slate", total_guesses=5)
        c = DecisionNode("trace", total_guesses=6)
        assert select_best([None, c, a, b]) is a

    def test_all_failed(self):
        assert select_best([None, None]) is None


class TestMemoized:
    """Test the constraint-state memoized search."""

    def test_resolves_every_answer(self):
        tree = make_search(memoize=True).run()
        counts = verify_tree(tree, SMALL)
        assert max(counts.values()) <= 6

    def test_toy_matches_plain_search(self):
        assert make_search(TOY, memoize=True).run() == make_search(TOY).run()

    def test_equivalent_histories_share_a_subtree(self):
        search = make_search(memoize=True)
        answer = "rates"
        a = ConstraintState.initial()
        for guess in ("slate", "crane"):
            a = a.advance(guess, score(guess, answer))
        b = ConstraintState.initial()
        for guess in ("crane", "slate"):
            b = b.advance(guess, score(guess, answer))
        assert a == b

        cached_a = search.solve_state(2, a)
        cached_b = search.solve_state(2, b)
        assert cached_b is cached_a
        assert search.memo.hits >= 1

        fresh = make_search(memoize=True).compute_state(2, b)
        assert fresh == cached_b
        survivors = [SMALL[i] for i in b.filter(search.answer_codes)]
        assert survivors == ["rates", "aster"]
        assert verify_tree(fresh, survivors) == verify_tree(cached_b, survivors)

    def test_depth_is_part_of_the_key(self):
        search = make_search(memoize=True, max_depth=3)
        state = ConstraintState.initial()
        search.solve_state(2, state)
        assert (2, state) in search.memo.cache
        assert (1, state) not in search.memo.cache

    def test_external_memo_store_used(self):
        memo = MemoStore()
        search = TreeSearch(TOY, TOY, SearchParams(memoize=True, progress=False), memo=memo)
        search.run()
        assert len(memo) > 0
