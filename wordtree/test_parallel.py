"""Tests for the process-pool dispatcher."""

from wordtree.params import SearchParams
from wordtree.parallel import solve_tree
from wordtree.tree import verify_tree


TOY = ["fghij", "fghik", "jklma", "fghil", "fghim"]

SMALL = [
    "crane", "slate", "trace", "crate", "react", "cater", "later", "alert",
    "alter", "stare", "tears", "rates", "aster", "least", "steal", "tales",
]


def params(**kwargs):
    kwargs.setdefault("progress", False)
    kwargs.setdefault("n_guesses", 4)
    return SearchParams(**kwargs)


class TestParallel:
    """Parallel evaluation changes wall-clock time only."""

    def test_toy(self):
        tree = solve_tree(TOY, TOY, params(workers=2))
        assert tree.guess == "jklma"
        assert tree.total_guesses == 9

    def test_same_tree_as_sequential(self):
        sequential = solve_tree(SMALL, SMALL, params(workers=1))
        parallel = solve_tree(SMALL, SMALL, params(workers=3))
        assert parallel == sequential

    def test_chunked_tasks(self):
        sequential = solve_tree(SMALL, SMALL, params(workers=1, use_matrix=False))
        parallel = solve_tree(SMALL, SMALL, params(workers=2, chunk_size=3, use_matrix=False))
        assert parallel == sequential

    def test_shared_memo(self):
        local = solve_tree(SMALL, SMALL, params(workers=1, memoize=True))
        shared = solve_tree(SMALL, SMALL, params(workers=2, memoize=True, shared_memo=True))
        assert shared == local
        assert max(verify_tree(shared, SMALL).values()) <= 6

    def test_depth_bound_failure(self):
        assert solve_tree(SMALL, SMALL, params(workers=2, max_depth=1)) is None
