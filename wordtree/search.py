"""
search.py

Depth-bounded recursive construction of the guess tree.

At every node the guess pool is ranked by a cheap partition score, the best
few guesses are each tried in full by recursing into every feedback bucket,
and the guess with the smallest total guess count wins. A branch that cannot
finish within the depth bound returns None and simply drops the guess that
led to it.

With memoization on, nodes are keyed by (depth, ConstraintState) and the
candidates of a node are the answers consistent with its state, so subtrees
are shared between guess histories that learned the same facts.
"""

import numpy as np
from tqdm import tqdm

from wordtree.memo import MemoStore
from wordtree.params import SearchParams
from wordtree.patterns import ALL_GREEN, PatternSource, build_matrix, encode_words, partition
from wordtree.ranking import get_ranker, rank
from wordtree.state import ConstraintState
from wordtree.tree import DecisionNode, format_summary
from wordtree.words import validate_word


def select_best(nodes):
    """Smallest total guess count; the earliest node wins ties. None if empty."""
    best = None
    for node in nodes:
        if node is None:
            continue
        if best is None or node.total_guesses < best.total_guesses:
            best = node
    return best


class TreeSearch:
    """
    One configured search over a fixed guess pool and answer list.

    guesses and answers are never modified. Only the memo store, when present,
    changes during a search.
    """

    def __init__(self, guesses, answers, params=None, matrix=None, memo=None):
        self.params = params if params is not None else SearchParams()
        self.guesses = list(guesses)
        self.answers = list(answers)

        if self.params.use_matrix and matrix is None:
            matrix = build_matrix(self.guesses, self.answers, self.params.progress)
        self.source = PatternSource(
            self.guesses, self.answers, matrix if self.params.use_matrix else None
        )
        self.policy = get_ranker(self.params.ranker)
        self.answer_codes = encode_words(self.answers)

        if memo is None and self.params.memoize:
            memo = MemoStore()
        self.memo = memo

        self.starting_index = None
        if self.params.starting_word is not None:
            word = validate_word(self.params.starting_word)
            try:
                self.starting_index = self.guesses.index(word)
            except ValueError as exc:
                raise ValueError(f"starting word not found in guess list: {word}") from exc

    @property
    def matrix(self):
        return self.source.matrix

    # Ranking

    def candidate_guesses(self, depth, candidates) -> np.ndarray:
        """Pool indices worth a full evaluation at this node, best first."""
        if depth == 0 and self.starting_index is not None:
            return np.array([self.starting_index])
        return rank(self.source.table(candidates), self.params.n_guesses, self.policy)

    # Plain search over explicit candidate sets

    def solve(self, depth, candidates):
        """
        Best subtree for the given candidate answer indices, or None when no
        tree fits within max_depth.
        """
        candidates = np.asarray(candidates)
        assert candidates.size > 0, "solve() needs at least one candidate answer"

        if depth >= self.params.max_depth:
            return None

        if candidates.size == 1:
            return DecisionNode.leaf(self.answers[candidates[0]])

        return select_best(
            self.evaluate(depth, guess, candidates)
            for guess in self.candidate_guesses(depth, candidates)
        )

    def evaluate(self, depth, guess, candidates, state=None):
        """
        Subtree rooted at one specific guess, or None if any bucket fails.

        Every candidate pays one guess for this node. Candidates left in a
        non-winning bucket then pay whatever their child subtree costs.
        """
        word = self.guesses[guess]
        buckets = partition(self.source.row(guess, candidates), candidates)
        solved = ALL_GREEN in buckets
        node = DecisionNode(
            guess=word,
            solved=solved,
            max_guesses=1,
            total_guesses=int(candidates.size),
            leaf_count=1 if solved else 0,
        )

        for pattern, bucket in buckets.items():
            if pattern == ALL_GREEN:
                continue
            if state is None:
                child = self.solve(depth + 1, bucket)
            else:
                child = self.solve_state(depth + 1, state.advance(word, pattern))
            if child is None:
                return None
            node.children[pattern] = child
            node.total_guesses += child.total_guesses
            node.max_guesses = max(node.max_guesses, child.max_guesses + 1)
            node.leaf_count += child.leaf_count

        return node

    # Memoized search over constraint states

    def solve_state(self, depth, state):
        """Best subtree for every answer consistent with state, cached."""
        if depth >= self.params.max_depth:
            return None
        return self.memo.get_or_compute(
            (depth, state), lambda: self.compute_state(depth, state)
        )

    def compute_state(self, depth, state):
        """solve_state without the cache lookup."""
        candidates = state.filter(self.answer_codes)
        assert candidates.size > 0, f"no answer is consistent with {state.describe()}"

        if candidates.size == 1:
            return DecisionNode.leaf(self.answers[candidates[0]])

        return select_best(
            self.evaluate(depth, guess, candidates, state)
            for guess in self.candidate_guesses(depth, candidates)
        )

    # Top level

    def root_candidates(self) -> np.ndarray:
        return np.arange(len(self.answers))

    def root_guesses(self) -> np.ndarray:
        return self.candidate_guesses(0, self.root_candidates())

    def evaluate_root(self, guess):
        """Full tree for one opening guess, or None if it does not fit."""
        candidates = self.root_candidates()
        if len(candidates) == 1:
            return self.solve(0, candidates)
        state = ConstraintState.initial() if self.memo is not None else None
        return self.evaluate(0, guess, candidates, state)

    def run(self):
        """
        Solve the whole answer list in this process.

        Every opening guess is reported as it finishes, the way the parallel
        dispatcher reports worker results.
        """
        if len(self.answers) <= 1:
            return self.solve(0, self.root_candidates())

        progress = self.params.progress
        nodes = []
        for guess in tqdm(self.root_guesses(), desc="Opening guess", disable=not progress):
            node = self.evaluate_root(guess)
            nodes.append(node)
            if progress:
                if node is None:
                    tqdm.write(f"{self.guesses[guess]}: no tree within {self.params.max_depth} guesses")
                else:
                    tqdm.write(format_summary(node, len(self.answers)))

        if progress and self.memo is not None:
            print(f"Memo {self.memo.status()}")
        return select_best(nodes)
