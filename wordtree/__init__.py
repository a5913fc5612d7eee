"""
wordtree

Builds Wordle decision trees: for every possible answer, which word to guess
next given the feedback so far.
"""

from wordtree.params import SearchParams
from wordtree.patterns import ALL_GREEN, score
from wordtree.parallel import solve_tree
from wordtree.search import TreeSearch
from wordtree.tree import DecisionNode, write_tree

__all__ = [
    "ALL_GREEN",
    "DecisionNode",
    "SearchParams",
    "TreeSearch",
    "score",
    "solve_tree",
    "write_tree",
]
