"""
tree.py

Decision tree nodes, their statistics, and the flat path file format.

Output file format: one line per answer, the comma-separated guesses played
from the root until that answer is guessed. Shared prefixes are repeated on
every line, so the set of lines is the set of root-to-answer paths.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from wordtree.patterns import ALL_GREEN, pattern_to_str, score


@dataclass
class DecisionNode:
    """
    A guess and the subtree to follow for each feedback pattern.

    solved is set when the guess is itself one of the candidates at this node,
    i.e. the all-green outcome wins here and needs no child.
    """

    guess: str
    children: Dict[int, "DecisionNode"] = field(default_factory=dict)
    solved: bool = False
    max_guesses: int = 1
    total_guesses: int = 1
    leaf_count: int = 1

    @classmethod
    def leaf(cls, word: str) -> "DecisionNode":
        return cls(guess=word, solved=True)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def __str__(self):
        return "DecisionNode({0.guess}) max={0.max_guesses},total={0.total_guesses},leaves={0.leaf_count}".format(
            self
        )


def iter_paths(node: DecisionNode, prefix=()) -> Iterator[List[str]]:
    """Root-to-answer guess sequences, children in ascending pattern order."""
    path = list(prefix) + [node.guess]
    if node.solved:
        yield path
    for pattern in sorted(node.children):
        yield from iter_paths(node.children[pattern], path)


def write_tree(node: DecisionNode, path) -> int:
    """Write one comma-separated path per line; returns the line count."""
    count = 0
    with open(path, "w", encoding="ascii") as handle:
        for words in iter_paths(node):
            handle.write(",".join(words) + "\n")
            count += 1
    return count


def read_paths(path) -> List[List[str]]:
    """Parse a file written by write_tree back into guess sequences."""
    with open(path, "r", encoding="ascii") as handle:
        return [line.strip().split(",") for line in handle if line.strip()]


def format_summary(node: DecisionNode, n_answers: int) -> str:
    return (
        f"{node.guess}, total: {node.total_guesses}, "
        f"avg: {node.total_guesses / n_answers:.4f}, max: {node.max_guesses}"
    )


def play(node: DecisionNode, answer: str) -> int:
    """Number of guesses the tree needs to find answer."""
    n_guesses = 0
    while True:
        n_guesses += 1
        pattern = score(node.guess, answer)
        if pattern == ALL_GREEN:
            return n_guesses
        if pattern not in node.children:
            raise ValueError(
                f"tree has no branch for {answer!r} after {node.guess!r} "
                f"({pattern_to_str(pattern)})"
            )
        node = node.children[pattern]


def verify_tree(node: DecisionNode, answers) -> Dict[str, int]:
    """Play every answer through the tree; returns guesses used per answer."""
    return {answer: play(node, answer) for answer in answers}
