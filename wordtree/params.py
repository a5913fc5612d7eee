"""
params.py

Search configuration shared by the sequential and parallel solvers.
"""

from dataclasses import dataclass
from typing import Optional


DEFAULT_N_GUESSES = 20
DEFAULT_MAX_DEPTH = 6


@dataclass(frozen=True)
class SearchParams:
    """Knobs for one tree search."""

    # Guesses kept after ranking at every node.
    n_guesses: int = DEFAULT_N_GUESSES
    # Restrict the guess pool to the answer list.
    answers_only: bool = False
    # Forced guess at the root, skipping ranking.
    starting_word: Optional[str] = None
    # Depth at which a branch is abandoned; 6 means at most six guesses.
    max_depth: int = DEFAULT_MAX_DEPTH
    # Read feedback from the precomputed matrix instead of scoring on demand.
    use_matrix: bool = True
    # Share subtrees between guess histories with the same constraint state.
    memoize: bool = False
    # Processes evaluating opening guesses; 1 keeps everything in-process.
    workers: int = 1
    # Opening guesses handed to a worker per task.
    chunk_size: int = 1
    # With workers > 1, one memo shared by all workers through a manager process.
    shared_memo: bool = False
    # Name of the ranking policy in ranking.RANKERS.
    ranker: str = "average"
    # Console progress output.
    progress: bool = True

    def __post_init__(self):
        if self.n_guesses < 1:
            raise ValueError(f"n_guesses must be positive, got {self.n_guesses}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.workers < 1:
            raise ValueError(f"workers must be positive, got {self.workers}")
