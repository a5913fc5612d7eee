"""
patterns.py

Wordle feedback scoring, the precomputed feedback pattern matrix, and
partitioning of candidate answers by feedback.

Matrix shape:
    (n_allowed_guesses, n_answers)

Each cell contains an integer 0..242 encoding the 5-tile Wordle feedback
pattern in base-3, first tile most significant:

    0 = gray (black)
    1 = yellow
    2 = green

With the matrix in memory, scoring a guess against any set of candidates is a
single fancy-indexing operation.
"""

import hashlib
from pathlib import Path

import numpy as np
from numba import njit
from tqdm import tqdm

from wordtree.words import WORD_LENGTH


BLACK = 0
YELLOW = 1
GREEN = 2

N_PATTERNS = 3**WORD_LENGTH
ALL_GREEN = N_PATTERNS - 1

_SYMBOLS = "byg"

# Rows scored per kernel call while building the matrix.
BUILD_CHUNK = 256


def score(guess: str, answer: str) -> int:
    """
    Encode Wordle feedback for a (guess, answer) pair as a base-3 integer.

    This implementation matches standard Wordle duplicate-letter rules:

    1. First mark greens (correct letter in correct position).
       Each green crosses out that letter in both words.

    2. Then, left to right, mark a yellow if the letter is still present
       somewhere in the answer, crossing out the first such occurrence.
       Everything else stays gray.
    """
    result = [BLACK] * WORD_LENGTH
    remaining = list(answer)

    # First pass: mark greens and cross out letters
    for i in range(WORD_LENGTH):
        if guess[i] == answer[i]:
            result[i] = GREEN
            remaining[i] = None

    # Second pass: mark yellows where letters remain unused
    for i in range(WORD_LENGTH):
        if result[i] == BLACK and guess[i] in remaining:
            result[i] = YELLOW
            remaining[remaining.index(guess[i])] = None

    code = 0
    for r in result:
        code = code * 3 + r

    return code


def pattern_digits(code: int) -> tuple:
    """Per-tile colors of a pattern code, first tile first."""
    digits = []
    for _ in range(WORD_LENGTH):
        code, digit = divmod(code, 3)
        digits.append(digit)
    return tuple(reversed(digits))


def pattern_to_str(code: int) -> str:
    """Render a pattern code as b/y/g characters, e.g. 242 -> 'ggggg'."""
    return "".join(_SYMBOLS[d] for d in pattern_digits(code))


def str_to_pattern(text: str) -> int:
    """Parse a b/y/g pattern string back to its code."""
    if len(text) != WORD_LENGTH or not set(text) <= set(_SYMBOLS):
        raise ValueError(f"invalid feedback pattern: {text!r}")
    code = 0
    for ch in text:
        code = code * 3 + _SYMBOLS.index(ch)
    return code


def encode_words(words) -> np.ndarray:
    """Words as a (n, 5) uint8 array of letter codes 0..25."""
    if not words:
        return np.zeros((0, WORD_LENGTH), dtype=np.uint8)
    raw = np.frombuffer("".join(words).encode("ascii"), dtype=np.uint8)
    return (raw - ord("a")).reshape(len(words), WORD_LENGTH)


@njit(cache=True)
def _fill_matrix(guess_codes, answer_codes, out):
    remaining = np.empty(WORD_LENGTH, dtype=np.int16)
    result = np.empty(WORD_LENGTH, dtype=np.uint8)

    for g in range(guess_codes.shape[0]):
        for a in range(answer_codes.shape[0]):
            for i in range(WORD_LENGTH):
                remaining[i] = answer_codes[a, i]
                result[i] = 0

            for i in range(WORD_LENGTH):
                if guess_codes[g, i] == answer_codes[a, i]:
                    result[i] = 2
                    remaining[i] = -1

            for i in range(WORD_LENGTH):
                if result[i] == 0:
                    letter = guess_codes[g, i]
                    for j in range(WORD_LENGTH):
                        if remaining[j] == letter:
                            result[i] = 1
                            remaining[j] = -1
                            break

            code = 0
            for i in range(WORD_LENGTH):
                code = code * 3 + result[i]
            out[g, a] = code


def build_matrix(guesses, answers, progress=True) -> np.ndarray:
    """
    Compute the full pattern matrix from scratch.

    This is the most expensive setup step, but it only needs to be done once
    per word list. Progress is shown so long builds don't look stuck.
    """
    guess_codes = encode_words(guesses)
    answer_codes = encode_words(answers)
    matrix = np.zeros((len(guesses), len(answers)), dtype=np.uint8)

    if progress:
        print(f"Building {len(guesses)}x{len(answers)} pattern matrix...")
    starts = range(0, len(guesses), BUILD_CHUNK)
    for start in tqdm(starts, unit="chunk", disable=not progress):
        end = min(start + BUILD_CHUNK, len(guesses))
        _fill_matrix(guess_codes[start:end], answer_codes, matrix[start:end])

    return matrix


def word_lists_fingerprint(guesses, answers) -> str:
    """Stable hash of both word lists, used to validate a cached matrix."""
    digest = hashlib.sha256()
    digest.update("\n".join(guesses).encode("ascii"))
    digest.update(b"\0")
    digest.update("\n".join(answers).encode("ascii"))
    return digest.hexdigest()


def load_or_build_matrix(guesses, answers, cache_path=None, progress=True) -> np.ndarray:
    """
    Load a previously built pattern matrix if it matches current word lists.

    If the cache file is missing, its shape does not match, or the word lists
    it was built from differ, it is rebuilt (and saved when cache_path is set).
    """
    if cache_path is None:
        return build_matrix(guesses, answers, progress)

    cache_path = Path(cache_path)
    fingerprint_path = cache_path.with_suffix(".sha256")
    fingerprint = word_lists_fingerprint(guesses, answers)

    if cache_path.exists() and fingerprint_path.exists():
        matrix = np.load(cache_path)

        # Guard 1: matrix dimensions must match active word lists.
        shape_ok = matrix.shape == (len(guesses), len(answers))

        # Guard 2: the exact word lists must be the ones the cache was built from.
        lists_ok = fingerprint_path.read_text(encoding="ascii").strip() == fingerprint

        if shape_ok and lists_ok:
            if progress:
                print("Loaded compatible pattern matrix from disk.")
            return matrix

        if progress:
            if not shape_ok:
                print("Matrix shape mismatch. Rebuilding.")
            else:
                print("Matrix was built from different word lists. Rebuilding.")

    matrix = build_matrix(guesses, answers, progress)
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    np.save(cache_path, matrix)
    fingerprint_path.write_text(fingerprint + "\n", encoding="ascii")
    if progress:
        print("Matrix saved to disk.")

    return matrix


class PatternSource:
    """
    Feedback codes for guess-pool words against candidate answers.

    Backed by the precomputed matrix when one is given, otherwise every code is
    computed with score() on demand. Both give identical results.
    """

    def __init__(self, guesses, answers, matrix=None):
        self.guesses = guesses
        self.answers = answers
        self.matrix = matrix

    @property
    def n_guesses(self):
        return len(self.guesses)

    def row(self, guess, candidates) -> np.ndarray:
        """Codes of one guess (pool index) against each candidate."""
        if self.matrix is not None:
            return self.matrix[guess, candidates]
        word = self.guesses[guess]
        return np.fromiter(
            (score(word, self.answers[a]) for a in candidates),
            dtype=np.uint8,
            count=len(candidates),
        )

    def table(self, candidates) -> np.ndarray:
        """Codes of every pool word against each candidate, (n_guesses, n)."""
        if self.matrix is not None:
            return self.matrix[:, candidates]
        return np.stack([self.row(g, candidates) for g in range(self.n_guesses)])


def partition(codes, candidates):
    """
    Group candidates by the feedback code each one produced.

    Returns {pattern_code: candidate indices}, keys ascending. The buckets are
    disjoint and together hold exactly the input candidates, each bucket in
    the input order.
    """
    codes = np.asarray(codes)
    candidates = np.asarray(candidates)
    order = np.argsort(codes, kind="stable")
    keys, starts = np.unique(codes[order], return_index=True)
    groups = np.split(candidates[order], starts[1:])
    return dict(zip(keys.tolist(), groups))
