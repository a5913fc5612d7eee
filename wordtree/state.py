"""
state.py

Letter-constraint summary of the feedback seen along one path of the tree.

A ConstraintState keeps, for each of the five positions, a 26-bit mask of the
letters still possible there, plus a mask of letters known to appear somewhere
in the answer. Two guess histories that end in the same state carry the same
information, so the search can reuse one subtree for both.
"""

from typing import NamedTuple

import numpy as np

from wordtree.patterns import BLACK, GREEN, YELLOW, pattern_digits
from wordtree.words import WORD_LENGTH


N_LETTERS = 26
FULL_MASK = (1 << N_LETTERS) - 1


class InconsistentStateError(RuntimeError):
    """Feedback ruled out every letter at some position."""


def letter_bit(ch: str) -> int:
    return 1 << (ord(ch) - ord("a"))


class ConstraintState(NamedTuple):
    positions: tuple
    required: int

    @classmethod
    def initial(cls) -> "ConstraintState":
        """The state before any guess: everything possible, nothing required."""
        return cls((FULL_MASK,) * WORD_LENGTH, 0)

    def advance(self, guess: str, pattern: int) -> "ConstraintState":
        """
        Fold one guess and its feedback into the state.

        Green pins the position to the letter. Yellow removes the letter from
        that position and marks it required. Black removes the letter from its
        position, and from every position when the same guess shows the letter
        nowhere as green or yellow.
        """
        digits = pattern_digits(pattern)
        positions = list(self.positions)
        required = self.required
        shown = {ch for ch, d in zip(guess, digits) if d != BLACK}

        for i, (ch, d) in enumerate(zip(guess, digits)):
            bit = letter_bit(ch)
            if d == GREEN:
                positions[i] = bit
                required |= bit
            elif d == YELLOW:
                positions[i] &= ~bit
                required |= bit

        for i, (ch, d) in enumerate(zip(guess, digits)):
            if d != BLACK:
                continue
            bit = letter_bit(ch)
            if ch in shown:
                positions[i] &= ~bit
            else:
                positions = [mask & ~bit for mask in positions]

        state = ConstraintState(tuple(positions), required)
        state.check()
        return state

    def check(self):
        """Raise InconsistentStateError if no word can satisfy the state."""
        allowed = 0
        for i, mask in enumerate(self.positions):
            if mask == 0:
                raise InconsistentStateError(
                    f"no letter left at position {i} ({self.describe()})"
                )
            allowed |= mask
        if self.required & ~allowed:
            raise InconsistentStateError(
                f"required letters fit no position ({self.describe()})"
            )

    def could_be_answer(self, word: str) -> bool:
        """True when word agrees with every fact in the state."""
        letters = 0
        for mask, ch in zip(self.positions, word):
            bit = letter_bit(ch)
            if not mask & bit:
                return False
            letters |= bit
        return self.required & ~letters == 0

    def filter(self, word_codes) -> np.ndarray:
        """
        Indices of the words consistent with the state.

        word_codes is the (n, 5) letter-code array from patterns.encode_words.
        """
        codes = np.asarray(word_codes, dtype=np.int64)
        ok = np.ones(codes.shape[0], dtype=bool)
        letters = np.zeros(codes.shape[0], dtype=np.int64)
        for i, mask in enumerate(self.positions):
            ok &= ((mask >> codes[:, i]) & 1).astype(bool)
            letters |= np.left_shift(1, codes[:, i])
        ok &= (letters & self.required) == self.required
        return np.flatnonzero(ok)

    def describe(self) -> str:
        def letters(mask):
            return "".join(chr(ord("a") + k) for k in range(N_LETTERS) if mask >> k & 1)

        slots = " ".join(
            "*" if mask == FULL_MASK else letters(mask) for mask in self.positions
        )
        return f"[{slots}] required={letters(self.required) or '-'}"


def could_be_answer(state: ConstraintState, word: str) -> bool:
    return state.could_be_answer(word)
