"""
words.py

Handles loading and validating the Wordle word lists.
No numpy here, just clean text handling.
"""

from pathlib import Path


DATA_DIR = Path(__file__).resolve().parent.parent / "data"
ANSWERS_PATH = DATA_DIR / "answers.txt"
GUESSES_PATH = DATA_DIR / "guesses.txt"

WORD_LENGTH = 5
ALPHABET = frozenset("abcdefghijklmnopqrstuvwxyz")


def validate_word(word, lineno=None):
    """Raise ValueError unless word is five lowercase ascii letters."""
    where = f" (line {lineno})" if lineno is not None else ""
    if len(word) != WORD_LENGTH:
        raise ValueError(
            f"word {word!r}{where} has length {len(word)}, expected {WORD_LENGTH}"
        )
    if not ALPHABET.issuperset(word):
        raise ValueError(f"word {word!r}{where} contains characters outside a-z")
    return word


def parse_word_list(lines):
    """Parse newline-separated words, skipping blank lines."""
    words = []
    for lineno, line in enumerate(lines, start=1):
        word = line.strip()
        if word:
            words.append(validate_word(word, lineno))
    return words


def load_word_list(path):
    """Load a newline-separated word list into a Python list."""
    with open(path, "r", encoding="ascii") as f:
        return parse_word_list(f)


def build_guess_pool(answers, extended=(), answers_only=False):
    """
    Returns:
        answers: answer words with duplicates dropped (first occurrence kept)
        guesses: the allowed guess vocabulary

    With answers_only the guess pool is exactly the answer list. Otherwise it
    is the sorted union of answers and the extended list.
    """
    answers = list(dict.fromkeys(answers))
    if answers_only:
        return answers, list(answers)
    return answers, sorted(set(answers) | set(extended))


def load_words(answers_path=ANSWERS_PATH, guesses_path=GUESSES_PATH, answers_only=False):
    """
    Returns:
        answers: list of possible solution words
        guesses: list of valid guess words (includes answers)
    """
    answers = load_word_list(answers_path)
    if not answers:
        raise ValueError(f"answer list {answers_path} is empty")
    extended = [] if answers_only else load_word_list(guesses_path)
    return build_guess_pool(answers, extended, answers_only)
