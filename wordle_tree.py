"""
wordle_tree.py

CLI for building a complete Wordle decision tree.

The tree says, for every possible answer, which word to guess next given the
feedback received so far. It is written to a flat file, one line per answer:
the comma-separated guesses played from the first guess until that answer.

Options:
-n-guesses N: guesses fully evaluated at every node after ranking (default 20).
-answers-only: guess only words from the answer list.
-starting-word WORD: force the opening guess.
-max-depth N: give up on branches needing more than N guesses (default 6).
-memo: share subtrees between histories that reach the same letter constraints.
-workers N: evaluate opening guesses in N processes.
-verify: replay every answer through the finished tree.
"""

import argparse
import os
import time

from wordtree.params import DEFAULT_MAX_DEPTH, DEFAULT_N_GUESSES, SearchParams
from wordtree.parallel import solve_tree
from wordtree.patterns import load_or_build_matrix
from wordtree.ranking import RANKERS
from wordtree.tree import format_summary, verify_tree, write_tree
from wordtree.words import ANSWERS_PATH, GUESSES_PATH, load_words


DEFAULT_OUT = "out.txt"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Build a Wordle guess tree that minimizes total guesses over all answers."
    )
    parser.add_argument(
        "-n-guesses",
        type=int,
        default=DEFAULT_N_GUESSES,
        help=f"Ranked guesses evaluated in full at every node (default: {DEFAULT_N_GUESSES}).",
    )
    parser.add_argument(
        "-answers-only",
        action="store_true",
        help="Restrict the guess vocabulary to the answer list.",
    )
    parser.add_argument(
        "-starting-word",
        type=str,
        default=None,
        help="Force the first guess instead of ranking the whole pool.",
    )
    parser.add_argument(
        "-max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum guesses allowed for any answer (default: {DEFAULT_MAX_DEPTH}).",
    )
    parser.add_argument(
        "-ranker",
        choices=tuple(RANKERS),
        default="average",
        help="Partition score used to rank guesses (default: average).",
    )
    parser.add_argument(
        "-no-matrix",
        action="store_true",
        help="Score guesses on demand instead of precomputing the pattern matrix.",
    )
    parser.add_argument(
        "-matrix-cache",
        type=str,
        default=None,
        help="Optional .npy path to reuse the pattern matrix between runs.",
    )
    parser.add_argument(
        "-memo",
        action="store_true",
        help="Reuse subtrees for guess histories with identical letter constraints.",
    )
    parser.add_argument(
        "-shared-memo",
        action="store_true",
        help="With -memo and several workers, share one memo across processes.",
    )
    parser.add_argument(
        "-workers",
        type=int,
        default=1,
        help="Worker processes for opening guesses (default: 1, 0 for CPU count).",
    )
    parser.add_argument(
        "-chunk-size",
        type=int,
        default=1,
        help="Opening guesses per worker task.",
    )
    parser.add_argument(
        "-answers",
        type=str,
        default=str(ANSWERS_PATH),
        help="Newline-separated answer list.",
    )
    parser.add_argument(
        "-guesses",
        type=str,
        default=str(GUESSES_PATH),
        help="Newline-separated extended guess list.",
    )
    parser.add_argument(
        "-out",
        type=str,
        default=DEFAULT_OUT,
        help=f"Output path for the tree (default: {DEFAULT_OUT}).",
    )
    parser.add_argument(
        "-verify",
        action="store_true",
        help="Replay every answer through the tree after solving.",
    )
    parser.add_argument(
        "-quiet",
        action="store_true",
        help="Suppress progress output.",
    )
    return parser.parse_args(argv)


def params_from_args(args) -> SearchParams:
    workers = args.workers if args.workers > 0 else (os.cpu_count() or 1)
    starting_word = args.starting_word.lower() if args.starting_word else None
    return SearchParams(
        n_guesses=args.n_guesses,
        answers_only=args.answers_only,
        starting_word=starting_word,
        max_depth=args.max_depth,
        use_matrix=not args.no_matrix,
        memoize=args.memo,
        workers=workers,
        chunk_size=args.chunk_size,
        shared_memo=args.shared_memo,
        ranker=args.ranker,
        progress=not args.quiet,
    )


def main(argv=None):
    args = parse_args(argv)
    try:
        params = params_from_args(args)
        answers, guesses = load_words(args.answers, args.guesses, params.answers_only)
    except (OSError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc

    if params.progress:
        print(f"Loaded {len(answers):,} answers and {len(guesses):,} allowed guesses.")

    start_time = time.time()
    try:
        matrix = None
        if params.use_matrix:
            matrix = load_or_build_matrix(guesses, answers, args.matrix_cache, params.progress)
        tree = solve_tree(guesses, answers, params, matrix)
    except (OSError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc

    if tree is None:
        raise SystemExit(f"No tree resolves every answer within {params.max_depth} guesses.")

    elapsed = time.time() - start_time
    print(f"\nDone in {elapsed/60:.1f} min!")
    print(format_summary(tree, len(answers)))

    n_lines = write_tree(tree, args.out)
    print(f"Wrote {n_lines:,} paths to {args.out}.")

    if args.verify:
        counts = verify_tree(tree, answers)
        print(
            f"Verified {len(counts):,} answers: total {sum(counts.values())}, "
            f"max {max(counts.values())}."
        )


if __name__ == "__main__":
    main()
