"""
ranking.py

Cheap partition-quality scores used to order candidate guesses before the
expensive recursive evaluation. Every policy maps a (n_guesses, 243) array of
bucket sizes to one score per guess; lower is better.
"""

import numpy as np

from wordtree.patterns import ALL_GREEN, N_PATTERNS


# Pool rows histogrammed per bincount call; bounds the temporary int64 buffer.
COUNT_CHUNK = 1024


def entropy_from_counts(counts):
    """Compute Shannon entropy from bucket counts."""
    total = counts.sum()
    probs = counts[counts > 0] / total
    return -np.sum(probs * np.log2(probs))


def bucket_counts(table):
    """
    Bucket sizes for every guess at once.

    table is (n_guesses, n_candidates) of pattern codes. Each row is shifted
    into its own block of 243 codes so one bincount histograms the whole chunk.
    """
    n_rows = table.shape[0]
    counts = np.empty((n_rows, N_PATTERNS), dtype=np.int64)
    for start in range(0, n_rows, COUNT_CHUNK):
        block = table[start:start + COUNT_CHUNK]
        offsets = np.arange(block.shape[0], dtype=np.int64)[:, None] * N_PATTERNS
        joint = (block.astype(np.int64) + offsets).ravel()
        counts[start:start + block.shape[0]] = np.bincount(
            joint, minlength=block.shape[0] * N_PATTERNS
        ).reshape(block.shape[0], N_PATTERNS)
    return counts


def average_bucket_score(counts):
    """
    Candidates left outside the winning bucket, divided by the bucket count.

    Finer partitions and smaller non-winning buckets both lower the score; it
    approximates the expected number of candidates left after the guess.
    """
    non_green = counts.sum(axis=1) - counts[:, ALL_GREEN]
    n_buckets = np.count_nonzero(counts, axis=1)
    return non_green / n_buckets


def negative_entropy_score(counts):
    """Minus the Shannon entropy of the partition, in bits."""
    return -np.array([entropy_from_counts(row) for row in counts], dtype=np.float64)


def worst_bucket_score(counts):
    """Size of the largest bucket."""
    return counts.max(axis=1).astype(np.float64)


RANKERS = {
    "average": average_bucket_score,
    "entropy": negative_entropy_score,
    "worst": worst_bucket_score,
}


def get_ranker(name):
    try:
        return RANKERS[name]
    except KeyError as exc:
        raise ValueError(
            f"unknown ranker {name!r}, expected one of: {', '.join(RANKERS)}"
        ) from exc


def rank(table, n_guesses, policy=average_bucket_score):
    """
    Pool indices of the best n_guesses guesses, best first.

    The sort is stable, so equal scores keep pool order.
    """
    scores = policy(bucket_counts(table))
    order = np.argsort(scores, kind="stable")
    return order[:n_guesses]
