"""
parallel.py

Fans the opening guesses of a search out over a process pool.

Each worker holds its own TreeSearch over the same read-only word lists and
matrix, installed once by the pool initializer, and evaluates whole opening
guesses sequentially. The parent reduces the results with the same rule the
sequential search uses, in ranked order, so the chosen tree does not depend
on the worker count or on completion order.
"""

import multiprocessing as mp
from dataclasses import replace

from tqdm import tqdm

from wordtree.memo import SharedMemoStore
from wordtree.search import TreeSearch, select_best
from wordtree.tree import format_summary


_WORKER_STATE = {}


def _init_worker(guesses, answers, matrix, params, shared_memo):
    memo = SharedMemoStore(shared_memo) if shared_memo is not None else None
    _WORKER_STATE["search"] = TreeSearch(
        guesses,
        answers,
        replace(params, workers=1, progress=False),
        matrix=matrix,
        memo=memo,
    )


def _worker_chunk(task):
    search = _WORKER_STATE["search"]
    return [(position, search.evaluate_root(guess)) for position, guess in task]


def solve_parallel(search: TreeSearch):
    """Evaluate search's opening guesses in worker processes."""
    params = search.params
    ranked = [(position, int(guess)) for position, guess in enumerate(search.root_guesses())]
    tasks = [
        ranked[start:start + params.chunk_size]
        for start in range(0, len(ranked), params.chunk_size)
    ]
    worker_count = max(1, min(params.workers, len(tasks)))

    if params.progress:
        print(
            f"Evaluating {len(ranked)} opening guess(es) using {worker_count} worker(s), "
            f"chunk size {params.chunk_size}..."
        )

    start_methods = mp.get_all_start_methods()
    start_method = "fork" if "fork" in start_methods else "spawn"
    ctx = mp.get_context(start_method)

    manager = ctx.Manager() if params.memoize and params.shared_memo else None
    shared_memo = manager.dict() if manager is not None else None
    results = [None] * len(ranked)

    try:
        with ctx.Pool(
            processes=worker_count,
            initializer=_init_worker,
            initargs=(search.guesses, search.answers, search.matrix, params, shared_memo),
        ) as pool:
            finished = pool.imap_unordered(_worker_chunk, tasks, chunksize=1)
            for chunk in tqdm(finished, total=len(tasks), desc="Opening guess", disable=not params.progress):
                for position, node in chunk:
                    results[position] = node
                    if not params.progress:
                        continue
                    guess = search.guesses[ranked[position][1]]
                    if node is None:
                        tqdm.write(f"{guess}: no tree within {params.max_depth} guesses")
                    else:
                        tqdm.write(format_summary(node, len(search.answers)))
    finally:
        if manager is not None:
            manager.shutdown()

    return select_best(results)


def solve_tree(guesses, answers, params=None, matrix=None):
    """
    Build the decision tree for answers using guesses as the pool.

    Returns the root DecisionNode, or None when no tree fits within
    params.max_depth.
    """
    search = TreeSearch(guesses, answers, params, matrix)
    if search.params.workers > 1 and len(search.answers) > 1:
        return solve_parallel(search)
    return search.run()
