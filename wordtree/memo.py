"""
memo.py

Subtree caches keyed by search state.

get_or_compute runs the computation outside any lock, so two threads may race
on the same key. Both compute the same subtree, the first insert wins, and
every caller gets the stored value back.
"""

import threading

import cachetools


MAX_CACHE_SIZE = 2000000

_MISSING = object()


class MemoStore:
    """In-process subtree cache: a bounded LRU guarded by a lock."""

    def __init__(self, maxsize=MAX_CACHE_SIZE):
        self.cache = cachetools.LRUCache(maxsize=maxsize)
        self.lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key, compute):
        with self.lock:
            value = self.cache.get(key, _MISSING)
            if value is not _MISSING:
                self.hits += 1
                return value
            self.misses += 1

        value = compute()

        with self.lock:
            existing = self.cache.get(key, _MISSING)
            if existing is not _MISSING:
                return existing
            self.cache[key] = value
        return value

    def __len__(self):
        return len(self.cache)

    def status(self) -> str:
        return "(cache={:.1%}, hits={:,}, misses={:,})".format(
            self.cache.currsize / self.cache.maxsize, self.hits, self.misses
        )


class SharedMemoStore:
    """
    Subtree cache shared between processes through a multiprocessing manager.

    Every lookup is a round trip to the manager process, so this only pays off
    when workers revisit many of the same states.
    """

    def __init__(self, shared_dict):
        self.store = shared_dict

    def get_or_compute(self, key, compute):
        if key in self.store:
            return self.store[key]
        return self.store.setdefault(key, compute())

    def __len__(self):
        return len(self.store)

    def status(self) -> str:
        return f"(shared cache={len(self.store):,})"
