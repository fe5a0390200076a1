"""Per-product critical sections for stock mutations."""

import threading
import weakref
from collections.abc import Iterable
from contextlib import contextmanager


class StockLocks:
    """Registry of re-entrant locks keyed by product id.

    Locks for a group of products are always taken in sorted id order so two
    payments touching overlapping products cannot deadlock. The registry only
    holds weak references: a product's lock lives while some thread holds or
    waits on it, and is dropped afterwards.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary[str, threading.RLock] = weakref.WeakValueDictionary()

    def _lock_for(self, product_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.RLock()
            return lock

    def __len__(self):
        return len(self._locks)

    @contextmanager
    def hold(self, product_ids: Iterable[str]):
        locks = [self._lock_for(pid) for pid in sorted({str(pid) for pid in product_ids})]
        acquired = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


stock_locks = StockLocks()
