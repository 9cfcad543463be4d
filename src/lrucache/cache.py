"""Fixed-capacity least-recently-used cache.

The cache keeps two views over one set of entries: a ``KeyIndex`` for O(1)
lookup and a ``RecencyList`` for O(1) reordering and eviction. Every public
method leaves both views describing the same entries.

Not thread-safe. Note that ``get`` mutates the recency order, so callers
sharing a cache between threads must lock around reads as well as writes.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from typing import Generic, TypeVar

from lrucache.errors import LRUCacheCapacityError, LRUCacheStateError
from lrucache.index import KeyIndex
from lrucache.recency import HEAD, TAIL, RecencyList

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

logger = logging.getLogger("lrucache.cache")


def _validate_capacity(capacity: object) -> int:
    if not isinstance(capacity, int) or isinstance(capacity, bool):
        raise LRUCacheCapacityError(
            f"capacity must be an integer, got {type(capacity).__name__}"
        )
    if capacity < 1:
        raise LRUCacheCapacityError(f"capacity must be >= 1, got {capacity}")
    return capacity


class LRUCache(Generic[K, V]):
    """Key-value store that evicts the least recently used entry on overflow.

    Both ``get`` and ``put`` count as a use. Eviction happens only inside
    ``put``, and at most one entry is evicted per call.
    """

    __slots__ = ("_capacity", "_index", "_list")

    def __init__(self, capacity: int) -> None:
        self._capacity = _validate_capacity(capacity)
        self._index: KeyIndex[K] = KeyIndex()
        self._list: RecencyList[K, V] = RecencyList()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K) -> V | None:
        """Return the value for ``key`` and mark it most recently used.

        A miss returns None. Use ``key in cache`` to tell a miss apart from a
        stored None.
        """

        handle = self._index.lookup(key)
        if handle is None:
            return None
        self._list.unlink(handle)
        self._list.insert_at_head(handle)
        return self._list.value(handle)

    def peek(self, key: K) -> V | None:
        """Return the value for ``key`` without touching the recency order."""

        handle = self._index.lookup(key)
        if handle is None:
            return None
        return self._list.value(handle)

    def put(self, key: K, value: V) -> None:
        """Insert or update ``key`` and mark it most recently used."""

        handle = self._index.lookup(key)
        if handle is not None:
            self._list.unlink(handle)
            self._list.set_value(handle, value)
        else:
            handle = self._list.allocate(key, value)
            self._index.insert(key, handle)
        self._list.insert_at_head(handle)

        if len(self._index) > self._capacity:
            self._evict()

    def remove(self, key: K) -> bool:
        """Drop ``key`` from the cache. Returns False if it was not resident."""

        handle = self._index.remove(key)
        if handle is None:
            return False
        self._list.unlink(handle)
        self._list.release(handle)
        logger.debug("Removed key %r", key)
        return True

    def clear(self) -> None:
        self._index.clear()
        self._list.clear()

    def _evict(self) -> None:
        handle = self._list.remove_tail()
        key = self._list.key(handle)
        if self._index.remove(key) != handle:
            raise LRUCacheStateError(f"evicted key {key!r} was not indexed to its slot")
        self._list.release(handle)
        logger.debug("Evicted least recently used key %r (capacity=%d)", key, self._capacity)

    # -- inspection ------------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[K]:
        """Yield keys from most to least recently used."""

        return iter(self._list)

    def keys(self) -> Iterator[K]:
        return iter(self._list)

    def items(self) -> Iterator[tuple[K, V]]:
        """Yield ``(key, value)`` pairs from most to least recently used."""

        return self._list.items()

    def lru_key(self) -> K | None:
        """The key that the next overflowing ``put`` would evict."""

        handle = self._list.tail()
        return None if handle is None else self._list.key(handle)

    def check_consistency(self) -> None:
        """Walk the recency list and verify it agrees with the key index.

        O(n); meant for tests and debugging.
        """

        size = len(self._index)
        if size > self._capacity:
            raise LRUCacheStateError(f"{size} entries exceed capacity {self._capacity}")
        if len(self._list) != size:
            raise LRUCacheStateError(
                f"recency list holds {len(self._list)} entries but index holds {size}"
            )

        prev = HEAD
        cur = self._list.next_of(HEAD)
        seen = 0
        while cur != TAIL:
            if seen >= size:
                raise LRUCacheStateError("recency list is longer than the index (cycle?)")
            if self._list.prev_of(cur) != prev:
                raise LRUCacheStateError(f"slot {cur} has a broken back link")
            key = self._list.key(cur)
            if self._index.lookup(key) != cur:
                raise LRUCacheStateError(f"key {key!r} is not indexed to slot {cur}")
            seen += 1
            prev, cur = cur, self._list.next_of(cur)

        if self._list.prev_of(TAIL) != prev:
            raise LRUCacheStateError("tail sentinel has a broken back link")
        if seen != size:
            raise LRUCacheStateError(f"reached {seen} entries from the head, expected {size}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self._capacity}, keys={list(self)!r})"
