"""Recency list: a doubly linked list of cache entries stored in an arena.

Entries live in parallel slot arrays and link to each other by slot index
rather than by object reference. Slot 0 is the head sentinel (the
most-recently-used side), slot 1 the tail sentinel (least-recently-used side).
Freed slots go onto a free-list and are handed out again by ``allocate``, so
the arena never grows past the largest population the list has held.

Handles are plain integers and never leave the ``lrucache`` package.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, NewType, TypeVar

from lrucache.errors import LRUCacheStateError

K = TypeVar("K")
V = TypeVar("V")

Handle = NewType("Handle", int)

HEAD = Handle(0)
TAIL = Handle(1)
DETACHED = -1
# Links of a slot sitting on the free-list.
FREED = -2


class RecencyList(Generic[K, V]):
    """Arena-backed doubly linked list ordered from most to least recently used."""

    __slots__ = ("_keys", "_values", "_prev", "_next", "_free", "_size", "_mutations")

    def __init__(self) -> None:
        self._keys: list[K | None] = [None, None]
        self._values: list[V | None] = [None, None]
        self._prev: list[int] = [DETACHED, HEAD]
        self._next: list[int] = [TAIL, DETACHED]
        self._free: list[Handle] = []
        self._size = 0
        # Bumped on every structural change so live traversals can notice.
        self._mutations = 0

    # -- arena -----------------------------------------------------------------

    def allocate(self, key: K, value: V) -> Handle:
        """Store ``key``/``value`` in a detached slot and return its handle."""

        if self._free:
            handle = self._free.pop()
            self._keys[handle] = key
            self._values[handle] = value
            self._prev[handle] = DETACHED
            self._next[handle] = DETACHED
            return handle

        handle = Handle(len(self._keys))
        self._keys.append(key)
        self._values.append(value)
        self._prev.append(DETACHED)
        self._next.append(DETACHED)
        return handle

    def release(self, handle: Handle) -> None:
        """Return a detached slot to the free-list, dropping its key and value."""

        self._check_real(handle)
        if self.is_linked(handle):
            raise LRUCacheStateError(f"cannot release slot {handle}: it is still linked")
        if self._prev[handle] == FREED:
            raise LRUCacheStateError(f"cannot release slot {handle}: it is already free")
        self._keys[handle] = None
        self._values[handle] = None
        self._prev[handle] = FREED
        self._next[handle] = FREED
        self._free.append(handle)

    @property
    def slot_count(self) -> int:
        """Number of real-entry slots ever allocated (linked, detached or free)."""

        return len(self._keys) - 2

    # -- links -----------------------------------------------------------------

    def is_linked(self, handle: Handle) -> bool:
        return self._prev[handle] >= 0

    def unlink(self, handle: Handle) -> None:
        """Detach ``handle`` from its neighbours and clear its own links."""

        self._check_real(handle)
        prev = self._prev[handle]
        nxt = self._next[handle]
        if prev < 0 or nxt < 0:
            raise LRUCacheStateError(f"cannot unlink slot {handle}: it is not in the list")

        self._next[prev] = nxt
        self._prev[nxt] = prev
        self._prev[handle] = DETACHED
        self._next[handle] = DETACHED
        self._size -= 1
        self._mutations += 1

    def insert_at_head(self, handle: Handle) -> None:
        """Splice ``handle`` in right after the head sentinel."""

        self._check_real(handle)
        if self.is_linked(handle):
            raise LRUCacheStateError(f"cannot insert slot {handle}: it is already linked")
        if self._prev[handle] == FREED:
            raise LRUCacheStateError(f"cannot insert slot {handle}: it is free")

        first = self._next[HEAD]
        self._prev[handle] = HEAD
        self._next[handle] = first
        self._prev[first] = handle
        self._next[HEAD] = handle
        self._size += 1
        self._mutations += 1

    def remove_tail(self) -> Handle:
        """Detach and return the least-recently-used entry."""

        last = self._prev[TAIL]
        if last == HEAD:
            raise IndexError("remove_tail() on an empty recency list")
        handle = Handle(last)
        self.unlink(handle)
        return handle

    def head(self) -> Handle | None:
        """Handle of the most-recently-used entry, or None when empty."""

        first = self._next[HEAD]
        return None if first == TAIL else Handle(first)

    def tail(self) -> Handle | None:
        """Handle of the least-recently-used entry, or None when empty."""

        last = self._prev[TAIL]
        return None if last == HEAD else Handle(last)

    def next_of(self, handle: Handle) -> int:
        return self._next[handle]

    def prev_of(self, handle: Handle) -> int:
        return self._prev[handle]

    # -- slot data -------------------------------------------------------------

    def key(self, handle: Handle) -> K:
        self._check_real(handle)
        return self._keys[handle]  # type: ignore[return-value]

    def value(self, handle: Handle) -> V:
        self._check_real(handle)
        return self._values[handle]  # type: ignore[return-value]

    def set_value(self, handle: Handle, value: V) -> None:
        self._check_real(handle)
        self._values[handle] = value

    # -- traversal -------------------------------------------------------------

    def handles(self) -> Iterator[Handle]:
        """Yield handles from head to tail."""

        mutations = self._mutations
        cur = self._next[HEAD]
        while cur != TAIL:
            yield Handle(cur)
            # Links may point into a cleared arena once the list has changed.
            self._check_unchanged(mutations)
            cur = self._next[cur]

    def __iter__(self) -> Iterator[K]:
        for handle in self.handles():
            yield self._keys[handle]  # type: ignore[misc]

    def __reversed__(self) -> Iterator[K]:
        mutations = self._mutations
        cur = self._prev[TAIL]
        while cur != HEAD:
            yield self._keys[cur]  # type: ignore[misc]
            self._check_unchanged(mutations)
            cur = self._prev[cur]

    def _check_unchanged(self, mutations: int) -> None:
        if self._mutations != mutations:
            raise RuntimeError("recency list changed during iteration")

    def items(self) -> Iterator[tuple[K, V]]:
        for handle in self.handles():
            yield self._keys[handle], self._values[handle]  # type: ignore[misc]

    def __len__(self) -> int:
        return self._size

    def clear(self) -> None:
        """Drop every entry and shrink the arena back to the two sentinels."""

        self._keys = [None, None]
        self._values = [None, None]
        self._prev = [DETACHED, HEAD]
        self._next = [TAIL, DETACHED]
        self._free = []
        self._size = 0
        self._mutations += 1

    def _check_real(self, handle: Handle) -> None:
        if handle in (HEAD, TAIL) or not (0 <= handle < len(self._keys)):
            raise LRUCacheStateError(f"invalid recency list handle: {handle!r}")
