"""Key index: O(1) translation from a cache key to its recency list handle."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from typing import Generic, TypeVar

from lrucache.recency import Handle

K = TypeVar("K", bound=Hashable)


class KeyIndex(Generic[K]):
    """Thin wrapper over a dict that only speaks in handles.

    CPython dicts cannot be pre-sized, so the index simply grows with the
    population; the cache never holds more than ``capacity + 1`` keys.
    """

    __slots__ = ("_map",)

    def __init__(self) -> None:
        self._map: dict[K, Handle] = {}

    def lookup(self, key: K) -> Handle | None:
        return self._map.get(key)

    def insert(self, key: K, handle: Handle) -> None:
        """Map ``key`` to ``handle`` (last write wins)."""

        self._map[key] = handle

    def remove(self, key: K) -> Handle | None:
        return self._map.pop(key, None)

    def clear(self) -> None:
        self._map.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)

    def __iter__(self) -> Iterator[K]:
        return iter(self._map)
