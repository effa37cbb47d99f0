"""Prefix tree over geohash characters holding driver occupants."""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from typing import TYPE_CHECKING

from driver_matching.core.exceptions import InvalidArgumentError
from driver_matching.core.locks import ReadWriteLock

if TYPE_CHECKING:
    from driver_matching.matching.driver_registry import Driver


@dataclass(frozen=True)
class TrieStats:
    total_drivers: int
    total_nodes: int
    max_depth: int


class _TrieNode:
    __slots__ = ("children", "occupants")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        # Drivers whose full geohash ends exactly at this node, keyed by id
        self.occupants: dict[str, Driver] = {}

    def is_empty(self) -> bool:
        return not self.occupants and not self.children


class GeohashTrie:
    """Spatial index keyed by geohash prefix.

    Each node is one geohash character; a driver sits at the node reached by
    its full geohash. Searching a shorter prefix sweeps the whole cell,
    including every finer sub-cell below it. Nodes left with no occupants
    and no children are pruned on delete.

    Thread-safe by default: searches share a read lock, mutations take the
    write lock. An owner that already serializes every call under its own
    lock passes ``thread_safe=False`` to skip the second lock.
    """

    def __init__(self, thread_safe: bool = True) -> None:
        self._root = _TrieNode()
        self._total_drivers = 0
        self._lock = ReadWriteLock() if thread_safe else None

    @property
    def thread_safe(self) -> bool:
        return self._lock is not None

    def _read_locked(self) -> AbstractContextManager[None]:
        return self._lock.read_locked() if self._lock else nullcontext()

    def _write_locked(self) -> AbstractContextManager[None]:
        return self._lock.write_locked() if self._lock else nullcontext()

    def insert(self, geohash: str, driver: Driver) -> None:
        self._validate(geohash, driver)
        with self._write_locked():
            self._insert_unlocked(geohash, driver)

    def search_by_prefix(self, prefix: str) -> list[Driver]:
        """Return every driver whose geohash starts with prefix.

        An empty prefix returns all drivers. A prefix with no matching path
        returns an empty list.
        """
        with self._read_locked():
            node = self._root
            for char in prefix:
                child = node.children.get(char)
                if child is None:
                    return []
                node = child

            results: list[Driver] = []
            stack = [node]
            while stack:
                current = stack.pop()
                results.extend(current.occupants.values())
                stack.extend(current.children.values())
            return results

    def delete(self, geohash: str, driver: Driver) -> bool:
        """Remove driver from the node at geohash, pruning emptied nodes.

        Returns:
            True if the driver was found and removed
        """
        if not geohash or driver is None:
            return False
        with self._write_locked():
            return self._delete_unlocked(geohash, driver)

    def relocate(self, old_geohash: str, new_geohash: str, driver: Driver) -> bool:
        """Move driver from old_geohash to new_geohash in one write.

        The insert happens whether or not the old entry existed.
        """
        self._validate(new_geohash, driver)
        with self._write_locked():
            if old_geohash:
                self._delete_unlocked(old_geohash, driver)
            self._insert_unlocked(new_geohash, driver)
        return True

    def stats(self) -> TrieStats:
        with self._read_locked():
            total_nodes = 0
            max_depth = 0
            stack = [(self._root, 0)]
            while stack:
                node, depth = stack.pop()
                total_nodes += 1
                max_depth = max(max_depth, depth)
                stack.extend((child, depth + 1) for child in node.children.values())
            return TrieStats(
                total_drivers=self._total_drivers,
                total_nodes=total_nodes,
                max_depth=max_depth,
            )

    @property
    def total_drivers(self) -> int:
        with self._read_locked():
            return self._total_drivers

    def is_empty(self) -> bool:
        return self.total_drivers == 0

    def clear(self) -> None:
        with self._write_locked():
            self._root = _TrieNode()
            self._total_drivers = 0

    @staticmethod
    def _validate(geohash: str, driver: Driver) -> None:
        if not geohash:
            raise InvalidArgumentError("Geohash cannot be empty")
        if driver is None or not getattr(driver, "driver_id", None):
            raise InvalidArgumentError("Driver must have an id")

    def _insert_unlocked(self, geohash: str, driver: Driver) -> None:
        node = self._root
        for char in geohash:
            child = node.children.get(char)
            if child is None:
                child = _TrieNode()
                node.children[char] = child
            node = child

        if driver.driver_id not in node.occupants:
            self._total_drivers += 1
        node.occupants[driver.driver_id] = driver

    def _delete_unlocked(self, geohash: str, driver: Driver) -> bool:
        path: list[tuple[_TrieNode, str]] = []
        node = self._root
        for char in geohash:
            child = node.children.get(char)
            if child is None:
                return False
            path.append((node, char))
            node = child

        if node.occupants.pop(driver.driver_id, None) is None:
            return False
        self._total_drivers -= 1

        # Post-order: walk back up and drop nodes that became empty
        for parent, char in reversed(path):
            if not parent.children[char].is_empty():
                break
            del parent.children[char]

        return True
