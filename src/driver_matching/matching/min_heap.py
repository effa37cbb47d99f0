"""Array-backed binary min-heap used for bounded top-k selection."""

from collections.abc import Iterable
from typing import Any, Generic, Protocol, TypeVar

from driver_matching.core.exceptions import EmptyHeapError, InvalidArgumentError


class SupportsLessThan(Protocol):
    def __lt__(self, other: Any, /) -> bool: ...


T = TypeVar("T", bound=SupportsLessThan)


class MinHeap(Generic[T]):
    """Binary min-heap over any type ordered by ``<``.

    Extracting k items from a heap bulk-loaded with n candidates costs
    O(n + k log n), which avoids sorting the whole candidate set when only
    the closest few are wanted.

    Not thread-safe; instances are meant to live for a single query.
    """

    def __init__(self) -> None:
        self._items: list[T] = []

    @classmethod
    def from_sequence(cls, items: Iterable[T]) -> "MinHeap[T]":
        """Build a heap in O(n) by sifting down from the last non-leaf."""
        heap: MinHeap[T] = cls()
        for item in items:
            if item is None:
                raise InvalidArgumentError("Cannot insert None into heap")
            heap._items.append(item)
        for index in range(len(heap._items) // 2 - 1, -1, -1):
            heap._sift_down(index)
        return heap

    def insert(self, item: T) -> None:
        if item is None:
            raise InvalidArgumentError("Cannot insert None into heap")
        self._items.append(item)
        self._sift_up(len(self._items) - 1)

    def extract_min(self) -> T:
        if not self._items:
            raise EmptyHeapError("Heap is empty")

        items = self._items
        minimum = items[0]
        last = items.pop()
        if items:
            items[0] = last
            self._sift_down(0)
        return minimum

    def peek(self) -> T:
        if not self._items:
            raise EmptyHeapError("Heap is empty")
        return self._items[0]

    def sorted_elements(self) -> list[T]:
        """Return all items in ascending order without consuming the heap."""
        copy: MinHeap[T] = MinHeap()
        copy._items = list(self._items)
        return [copy.extract_min() for _ in range(len(copy._items))]

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def _sift_up(self, index: int) -> None:
        items = self._items
        while index > 0:
            parent = (index - 1) // 2
            if items[index] < items[parent]:
                items[index], items[parent] = items[parent], items[index]
                index = parent
            else:
                break

    def _sift_down(self, index: int) -> None:
        items = self._items
        size = len(items)
        while True:
            smallest = index
            left = 2 * index + 1
            right = left + 1

            if left < size and items[left] < items[smallest]:
                smallest = left
            if right < size and items[right] < items[smallest]:
                smallest = right

            if smallest == index:
                break

            items[index], items[smallest] = items[smallest], items[index]
            index = smallest
