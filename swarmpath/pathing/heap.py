# pathing/heap.py — fixed-capacity binary heap with per-item index tracking

from __future__ import annotations
from typing import Generic, Protocol, TypeVar


class HeapItem(Protocol):
    heap_index: int

    def compare(self, other) -> int:
        """1 if self has higher priority than other, 0 if equal, -1 if lower."""
        ...


T = TypeVar("T", bound=HeapItem)


class Heap(Generic[T]):
    """
    Max-heap by item priority. Every item stores its own slot in
    `heap_index`, which makes contains() and update_item() O(1) to locate.

    update_item() only sifts upward. Callers may only raise an item's
    priority after it was added; lowering it leaves the heap unordered.
    """

    def __init__(self, max_size: int) -> None:
        self._items: list[T | None] = [None] * max_size
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __bool__(self) -> bool:
        return self._count > 0

    @property
    def capacity(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        """Forget all items without reallocating."""
        self._count = 0

    def contains(self, item: T) -> bool:
        i = item.heap_index
        return 0 <= i < self._count and self._items[i] is item

    def add(self, item: T) -> None:
        if self._count >= len(self._items):
            raise IndexError(f"heap is full ({len(self._items)} items)")
        item.heap_index = self._count
        self._items[self._count] = item
        self._count += 1
        self._sort_up(item)

    def peek(self) -> T:
        if self._count == 0:
            raise IndexError("peek from an empty heap")
        return self._items[0]

    def remove_first(self) -> T:
        """Remove and return the highest-priority item."""
        if self._count == 0:
            raise IndexError("remove_first from an empty heap")
        first = self._items[0]
        self._count -= 1
        last = self._items[self._count]
        self._items[self._count] = None
        first.heap_index = -1
        if self._count > 0:
            self._items[0] = last
            last.heap_index = 0
            self._sort_down(last)
        else:
            self._items[0] = None
        return first

    def update_item(self, item: T) -> None:
        """Re-sort an item whose priority went up."""
        self._sort_up(item)

    # ------------------------------------------------------------------
    # Sifting
    # ------------------------------------------------------------------

    def _sort_up(self, item: T) -> None:
        while item.heap_index > 0:
            parent = self._items[(item.heap_index - 1) // 2]
            if item.compare(parent) > 0:
                self._swap(item, parent)
            else:
                break

    def _sort_down(self, item: T) -> None:
        while True:
            left = item.heap_index * 2 + 1
            right = left + 1
            if left >= self._count:
                return

            child = left
            if right < self._count and self._items[left].compare(self._items[right]) < 0:
                child = right

            if item.compare(self._items[child]) < 0:
                self._swap(item, self._items[child])
            else:
                return

    def _swap(self, a: T, b: T) -> None:
        self._items[a.heap_index] = b
        self._items[b.heap_index] = a
        a.heap_index, b.heap_index = b.heap_index, a.heap_index
