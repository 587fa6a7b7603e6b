"""Bounded FIFO of recently shown filenames"""

from collections import deque
from typing import Deque, Iterator, Set

from ..constants import RECENT_CAPACITY


class RecentItems:
    """Insertion-ordered exclusion list.

    Eviction is strictly by insertion order: adding a filename that is already
    present does not move it to the back.
    """

    def __init__(self, capacity: int = RECENT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._order: Deque[str] = deque()
        self._members: Set[str] = set()

    def add(self, filename: str) -> None:
        if filename in self._members:
            return
        self._order.append(filename)
        self._members.add(filename)
        while len(self._order) > self.capacity:
            self._members.discard(self._order.popleft())

    def discard(self, filename: str) -> None:
        if filename in self._members:
            self._members.discard(filename)
            self._order.remove(filename)

    def clear(self) -> None:
        self._order.clear()
        self._members.clear()

    def __contains__(self, filename: object) -> bool:
        return filename in self._members

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)
