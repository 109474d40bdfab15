from typing import List, Tuple


class ArrayModel:
    """
    Integer array under sort. No bookkeeping here; the runner counts
    accesses itself.
    """

    def __init__(self, values=()):
        self._items: List[int] = list(values)

    @property
    def length(self) -> int:
        return len(self._items)

    def load(self, values):
        self._items = [int(value) for value in values]

    def read(self, index: int) -> int:
        if index < 0 or index >= self.length:
            raise IndexError("Index out of range")
        return self._items[index]

    def write(self, index: int, value: int):
        if index < 0 or index >= self.length:
            raise IndexError("Index out of range")
        self._items[index] = value

    def swap(self, i: int, j: int):
        self._items[i], self._items[j] = self._items[j], self._items[i]

    def compare(self, i: int, j: int) -> int:
        """-1, 0 or 1 as ``arr[i]`` is less than, equal to or greater than ``arr[j]``."""
        a, b = self._items[i], self._items[j]
        return (a > b) - (a < b)

    def slice(self, low: int, high: int) -> List[int]:
        """Inclusive range ``[low, high]``."""
        return self._items[low : high + 1]

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self._items)
