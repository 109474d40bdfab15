import logging
from collections import namedtuple
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from core.steps import StepTag, StepTrace
from sorting.sort_model import ArrayModel

logger = logging.getLogger(__name__)


class SortKind(str, Enum):
    BUBBLE = "bubble"
    INSERTION = "insertion"
    QUICK = "quick"

    @property
    def label(self) -> str:
        return {
            SortKind.BUBBLE: "Bubble Sort",
            SortKind.INSERTION: "Insertion Sort",
            SortKind.QUICK: "Quick Sort",
        }[self]


PSEUDOCODE = {
    SortKind.BUBBLE: [
        "for i in range(n - 1):",
        "    swapped = False",
        "    for j in range(n - i - 1):",
        "        if arr[j] > arr[j + 1]:",
        "            arr[j], arr[j + 1] = arr[j + 1], arr[j]",
        "            swapped = True",
        "    if not swapped:",
        "        break",
    ],
    SortKind.INSERTION: [
        "for i in range(1, n):",
        "    key = arr[i]",
        "    j = i - 1",
        "    while j >= 0 and arr[j] > key:",
        "        arr[j + 1] = arr[j]",
        "        j -= 1",
        "    arr[j + 1] = key",
    ],
    SortKind.QUICK: [
        "def quick_sort(low, high):",
        "    if low < high:",
        "        p = partition(low, high)",
        "        quick_sort(low, p - 1)",
        "        quick_sort(p + 1, high)",
        "",
        "def partition(low, high):",
        "    pivot = arr[high]",
        "    i = low - 1",
        "    for j in range(low, high):",
        "        if arr[j] < pivot:",
        "            i += 1",
        "            arr[i], arr[j] = arr[j], arr[i]",
        "    arr[i + 1], arr[high] = arr[high], arr[i + 1]",
        "    return i + 1",
    ],
}


@dataclass
class SortStats:
    comparisons: int = 0
    swaps: int = 0
    shifts: int = 0
    accesses: int = 0
    current_pass: int = 0
    current_key: Optional[int] = None
    max_depth: int = 0

    def as_dict(self):
        return asdict(self)


# What an algorithm reports at each of its yield points.
Event = namedtuple("Event", ["text", "tag", "focus", "depth"], defaults=((), 0))


class SortRunner:
    """
    Runs one sort over the model, turning each yield point of the algorithm
    into a step that carries the array, the sorted set and the counters as
    they were at that moment.
    """

    def __init__(self, model: ArrayModel):
        self.model = model
        self.stats = SortStats()
        self._sorted = set()
        self._depth = 0

    def reset_stats(self):
        self.stats = SortStats()
        self._sorted = set()
        self._depth = 0

    def run(self, kind) -> StepTrace:
        kind = SortKind(kind)
        self.reset_stats()
        trace = StepTrace(kind.label)
        trace.code = list(PSEUDOCODE[kind])

        algorithm = {
            SortKind.BUBBLE: self._bubble_sort,
            SortKind.INSERTION: self._insertion_sort,
            SortKind.QUICK: self._quick_sort,
        }[kind]
        for event in algorithm():
            self._record(trace, event)

        self._sorted = set(range(self.model.length))
        self._record(trace, Event("Sorting complete!", StepTag.COMPLETE))
        logger.info(
            "%s: %d steps, %d comparisons", kind.label, len(trace), self.stats.comparisons
        )
        return trace

    def _record(self, trace, event):
        trace.add(
            event.text,
            event.tag,
            snapshot=self.model.snapshot(),
            focus=event.focus,
            sorted_positions=self._sorted,
            stats=self.stats.as_dict(),
            depth=event.depth,
        )

    # ---------- Bubble sort ----------

    def _bubble_sort(self):
        n = self.model.length
        for i in range(n - 1):
            self.stats.current_pass = i + 1
            swapped = False
            yield Event(f"Pass {i + 1}: Comparing adjacent elements", StepTag.PHASE)

            for j in range(n - i - 1):
                left, right = self.model.read(j), self.model.read(j + 1)
                self.stats.accesses += 2
                self.stats.comparisons += 1
                yield Event(
                    f"Compare: arr[{j}] ({left}) vs arr[{j + 1}] ({right})",
                    StepTag.COMPARISON,
                    (j, j + 1),
                )
                if self.model.compare(j, j + 1) > 0:
                    self.model.swap(j, j + 1)
                    self.stats.swaps += 1
                    self.stats.accesses += 2
                    swapped = True
                    yield Event(f"Swap: {left} > {right} - Swapping!", StepTag.SWAP, (j, j + 1))
                else:
                    yield Event(f"No swap needed: {left} ≤ {right}", StepTag.INFO, (j, j + 1))

            last = n - i - 1
            self._sorted.add(last)
            yield Event(
                f"Element at position {last} is now in final position", StepTag.SORTED, (last,)
            )
            if not swapped:
                self._sorted.update(range(last))
                yield Event("No swaps in this pass - Array is sorted!", StepTag.SORTED)
                break

        if n:
            self._sorted.add(0)

    # ---------- Insertion sort ----------

    def _insertion_sort(self):
        n = self.model.length
        if n == 0:
            return
        self._sorted.add(0)
        yield Event("Start: First element arr[0] is already sorted", StepTag.INFO, (0,))

        for i in range(1, n):
            key = self.model.read(i)
            self.stats.accesses += 1
            self.stats.current_key = key
            yield Event(f"Iteration {i}: Pick key = arr[{i}] = {key}", StepTag.PHASE, (i,))
            yield Event(f"Compare key ({key}) with sorted portion", StepTag.INFO, (i,))

            j = i - 1
            while j >= 0:
                current = self.model.read(j)
                self.stats.comparisons += 1
                self.stats.accesses += 1
                yield Event(
                    f"Compare: arr[{j}] ({current}) vs key ({key})", StepTag.COMPARISON, (j, j + 1)
                )
                if current > key:
                    self.model.write(j + 1, current)
                    self.stats.shifts += 1
                    self.stats.accesses += 2
                    yield Event(
                        f"{current} > {key}: Shift arr[{j}] to arr[{j + 1}]",
                        StepTag.SHIFT,
                        (j, j + 1),
                    )
                    j -= 1
                else:
                    yield Event(f"{current} ≤ {key}: Found correct position", StepTag.INFO, (j,))
                    break

            self.model.write(j + 1, key)
            self.stats.accesses += 1
            yield Event(f"Insert key ({key}) at position {j + 1}", StepTag.INSERT, (j + 1,))

            self._sorted.update(range(i + 1))
            yield Event(f"Elements 0 to {i} are now sorted", StepTag.SORTED)

    # ---------- Quick sort ----------

    def _quick_sort(self):
        yield Event("Starting Quick Sort Algorithm...", StepTag.PHASE)
        yield Event(f"Initial Array: [{self._join(self.model.snapshot())}]", StepTag.INFO)
        yield from self._quick_range(0, self.model.length - 1, 0)

    def _quick_range(self, low, high, depth):
        if low >= high:
            if low == high:
                self._sorted.add(low)
            return

        self._depth += 1
        self.stats.max_depth = max(self.stats.max_depth, self._depth)
        span = tuple(range(low, high + 1))
        yield Event(
            f"QuickSort({low}, {high}) - Working on [{self._join(self.model.slice(low, high))}]",
            StepTag.PHASE,
            span,
            depth,
        )

        p = yield from self._partition(low, high, depth)
        pivot = self.model.read(p)
        self._sorted.add(p)
        yield Event(f"Pivot {pivot} placed at position {p}", StepTag.SORTED, (p,), depth)

        left = self._join(self.model.slice(low, p - 1)) if p - 1 >= low else "none"
        right = self._join(self.model.slice(p + 1, high)) if p + 1 <= high else "none"
        yield Event(f"Left: [{left}] | Pivot: {pivot} | Right: [{right}]", StepTag.INFO, (p,), depth)

        if p - 1 > low:
            yield Event(
                f"Going LEFT to sort [{low}...{p - 1}]", StepTag.RECURSE, tuple(range(low, p)), depth
            )
            yield from self._quick_range(low, p - 1, depth + 1)
        elif p - 1 == low:
            self._sorted.add(low)
            yield Event(f"Single element at {low} is sorted", StepTag.SORTED, (low,), depth)

        if p + 1 < high:
            yield Event(
                f"Going RIGHT to sort [{p + 1}...{high}]",
                StepTag.RECURSE,
                tuple(range(p + 1, high + 1)),
                depth,
            )
            yield from self._quick_range(p + 1, high, depth + 1)
        elif p + 1 == high:
            self._sorted.add(high)
            yield Event(f"Single element at {high} is sorted", StepTag.SORTED, (high,), depth)

        yield Event(f"Completed range [{low}...{high}]", StepTag.COMPLETE, span, depth)
        self._depth -= 1

    def _partition(self, low, high, depth):
        pivot = self.model.read(high)
        self.stats.accesses += 1
        yield Event(f"Partition: Pivot = arr[{high}] = {pivot}", StepTag.PARTITION, (high,), depth)

        i = low - 1
        yield Event(f"Partition index i = {i}", StepTag.PARTITION, (high,), depth)

        for j in range(low, high):
            value = self.model.read(j)
            self.stats.comparisons += 1
            self.stats.accesses += 1
            yield Event(f"arr[{j}]={value} vs pivot={pivot}", StepTag.COMPARISON, (j, high), depth)
            if value < pivot:
                i += 1
                if i != j:
                    self.model.swap(i, j)
                    self.stats.swaps += 1
                    self.stats.accesses += 2
                    yield Event(
                        f"{value} < {pivot}: Move to left partition (i={i})",
                        StepTag.SWAP,
                        (i, j),
                        depth,
                    )
                else:
                    yield Event(f"{value} < {pivot}: Already in position", StepTag.INFO, (j,), depth)
            else:
                yield Event(f"{value} ≥ {pivot}: Stay in right partition", StepTag.INFO, (j,), depth)

        p = i + 1
        if p != high:
            self.model.swap(p, high)
            self.stats.swaps += 1
            self.stats.accesses += 2
            yield Event(f"Final step: Place pivot at position {p}", StepTag.SWAP, (p, high), depth)
        else:
            yield Event(f"Final step: Place pivot at position {p}", StepTag.PARTITION, (p,), depth)
        return p

    @staticmethod
    def _join(values):
        return ", ".join(str(value) for value in values)
