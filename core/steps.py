from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class StepTag(str, Enum):
    PHASE = "phase"
    INFO = "info"
    COMPARISON = "comparison"
    SWAP = "swap"
    SHIFT = "shift"
    INSERT = "insert"
    PARTITION = "partition"
    RECURSE = "recurse"
    SORTED = "sorted"
    LINK = "link"
    ALLOC = "alloc"
    SELECT = "select"
    COMPLETE = "complete"


class StepStatus(str, Enum):
    PENDING = "pending"
    CURRENT = "current"
    DONE = "done"


@dataclass(frozen=True)
class Step:
    """
    One narrated unit of an operation.

    ``snapshot`` is the model state right after the step was applied, so a
    renderer can draw any step without replaying the ones before it.
    ``focus`` lists the positions (sorting) or node ids (lists) the step is
    about; ``sorted_positions`` is the set of indices known to be final.
    """

    index: int
    text: str
    tag: StepTag = StepTag.INFO
    snapshot: Any = None
    focus: Tuple[int, ...] = ()
    sorted_positions: Tuple[int, ...] = ()
    stats: Tuple[Tuple[str, int], ...] = ()
    depth: int = 0

    def describe(self) -> Tuple[str, str]:
        return self.text, self.tag.value

    def counters(self) -> Dict[str, int]:
        return dict(self.stats)


class StepTrace:
    """
    Append-only builder for a step sequence. Indices are assigned in call
    order, which is the playback order.
    """

    def __init__(self, title: str):
        self.title = title
        self._steps: List[Step] = []
        self.code: List[str] = []

    def add(
        self,
        text: str,
        tag: StepTag = StepTag.INFO,
        snapshot=None,
        focus=(),
        sorted_positions=(),
        stats: Optional[Dict[str, int]] = None,
        depth: int = 0,
    ) -> Step:
        step = Step(
            index=len(self._steps),
            text=text,
            tag=tag,
            snapshot=snapshot,
            focus=tuple(focus),
            sorted_positions=tuple(sorted(sorted_positions)),
            stats=tuple((stats or {}).items()),
            depth=depth,
        )
        self._steps.append(step)
        return step

    @property
    def steps(self) -> List[Step]:
        return list(self._steps)

    @property
    def last(self) -> Optional[Step]:
        return self._steps[-1] if self._steps else None

    def texts(self) -> List[str]:
        return [step.text for step in self._steps]

    def __len__(self):
        return len(self._steps)

    def __iter__(self):
        return iter(self._steps)
