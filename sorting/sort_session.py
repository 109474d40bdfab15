import logging
import random
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from core.config import (
    DEFAULT_ARRAY,
    RANDOM_SIZE_RANGE,
    RANDOM_VALUE_RANGE,
    SORT_STEP_INTERVAL_MS,
)
from core.sequencer import PlaybackState, StepSequencer
from core.steps import StepTrace
from sorting.sort_model import ArrayModel
from sorting.sort_runner import SortKind, SortRunner, SortStats

logger = logging.getLogger(__name__)


class SortSession(QObject):
    """
    One sort visualizer: array model, runner for a fixed algorithm and a
    sequencer replaying the trace. ``reset`` restores the array that was
    last set or randomized.
    """

    arrayChanged = pyqtSignal(object)
    statsReset = pyqtSignal()

    def __init__(self, kind=SortKind.BUBBLE, global_ctrl=None, values=DEFAULT_ARRAY, rng=None, parent=None):
        super().__init__(parent)
        self.kind = SortKind(kind)
        self.model = ArrayModel(values)
        self.runner = SortRunner(self.model)
        self.sequencer = StepSequencer(global_ctrl, SORT_STEP_INTERVAL_MS, parent=self)
        self.original = tuple(values)
        self._rng = rng or random.Random()
        self.last_trace: Optional[StepTrace] = None

    @property
    def stats(self) -> SortStats:
        return self.runner.stats

    @property
    def is_sorting(self) -> bool:
        return self.sequencer.state in (PlaybackState.RUNNING, PlaybackState.PAUSED)

    def values(self):
        return list(self.model.snapshot())

    def set_array(self, values):
        """Replace the array; callers pass already validated integers."""
        self.sequencer.reset()
        self.original = tuple(int(value) for value in values)
        self.model.load(self.original)
        self._reset_stats()
        self.arrayChanged.emit(self.model.snapshot())

    def randomize(self):
        size = self._rng.randint(*RANDOM_SIZE_RANGE)
        values = [self._rng.randint(*RANDOM_VALUE_RANGE) for _ in range(size)]
        self.set_array(values)
        return values

    def sort(self) -> StepTrace:
        if self.is_sorting:
            logger.debug("Restarting %s while a replay is in flight", self.kind.label)
        trace = self.runner.run(self.kind)
        self.last_trace = trace
        self.sequencer.start(trace.steps, trace.title)
        return trace

    def pause(self):
        self.sequencer.pause()

    def resume(self):
        self.sequencer.resume()

    def suspend(self):
        self.sequencer.suspend()

    def restore(self):
        self.sequencer.restore()

    def toggle_pause(self):
        self.sequencer.toggle_pause()

    def reset(self):
        self.sequencer.reset()
        self.model.load(self.original)
        self._reset_stats()
        self.arrayChanged.emit(self.model.snapshot())

    def _reset_stats(self):
        self.runner.reset_stats()
        self.last_trace = None
        self.statsReset.emit()
