import logging
from enum import Enum
from typing import List, Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from core.config import STEP_INTERVAL_MS
from core.steps import Step, StepStatus, StepTag

logger = logging.getLogger(__name__)


class PlaybackState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class StepSequencer(QObject):
    """
    Timed reveal of a step sequence.

    Idle -> Running -> (Paused <-> Running) -> Completed. Starting a new
    sequence or resetting bumps a generation counter; a timeout armed for an
    older generation is dropped, so stale steps never get revealed.
    """

    sequenceStarted = pyqtSignal(str, list)
    stepAppended = pyqtSignal(object)
    stepStatusChanged = pyqtSignal(int, str)
    currentStepChanged = pyqtSignal(object)
    stateChanged = pyqtSignal(str)
    sequenceFinished = pyqtSignal()

    def __init__(self, global_ctrl=None, base_interval_ms: int = STEP_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self.global_ctrl = global_ctrl
        self.base_interval_ms = base_interval_ms

        self._title = "Idle"
        self._steps: List[Step] = []
        self._statuses: List[StepStatus] = []
        self._index = -1
        self._state = PlaybackState.IDLE
        self._generation = 0
        self._armed_generation: Optional[int] = None
        self._suspended = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

    # ---------- Read-only state ----------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def title(self) -> str:
        return self._title

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def steps(self) -> List[Step]:
        return list(self._steps)

    @property
    def statuses(self) -> List[StepStatus]:
        return list(self._statuses)

    @property
    def current_step(self) -> Optional[Step]:
        if 0 <= self._index < len(self._steps):
            return self._steps[self._index]
        return None

    @property
    def generation(self) -> int:
        return self._generation

    def is_timer_armed(self) -> bool:
        return self._timer.isActive()

    def interval_ms(self) -> int:
        if self.global_ctrl is None:
            return self.base_interval_ms
        return self.global_ctrl.scale_duration(self.base_interval_ms)

    # ---------- Playback control ----------

    def start(self, steps, title: str = "Operation"):
        """Replace whatever is playing and reveal the first step right away."""
        if self._state in (PlaybackState.RUNNING, PlaybackState.PAUSED):
            logger.debug("Cancelling '%s' at step %d", self._title, self._index)
        self._cancel_timer()
        self._suspended = False

        self._title = title
        self._steps = list(steps)
        self._statuses = [StepStatus.PENDING] * len(self._steps)
        self._index = -1
        self.sequenceStarted.emit(title, list(self._steps))

        if not self._steps:
            self._complete()
            return

        self._set_state(PlaybackState.RUNNING)
        self.advance()

    def advance(self) -> bool:
        """
        Move to the next step. Returns False once the sequence is exhausted
        (or when there is nothing to advance).
        """
        if self._state not in (PlaybackState.RUNNING, PlaybackState.PAUSED):
            return False

        self._timer.stop()
        self._index += 1
        if self._index >= len(self._steps):
            self._complete()
            return False

        self._apply_statuses()
        self.currentStepChanged.emit(self._steps[self._index])
        if self._state is PlaybackState.RUNNING:
            self._arm()
        return True

    def pause(self):
        if self._state is not PlaybackState.RUNNING:
            return
        self._cancel_timer()
        self._set_state(PlaybackState.PAUSED)

    def resume(self):
        if self._state is not PlaybackState.PAUSED:
            return
        self._set_state(PlaybackState.RUNNING)
        self._arm()

    def toggle_pause(self):
        if self._state is PlaybackState.RUNNING:
            self.pause()
        elif self._state is PlaybackState.PAUSED:
            self.resume()

    def finish(self, extra_text: Optional[str] = None):
        """
        Fast-forward: optionally append one terminal step, then mark every
        step done and stop the timer.
        """
        if self._state in (PlaybackState.IDLE, PlaybackState.COMPLETED):
            return
        self._cancel_timer()
        if extra_text:
            last = self._steps[-1] if self._steps else None
            step = Step(
                index=len(self._steps),
                text=extra_text,
                tag=StepTag.COMPLETE,
                snapshot=last.snapshot if last else None,
                sorted_positions=last.sorted_positions if last else (),
                stats=last.stats if last else (),
            )
            self._steps.append(step)
            self._statuses.append(StepStatus.PENDING)
            self.stepAppended.emit(step)
        self._complete()

    def suspend(self):
        """Pause for a visualization switch. Only a sequence this call paused is resumed by ``restore``."""
        self._suspended = self._state is PlaybackState.RUNNING
        self.pause()

    def restore(self):
        if self._suspended:
            self._suspended = False
            self.resume()

    def reset(self):
        self._cancel_timer()
        self._suspended = False
        self._title = "Idle"
        self._steps = []
        self._statuses = []
        self._index = -1
        self._set_state(PlaybackState.IDLE)

    # ---------- Internals ----------

    def _arm(self):
        self._armed_generation = self._generation
        self._timer.start(self.interval_ms())

    def _cancel_timer(self):
        self._generation += 1
        self._armed_generation = None
        self._timer.stop()

    def _on_timeout(self):
        if self._armed_generation != self._generation:
            logger.debug("Dropping stale timeout for generation %s", self._armed_generation)
            return
        self._armed_generation = None
        self.advance()

    def _apply_statuses(self):
        for idx, status in enumerate(self._statuses):
            if idx < self._index:
                wanted = StepStatus.DONE
            elif idx == self._index:
                wanted = StepStatus.CURRENT
            else:
                wanted = StepStatus.PENDING
            if wanted is not status:
                self._statuses[idx] = wanted
                self.stepStatusChanged.emit(idx, wanted.value)

    def _complete(self):
        self._cancel_timer()
        self._index = len(self._steps)
        self._apply_statuses()
        self._set_state(PlaybackState.COMPLETED)
        logger.debug("Sequence '%s' completed with %d steps", self._title, len(self._steps))
        self.sequenceFinished.emit()

    def _set_state(self, state: PlaybackState):
        if state is not self._state:
            self._state = state
            self.stateChanged.emit(state.value)
