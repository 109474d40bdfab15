import logging
from typing import List, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from core.config import CIRCULAR_SEED, STEP_INTERVAL_MS
from core.sequencer import StepSequencer
from linklist.ll_model import LinkedListModel, ListKind, ListSnapshot
from linklist.ll_runner import ListRunner

logger = logging.getLogger(__name__)


class LinkedListSession(QObject):
    """
    One visualization instance: a model, its runner and a sequencer, plus
    the current selection. Every call replaces whatever narration is
    playing; calls on stale ids are silent no-ops.
    """

    modelChanged = pyqtSignal(object)
    selectionChanged = pyqtSignal(object)
    codeChanged = pyqtSignal(list)

    def __init__(self, kind=ListKind.SINGLY, global_ctrl=None, seed=None, parent=None):
        super().__init__(parent)
        self.kind = ListKind(kind)
        self.model = LinkedListModel(self.kind)
        self.runner = ListRunner(self.model)
        self.sequencer = StepSequencer(global_ctrl, STEP_INTERVAL_MS, parent=self)
        if seed is None:
            seed = CIRCULAR_SEED if self.kind.is_circular else ()
        self.seed = tuple(seed)
        self.selected_id: Optional[int] = None
        self.code: List[str] = []

    # ---------- Queries ----------

    def snapshot(self) -> ListSnapshot:
        return self.model.snapshot()

    def values(self) -> List[int]:
        return self.model.to_ordered_sequence()

    def supports(self, operation: str) -> bool:
        return self.model.supports(operation)

    # ---------- Operations ----------

    def insert_at_head(self, value):
        return self._perform("insert_at_head", value)

    def insert_at_tail(self, value):
        return self._perform("insert_at_tail", value)

    def insert_after(self, target_id, value):
        return self._perform("insert_after", target_id, value)

    def insert_before(self, target_id, value):
        return self._perform("insert_before", target_id, value)

    def delete(self, target_id) -> bool:
        removed = self._perform("delete", target_id)
        if removed:
            self._set_selection(None)
        return bool(removed)

    def reverse(self) -> bool:
        return bool(self._perform("reverse"))

    def select(self, node_id):
        selected, trace = self.runner.select(node_id)
        if selected is None:
            logger.debug("Ignoring selection of unknown node %s", node_id)
            return None
        self._set_selection(selected)
        self._play(trace)
        return selected

    def build(self, values):
        """Replace the list with ``values`` and narrate the construction."""
        self.sequencer.reset()
        self.model.clear()
        self._set_selection(None)
        ids, trace = self.runner.initialize(values)
        self._play(trace)
        return ids

    def reset(self):
        """Drop the list and narration, then rebuild the kind's seed list."""
        if self.seed:
            self.build(self.seed)
            return
        self.sequencer.reset()
        self.model.clear()
        self._set_selection(None)
        self._set_code([])
        self.modelChanged.emit(self.model.snapshot())

    # ---------- Playback passthrough ----------

    def pause(self):
        self.sequencer.pause()

    def resume(self):
        self.sequencer.resume()

    def suspend(self):
        self.sequencer.suspend()

    def restore(self):
        self.sequencer.restore()

    def finish(self, extra_text=None):
        self.sequencer.finish(extra_text)

    # ---------- Internals ----------

    def _perform(self, operation, *args):
        if not self.model.supports(operation):
            logger.warning("%s does not support %s", self.kind.label, operation)
            return None
        result, trace = getattr(self.runner, operation)(*args)
        if len(trace) == 0:
            return result
        self._play(trace)
        return result

    def _play(self, trace):
        self._set_code(trace.code)
        self.modelChanged.emit(self.model.snapshot())
        self.sequencer.start(trace.steps, trace.title)

    def _set_code(self, lines):
        self.code = list(lines)
        self.codeChanged.emit(list(self.code))

    def _set_selection(self, node_id):
        if node_id != self.selected_id:
            self.selected_id = node_id
            self.selectionChanged.emit(node_id)
