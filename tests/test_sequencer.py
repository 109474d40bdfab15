"""
Tests for StepSequencer: status transitions, pause/resume, fast-forward
and cancellation of stale timeouts.
"""

from core.global_ctrl import GlobalController
from core.sequencer import PlaybackState, StepSequencer
from core.steps import StepStatus, StepTag, StepTrace


def make_steps(count):
    trace = StepTrace("Demo")
    for number in range(count):
        trace.add(f"step {number}", StepTag.INFO, snapshot=(number,))
    return trace.steps


class Recorder:
    """Collects everything a sequencer emits."""

    def __init__(self, sequencer: StepSequencer):
        self.started = []
        self.statuses = []
        self.current = []
        self.states = []
        self.finished = 0
        sequencer.sequenceStarted.connect(lambda title, steps: self.started.append(title))
        sequencer.stepStatusChanged.connect(lambda i, s: self.statuses.append((i, s)))
        sequencer.currentStepChanged.connect(lambda step: self.current.append(step.index))
        sequencer.stateChanged.connect(self.states.append)
        sequencer.sequenceFinished.connect(self._on_finished)

    def _on_finished(self):
        self.finished += 1


class TestStepSequencer:
    """Synchronous control of the sequencer."""

    def test_start_reveals_first_step(self) -> None:
        sequencer = StepSequencer()
        recorder = Recorder(sequencer)
        sequencer.start(make_steps(3), "Demo")
        assert sequencer.state is PlaybackState.RUNNING
        assert sequencer.current_index == 0
        assert sequencer.statuses == [StepStatus.CURRENT, StepStatus.PENDING, StepStatus.PENDING]
        assert recorder.started == ["Demo"]
        assert recorder.current == [0]
        assert sequencer.is_timer_armed()

    def test_advance_updates_statuses(self) -> None:
        sequencer = StepSequencer()
        recorder = Recorder(sequencer)
        sequencer.start(make_steps(3), "Demo")
        assert sequencer.advance() is True
        assert sequencer.statuses == [StepStatus.DONE, StepStatus.CURRENT, StepStatus.PENDING]
        assert recorder.statuses == [(0, "current"), (0, "done"), (1, "current")]
        assert sequencer.current_step.text == "step 1"

    def test_advance_past_end_completes(self) -> None:
        sequencer = StepSequencer()
        recorder = Recorder(sequencer)
        sequencer.start(make_steps(2), "Demo")
        sequencer.advance()
        assert sequencer.advance() is False
        assert sequencer.state is PlaybackState.COMPLETED
        assert sequencer.statuses == [StepStatus.DONE, StepStatus.DONE]
        assert recorder.finished == 1
        assert not sequencer.is_timer_armed()
        assert sequencer.advance() is False

    def test_empty_sequence_completes_immediately(self) -> None:
        sequencer = StepSequencer()
        recorder = Recorder(sequencer)
        sequencer.start([], "Nothing")
        assert sequencer.state is PlaybackState.COMPLETED
        assert recorder.finished == 1

    def test_steps_revealed_in_order(self) -> None:
        sequencer = StepSequencer()
        recorder = Recorder(sequencer)
        sequencer.start(make_steps(5), "Demo")
        while sequencer.advance():
            pass
        assert recorder.current == [0, 1, 2, 3, 4]

    def test_pause_and_resume(self) -> None:
        sequencer = StepSequencer()
        sequencer.start(make_steps(3), "Demo")
        sequencer.pause()
        assert sequencer.state is PlaybackState.PAUSED
        assert not sequencer.is_timer_armed()
        sequencer.advance()
        assert sequencer.current_index == 1
        assert not sequencer.is_timer_armed()
        sequencer.resume()
        assert sequencer.state is PlaybackState.RUNNING
        assert sequencer.is_timer_armed()

    def test_toggle_pause(self) -> None:
        sequencer = StepSequencer()
        sequencer.toggle_pause()
        assert sequencer.state is PlaybackState.IDLE
        sequencer.start(make_steps(2), "Demo")
        sequencer.toggle_pause()
        assert sequencer.state is PlaybackState.PAUSED
        sequencer.toggle_pause()
        assert sequencer.state is PlaybackState.RUNNING

    def test_finish_with_extra_step(self) -> None:
        sequencer = StepSequencer()
        appended = []
        sequencer.stepAppended.connect(appended.append)
        sequencer.start(make_steps(3), "Demo")
        sequencer.finish("All done")
        assert sequencer.state is PlaybackState.COMPLETED
        assert len(sequencer.steps) == 4
        extra = sequencer.steps[-1]
        assert extra.text == "All done"
        assert extra.tag is StepTag.COMPLETE
        assert extra.snapshot == (2,)
        assert appended == [extra]
        assert set(sequencer.statuses) == {StepStatus.DONE}
        assert not sequencer.is_timer_armed()

    def test_finish_without_extra(self) -> None:
        sequencer = StepSequencer()
        sequencer.start(make_steps(3), "Demo")
        sequencer.finish()
        assert len(sequencer.steps) == 3
        assert set(sequencer.statuses) == {StepStatus.DONE}

    def test_finish_when_idle_is_noop(self) -> None:
        sequencer = StepSequencer()
        recorder = Recorder(sequencer)
        sequencer.finish("ignored")
        assert sequencer.state is PlaybackState.IDLE
        assert sequencer.steps == []
        assert recorder.finished == 0

    def test_finish_when_completed_is_noop(self) -> None:
        sequencer = StepSequencer()
        recorder = Recorder(sequencer)
        sequencer.start(make_steps(2), "Demo")
        sequencer.finish("All done")
        sequencer.finish("Again")
        assert [step.text for step in sequencer.steps] == ["step 0", "step 1", "All done"]
        assert recorder.finished == 1

    def test_suspend_and_restore_running(self) -> None:
        sequencer = StepSequencer()
        sequencer.start(make_steps(3), "Demo")
        sequencer.suspend()
        assert sequencer.state is PlaybackState.PAUSED
        assert not sequencer.is_timer_armed()
        sequencer.restore()
        assert sequencer.state is PlaybackState.RUNNING
        assert sequencer.is_timer_armed()
        assert sequencer.current_index == 0

    def test_restore_keeps_user_pause(self) -> None:
        sequencer = StepSequencer()
        sequencer.start(make_steps(3), "Demo")
        sequencer.pause()
        sequencer.suspend()
        sequencer.restore()
        assert sequencer.state is PlaybackState.PAUSED

    def test_restore_after_restart_is_noop(self) -> None:
        sequencer = StepSequencer()
        sequencer.start(make_steps(3), "First")
        sequencer.suspend()
        sequencer.start(make_steps(2), "Second")
        sequencer.pause()
        sequencer.restore()
        assert sequencer.state is PlaybackState.PAUSED

    def test_steps_are_hashable(self) -> None:
        trace = StepTrace("Demo")
        trace.add("compare", StepTag.COMPARISON, snapshot=(2, 1), stats={"comparisons": 1})
        step = trace.last
        assert hash(step) == hash(trace.steps[0])
        assert step.counters() == {"comparisons": 1}
        assert len({step, trace.steps[0]}) == 1

    def test_reset(self) -> None:
        sequencer = StepSequencer()
        recorder = Recorder(sequencer)
        sequencer.start(make_steps(3), "Demo")
        sequencer.reset()
        assert sequencer.state is PlaybackState.IDLE
        assert sequencer.steps == []
        assert sequencer.current_index == -1
        assert not sequencer.is_timer_armed()
        assert recorder.states[-1] == "idle"

    def test_restart_bumps_generation(self) -> None:
        sequencer = StepSequencer()
        sequencer.start(make_steps(3), "First")
        generation = sequencer.generation
        sequencer.start(make_steps(2), "Second")
        assert sequencer.generation > generation
        assert sequencer.title == "Second"
        assert sequencer.current_index == 0

    def test_stale_timeout_is_ignored(self) -> None:
        sequencer = StepSequencer()
        recorder = Recorder(sequencer)
        sequencer.start(make_steps(3), "Demo")
        sequencer.pause()
        sequencer._on_timeout()
        assert sequencer.current_index == 0
        assert recorder.current == [0]

    def test_interval_follows_speed(self) -> None:
        ctrl = GlobalController()
        sequencer = StepSequencer(ctrl, base_interval_ms=900)
        assert sequencer.interval_ms() == 900
        ctrl.set_speed(3.0)
        assert sequencer.interval_ms() == 300
        ctrl.set_speed(10.0)
        assert ctrl.speed == 3.0


class TestTimedPlayback:
    """Playback driven by the Qt event loop."""

    def test_timer_reveals_every_step(self, pump) -> None:
        sequencer = StepSequencer(base_interval_ms=5)
        recorder = Recorder(sequencer)
        sequencer.start(make_steps(4), "Timed")
        assert pump(lambda: sequencer.state is PlaybackState.COMPLETED)
        assert recorder.current == [0, 1, 2, 3]
        assert recorder.finished == 1

    def test_paused_sequence_does_not_move(self, pump) -> None:
        sequencer = StepSequencer(base_interval_ms=5)
        sequencer.start(make_steps(4), "Timed")
        sequencer.pause()
        assert not pump(lambda: sequencer.current_index > 0, timeout=0.1)
        sequencer.resume()
        assert pump(lambda: sequencer.state is PlaybackState.COMPLETED)

    def test_restart_drops_old_sequence(self, pump) -> None:
        sequencer = StepSequencer(base_interval_ms=5)
        recorder = Recorder(sequencer)
        sequencer.start(make_steps(10), "Old")
        sequencer.start(make_steps(2), "New")
        assert pump(lambda: sequencer.state is PlaybackState.COMPLETED)
        assert sequencer.title == "New"
        assert recorder.current == [0, 0, 1]
