from PyQt5.QtWidgets import (
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from core.config import ARRAY_MAX_LENGTH, ARRAY_MIN_LENGTH
from core.global_ctrl import GlobalController
from core.sequencer import PlaybackState
from core.validation import ValidationError, parse_array
from sorting.sort_runner import PSEUDOCODE, SortKind
from sorting.sort_session import SortSession
from sorting.sort_view import ArrayView
from widgets.steps_panel import StepsPanel


class SortController(QWidget):
    """
    Panel for one sorting algorithm: array input, sort/pause/reset and the
    statistics row. The statistics shown are the ones captured with the
    step currently on screen, so they advance with the replay.
    """

    def __init__(self, global_ctrl: GlobalController, kind=SortKind.BUBBLE):
        super().__init__()
        self.kind = SortKind(kind)
        self.session = SortSession(self.kind, global_ctrl, parent=self)
        self.view = ArrayView(global_ctrl)
        self.side_panel = StepsPanel()
        self.side_panel.bind(self.session.sequencer)
        self.side_panel.set_code(PSEUDOCODE[self.kind])

        self._build_inputs()
        self.panel = self._create_panel()

        sequencer = self.session.sequencer
        self.session.arrayChanged.connect(self._on_array_changed)
        self.session.statsReset.connect(self._clear_stats)
        sequencer.currentStepChanged.connect(self._on_current_step)
        sequencer.sequenceFinished.connect(self._on_sequence_finished)
        sequencer.stateChanged.connect(self._refresh_buttons)

        self.view.show_values(self.session.values())
        self._clear_stats()
        self._refresh_buttons()

    # ---------- Panel UI ----------

    def _create_panel(self):
        container = QWidget()
        layout = QGridLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setHorizontalSpacing(12)
        layout.setVerticalSpacing(12)
        layout.setColumnStretch(0, 1)
        layout.setColumnStretch(1, 1)

        array_group = QGroupBox("Array")
        array_group.setStyleSheet("QGroupBox { color: white; }")
        array_layout = QVBoxLayout(array_group)
        array_layout.setContentsMargins(12, 8, 12, 12)
        array_layout.setSpacing(6)
        array_layout.addWidget(self.array_edit)
        row = QHBoxLayout()
        self.set_btn = QPushButton("Set Array")
        self.set_btn.clicked.connect(self._on_set_array)
        self.random_btn = QPushButton("Randomize")
        self.random_btn.clicked.connect(self._on_randomize)
        row.addWidget(self.set_btn)
        row.addWidget(self.random_btn)
        array_layout.addLayout(row)
        layout.addWidget(array_group, 0, 0)

        run_group = QGroupBox(self.kind.label)
        run_group.setStyleSheet("QGroupBox { color: white; }")
        run_layout = QHBoxLayout(run_group)
        run_layout.setContentsMargins(12, 8, 12, 12)
        self.sort_btn = QPushButton("Sort")
        self.sort_btn.clicked.connect(self._on_sort)
        self.pause_btn = QPushButton("Pause")
        self.pause_btn.clicked.connect(self.session.toggle_pause)
        self.reset_btn = QPushButton("Reset")
        self.reset_btn.clicked.connect(self.session.reset)
        for button in (self.sort_btn, self.pause_btn, self.reset_btn):
            run_layout.addWidget(button)
        layout.addWidget(run_group, 1, 0)

        stats_group = QGroupBox("Statistics")
        stats_group.setStyleSheet("QGroupBox { color: white; }")
        stats_layout = QFormLayout(stats_group)
        stats_layout.setContentsMargins(12, 8, 12, 12)
        stats_layout.setSpacing(6)
        for caption, label in self.stat_labels:
            stats_layout.addRow(caption, label)
        layout.addWidget(stats_group, 0, 1, 2, 1)

        layout.setRowStretch(2, 1)
        return container

    def _build_inputs(self):
        self.array_edit = QLineEdit(", ".join(str(v) for v in self.session.original))
        self.array_edit.setPlaceholderText(
            f"{ARRAY_MIN_LENGTH}-{ARRAY_MAX_LENGTH} numbers, comma separated"
        )

        self.comparisons_label = QLabel()
        self.moves_label = QLabel()
        self.accesses_label = QLabel()
        self.extra_label = QLabel()
        moves_caption = "Shifts:" if self.kind is SortKind.INSERTION else "Swaps:"
        extra_caption = {
            SortKind.BUBBLE: "Pass:",
            SortKind.INSERTION: "Key:",
            SortKind.QUICK: "Max depth:",
        }[self.kind]
        self.stat_labels = [
            ("Comparisons:", self.comparisons_label),
            (moves_caption, self.moves_label),
            ("Array accesses:", self.accesses_label),
            (extra_caption, self.extra_label),
        ]

    def _refresh_buttons(self, *_):
        state = self.session.sequencer.state
        sorting = self.session.is_sorting
        for widget in (self.sort_btn, self.set_btn, self.random_btn, self.array_edit):
            widget.setDisabled(sorting)
        self.pause_btn.setEnabled(sorting)
        self.pause_btn.setText("Resume" if state is PlaybackState.PAUSED else "Pause")

    # ---------- Controller lifecycle ----------

    def on_activate(self, graphics_view):
        self.view.bind_canvas(graphics_view)
        self.session.restore()

    def on_deactivate(self):
        self.session.suspend()
        self.view.stop_animations()
        self.view.unbind_canvas()

    def build_panel(self):
        return self.panel

    # ---------- Session signal handlers ----------

    def _on_array_changed(self, values):
        self.view.show_values(values)
        self.array_edit.setText(", ".join(str(v) for v in values))

    def _on_current_step(self, step):
        self.view.show_step(step)
        self._show_stats(step.counters())

    def _on_sequence_finished(self):
        trace = self.session.last_trace
        if trace is not None and trace.last is not None:
            last = trace.last
            self.view.show_step_state(last.snapshot, sorted_positions=last.sorted_positions)
            self._show_stats(last.counters())
        self._refresh_buttons()

    def _show_stats(self, stats):
        if not stats:
            return
        self.comparisons_label.setText(str(stats["comparisons"]))
        moves = stats["shifts"] if self.kind is SortKind.INSERTION else stats["swaps"]
        self.moves_label.setText(str(moves))
        self.accesses_label.setText(str(stats["accesses"]))
        extra = {
            SortKind.BUBBLE: stats["current_pass"],
            SortKind.INSERTION: stats["current_key"],
            SortKind.QUICK: stats["max_depth"],
        }[self.kind]
        self.extra_label.setText("-" if extra is None else str(extra))

    def _clear_stats(self):
        for _, label in self.stat_labels:
            label.setText("0")
        if self.kind is SortKind.INSERTION:
            self.extra_label.setText("-")

    # ---------- UI handlers ----------

    def _on_set_array(self):
        try:
            values = parse_array(self.array_edit.text(), ARRAY_MIN_LENGTH, ARRAY_MAX_LENGTH)
        except ValidationError as exc:
            QMessageBox.warning(self, "Invalid array", str(exc))
            return
        self.session.set_array(values)

    def _on_randomize(self):
        self.session.randomize()

    def _on_sort(self):
        if self.session.model.length == 0:
            return
        self.session.sort()
