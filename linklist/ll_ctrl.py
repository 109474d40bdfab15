from PyQt5.QtWidgets import (
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from core.config import ARRAY_MAX_LENGTH, VALUE_MAX, VALUE_MIN
from core.global_ctrl import GlobalController
from core.sequencer import PlaybackState
from core.validation import ValidationError, parse_array, parse_value
from linklist.ll_model import ListKind
from linklist.ll_session import LinkedListSession
from linklist.ll_view import LinkedListView
from widgets.steps_panel import StepsPanel


class LinkedListController(QWidget):
    """
    Controller builds the operation panel and wires UI events -> session,
    and session/sequencer signals -> view and steps panel.
    """

    def __init__(self, global_ctrl: GlobalController, kind=ListKind.SINGLY):
        super().__init__()
        self.kind = ListKind(kind)
        self.session = LinkedListSession(self.kind, global_ctrl, parent=self)
        self.view = LinkedListView(global_ctrl)
        self.side_panel = StepsPanel()
        self.side_panel.bind(self.session.sequencer)

        self._build_inputs()
        self.panel = self._create_panel()

        sequencer = self.session.sequencer
        self.session.modelChanged.connect(self._on_model_changed)
        self.session.selectionChanged.connect(self._on_selection_changed)
        self.session.codeChanged.connect(self.side_panel.set_code)
        sequencer.currentStepChanged.connect(self._on_current_step)
        sequencer.sequenceFinished.connect(self._on_sequence_finished)
        sequencer.stateChanged.connect(self._refresh_buttons)
        self.view.nodeClicked.connect(self._on_node_clicked)

        self.session.reset()
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

        # Value + head/tail inserts
        insert_group = self._group("Insert")
        insert_layout = QVBoxLayout(insert_group)
        insert_layout.setContentsMargins(12, 8, 12, 12)
        insert_layout.setSpacing(6)
        insert_layout.addWidget(self.value_edit)
        row = QHBoxLayout()
        self.head_btn = QPushButton("Insert Head")
        self.head_btn.clicked.connect(self._on_insert_head)
        self.tail_btn = QPushButton("Insert Tail")
        self.tail_btn.clicked.connect(self._on_insert_tail)
        row.addWidget(self.head_btn)
        row.addWidget(self.tail_btn)
        insert_layout.addLayout(row)
        layout.addWidget(insert_group, 0, 0)

        # Operations on the selected node
        selected_group = self._group("Selected Node")
        selected_layout = QVBoxLayout(selected_group)
        selected_layout.setContentsMargins(12, 8, 12, 12)
        selected_layout.setSpacing(6)
        selected_layout.addWidget(self.selection_label)
        self.after_btn = QPushButton("Insert After")
        self.after_btn.clicked.connect(self._on_insert_after)
        self.before_btn = QPushButton("Insert Before")
        self.before_btn.clicked.connect(self._on_insert_before)
        self.delete_btn = QPushButton("Delete")
        self.delete_btn.clicked.connect(self._on_delete)
        for button in (self.after_btn, self.before_btn, self.delete_btn):
            selected_layout.addWidget(button)
        self.before_btn.setVisible(self.session.supports("insert_before"))
        layout.addWidget(selected_group, 0, 1, 2, 1)

        # Whole-list actions
        list_group = self._group("List")
        list_layout = QVBoxLayout(list_group)
        list_layout.setContentsMargins(12, 8, 12, 12)
        list_layout.setSpacing(6)
        self.create_btn = QPushButton("Create From List")
        self.create_btn.clicked.connect(self._on_create)
        self.reverse_btn = QPushButton("Reverse")
        self.reverse_btn.clicked.connect(self._on_reverse)
        self.reverse_btn.setVisible(self.session.supports("reverse"))
        self.reset_btn = QPushButton("Reset")
        self.reset_btn.clicked.connect(self._on_reset)
        for button in (self.create_btn, self.reverse_btn, self.reset_btn):
            list_layout.addWidget(button)
        layout.addWidget(list_group, 1, 0)

        # Playback
        playback_group = self._group("Playback")
        playback_layout = QHBoxLayout(playback_group)
        playback_layout.setContentsMargins(12, 8, 12, 12)
        self.pause_btn = QPushButton("Pause")
        self.pause_btn.clicked.connect(self.session.sequencer.toggle_pause)
        self.finish_btn = QPushButton("Finish")
        self.finish_btn.clicked.connect(lambda: self.session.finish())
        playback_layout.addWidget(self.pause_btn)
        playback_layout.addWidget(self.finish_btn)
        layout.addWidget(playback_group, 2, 0, 1, 2)

        layout.setRowStretch(3, 1)
        return container

    @staticmethod
    def _group(title):
        group = QGroupBox(title)
        group.setStyleSheet("QGroupBox { color: white; }")
        return group

    def _build_inputs(self):
        self.value_edit = QLineEdit()
        self.value_edit.setPlaceholderText(f"Value ({VALUE_MIN}-{VALUE_MAX})")
        self.selection_label = QLabel("Click a node to select it")

    def _refresh_buttons(self, *_):
        has_selection = self.session.selected_id is not None
        self.after_btn.setEnabled(has_selection)
        self.before_btn.setEnabled(has_selection)
        self.delete_btn.setEnabled(has_selection)
        self.reverse_btn.setEnabled(self.session.model.size >= 2)

        state = self.session.sequencer.state
        playing = state in (PlaybackState.RUNNING, PlaybackState.PAUSED)
        self.pause_btn.setEnabled(playing)
        self.finish_btn.setEnabled(playing)
        self.pause_btn.setText("Resume" if state is PlaybackState.PAUSED else "Pause")

    # ---------- Controller lifecycle ----------

    def on_activate(self, graphics_view):
        self.view.bind_canvas(graphics_view)
        self.view.show_snapshot(self.session.snapshot(), animate=False)
        self.session.restore()

    def on_deactivate(self):
        self.session.suspend()
        self.view.stop_animations()
        self.view.unbind_canvas()

    def build_panel(self):
        return self.panel

    # ---------- Session signal handlers ----------

    def _on_model_changed(self, snapshot):
        self.view.show_snapshot(snapshot)
        self._refresh_buttons()

    def _on_current_step(self, step):
        if step.snapshot is not None:
            self.view.show_snapshot(step.snapshot, step.focus)

    def _on_sequence_finished(self):
        self.view.show_snapshot(self.session.snapshot(), animate=False)
        self._refresh_buttons()

    def _on_selection_changed(self, node_id):
        self.view.set_selected(node_id)
        if node_id is None:
            self.selection_label.setText("Click a node to select it")
        else:
            self.selection_label.setText(f"Selected: {self.session.model.value_of(node_id)}")
        self._refresh_buttons()

    def _on_node_clicked(self, node_id):
        self.session.select(node_id)

    # ---------- UI handlers ----------

    def _read_value(self):
        try:
            return parse_value(self.value_edit.text())
        except ValidationError as exc:
            QMessageBox.warning(self, "Invalid value", str(exc))
            return None

    def _on_insert_head(self):
        value = self._read_value()
        if value is not None:
            self.session.insert_at_head(value)

    def _on_insert_tail(self):
        value = self._read_value()
        if value is not None:
            self.session.insert_at_tail(value)

    def _on_insert_after(self):
        value = self._read_value()
        if value is not None:
            self.session.insert_after(self.session.selected_id, value)

    def _on_insert_before(self):
        value = self._read_value()
        if value is not None:
            self.session.insert_before(self.session.selected_id, value)

    def _on_delete(self):
        self.session.delete(self.session.selected_id)

    def _on_reverse(self):
        self.session.reverse()

    def _on_reset(self):
        self.session.reset()

    def _on_create(self):
        text, ok = QInputDialog.getText(
            self, "Create Linked List", "Enter values (comma-separated):"
        )
        if not ok:
            return
        try:
            values = parse_array(text, 1, ARRAY_MAX_LENGTH, VALUE_MIN, VALUE_MAX)
        except ValidationError as exc:
            QMessageBox.warning(self, "Invalid values", str(exc))
            return
        self.session.build(values)
