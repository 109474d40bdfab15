from PyQt5.QtCore import Qt
from PyQt5.QtGui import QBrush, QColor, QFont
from PyQt5.QtWidgets import (
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPlainTextEdit,
    QVBoxLayout,
    QWidget,
)

from core.steps import StepStatus

STATUS_STYLE = {
    StepStatus.PENDING: ("#9e9e9e", "#00000000", "·"),
    StepStatus.CURRENT: ("#1f1f24", "#ffd54f", "→"),
    StepStatus.DONE: ("#43a047", "#00000000", "✓"),
}


class StepsPanel(QWidget):
    """
    Right-hand narration panel: operation title, the step list with
    pending/current/done styling, and the reference code for the operation.
    Subscribes to a StepSequencer; never drives it.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._steps = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        self.operation_label = QLabel("Idle")
        font = self.operation_label.font()
        font.setBold(True)
        self.operation_label.setFont(font)

        self.list_widget = QListWidget()
        self.list_widget.setSelectionMode(QListWidget.NoSelection)

        self.code_view = QPlainTextEdit()
        self.code_view.setReadOnly(True)
        self.code_view.setFont(QFont("Monospace", 10))
        self.code_view.setMaximumHeight(220)

        layout.addWidget(QLabel("Steps"))
        layout.addWidget(self.operation_label)
        layout.addWidget(self.list_widget, 1)
        layout.addWidget(QLabel("Code"))
        layout.addWidget(self.code_view)

    def bind(self, sequencer):
        sequencer.sequenceStarted.connect(self.show_sequence)
        sequencer.stepAppended.connect(self.append_step)
        sequencer.stepStatusChanged.connect(self.set_status)
        sequencer.stateChanged.connect(self._on_state_changed)

    def show_sequence(self, title, steps):
        self.operation_label.setText(title)
        self.list_widget.clear()
        self._steps = []
        for step in steps:
            self.append_step(step)

    def append_step(self, step):
        item = QListWidgetItem()
        item.setData(Qt.UserRole, step.index)
        self.list_widget.addItem(item)
        self._steps.append(step)
        self._style_item(item, StepStatus.PENDING)

    def set_status(self, index, status):
        item = self.list_widget.item(index)
        if item is None:
            return
        status = StepStatus(status)
        self._style_item(item, status)
        if status is StepStatus.CURRENT:
            self.list_widget.scrollToItem(item, QListWidget.EnsureVisible)

    def set_code(self, lines):
        self.code_view.setPlainText("\n".join(lines))

    def clear(self):
        self.operation_label.setText("Idle")
        self.list_widget.clear()
        self._steps = []

    def _on_state_changed(self, state):
        if state == "idle":
            self.clear()

    def _style_item(self, item, status):
        fg, bg, badge = STATUS_STYLE[status]
        index = item.data(Qt.UserRole)
        step = self._steps[index]
        indent = "  " * step.depth
        item.setText(f"{badge} {index + 1}. {indent}{step.text}")
        item.setForeground(QBrush(QColor(fg)))
        item.setBackground(QBrush(QColor(bg)))
