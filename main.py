import logging
import os
import sys

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QApplication,
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QSlider,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from core.config import SPEED_MAX, SPEED_MIN
from core.global_ctrl import GlobalController
from linklist.ll_ctrl import LinkedListController
from linklist.ll_model import ListKind
from sorting.sort_ctrl import SortController
from sorting.sort_runner import SortKind
from widgets.graphics_view import CustomGraphicsView

logger = logging.getLogger(__name__)

# Slider ticks per 1.0x of speed.
SPEED_TICKS = 100


def _row(*widgets, stretch_index=None):
    layout = QHBoxLayout()
    layout.setContentsMargins(0, 0, 0, 0)
    layout.setSpacing(6)
    for index, widget in enumerate(widgets):
        layout.addWidget(widget, 1 if index == stretch_index else 0)
    return layout


class MainWindow(QMainWindow):
    """
    One window hosting every visualizer. The selector swaps which
    controller owns the shared canvas; its operation panel sits under the
    canvas and its steps/code panel fills the right-hand column.
    """

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Data Structure & Sorting Visualizer")
        self.resize(1280, 760)

        self.global_ctrl = GlobalController()
        self.canvas = CustomGraphicsView()
        self.selector = QComboBox()
        self.selector.setObjectName("structureSelectCombo")
        self.panels = QStackedWidget()
        self.sidebars = QStackedWidget()
        self.speed_slider, self.speed_readout = self._make_speed_slider()

        self.controllers = {}
        self.active = None

        self.setCentralWidget(self._compose())
        for kind in ListKind:
            self.register(kind.label, LinkedListController(self.global_ctrl, kind))
        for kind in SortKind:
            self.register(kind.label, SortController(self.global_ctrl, kind))

        self.selector.currentTextChanged.connect(self.activate)
        self.speed_slider.valueChanged.connect(self._speed_changed)
        if self.controllers:
            self.activate(self.selector.itemText(0))

    def _make_speed_slider(self):
        slider = QSlider(Qt.Horizontal)
        slider.setRange(int(SPEED_MIN * SPEED_TICKS), int(SPEED_MAX * SPEED_TICKS))
        slider.setValue(SPEED_TICKS)
        return slider, QLabel("1.0×")

    def _compose(self):
        work_area = QWidget()
        column = QVBoxLayout(work_area)
        column.setContentsMargins(0, 0, 0, 0)
        column.setSpacing(6)
        column.addLayout(_row(QLabel("Visualization:"), self.selector, stretch_index=1))
        column.addWidget(self.canvas, 1)
        column.addLayout(_row(QLabel("Animation Speed"), self.speed_slider, self.speed_readout, stretch_index=1))
        column.addWidget(self.panels, 0)

        central = QWidget(self)
        split = QHBoxLayout(central)
        split.setContentsMargins(8, 8, 8, 8)
        split.setSpacing(8)
        split.addWidget(work_area, 14)
        split.addWidget(self.sidebars, 6)
        return central

    def register(self, name, controller):
        controller.panel_index = self.panels.addWidget(controller.build_panel())
        self.sidebars.addWidget(controller.side_panel)
        self.controllers[name] = controller
        self.selector.addItem(name)

    def activate(self, name):
        controller = self.controllers.get(name)
        if controller is None or name == self.active:
            return
        if self.active is not None:
            self.controllers[self.active].on_deactivate()
        controller.on_activate(self.canvas)
        self.panels.setCurrentIndex(controller.panel_index)
        self.sidebars.setCurrentWidget(controller.side_panel)
        self.active = name
        logger.debug("Activated %s", name)

    def _speed_changed(self, ticks):
        speed = ticks / SPEED_TICKS
        self.speed_readout.setText(f"{speed:.1f}×")
        self.global_ctrl.set_speed(speed)


def configure_logging():
    level_name = os.environ.get("DSVIZ_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    configure_logging()
    app = QApplication(sys.argv)
    window = MainWindow()
    window.showMaximized()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
