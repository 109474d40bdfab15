from PyQt5.QtCore import QPointF, QRectF, Qt
from PyQt5.QtGui import QBrush, QColor, QFont, QPen
from PyQt5.QtWidgets import QGraphicsObject

from core.steps import StepTag
from widgets.base_view import BaseStructureView

BAR_COLOR = QColor("#90a4ae")
SORTED_COLOR = QColor("#66bb6a")
OUT_OF_RANGE_COLOR = QColor("#cfd8dc")
MIN_BAR_HEIGHT = 6.0

TAG_COLORS = {
    StepTag.COMPARISON: QColor("#ffd54f"),
    StepTag.SWAP: QColor("#ef5350"),
    StepTag.SHIFT: QColor("#ff8c00"),
    StepTag.INSERT: QColor("#42a5f5"),
    StepTag.PARTITION: QColor("#ab47bc"),
    StepTag.RECURSE: QColor("#26a69a"),
    StepTag.PHASE: QColor("#26a69a"),
    StepTag.SORTED: SORTED_COLOR,
}


class ArrayView(BaseStructureView):
    """
    Bar chart of the array under sort. Every step redraws heights from the
    step's snapshot, paints sorted positions green and flashes the focused
    positions in the colour of the step's tag. Quick sort range steps dim
    everything outside the range being worked on.
    """

    bar_width = 46
    gap = 10
    max_bar_height = 320

    def __init__(self, global_ctrl):
        super().__init__(global_ctrl)
        self.bars = []

    def show_values(self, values):
        self.show_step_state(values)

    def show_step(self, step):
        self.show_step_state(
            step.snapshot or (),
            focus=step.focus,
            tag=step.tag,
            sorted_positions=step.sorted_positions,
        )

    def show_step_state(self, values, focus=(), tag=None, sorted_positions=()):
        self.stop_animations()
        values = list(values)
        self._ensure_bars(len(values))

        range_tags = (StepTag.PHASE, StepTag.RECURSE)
        window = set(focus) if tag in range_tags and focus else None

        peak = max([abs(value) for value in values] + [1])
        unit = self.max_bar_height / peak
        for index, (bar, value) in enumerate(zip(self.bars, values)):
            bar.set_value(value, unit)
            if index in sorted_positions:
                bar.setFillColor(SORTED_COLOR)
            elif window is not None and index not in window:
                bar.setFillColor(OUT_OF_RANGE_COLOR)
            else:
                bar.setFillColor(BAR_COLOR)

        highlight = TAG_COLORS.get(tag)
        if highlight is not None and tag not in range_tags:
            flashes = [
                self.anim.flash_brush(self.bars[i].setFillColor, self.bars[i].fillColor, highlight)
                for i in focus
                if 0 <= i < len(self.bars)
            ]
            if flashes:
                self._track_animation(self.anim.parallel(*flashes))
        self.auto_fit_view()

    def _ensure_bars(self, count):
        if len(self.bars) == count:
            return
        for bar in self.bars:
            self.scene.removeItem(bar)
        self.bars = []
        for index in range(count):
            bar = BarItem(index, self.bar_width)
            bar.setPos(QPointF(index * (self.bar_width + self.gap), 0))
            self.scene.addItem(bar)
            self.bars.append(bar)


def bar_extent(value, unit, minimum=MIN_BAR_HEIGHT):
    """Signed bar height: positive values rise above the baseline, negative ones hang below it."""
    height = value * unit
    if abs(height) < minimum:
        return -minimum if value < 0 else minimum
    return height


class BarItem(QGraphicsObject):
    """Bar anchored at its baseline (y = 0); the value label sits on its free end."""

    label_height = 22

    def __init__(self, index, width):
        super().__init__()
        self.index = index
        self.width = width
        self.value = 0
        self.bar_height = 0.0
        self.fillColor = QColor(BAR_COLOR)
        self.strokeColor = QColor("#37474f")
        self.setZValue(2)

    def bar_rect(self):
        return QRectF(0, -self.bar_height, self.width, self.bar_height).normalized()

    def value_rect(self):
        bar = self.bar_rect()
        if self.bar_height < 0:
            return QRectF(0, bar.bottom(), self.width, self.label_height)
        return QRectF(0, bar.top() - self.label_height, self.width, self.label_height)

    def index_rect(self):
        top = -self.label_height if self.bar_height < 0 else 0
        return QRectF(0, top, self.width, self.label_height)

    def boundingRect(self):
        return self.bar_rect().united(self.value_rect()).united(self.index_rect())

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        rect = self.bar_rect()
        painter.setPen(QPen(self.strokeColor, 1.4))
        painter.setBrush(QBrush(self.fillColor))
        painter.drawRoundedRect(rect, 4, 4)

        font = QFont()
        font.setPointSize(11)
        painter.setFont(font)
        painter.setPen(QColor("#eceff1"))
        painter.drawText(self.value_rect(), Qt.AlignCenter, str(self.value))

        painter.setPen(QColor("#78909c"))
        painter.drawText(self.index_rect(), Qt.AlignCenter, str(self.index))

    def set_value(self, value, unit):
        height = bar_extent(value, unit)
        if value != self.value or height != self.bar_height:
            self.prepareGeometryChange()
            self.value = value
            self.bar_height = height
            self.update()

    def setFillColor(self, color):
        self.fillColor = QColor(color)
        self.update()
