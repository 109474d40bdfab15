from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPainter, QWheelEvent
from PyQt5.QtWidgets import QGraphicsView


class CustomGraphicsView(QGraphicsView):
    """
    Shared canvas for every visualization:
    - normal wheel: horizontal panning (lists and arrays grow sideways)
    - Ctrl + wheel: zoom with factor 1.1, clamped
    """

    min_zoom = 0.2
    max_zoom = 4.0

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setRenderHints(QPainter.Antialiasing | QPainter.TextAntialiasing)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setViewportUpdateMode(QGraphicsView.FullViewportUpdate)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAsNeeded)

    def wheelEvent(self, event: QWheelEvent):
        delta = event.angleDelta().y()
        if event.modifiers() & Qt.ControlModifier:
            factor = 1.1 if delta > 0 else (1 / 1.1)
            current = self.transform().m11()
            if self.min_zoom <= current * factor <= self.max_zoom:
                self.scale(factor, factor)
        else:
            bar = self.horizontalScrollBar()
            bar.setValue(bar.value() - int(delta * 0.5))
        event.accept()
