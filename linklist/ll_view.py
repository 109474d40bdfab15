import math

from PyQt5.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QFont, QPainterPath, QPen
from PyQt5.QtWidgets import QGraphicsItem, QGraphicsObject, QGraphicsPathItem, QGraphicsSimpleTextItem

from widgets.base_view import BaseStructureView

FILL_COLOR = QColor("#e9e9ef")
FOCUS_COLOR = QColor("#ffd54f")
SELECTED_STROKE = QColor("#1e88e5")
DEFAULT_STROKE = QColor("#4a4a52")


class LinkedListView(BaseStructureView):
    """
    Draws ``ListSnapshot`` objects: one box per node, an arrow per link and
    the circular closure as an arc. Nodes not reachable from head yet
    (mid-operation) are drawn lifted above the row.
    """

    nodeClicked = pyqtSignal(int)

    spacing = 190
    lift = 120

    def __init__(self, global_ctrl):
        super().__init__(global_ctrl)
        self.items = {}
        self.arrows = []
        self.markers = []
        self._selected = None

    def show_snapshot(self, snapshot, focus=(), animate=True):
        self.stop_animations()
        present = {node.id for node in snapshot.nodes}
        for node_id in list(self.items):
            if node_id not in present:
                item = self.items.pop(node_id)
                self.scene.removeItem(item)
            else:
                self.items[node_id].setOpacity(1.0)

        reachable = self._reachable(snapshot)
        for index, node in enumerate(snapshot.nodes):
            target = QPointF(index * self.spacing, 0 if node.id in reachable else -self.lift)
            item = self.items.get(node.id)
            if item is None:
                item = self._create_item(node, snapshot.kind.is_doubly)
                item.setPos(target)
                if animate:
                    item.setOpacity(0.0)
                    self._track_animation(self.anim.fade_item(item, 0.0, 1.0))
            else:
                item.set_value(node.value)
                if animate and item.pos() != target:
                    self._track_animation(self.anim.move_item(item, target))
                else:
                    item.setPos(target)
            item.set_null_next(node.next is None)
            item.setFillColor(FILL_COLOR)

        self._rebuild_arrows(snapshot)
        self._rebuild_markers(snapshot)
        self.set_selected(self._selected)
        self.highlight(focus)
        self.auto_fit_view()

    def highlight(self, focus):
        for node_id in focus:
            item = self.items.get(node_id)
            if item is not None:
                self._track_animation(
                    self.anim.flash_brush(item.setFillColor, item.fillColor, FOCUS_COLOR)
                )

    def set_selected(self, node_id):
        self._selected = node_id
        for item_id, item in self.items.items():
            item.setStrokeColor(SELECTED_STROKE if item_id == node_id else DEFAULT_STROKE)

    # ---------- Internal helpers ----------

    def _create_item(self, node, doubly):
        item = ListNodeItem(node.id, node.value, doubly)
        item.clicked.connect(self.nodeClicked)
        item.positionChanged.connect(self._refresh_arrow_paths)
        self.scene.addItem(item)
        self.items[node.id] = item
        return item

    @staticmethod
    def _reachable(snapshot):
        links = {node.id: node.next for node in snapshot.nodes}
        seen = set()
        current = snapshot.head
        while current is not None and current not in seen:
            seen.add(current)
            current = links.get(current)
        return seen

    def _rebuild_arrows(self, snapshot):
        for arrow in self.arrows:
            self.scene.removeItem(arrow)
        self.arrows = []

        for node in snapshot.nodes:
            start = self.items.get(node.id)
            if node.next is not None and node.next in self.items:
                closure = node.id == snapshot.tail and node.next == snapshot.head
                style = "closure_next" if closure and snapshot.kind.is_circular else "next"
                self._add_arrow(start, self.items[node.next], style)
            if node.prev is not None and node.prev in self.items:
                closure = node.id == snapshot.head and node.prev == snapshot.tail
                style = "closure_prev" if closure and snapshot.kind.is_circular else "prev"
                self._add_arrow(start, self.items[node.prev], style)

    def _add_arrow(self, start, end, style):
        arrow = ArrowItem(start, end, style)
        self.scene.addItem(arrow)
        self.arrows.append(arrow)

    def _refresh_arrow_paths(self):
        for arrow in self.arrows:
            arrow.update_path()

    def _rebuild_markers(self, snapshot):
        for marker in self.markers:
            if marker.scene() is self.scene:
                self.scene.removeItem(marker)
        self.markers = []
        for label, node_id in (("head", snapshot.head), ("tail", snapshot.tail)):
            item = self.items.get(node_id)
            if item is None:
                continue
            text = QGraphicsSimpleTextItem(label)
            text.setBrush(QColor("#90a4ae"))
            font = text.font()
            font.setPointSize(11)
            text.setFont(font)
            offset = -28 if label == "head" else ListNodeItem.height + 8
            text.setParentItem(item)
            text.setPos(8, offset)
            self.markers.append(text)


class ListNodeItem(QGraphicsObject):
    clicked = pyqtSignal(int)
    positionChanged = pyqtSignal()

    height = 50
    pointer_size = 40
    data_width = 70

    def __init__(self, node_id, value, doubly=False):
        super().__init__()
        self.node_id = node_id
        self._value = str(value)
        self._doubly = doubly
        self._null_next = False
        self.fillColor = QColor(FILL_COLOR)
        self.strokeColor = QColor(DEFAULT_STROKE)
        self.textColor = QColor("#1f1f24")
        self.setZValue(2)
        self.setFlags(QGraphicsItem.ItemSendsGeometryChanges)
        self.setCursor(Qt.PointingHandCursor)

    def boundingRect(self):
        return QRectF(0, 0, self.total_width(), self.height)

    def total_width(self):
        prev_cell = self.pointer_size if self._doubly else 0
        return prev_cell + self.data_width + self.pointer_size

    def paint(self, painter, option, widget=None):
        painter.setRenderHint(painter.Antialiasing)
        painter.setPen(QPen(self.strokeColor, 2.2))
        painter.setBrush(QBrush(self.fillColor))
        painter.drawRect(self.boundingRect())

        data_left = self.pointer_size if self._doubly else 0
        data_right = data_left + self.data_width
        painter.setPen(QPen(self.strokeColor, 1.6))
        if self._doubly:
            painter.drawLine(QPointF(data_left, 1.0), QPointF(data_left, self.height - 1.0))
        painter.drawLine(QPointF(data_right, 1.0), QPointF(data_right, self.height - 1.0))

        font = QFont()
        font.setPointSize(14)
        painter.setFont(font)
        painter.setPen(self.textColor)
        painter.drawText(QRectF(data_left, 0, self.data_width, self.height), Qt.AlignCenter, self._value)

        if self._null_next:
            small = QFont(font)
            small.setPointSize(7)
            small.setBold(True)
            painter.setFont(small)
            painter.setPen(self.strokeColor)
            painter.drawText(self.next_rect(), Qt.AlignCenter, "NULL")

    def next_rect(self):
        return QRectF(self.total_width() - self.pointer_size, 0, self.pointer_size, self.height)

    def next_anchor(self):
        return self.mapToScene(self.next_rect().center())

    def prev_anchor(self):
        if self._doubly:
            return self.mapToScene(QPointF(self.pointer_size / 2.0, self.height / 2.0))
        return self.mapToScene(QPointF(0, self.height / 2.0))

    def entry_point(self, upper=True):
        y = self.height * (0.3 if upper else 0.7)
        return self.mapToScene(QPointF(0, y))

    def exit_point(self, upper=True):
        y = self.height * (0.3 if upper else 0.7)
        return self.mapToScene(QPointF(self.total_width(), y))

    def set_value(self, value):
        self._value = str(value)
        self.update()

    def set_null_next(self, is_null):
        if self._null_next != is_null:
            self._null_next = is_null
            self.update()

    def setFillColor(self, color):
        self.fillColor = QColor(color)
        self.update()

    def setStrokeColor(self, color):
        self.strokeColor = QColor(color)
        self.update()

    def itemChange(self, change, value):
        if change == QGraphicsItem.ItemPositionHasChanged:
            self.positionChanged.emit()
        return super().itemChange(change, value)

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.clicked.emit(self.node_id)
            event.accept()
            return
        super().mousePressEvent(event)


class ArrowItem(QGraphicsPathItem):
    COLORS = {
        "next": "#ff8c00",
        "prev": "#26a69a",
        "closure_next": "#ff8c00",
        "closure_prev": "#26a69a",
    }

    def __init__(self, start_item, end_item, style="next"):
        super().__init__()
        self.start_item = start_item
        self.end_item = end_item
        self.style = style
        pen = QPen(QColor(self.COLORS[style]), 2.5)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        self.setPen(pen)
        self.setZValue(5)
        self.update_path()

    def update_path(self):
        path = QPainterPath()
        if self.style == "next":
            start = self.start_item.next_anchor()
            end = self.end_item.entry_point(upper=True)
            path.moveTo(start)
            path.lineTo(end)
        elif self.style == "prev":
            start = self.start_item.prev_anchor()
            end = self.end_item.exit_point(upper=False)
            path.moveTo(start)
            path.lineTo(end)
        else:
            below = self.style == "closure_next"
            start = self.start_item.next_anchor() if below else self.start_item.prev_anchor()
            end_item_rect = self.end_item.sceneBoundingRect()
            if below:
                end = QPointF(end_item_rect.left() + 12, end_item_rect.bottom())
                depth = max(end_item_rect.bottom(), self.start_item.sceneBoundingRect().bottom()) + 70
            else:
                end = QPointF(end_item_rect.right() - 12, end_item_rect.top())
                depth = min(end_item_rect.top(), self.start_item.sceneBoundingRect().top()) - 70
            path.moveTo(start)
            path.cubicTo(QPointF(start.x(), depth), QPointF(end.x(), depth), end)
            before = path.pointAtPercent(0.97)
            self._add_head(path, before, end)
            self.setPath(path)
            return

        self._add_head(path, start, end)
        self.setPath(path)

    @staticmethod
    def _add_head(path, start, end, size=10):
        angle = math.atan2(end.y() - start.y(), end.x() - start.x())
        for offset in (math.radians(150), math.radians(-150)):
            tip = QPointF(end.x() + size * math.cos(angle + offset), end.y() + size * math.sin(angle + offset))
            path.moveTo(end)
            path.lineTo(tip)
