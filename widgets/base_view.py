import math

from PyQt5.QtCore import QObject, QPointF, QRectF, QVariantAnimation
from PyQt5.QtWidgets import QGraphicsScene

from widgets.animation import AnimationToolkit

# Never zoom in past 1:1, even for a single node or bar.
MAX_FIT_SCALE = 1.0
MIN_FIT_SCALE = 0.05


class BaseStructureView(QObject):
    """
    Common ground for the list and array views. Each view owns a scene that
    is swapped onto the shared canvas while its visualization is active,
    holds on to its running item animations and glides the camera onto the
    drawn content after every redraw.
    """

    empty_rect = QRectF(-200, -200, 1200, 600)

    def __init__(self, global_ctrl):
        super().__init__()
        self.scene = QGraphicsScene()
        self.scene.setSceneRect(self.empty_rect)
        self.anim = AnimationToolkit(global_ctrl)
        self._running = []
        self._canvas = None
        self._camera = None
        self._fitted_rect = None

    # ---------- Canvas ----------

    def bind_canvas(self, view):
        self._stop_camera()
        self._canvas = view
        self._fitted_rect = None
        if view is not None:
            view.setScene(self.scene)
            view.resetTransform()
            self.auto_fit_view()

    def unbind_canvas(self):
        self._stop_camera()
        self._canvas = None

    def auto_fit_view(self, padding=80):
        if self._canvas is None:
            return
        bounds = self.scene.itemsBoundingRect()
        if bounds.isNull():
            target = QRectF(self.empty_rect)
        else:
            target = bounds.adjusted(-padding, -padding, padding, padding)
        if target == self._fitted_rect:
            return
        self._fitted_rect = target
        self.scene.setSceneRect(target)
        self._glide_to(target)

    # ---------- Item animations ----------

    def stop_animations(self):
        running, self._running = self._running, []
        for animation in running:
            animation.stop()

    def _track_animation(self, animation):
        """Start ``animation`` and keep a reference until it finishes."""
        if animation is None:
            return
        self._running.append(animation)

        def _forget():
            if animation in self._running:
                self._running.remove(animation)

        animation.finished.connect(_forget)
        animation.start()

    # ---------- Camera ----------

    def _glide_to(self, target, duration=300):
        viewport = self._canvas.viewport().rect()
        if viewport.isEmpty():
            return

        start_scale = self._canvas.transform().m11()
        if not math.isfinite(start_scale) or abs(start_scale) < 1e-4:
            start_scale = 1.0
        start_center = self._canvas.mapToScene(viewport.center())

        fit = min(
            viewport.width() / max(target.width(), 1.0),
            viewport.height() / max(target.height(), 1.0),
        )
        end_scale = min(max(MIN_FIT_SCALE, fit), MAX_FIT_SCALE)
        end_center = target.center()

        self._stop_camera()
        camera = QVariantAnimation(self)
        camera.setDuration(self.anim.duration(duration))
        camera.setStartValue(0.0)
        camera.setEndValue(1.0)

        def _frame(t):
            scale = start_scale + (end_scale - start_scale) * t
            center = start_center + (end_center - start_center) * t
            self._place_camera(scale, center)

        def _settle():
            self._place_camera(end_scale, end_center)
            self._camera = None

        camera.valueChanged.connect(_frame)
        camera.finished.connect(_settle)
        self._camera = camera
        camera.start()

    def _place_camera(self, scale, center: QPointF):
        if self._canvas is None:
            return
        self._canvas.resetTransform()
        self._canvas.scale(scale, scale)
        self._canvas.centerOn(center)

    def _stop_camera(self):
        if self._camera is not None:
            self._camera.stop()
            self._camera = None
