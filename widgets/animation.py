from PyQt5.QtCore import QEasingCurve, QParallelAnimationGroup, QPropertyAnimation, QVariantAnimation
from PyQt5.QtGui import QColor


class AnimationToolkit:
    """
    Small factory for the item animations the views use; every duration
    goes through the global speed multiplier.
    """

    def __init__(self, global_ctrl):
        self.global_ctrl = global_ctrl

    def duration(self, base_ms):
        if self.global_ctrl is None:
            return base_ms
        return self.global_ctrl.scale_duration(base_ms)

    def move_item(self, item, end_pos, duration=420, easing=QEasingCurve.InOutCubic):
        anim = QPropertyAnimation(item, b"pos")
        anim.setDuration(self.duration(duration))
        anim.setEndValue(end_pos)
        anim.setEasingCurve(easing)
        return anim

    def fade_item(self, item, start=0.0, end=1.0, duration=360):
        anim = QPropertyAnimation(item, b"opacity")
        anim.setDuration(self.duration(duration))
        anim.setStartValue(start)
        anim.setEndValue(end)
        anim.setEasingCurve(QEasingCurve.InOutQuad)
        return anim

    def flash_brush(self, setter, start_color, end_color, duration=300):
        """
        setter: callable receiving QColor (e.g. node.setFillColor). Runs
        start -> end and settles on ``end_color``.
        """
        anim = QVariantAnimation()
        anim.setDuration(self.duration(duration))
        anim.setStartValue(QColor(start_color))
        anim.setEndValue(QColor(end_color))
        anim.setEasingCurve(QEasingCurve.InOutQuad)

        def _update(value):
            if isinstance(value, QColor):
                setter(value)

        anim.valueChanged.connect(_update)
        return anim

    @staticmethod
    def parallel(*animations):
        group = QParallelAnimationGroup()
        for anim in animations:
            if anim:
                group.addAnimation(anim)
        return group
