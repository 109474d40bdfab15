from PyQt5.QtCore import QObject, pyqtSignal

from core.config import SPEED_MAX, SPEED_MIN


class GlobalController(QObject):
    """
    Holds the playback speed shared by every visualization. Sequencers ask
    for their step interval on each re-arm, so a slider change applies from
    the next step on.
    """

    speedChanged = pyqtSignal(float)

    def __init__(self, speed: float = 1.0):
        super().__init__()
        self._speed = self._clamp(speed)

    @property
    def speed(self) -> float:
        return self._speed

    def set_speed(self, value: float):
        """Clamp and broadcast speed multiplier (0.5x - 3x)."""
        value = self._clamp(value)
        if abs(value - self._speed) > 1e-3:
            self._speed = value
            self.speedChanged.emit(self._speed)

    def scale_duration(self, base_ms: int) -> int:
        """
        Convert a base duration (ms) into the actual playback duration.
        Higher speed -> shorter duration.
        """
        if self._speed <= 0:
            return base_ms
        return max(1, int(base_ms / self._speed))

    @staticmethod
    def _clamp(value: float) -> float:
        return max(SPEED_MIN, min(SPEED_MAX, float(value)))
