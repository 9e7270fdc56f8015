import math
from collections import deque
from typing import Sequence, Tuple

Point2 = Tuple[float, float]


def normalize_angle(angle: float) -> float:
    """Wrap an angle difference into (-pi, pi]."""
    while angle > math.pi:
        angle -= 2.0 * math.pi
    while angle <= -math.pi:
        angle += 2.0 * math.pi
    return angle


def angle_about(point: Sequence[float], center: Sequence[float]) -> float:
    """Screen-space angle of point around center. y grows downwards, so a
    growing angle is clockwise rotation as seen by the user."""
    return math.atan2(point[1] - center[1], point[0] - center[0])


def angle_delta(prev_point, prev_center, point, center) -> float:
    return normalize_angle(angle_about(point, center) - angle_about(prev_point, prev_center))


class RotationHistory:
    """
    Maintains a short history of per-frame angle deltas to reduce jitter.
    Call push() per frame to obtain the smoothed delta.
    """

    def __init__(self, size: int = 8):
        self.size = max(1, int(size))
        self._buffer = deque(maxlen=self.size)

    def __len__(self):
        return len(self._buffer)

    def __bool__(self):
        return len(self._buffer) > 0

    def reset(self) -> None:
        self._buffer.clear()

    def push(self, delta: float) -> float:
        self._buffer.append(float(delta))
        return self.average()

    def average(self) -> float:
        if not self._buffer:
            return 0.0
        return sum(self._buffer) / len(self._buffer)

    def values(self):
        return list(self._buffer)
