from typing import Optional

import numpy as np

from Angles import RotationHistory, angle_delta
from HandData import HandData

CLOCKWISE = 1
COUNTER_CLOCKWISE = -1


class RotaryDialDetector:
    """
    Reads a spread hand as a dial and reports rotation ticks.

    Each frame the thumb tip angle is measured around the centroid of the
    five fingertips, for the stored and for the current sample separately.
    Measuring around the per-sample centroid removes hand translation, and
    a centroid jump bigger than max_drift is treated as the hand moving
    rather than turning. Only a direction is ever reported, never an
    absolute dial position.
    """

    def __init__(
        self,
        min_spread: float = 0.05,
        max_drift: float = 0.03,
        rotation_threshold: float = 0.02,
        history_len: int = 8,
    ):
        self.min_spread = min_spread
        self.max_drift = max_drift
        self.rotation_threshold = rotation_threshold  # radians per frame, averaged
        self.history = RotationHistory(size=history_len)

        self._last_tips: Optional[np.ndarray] = None  # 5x2
        self.last_average = 0.0

    def configure(
        self,
        min_spread: float = None,
        max_drift: float = None,
        rotation_threshold: float = None,
        history_len: int = None,
    ) -> None:
        if min_spread is not None:
            self.min_spread = float(min_spread)
        if max_drift is not None:
            self.max_drift = float(max_drift)
        if rotation_threshold is not None:
            self.rotation_threshold = float(rotation_threshold)
        if history_len is not None and int(history_len) != self.history.size:
            self.history = RotationHistory(size=history_len)

    @property
    def active(self) -> bool:
        return self._last_tips is not None or bool(self.history)

    def reset(self) -> None:
        self._last_tips = None
        self.history.reset()
        self.last_average = 0.0

    @staticmethod
    def _tips(hand: HandData) -> np.ndarray:
        return np.array([p[:2] for p in hand.fingertips()], dtype=float)

    def is_dial_formation(self, tips: np.ndarray) -> bool:
        center = tips.mean(axis=0)
        spread = float(np.linalg.norm(tips - center, axis=1).mean())
        return spread > self.min_spread

    def update(self, hand: HandData) -> int:
        """
        Feed one frame. Returns CLOCKWISE, COUNTER_CLOCKWISE or 0.
        """
        if hand is None or not hand.valid:
            return 0

        tips = self._tips(hand)
        if not np.all(np.isfinite(tips)):
            return 0

        # fingers bunched together: not a dial this frame, history is kept
        if not self.is_dial_formation(tips):
            return 0

        if self._last_tips is None:
            self._last_tips = tips
            self.history.reset()
            return 0

        last_center = self._last_tips.mean(axis=0)
        center = tips.mean(axis=0)

        if float(np.linalg.norm(center - last_center)) > self.max_drift:
            self._last_tips = tips
            self.history.reset()
            self.last_average = 0.0
            return 0

        # thumb tip is the dial's pointer
        delta = angle_delta(self._last_tips[0], last_center, tips[0], center)
        avg = self.history.push(delta)
        self.last_average = avg
        self._last_tips = tips

        if abs(avg) > self.rotation_threshold:
            return CLOCKWISE if avg > 0 else COUNTER_CLOCKWISE
        return 0
