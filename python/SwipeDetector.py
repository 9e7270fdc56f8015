from typing import Optional, Tuple

from HandData import PALM_CENTER, HandData

ADVANCE = 1
RETREAT = -1


class SwipeDetector:
    """
    Turns palm-center motion into discrete left/right swipe commits.

    Velocity is measured between consecutive processed frames, not from the
    start of a gesture, so a single fast flick is enough. Direction gating
    rejects vertical and diagonal motion.
    """

    def __init__(
        self,
        min_distance: float = 0.01,
        direction_ratio: float = 1.5,
        velocity_threshold: float = 1.0,
        cooldown: float = 0.5,
        min_frame_interval: float = 0.016,
    ):
        self.min_distance = min_distance
        self.direction_ratio = direction_ratio
        self.velocity_threshold = velocity_threshold  # normalized units / second
        self.cooldown = cooldown
        self.min_frame_interval = min_frame_interval

        self._last: Optional[Tuple[float, float, float]] = None  # (x, y, t)
        self._last_commit_time: Optional[float] = None
        self.last_velocity = 0.0

    def configure(
        self,
        min_distance: float = None,
        direction_ratio: float = None,
        velocity_threshold: float = None,
        cooldown: float = None,
        min_frame_interval: float = None,
    ) -> None:
        if min_distance is not None:
            self.min_distance = float(min_distance)
        if direction_ratio is not None:
            self.direction_ratio = float(direction_ratio)
        if velocity_threshold is not None:
            self.velocity_threshold = float(velocity_threshold)
        if cooldown is not None:
            self.cooldown = float(cooldown)
        if min_frame_interval is not None:
            self.min_frame_interval = float(min_frame_interval)

    @property
    def active(self) -> bool:
        """True while a previous palm sample is held."""
        return self._last is not None

    def reset(self) -> None:
        # the commit clock survives a reset, it gates its own event class
        self._last = None
        self.last_velocity = 0.0

    def _cooled_down(self, now: float) -> bool:
        if self._last_commit_time is None:
            return True
        return now - self._last_commit_time > self.cooldown

    def update(self, hand: HandData) -> int:
        """
        Feed one frame. Returns ADVANCE, RETREAT or 0.
        """
        if hand is None or not hand.valid:
            return 0

        x, y, _ = hand.point(PALM_CENTER)
        now = hand.timestamp

        if self._last is None:
            self._last = (x, y, now)
            return 0

        last_x, last_y, last_t = self._last
        dt = now - last_t
        # too soon after the stored sample; keep it so the next delta is meaningful
        if dt < self.min_frame_interval:
            return 0

        dx = x - last_x
        dy = y - last_y
        self.last_velocity = abs(dx) / dt if dt > 0 else 0.0

        result = 0
        if dt > 0 and abs(dx) > self.min_distance and abs(dx) > abs(dy) * self.direction_ratio:
            if self.last_velocity > self.velocity_threshold and self._cooled_down(now):
                result = ADVANCE if dx > 0 else RETREAT
                self._last_commit_time = now

        self._last = (x, y, now)
        return result
