from enum import IntEnum
from typing import List, Optional, Set

import Events
from Bodies import Body, load_bodies


class DetailLevel(IntEnum):
    OVERVIEW = 0
    DETAILED = 1
    DEEP = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value) -> "DetailLevel":
        if isinstance(value, DetailLevel):
            return value
        if isinstance(value, str):
            return cls[value.upper()]
        return cls(int(value))


class Navigator:
    """
    Owns the focused body and the detail level; the only state the
    presentation side reads.

    Detail changes coming from the dial are debounced by detail_cooldown.
    Clamped no-ops at either end of the ladder do not touch the cooldown.
    """

    def __init__(self, bodies: Optional[List[Body]] = None, detail_cooldown: float = 1.0):
        self.bodies = list(bodies) if bodies else load_bodies()
        self.focus_index = 0
        self.detail_level = DetailLevel.OVERVIEW
        self.detail_cooldown = detail_cooldown
        self._last_detail_change: Optional[float] = None
        self.halted: Set[int] = set()

    def configure(self, detail_cooldown: float = None, bodies: Optional[List[Body]] = None) -> None:
        if detail_cooldown is not None:
            self.detail_cooldown = float(detail_cooldown)
        if bodies:
            self.bodies = list(bodies)
            self.focus_index %= len(self.bodies)
            self.halted = {i for i in self.halted if i < len(self.bodies)}

    # ---------- focus ----------
    @property
    def body(self) -> Body:
        return self.bodies[self.focus_index]

    def _focus(self, index: int, now: float) -> Events.GestureEvent:
        self.focus_index = index % len(self.bodies)
        return Events.focus_changed(self.focus_index, self.body.name, timestamp=now)

    def advance_focus(self, now: float = 0.0) -> Events.GestureEvent:
        return self._focus(self.focus_index + 1, now)

    def retreat_focus(self, now: float = 0.0) -> Events.GestureEvent:
        return self._focus(self.focus_index - 1, now)

    # ---------- detail ladder ----------
    def description(self) -> str:
        return self.body.describe(self.detail_level.label)

    def _detail_event(self, now: float) -> Events.GestureEvent:
        return Events.detail_level_changed(self.detail_level, self.description(), timestamp=now)

    def detail_cooldown_active(self, now: float) -> bool:
        if self._last_detail_change is None:
            return False
        return now - self._last_detail_change < self.detail_cooldown

    def _step_detail(self, step: int, now: float) -> Optional[Events.GestureEvent]:
        if self.detail_cooldown_active(now):
            return None
        target = max(DetailLevel.OVERVIEW, min(DetailLevel.DEEP, self.detail_level + step))
        if target == self.detail_level:
            return None
        self.detail_level = DetailLevel(target)
        self._last_detail_change = now
        return self._detail_event(now)

    def raise_detail(self, now: float) -> Optional[Events.GestureEvent]:
        return self._step_detail(1, now)

    def lower_detail(self, now: float) -> Optional[Events.GestureEvent]:
        return self._step_detail(-1, now)

    def apply_rotation(self, direction: int, now: float) -> Optional[Events.GestureEvent]:
        if direction > 0:
            return self.raise_detail(now)
        if direction < 0:
            return self.lower_detail(now)
        return None

    def set_detail_level(self, level, now: float = 0.0) -> Optional[Events.GestureEvent]:
        """Direct set, bypasses the cooldown. Emits only on an actual change."""
        level = DetailLevel.parse(level)
        if level == self.detail_level:
            return None
        self.detail_level = level
        return self._detail_event(now)

    # ---------- orbital halt ----------
    def halt(self, index: int) -> None:
        self.halted.add(index)

    def resume(self, index: int) -> None:
        self.halted.discard(index)

    def is_halted(self, index: int) -> bool:
        return index in self.halted

    def snapshot(self) -> dict:
        return {
            "focus_index": self.focus_index,
            "body": self.body.name,
            "moons": self.body.moons,
            "detail_level": self.detail_level.label,
            "description": self.description(),
            "halted": sorted(self.halted),
        }
