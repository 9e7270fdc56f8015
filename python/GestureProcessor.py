import time
from collections import defaultdict
from typing import Callable, Iterable, List, Optional

import Events
from Bodies import load_bodies
from Calibrator import FistCalibrator
from GestureClassifier import HAND_CLOSED, HAND_OPEN, FistClassifier, LabelClassifier
from GestureState import ModeState
from HandData import HandData
from helpers import deep_merge
from Navigator import DetailLevel, Navigator
from RotaryDial import RotaryDialDetector
from SwipeDetector import SwipeDetector

DEFAULT_CONFIG = {
    "gestures": {
        "confidence_threshold": 0.6,
        "open_label": "Open_Palm",
        "closed_label": "Closed_Fist",
    },
    "swipe": {
        "min_distance": 0.01,
        "direction_ratio": 1.5,
        "velocity_threshold": 1.0,
        "cooldown": 0.5,
        "min_frame_interval": 0.016,
    },
    "dial": {
        "min_spread": 0.05,
        "max_drift": 0.03,
        "rotation_threshold": 0.02,
        "history_len": 8,
    },
    "detail": {
        "cooldown": 1.0,
    },
    "calibration": {
        "thumb_tolerance": 0.05,
        "min_closed": 4,
    },
    "zoom": {
        "enabled": True,
        "keep_revolving": True,
        "spin_boost": 4.0,
    },
    "bodies": None,
}


# ==========================================
# PROCESSING CORE
# ==========================================
class GestureProcessor:
    """
    Single owner of all interpretation state. One call to process() runs a
    full step for one frame:

        label -> mode state -> calibrator -> swipe or dial -> navigator

    and returns the events it committed, in order. Nothing here touches a
    camera, a window or a socket; feed it frames from any iterable.
    """

    def __init__(self, cfg=None):
        self.cfg = deep_merge(DEFAULT_CONFIG, {})

        self.mode = ModeState()
        self.label_classifier = LabelClassifier()
        self.fist_classifier = FistClassifier()
        self.calibrator = FistCalibrator(self.fist_classifier)
        self.swipe = SwipeDetector()
        self.dial = RotaryDialDetector()
        self.navigator = Navigator(load_bodies(self.cfg["bodies"]))

        self._callbacks = defaultdict(list)
        self._sinks: List[Callable] = []

        self.update_config(cfg)

    # ---------- configuration ----------
    def update_config(self, cfg):
        """Deep-merge a (partial) config and push it to every component."""
        if cfg:
            self.cfg = deep_merge(self.cfg, cfg)

        c = self.cfg
        self.label_classifier.update_config(c)
        self.fist_classifier.update_config(c)

        s = c.get("swipe", {})
        self.swipe.configure(
            min_distance=s.get("min_distance"),
            direction_ratio=s.get("direction_ratio"),
            velocity_threshold=s.get("velocity_threshold"),
            cooldown=s.get("cooldown"),
            min_frame_interval=s.get("min_frame_interval"),
        )

        d = c.get("dial", {})
        self.dial.configure(
            min_spread=d.get("min_spread"),
            max_drift=d.get("max_drift"),
            rotation_threshold=d.get("rotation_threshold"),
            history_len=d.get("history_len"),
        )

        bodies = load_bodies(c["bodies"]) if c.get("bodies") else None
        self.navigator.configure(detail_cooldown=c.get("detail", {}).get("cooldown"), bodies=bodies)

        z = c.get("zoom", {})
        self.zoom_enabled = bool(z.get("enabled", True))
        self.keep_revolving = bool(z.get("keep_revolving", True))
        self.spin_boost = float(z.get("spin_boost", 1.0))

    # ---------- callbacks ----------
    def register_callback(self, event_name: str, callback: Callable):
        """Register a callback for one event name."""
        if event_name not in Events.EVENT_NAMES:
            raise ValueError(f"Unknown event name: {event_name}")
        self._callbacks[event_name].append(callback)

    def register_sink(self, sink: Callable):
        """Register a callable receiving every event."""
        self._sinks.append(sink)

    def _dispatch(self, events):
        for ev in events:
            for callback in self._callbacks[ev.name]:
                callback(ev)
            for sink in self._sinks:
                sink(ev)

    # ---------- state ----------
    @property
    def calibration_depth(self) -> Optional[float]:
        return self.calibrator.depth

    def snapshot(self) -> dict:
        state = self.navigator.snapshot()
        state.update(self.mode.to_dict())
        state["calibration_depth"] = self.calibrator.depth
        return state

    def _clear_detector_memory(self):
        self.swipe.reset()
        self.dial.reset()

    # ---------- zoom ----------
    def _zoom_in(self, now):
        index = self.navigator.focus_index
        if not self.mode.zoom_in(index):
            return []
        self.navigator.halt(index)
        return [
            Events.zoom_changed(
                True,
                index,
                self.navigator.bodies[index].name,
                keep_revolving=self.keep_revolving,
                spin_boost=self.spin_boost,
                timestamp=now,
            )
        ]

    def _zoom_out(self, now):
        index = self.mode.zoom_out()
        if index < 0:
            return []
        self.navigator.resume(index)
        return [
            Events.zoom_changed(
                False,
                index,
                self.navigator.bodies[index % len(self.navigator.bodies)].name,
                keep_revolving=self.keep_revolving,
                spin_boost=1.0,
                timestamp=now,
            )
        ]

    # ---------- per-frame steps ----------
    def _apply_label(self, hand: HandData, now: float):
        events = []
        state = self.label_classifier.classify(hand)

        if state == HAND_CLOSED:
            if self.zoom_enabled and not self.mode.zoomed_in:
                events += self._zoom_in(now)
            if self.mode.lock():
                self._clear_detector_memory()
                events.append(Events.mode_changed(True, timestamp=now))

        elif state == HAND_OPEN:
            if self.mode.zoomed_in:
                events += self._zoom_out(now)
            if self.mode.unlock():
                self._clear_detector_memory()
                events.append(Events.mode_changed(False, timestamp=now))

        return events

    def _change_focus(self, direction: int, now: float):
        # zoom and halt belong to the body being left
        events = self._zoom_out(now) if self.mode.zoomed_in else []
        if direction > 0:
            events.append(self.navigator.advance_focus(now))
        else:
            events.append(self.navigator.retreat_focus(now))
        return events

    def _apply_landmarks(self, hand: HandData, now: float):
        events = []

        depth = self.calibrator.update(hand)
        if depth is not None:
            events.append(Events.calibrated(depth, timestamp=now))
            ev = self.navigator.set_detail_level(DetailLevel.OVERVIEW, now)
            if ev is not None:
                events.append(ev)

        if self.mode.locked:
            self.swipe.reset()
            direction = self.dial.update(hand)
            if direction:
                ev = self.navigator.apply_rotation(direction, now)
                if ev is not None:
                    events.append(ev)
        else:
            self.dial.reset()
            direction = self.swipe.update(hand)
            if direction:
                events += self._change_focus(direction, now)

        return events

    def process(self, hand: Optional[HandData]) -> List[Events.GestureEvent]:
        """
        Run one frame through the core. hand may be None (no hand detected).
        Never raises on missing or partial landmarks; those frames only feed
        the gesture label, if any.
        """
        if hand is None:
            return []

        now = hand.timestamp
        events = self._apply_label(hand, now)
        if hand.valid:
            events += self._apply_landmarks(hand, now)

        self._dispatch(events)
        return events

    def on_frame(self, landmarks=None, gesture: Optional[str] = None, confidence: float = 0.0, timestamp: float = None):
        if landmarks is None and gesture is None:
            return []
        if timestamp is None:
            timestamp = time.monotonic()
        hand = HandData(landmarks=landmarks, gesture=gesture, confidence=confidence, timestamp=timestamp)
        return self.process(hand)

    def run(self, frames: Iterable[Optional[HandData]], stop_event=None) -> int:
        """
        Drive the core from a lazy frame sequence until it ends or
        stop_event is set. Returns the number of frames consumed.
        """
        count = 0
        for hand in frames:
            if stop_event is not None and stop_event.is_set():
                break
            self.process(hand)
            count += 1
        return count
