"""Tests for the processing core: mode switching, zoom, robustness and config."""

import math

import pytest

import Events
from frames import dial_hand, fist_hand, hand, names, open_hand
from GestureProcessor import DEFAULT_CONFIG, GestureProcessor
from GestureState import ModeState
from HandData import HandData
from Navigator import DetailLevel


def fist_label(proc, t, confidence=0.9):
    return proc.on_frame(gesture="Closed_Fist", confidence=confidence, timestamp=t)


def palm_label(proc, t, confidence=0.9):
    return proc.on_frame(gesture="Open_Palm", confidence=confidence, timestamp=t)


class TestModeState:
    def test_lock_unlock_report_changes(self):
        mode = ModeState()
        assert mode.mode_name == "swipe"
        assert mode.lock() is True
        assert mode.lock() is False
        assert mode.mode_name == "dial"
        assert mode.unlock() is True
        assert mode.unlock() is False

    def test_zoom(self):
        mode = ModeState()
        assert mode.zoom_out() == -1
        assert mode.zoom_in(4)
        assert not mode.zoom_in(5)
        assert mode.zoomed_index == 4
        assert mode.zoom_out() == 4
        assert not mode.zoomed_in


class TestLabels:
    def test_fist_locks(self):
        proc = GestureProcessor({"zoom": {"enabled": False}})
        events = fist_label(proc, 0.0)
        assert names(events) == [Events.MODE_CHANGED]
        assert events[0]["locked"] is True

    def test_repeated_label_is_idempotent(self):
        proc = GestureProcessor()
        fist_label(proc, 0.0)
        assert fist_label(proc, 0.1) == []
        assert proc.mode.locked

    def test_palm_while_unlocked_is_silent(self):
        proc = GestureProcessor()
        assert palm_label(proc, 0.0) == []

    @pytest.mark.parametrize("confidence", [0.0, 0.3, 0.6])
    def test_low_confidence_ignored(self, confidence):
        """The confidence must be strictly above 0.6."""
        proc = GestureProcessor()
        assert fist_label(proc, 0.0, confidence=confidence) == []
        assert not proc.mode.locked

    def test_threshold_is_configurable(self):
        proc = GestureProcessor({"gestures": {"confidence_threshold": 0.3}})
        fist_label(proc, 0.0, confidence=0.4)
        assert proc.mode.locked

    def test_unknown_label_ignored(self):
        proc = GestureProcessor()
        assert proc.on_frame(gesture="Thumb_Up", confidence=0.99, timestamp=0.0) == []
        assert proc.on_frame(gesture="None", confidence=0.99, timestamp=0.1) == []
        assert not proc.mode.locked


class TestModeExclusivity:
    def test_swipe_ignored_in_dial_mode(self):
        proc = GestureProcessor()
        fist_label(proc, 0.0)
        events = proc.process(hand(open_hand(0.30), 0.1))
        events += proc.process(hand(open_hand(0.55), 0.2))

        assert Events.FOCUS_CHANGED not in names(events)
        assert proc.navigator.focus_index == 0
        assert not proc.swipe.active

    def test_swipe_works_after_unlock(self):
        proc = GestureProcessor()
        fist_label(proc, 0.0)
        palm_label(proc, 0.1)
        proc.process(hand(open_hand(0.30), 0.2))
        events = proc.process(hand(open_hand(0.55), 0.3))
        assert names(events) == [Events.FOCUS_CHANGED]

    def test_dial_after_lock(self):
        proc = GestureProcessor()
        proc.process(hand(dial_hand(0.0), 0.0))
        assert not proc.dial.active
        fist_label(proc, 0.05)
        proc.process(hand(dial_hand(0.0), 0.1))
        events = proc.process(hand(dial_hand(0.1), 0.15))
        assert names(events) == [Events.DETAIL_LEVEL_CHANGED]


class TestMemoryClearing:
    def test_lock_clears_swipe_memory(self):
        proc = GestureProcessor()
        proc.process(hand(open_hand(0.30), 0.0))
        assert proc.swipe.active
        fist_label(proc, 0.05)
        assert not proc.swipe.active

    def test_unlock_clears_dial_memory(self):
        proc = GestureProcessor()
        fist_label(proc, 0.0)
        proc.process(hand(dial_hand(0.0), 0.1))
        proc.process(hand(dial_hand(-0.05), 0.15))
        assert proc.dial.active
        palm_label(proc, 0.2)
        assert not proc.dial.active

    def test_repeated_label_keeps_memory(self):
        """Only an actual transition clears detector memory."""
        proc = GestureProcessor()
        proc.process(hand(open_hand(0.30), 0.0))
        palm_label(proc, 0.05)
        assert proc.swipe.active

    def test_no_stale_swipe_after_round_trip(self):
        """A palm sample from before a lock is never compared against one after."""
        proc = GestureProcessor({"zoom": {"enabled": False}})
        proc.process(hand(open_hand(0.30), 0.0))
        fist_label(proc, 0.05)
        palm_label(proc, 0.10)
        events = proc.process(hand(open_hand(0.55), 0.15))
        assert events == []


class TestZoom:
    def test_fist_zooms_in_and_halts(self):
        proc = GestureProcessor()
        events = fist_label(proc, 0.0)

        assert names(events) == [Events.ZOOM_CHANGED, Events.MODE_CHANGED]
        zoom = events[0]
        assert zoom["zoomed_in"] is True
        assert zoom["body"] == "Sun"
        assert zoom["keep_revolving"] is True
        assert zoom["spin_boost"] == 4.0
        assert proc.navigator.is_halted(0)

    def test_palm_zooms_out_and_resumes(self):
        proc = GestureProcessor()
        fist_label(proc, 0.0)
        events = palm_label(proc, 0.1)

        assert names(events) == [Events.ZOOM_CHANGED, Events.MODE_CHANGED]
        assert events[0]["zoomed_in"] is False
        assert events[0]["spin_boost"] == 1.0
        assert proc.navigator.halted == set()
        assert not proc.mode.zoomed_in

    def test_zoom_disabled(self):
        proc = GestureProcessor({"zoom": {"enabled": False}})
        fist_label(proc, 0.0)
        assert not proc.mode.zoomed_in
        assert proc.navigator.halted == set()

    def test_keep_revolving_reported(self):
        proc = GestureProcessor({"zoom": {"keep_revolving": False, "spin_boost": 2.0}})
        events = fist_label(proc, 0.0)
        assert events[0]["keep_revolving"] is False
        assert events[0]["spin_boost"] == 2.0

    def test_focus_change_leaves_zoom(self):
        proc = GestureProcessor()
        proc.mode.zoom_in(0)
        proc.navigator.halt(0)

        proc.process(hand(open_hand(0.30), 0.0))
        events = proc.process(hand(open_hand(0.55), 0.1))

        assert names(events) == [Events.ZOOM_CHANGED, Events.FOCUS_CHANGED]
        assert events[0]["zoomed_in"] is False
        assert events[0]["body"] == "Sun"
        assert events[1]["body"] == "Mercury"
        assert not proc.mode.zoomed_in
        assert not proc.navigator.is_halted(0)


class TestRobustness:
    def test_none_frame(self):
        proc = GestureProcessor()
        assert proc.process(None) == []
        assert proc.on_frame() == []

    def test_partial_landmarks(self):
        proc = GestureProcessor()
        assert proc.on_frame(landmarks=open_hand()[:5], timestamp=0.0) == []
        assert proc.on_frame(landmarks=[], timestamp=0.1) == []

    def test_malformed_landmarks(self):
        proc = GestureProcessor()
        assert proc.on_frame(landmarks=["a", "b"], timestamp=0.0) == []
        assert proc.on_frame(landmarks=42, timestamp=0.1) == []

    def test_nan_landmarks(self):
        proc = GestureProcessor()
        fist_label(proc, 0.0)
        lm = dial_hand(0.0)
        lm[8] = [math.nan, math.nan, 0.0]
        assert proc.process(hand(lm, 0.1)) == []

    def test_label_applied_on_partial_frame(self):
        proc = GestureProcessor()
        events = proc.on_frame(landmarks=open_hand()[:3], gesture="Closed_Fist", confidence=0.9, timestamp=0.0)
        assert Events.MODE_CHANGED in names(events)

    def test_accepts_landmark_objects(self):
        class Lm:
            def __init__(self, x, y, z):
                self.x, self.y, self.z = x, y, z

        proc = GestureProcessor()
        proc.process(HandData([Lm(*p) for p in open_hand(0.30)], timestamp=0.0))
        events = proc.process(HandData([{"x": p[0], "y": p[1], "z": p[2]} for p in open_hand(0.55)], timestamp=0.1))
        assert names(events) == [Events.FOCUS_CHANGED]

    def test_default_timestamp(self):
        proc = GestureProcessor()
        events = fist_label(proc, None)
        assert events[0].timestamp > 0


class TestCallbacks:
    def test_callback_and_sink(self):
        proc = GestureProcessor({"zoom": {"enabled": False}})
        seen, everything = [], []
        proc.register_callback(Events.MODE_CHANGED, seen.append)
        proc.register_sink(everything.append)

        fist_label(proc, 0.0)
        proc.process(hand(open_hand(0.30), 0.1))
        palm_label(proc, 0.2)

        assert [e["locked"] for e in seen] == [True, False]
        assert names(everything) == [Events.MODE_CHANGED, Events.MODE_CHANGED]

    def test_unknown_event_name(self):
        proc = GestureProcessor()
        with pytest.raises(ValueError):
            proc.register_callback("Exploded", print)

    def test_run_consumes_frames(self):
        proc = GestureProcessor()
        frames = [hand(open_hand(0.30), 0.0), None, hand(open_hand(0.55), 0.1)]
        assert proc.run(frames) == 3
        assert proc.navigator.focus_index == 1

    def test_run_stops_on_event(self):
        import threading

        stop = threading.Event()
        stop.set()
        proc = GestureProcessor()
        assert proc.run([hand(open_hand(), 0.0)], stop_event=stop) == 0


class TestConfig:
    def test_partial_update_merges(self):
        proc = GestureProcessor()
        proc.update_config({"swipe": {"cooldown": 0.8}})

        assert proc.swipe.cooldown == 0.8
        assert proc.swipe.velocity_threshold == 1.0
        assert proc.cfg["dial"] == DEFAULT_CONFIG["dial"]

    def test_default_config_not_mutated(self):
        GestureProcessor({"detail": {"cooldown": 3.0}})
        assert DEFAULT_CONFIG["detail"]["cooldown"] == 1.0

    def test_updates_reach_components(self):
        proc = GestureProcessor()
        proc.update_config({
            "dial": {"history_len": 4, "max_drift": 0.1},
            "detail": {"cooldown": 0.25},
            "calibration": {"thumb_tolerance": 0.02},
        })
        assert proc.dial.history.size == 4
        assert proc.dial.max_drift == 0.1
        assert proc.navigator.detail_cooldown == 0.25
        assert proc.fist_classifier.thumb_tolerance == 0.02

    def test_custom_bodies(self):
        proc = GestureProcessor({"bodies": ["Earth", "Moon"]})
        assert [b.name for b in proc.navigator.bodies] == ["Earth", "Moon"]

    def test_snapshot(self):
        proc = GestureProcessor()
        fist_label(proc, 0.0)
        proc.navigator.set_detail_level(DetailLevel.DEEP)
        snap = proc.snapshot()
        assert snap["locked"] is True
        assert snap["zoomed_in"] is True
        assert snap["mode"] == "dial"
        assert snap["detail_level"] == "deep"
        assert snap["calibration_depth"] is None


class TestNoMotion:
    def test_still_open_hand_unlocked(self):
        proc = GestureProcessor()
        events = []
        for i in range(20):
            events += proc.process(hand(open_hand(), i * 0.05))
        assert events == []
        assert proc.navigator.focus_index == 0

    def test_still_dial_hand_locked(self):
        proc = GestureProcessor()
        fist_label(proc, 0.0)
        events = []
        for i in range(20):
            events += proc.process(hand(dial_hand(0.3), 0.05 + i * 0.05))
        assert events == []
        assert proc.navigator.detail_level == DetailLevel.OVERVIEW

    def test_held_fist(self):
        proc = GestureProcessor()
        events = []
        for i in range(20):
            events += proc.process(hand(fist_hand(), i * 0.05))
        assert events == []
        assert proc.calibration_depth is None
        assert proc.calibrator.was_fist

    def test_held_labelled_fist_reports_once(self):
        proc = GestureProcessor()
        first = proc.process(hand(fist_hand(), 0.0, gesture="Closed_Fist", confidence=0.9))
        assert Events.MODE_CHANGED in names(first)

        later = []
        for i in range(1, 20):
            later += proc.process(hand(fist_hand(), i * 0.05, gesture="Closed_Fist", confidence=0.9))
        assert later == []
        assert proc.mode.locked
