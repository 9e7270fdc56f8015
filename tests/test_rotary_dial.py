"""Tests for rotary dial detection and detail-level control in dial mode."""

import Events
from frames import dial_hand, hand, names
from GestureProcessor import GestureProcessor
from Navigator import DetailLevel
from RotaryDial import CLOCKWISE, COUNTER_CLOCKWISE, RotaryDialDetector


def locked_processor(cfg=None):
    proc = GestureProcessor(cfg)
    proc.on_frame(gesture="Closed_Fist", confidence=0.9, timestamp=0.0)
    assert proc.mode.locked
    return proc


def turn(proc, angles, start=0.1, step=0.05, center=(0.5, 0.4)):
    events = []
    for i, a in enumerate(angles):
        events += proc.process(hand(dial_hand(a, center=center), start + i * step))
    return events


class TestRotaryDialDetector:
    def test_first_sample_primes(self):
        det = RotaryDialDetector()
        assert det.update(hand(dial_hand(0.0), 0.0)) == 0
        assert det.active
        assert len(det.history) == 0

    def test_growing_angle_is_clockwise(self):
        """Image y points down, so a growing atan2 angle turns clockwise on screen."""
        det = RotaryDialDetector()
        det.update(hand(dial_hand(0.0), 0.0))
        assert det.update(hand(dial_hand(0.1), 0.05)) == CLOCKWISE
        assert det.last_average > 0

    def test_shrinking_angle_is_counter_clockwise(self):
        det = RotaryDialDetector()
        det.update(hand(dial_hand(0.0), 0.0))
        assert det.update(hand(dial_hand(-0.1), 0.05)) == COUNTER_CLOCKWISE

    def test_small_jitter_below_threshold(self):
        det = RotaryDialDetector()
        det.update(hand(dial_hand(0.0), 0.0))
        assert det.update(hand(dial_hand(0.01), 0.05)) == 0
        assert det.update(hand(dial_hand(0.0), 0.10)) == 0

    def test_wraparound_across_pi(self):
        """A small turn through +-pi is a small delta, not a full revolution."""
        det = RotaryDialDetector()
        det.update(hand(dial_hand(3.10), 0.0))
        assert det.update(hand(dial_hand(3.20), 0.05)) == CLOCKWISE
        assert abs(det.last_average - 0.1) < 1e-6

    def test_history_is_averaged(self):
        """One noisy opposite frame does not flip a steady turn."""
        det = RotaryDialDetector()
        det.update(hand(dial_hand(0.0), 0.0))
        det.update(hand(dial_hand(0.1), 0.05))
        det.update(hand(dial_hand(0.2), 0.10))
        assert det.update(hand(dial_hand(0.15), 0.15)) == CLOCKWISE

    def test_history_is_bounded(self):
        det = RotaryDialDetector(history_len=8)
        det.update(hand(dial_hand(0.0), 0.0))
        for i in range(1, 15):
            det.update(hand(dial_hand(0.05 * i), 0.05 * i))
        assert len(det.history) == 8

    def test_bunched_fingers_keep_history(self):
        """A non-dial frame leaves both the stored sample and the history alone."""
        det = RotaryDialDetector()
        det.update(hand(dial_hand(0.0), 0.0))
        det.update(hand(dial_hand(0.1), 0.05))
        before = det.history.values()

        assert det.update(hand(dial_hand(0.5, radius=0.03), 0.10)) == 0
        assert det.history.values() == before
        # next good frame is compared with the angle-0.1 sample
        assert det.update(hand(dial_hand(0.2), 0.15)) == CLOCKWISE
        assert len(det.history) == 2

    def test_centroid_drift_clears_history(self):
        det = RotaryDialDetector()
        det.update(hand(dial_hand(0.0), 0.0))
        det.update(hand(dial_hand(0.1), 0.05))

        assert det.update(hand(dial_hand(0.2, center=(0.55, 0.4)), 0.10)) == 0
        assert len(det.history) == 0
        assert det.last_average == 0.0

    def test_translation_within_drift_is_not_rotation(self):
        """Angles are measured about each sample's own centroid."""
        det = RotaryDialDetector()
        det.update(hand(dial_hand(0.0), 0.0))
        assert det.update(hand(dial_hand(0.0, center=(0.52, 0.41)), 0.05)) == 0
        assert abs(det.last_average) < 1e-9

    def test_partial_frame(self):
        det = RotaryDialDetector()
        assert det.update(hand(dial_hand(0.0)[:8], 0.0)) == 0
        assert det.update(None) == 0
        assert not det.active

    def test_reset(self):
        det = RotaryDialDetector()
        det.update(hand(dial_hand(0.0), 0.0))
        det.update(hand(dial_hand(0.1), 0.05))
        det.reset()
        assert not det.active
        assert det.update(hand(dial_hand(0.2), 0.10)) == 0


class TestDialDetailControl:
    def test_clockwise_raises_detail(self):
        proc = locked_processor()
        events = turn(proc, [0.0, 0.1])

        assert names(events) == [Events.DETAIL_LEVEL_CHANGED]
        assert events[0]["level"] == "detailed"
        assert proc.navigator.detail_level == DetailLevel.DETAILED

    def test_counter_clockwise_at_overview_is_clamped(self):
        proc = locked_processor()
        events = turn(proc, [0.0, -0.1, -0.2])
        assert events == []
        assert proc.navigator.detail_level == DetailLevel.OVERVIEW

    def test_detail_cooldown(self):
        """Commits within one second of a change only move the ladder once."""
        proc = locked_processor()
        events = turn(proc, [0.0, 0.1, 0.2, 0.3, 0.4])

        assert names(events) == [Events.DETAIL_LEVEL_CHANGED]
        assert proc.navigator.detail_level == DetailLevel.DETAILED

    def test_second_step_after_cooldown(self):
        proc = locked_processor()
        turn(proc, [0.0, 0.1], start=0.1)
        events = turn(proc, [0.2, 0.3], start=1.5)

        assert names(events) == [Events.DETAIL_LEVEL_CHANGED]
        assert proc.navigator.detail_level == DetailLevel.DEEP

    def test_clamped_at_deep(self):
        proc = locked_processor()
        proc.navigator.set_detail_level(DetailLevel.DEEP, 0.0)
        events = turn(proc, [0.0, 0.1, 0.2])

        assert events == []
        assert proc.navigator.detail_level == DetailLevel.DEEP
        assert not proc.navigator.detail_cooldown_active(0.2)

    def test_drift_restarts_accumulation(self):
        """After a centroid jump, the new direction is read fresh."""
        proc = locked_processor()
        # counter-clockwise history, clamped at OVERVIEW so nothing fires
        assert turn(proc, [0.0, -0.1, -0.2, -0.3, -0.4]) == []
        assert len(proc.dial.history) == 4

        # hand jumps: no event, history cleared
        assert turn(proc, [-0.4], start=0.5, center=(0.55, 0.4)) == []
        assert len(proc.dial.history) == 0

        events = turn(proc, [-0.37], start=0.55, center=(0.55, 0.4))
        assert names(events) == [Events.DETAIL_LEVEL_CHANGED]
        assert proc.navigator.detail_level == DetailLevel.DETAILED

    def test_dial_ignored_while_unlocked(self):
        proc = GestureProcessor()
        events = turn(proc, [0.0, 0.1, 0.2, 0.3])
        assert events == []
        assert proc.navigator.detail_level == DetailLevel.OVERVIEW
        assert not proc.dial.active
