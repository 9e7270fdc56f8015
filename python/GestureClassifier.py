# GestureClassifier.py
from typing import Optional

from HandData import FINGER_BASES, FINGERTIPS, HandData

HAND_OPEN = "open"
HAND_CLOSED = "closed"


class HandStateClassifier:
    """
    Decides whether a hand is open or closed.
    Subclasses answer from different evidence and may disagree on the same
    frame; callers keep their results apart.
    """

    section = ""
    defaults = {}

    def __init__(self, cfg=None):
        self.cfg = dict(self.defaults)
        self.update_config(cfg)

    def update_config(self, cfg):
        if cfg:
            self.cfg.update(cfg.get(self.section, {}))
        self._apply()

    def _apply(self):
        pass

    def classify(self, hand: HandData) -> Optional[str]:
        raise NotImplementedError


class LabelClassifier(HandStateClassifier):
    """
    Trusts the detector's own gesture label, gated by its confidence score.
    """

    section = "gestures"
    defaults = {
        "confidence_threshold": 0.6,
        "open_label": "Open_Palm",
        "closed_label": "Closed_Fist",
    }

    def _apply(self):
        self.confidence_threshold = float(self.cfg["confidence_threshold"])
        self.open_label = self.cfg["open_label"]
        self.closed_label = self.cfg["closed_label"]

    def classify_label(self, label: Optional[str], confidence: float) -> Optional[str]:
        if not label or confidence is None:
            return None
        if confidence <= self.confidence_threshold:
            return None
        if label == self.open_label:
            return HAND_OPEN
        if label == self.closed_label:
            return HAND_CLOSED
        return None

    def classify(self, hand: HandData) -> Optional[str]:
        if hand is None:
            return None
        return self.classify_label(hand.gesture, hand.confidence)


class FistClassifier(HandStateClassifier):
    """
    Geometric fist test on raw landmarks, independent of any label.

    Thumb: closed when its tip sits horizontally close to the IP joint.
    Other fingers: closed when the tip is below the MCP joint (image y grows down).
    """

    section = "calibration"
    defaults = {
        "thumb_tolerance": 0.05,
        "min_closed": 4,
    }

    def _apply(self):
        self.thumb_tolerance = float(self.cfg["thumb_tolerance"])
        self.min_closed = int(self.cfg["min_closed"])

    def closed_fingers(self, hand: HandData):
        lm = hand.landmarks
        closed = []
        for i, (tip, base) in enumerate(zip(FINGERTIPS, FINGER_BASES)):
            if i == 0:
                closed.append(abs(lm[tip][0] - lm[base][0]) < self.thumb_tolerance)
            else:
                closed.append(lm[tip][1] > lm[base][1])
        return closed

    def is_fist(self, hand: HandData) -> bool:
        if hand is None or not hand.valid:
            return False
        return sum(self.closed_fingers(hand)) >= self.min_closed

    def classify(self, hand: HandData) -> Optional[str]:
        if hand is None or not hand.valid:
            return None
        return HAND_CLOSED if self.is_fist(hand) else HAND_OPEN
