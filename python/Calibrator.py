from typing import Optional

from GestureClassifier import FistClassifier
from HandData import THUMB_TIP, HandData


class FistCalibrator:
    """
    Watches the geometric fist test frame to frame and fires once on the
    fist -> open transition, sampling the thumb tip depth as the baseline.
    """

    def __init__(self, classifier: FistClassifier = None):
        self.classifier = classifier or FistClassifier()
        self.was_fist = False
        self.depth: Optional[float] = None

    def reset(self) -> None:
        self.was_fist = False

    def update(self, hand: HandData) -> Optional[float]:
        """Returns the new calibration depth on a fist -> palm transition, else None."""
        if hand is None or not hand.valid:
            return None

        is_fist = self.classifier.is_fist(hand)
        result = None
        if self.was_fist and not is_fist:
            self.depth = hand.point(THUMB_TIP)[2]
            result = self.depth
        self.was_fist = is_fist
        return result
