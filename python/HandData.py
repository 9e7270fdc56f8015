from typing import Dict, List, Optional, Sequence, Tuple, Union

Point = Tuple[float, float, float]

NUM_LANDMARKS = 21

WRIST = 0
THUMB_IP = 3
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_TIP = 12
RING_MCP = 13
RING_TIP = 16
PINKY_MCP = 17
PINKY_TIP = 20

# middle finger MCP, steadier than any fingertip
PALM_CENTER = MIDDLE_MCP

FINGERTIPS = (THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)
# joint each tip is compared against when testing for a closed finger
FINGER_BASES = (THUMB_IP, INDEX_MCP, MIDDLE_MCP, RING_MCP, PINKY_MCP)


def extract_point(entry) -> Point:
    if hasattr(entry, "x") and hasattr(entry, "y") and hasattr(entry, "z"):
        return (float(entry.x), float(entry.y), float(entry.z))
    if isinstance(entry, dict):
        return (float(entry.get("x", 0.0)), float(entry.get("y", 0.0)), float(entry.get("z", 0.0)))
    if isinstance(entry, (list, tuple)) and len(entry) >= 2:
        z = float(entry[2]) if len(entry) >= 3 else 0.0
        return (float(entry[0]), float(entry[1]), z)
    raise ValueError("Unsupported landmark format; expected object with x,y,z or sequence of 3 values.")


def to_points(landmarks) -> Optional[List[Point]]:
    """Normalize any landmark container into a list of (x, y, z) tuples.

    Returns None when nothing usable was given. A malformed entry makes the
    whole frame unusable rather than raising.
    """
    if landmarks is None:
        return None
    try:
        return [extract_point(lm) for lm in landmarks]
    except (TypeError, ValueError):
        return None


class HandData:
    """
    Container for the single tracked hand of one processed video frame.
    Built by a landmark source, consumed by GestureProcessor.
    """

    def __init__(
        self,
        landmarks: Optional[Sequence] = None,
        gesture: Optional[str] = None,
        confidence: float = 0.0,
        timestamp: float = 0.0,
        handedness: str = "Unknown",
    ):
        # list of (x, y, z); x/y normalized to the frame, z relative depth
        self.landmarks: Optional[List[Point]] = to_points(landmarks)

        # classified static gesture from the detector, e.g. "Open_Palm"
        self.gesture = gesture
        self.confidence = float(confidence or 0.0)

        # monotonic seconds
        self.timestamp = float(timestamp)

        self.handedness = handedness
        self.visible = self.landmarks is not None and len(self.landmarks) > 0

    @property
    def valid(self) -> bool:
        """True when the frame carries a complete 21-point hand."""
        return self.landmarks is not None and len(self.landmarks) >= NUM_LANDMARKS

    def point(self, index: int) -> Point:
        return self.landmarks[index]

    def fingertips(self) -> List[Point]:
        return [self.landmarks[i] for i in FINGERTIPS]

    def to_dict(self) -> Dict[str, Union[str, float, bool, list, None]]:
        """Serialize to JSON-friendly dict."""
        return {
            "handedness": self.handedness,
            "visible": self.visible,
            "gesture": self.gesture,
            "confidence": self.confidence,
            "timestamp": self.timestamp,
            "landmarks": [list(p) for p in self.landmarks] if self.landmarks is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HandData":
        return cls(
            landmarks=data.get("landmarks"),
            gesture=data.get("gesture"),
            confidence=data.get("confidence", 0.0),
            timestamp=data.get("timestamp", 0.0),
            handedness=data.get("handedness", "Unknown"),
        )

    def __repr__(self):
        n = len(self.landmarks) if self.landmarks is not None else 0
        return f"HandData(points={n}, gesture={self.gesture!r}, conf={self.confidence:.2f}, t={self.timestamp:.3f})"
