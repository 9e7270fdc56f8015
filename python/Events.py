FOCUS_CHANGED = "FocusChanged"
DETAIL_LEVEL_CHANGED = "DetailLevelChanged"
MODE_CHANGED = "ModeChanged"
ZOOM_CHANGED = "ZoomChanged"
CALIBRATED = "Calibrated"

EVENT_NAMES = (FOCUS_CHANGED, DETAIL_LEVEL_CHANGED, MODE_CHANGED, ZOOM_CHANGED, CALIBRATED)


class GestureEvent:
    """
    A committed command for the presentation side.
    name is one of EVENT_NAMES, data holds the JSON-friendly payload.
    """

    def __init__(self, name, data=None, timestamp=0.0):
        self.name = name
        self.data = dict(data or {})
        self.timestamp = timestamp

    def __getitem__(self, key):
        return self.data[key]

    def __eq__(self, other):
        if not isinstance(other, GestureEvent):
            return NotImplemented
        return self.name == other.name and self.data == other.data

    def __repr__(self):
        return f"{self.name}({', '.join(f'{k}={v!r}' for k, v in self.data.items())})"

    def to_dict(self):
        return {"event": self.name, "timestamp": self.timestamp, **self.data}


def focus_changed(index, body, timestamp=0.0):
    return GestureEvent(FOCUS_CHANGED, {"index": index, "body": body}, timestamp)


def detail_level_changed(level, description="", timestamp=0.0):
    return GestureEvent(
        DETAIL_LEVEL_CHANGED, {"level": level.label, "description": description}, timestamp
    )


def mode_changed(locked, timestamp=0.0):
    return GestureEvent(MODE_CHANGED, {"locked": locked}, timestamp)


def zoom_changed(zoomed_in, focus_index, body, keep_revolving=False, spin_boost=1.0, timestamp=0.0):
    return GestureEvent(
        ZOOM_CHANGED,
        {
            "zoomed_in": zoomed_in,
            "focus_index": focus_index,
            "body": body,
            "keep_revolving": keep_revolving,
            "spin_boost": spin_boost,
        },
        timestamp,
    )


def calibrated(depth, timestamp=0.0):
    return GestureEvent(CALIBRATED, {"depth": depth}, timestamp)
