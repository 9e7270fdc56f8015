import json

from HandData import HandData


class FrameRecorder:
    """
    Appends processed frames to a JSON-lines file, one HandData per line.
    Frames without a hand are written as {"hand": null} with their time.
    """

    def __init__(self, path):
        self.path = path
        self._file = open(path, "w", encoding="utf-8")
        self.count = 0

    def write(self, hand, timestamp=None):
        if hand is None:
            record = {"hand": None, "timestamp": timestamp}
        else:
            record = {"hand": hand.to_dict()}
        self._file.write(json.dumps(record) + "\n")
        self.count += 1

    def close(self):
        if not self._file.closed:
            self._file.close()
            print(f"[PY] Recorded {self.count} frames to {self.path}")


class ReplaySource:
    """
    Iterates a recording made by FrameRecorder, yielding HandData or None.
    Malformed lines are skipped.
    """

    def __init__(self, path):
        self.path = path

    def __iter__(self):
        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except ValueError as e:
                    print(f"[PY] Skipping bad replay line {lineno}: {e}")
                    continue
                if not isinstance(record, dict):
                    print(f"[PY] Skipping bad replay line {lineno}: not an object")
                    continue
                hand = record.get("hand")
                if hand:
                    try:
                        hand = HandData.from_dict(hand)
                    except (TypeError, ValueError, AttributeError) as e:
                        print(f"[PY] Skipping bad replay line {lineno}: {e}")
                        continue
                yield hand or None
