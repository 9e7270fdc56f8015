import copy
import json
import os
import time


# ---------- geometry ----------
def centroid2d(points):
    """Mean (x, y) of a non-empty sequence of points."""
    n = len(points)
    return (sum(p[0] for p in points) / n, sum(p[1] for p in points) / n)


# ---------- config ----------
def deep_merge(base, override):
    """
    Return a copy of base with override merged in, one level of dicts deep
    per recursion. Non-dict values in override replace base values.
    """
    merged = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = deep_merge(merged[k], v)
        else:
            merged[k] = copy.deepcopy(v)
    return merged


def _read_json_object(path):
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"top level of {os.path.basename(path)} must be an object")
    return data


def load_config(path="config.json"):
    if not os.path.exists(path):
        print(f"[PY] config '{path}' not found, using defaults.")
        return {}
    try:
        return _read_json_object(path)
    except (OSError, ValueError) as e:
        print("[PY] Failed to load config:", e)
        return {}


class ConfigWatcher:
    """
    Polls a JSON config file's mtime and re-reads it when it moves.

        watcher = ConfigWatcher("config.json", on_change=processor.update_config)
        cfg = watcher.get_config()
        # once per processed frame:
        cfg = watcher.check_reload()

    A write that fails to parse is reported once and ignored; the previous
    config stays current until a good version lands. `version` counts
    successful loads.
    """

    def __init__(self, path="config.json", min_check_interval=0.5, on_change=None):
        self.path = path
        self.min_check_interval = min_check_interval  # seconds between stats
        self.on_change = on_change
        self.version = 0
        self._cfg = {}
        self._mtime = None
        self._next_check = 0.0
        self._read()

    def _stat(self):
        try:
            return os.stat(self.path).st_mtime
        except FileNotFoundError:
            return None

    def _read(self):
        mtime = self._stat()
        if mtime is None:
            return False
        # remember the mtime even on failure so one bad save is reported once
        self._mtime = mtime
        try:
            self._cfg = _read_json_object(self.path)
        except (OSError, ValueError) as e:
            print(f"[ConfigWatcher] keeping previous config, {e}")
            return False
        self.version += 1
        return True

    def get_config(self):
        return self._cfg

    def check_reload(self):
        """Cheap enough to call every frame. Returns the current config."""
        now = time.monotonic()
        if now < self._next_check:
            return self._cfg
        self._next_check = now + self.min_check_interval

        mtime = self._stat()
        if mtime is None or mtime == self._mtime:
            return self._cfg

        print(f"[ConfigWatcher] {os.path.basename(self.path)} changed, reloading")
        if self._read() and self.on_change is not None:
            self.on_change(self._cfg)
        return self._cfg
