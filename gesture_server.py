"""
Unified entry point for the gesture navigation backend.

Usage examples:
    python gesture_server.py                                  # live webcam, events over TCP
    python gesture_server.py --record session.jsonl           # live, and keep the frames
    python gesture_server.py --mode replay --replay session.jsonl
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
PY_DIR = ROOT / "python"
if str(PY_DIR) not in sys.path:
    sys.path.insert(0, str(PY_DIR))


def main() -> int:
    from main_loop import main as run_main_loop

    argv = sys.argv[1:]
    if not any(a == "--config" or a.startswith("--config=") for a in argv):
        argv = ["--config", str(PY_DIR / "config.json")] + argv
    return run_main_loop(argv)


if __name__ == "__main__":
    raise SystemExit(main())
