import argparse
import threading
import time
from collections import deque
from queue import Empty, Full, Queue

import cv2

from debug_draw import draw_dial_overlay, draw_hand_debug, draw_status
from GestureProcessor import GestureProcessor
from HandTracker import CameraSource
from helpers import ConfigWatcher, load_config
from Network import attach_sinks
from Replay import FrameRecorder, ReplaySource


# --------------------------------------------------------
# Queue for latest frame only (overwrite when full)
# --------------------------------------------------------
FRAME_QUEUE_MAX = 1


def put_latest(frame_queue, item):
    """Drop whatever is waiting and enqueue item; the consumer only ever sees the newest frame."""
    while True:
        try:
            frame_queue.put_nowait(item)
            return
        except Full:
            try:
                frame_queue.get_nowait()  # remove older frame
            except Empty:
                pass


def latest_frames(frame_queue, stop_event, timeout=0.1):
    """Pull-side view of the capture queue as a lazy sequence."""
    while not stop_event.is_set():
        try:
            yield frame_queue.get(timeout=timeout)
        except Empty:
            continue


# --------------------------------------------------------
# CAPTURE THREAD
# --------------------------------------------------------
def capture_thread(frame_queue, stop_event, cfg):
    debug_cfg = cfg.get("debug", {})
    fps_times = deque(maxlen=debug_cfg.get("fps_window", 20))
    current_fps = 0.0

    print("[PY] Capture thread started.")
    try:
        for frame, hand in CameraSource(cfg, stop_event):
            now = time.monotonic()
            fps_times.append(now)
            if len(fps_times) > 1:
                current_fps = (len(fps_times) - 1) / (fps_times[-1] - fps_times[0])
            put_latest(frame_queue, (frame, hand, now, current_fps))
    except FileNotFoundError as e:
        print("[PY] ERROR:", e)
    finally:
        stop_event.set()
        print("[PY] Capture thread exiting.")


# --------------------------------------------------------
# PROCESSING THREAD
# --------------------------------------------------------
def processing_thread(frame_queue, stop_event, cfg, config_path, record_path=None):
    cfg_watcher = ConfigWatcher(config_path)
    current_cfg = cfg_watcher.get_config() or cfg or {}

    processor = GestureProcessor(current_cfg)
    cfg_watcher.on_change = processor.update_config
    sinks = []
    recorder = None

    debug_cfg = current_cfg.get("debug", {})
    show_window = debug_cfg.get("show_window", True)
    debug_window = "Gesture Debug"

    print("[PY] Processing thread started.")

    try:
        sinks = attach_sinks(processor, current_cfg)
        recorder = FrameRecorder(record_path) if record_path else None
        if show_window:
            camera_cfg = current_cfg.get("camera", {})
            cv2.namedWindow(debug_window, cv2.WINDOW_NORMAL)
            cv2.resizeWindow(debug_window, camera_cfg.get("frame_width", 960), camera_cfg.get("frame_height", 720))

        for frame, hand, timestamp, fps in latest_frames(frame_queue, stop_event):
            current_cfg = cfg_watcher.check_reload() or current_cfg
            processor.process(hand)
            if recorder is not None:
                recorder.write(hand, timestamp)

            # idle the bridge so a renderer can connect before the first event
            for sink in sinks:
                if hasattr(sink, "update"):
                    sink.update()

            if show_window:
                if current_cfg.get("debug", {}).get("draw_landmarks", True):
                    draw_hand_debug(frame, hand)
                    if processor.mode.locked:
                        draw_dial_overlay(frame, hand)
                draw_status(frame, processor, hand, fps=fps)
                cv2.imshow(debug_window, frame)
                if cv2.waitKey(1) & 0xFF == 27:
                    stop_event.set()
                    break
    finally:
        # whatever ended this thread ends the run
        stop_event.set()
        if recorder is not None:
            recorder.close()
        for sink in sinks:
            sink.close()
        if show_window:
            cv2.destroyAllWindows()
        print("[PY] Processing thread exiting.")


# --------------------------------------------------------
# ENTRY POINTS
# --------------------------------------------------------
def run_live(cfg, config_path, record_path=None):
    frame_queue = Queue(maxsize=FRAME_QUEUE_MAX)
    stop_event = threading.Event()

    cap_thread = threading.Thread(target=capture_thread, args=(frame_queue, stop_event, cfg), daemon=True)
    proc_thread = threading.Thread(
        target=processing_thread,
        args=(frame_queue, stop_event, cfg, config_path, record_path),
        daemon=True,
    )

    cap_thread.start()
    proc_thread.start()

    # Keep main thread alive
    try:
        while not stop_event.is_set():
            time.sleep(0.1)
    except KeyboardInterrupt:
        stop_event.set()

    cap_thread.join(timeout=1.0)
    proc_thread.join(timeout=1.0)

    print("[PY] Shutdown complete.")


def run_replay(cfg, replay_path):
    processor = GestureProcessor(cfg)
    sinks = attach_sinks(processor, cfg)
    try:
        count = processor.run(ReplaySource(replay_path))
    finally:
        for sink in sinks:
            sink.close()
    print(f"[PY] Replayed {count} frames. Final state: {processor.snapshot()}")
    return processor


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Hand gesture navigation for the Solar System viewer")
    parser.add_argument(
        "--mode",
        choices=("live", "replay"),
        default="live",
        help="'live' reads the webcam, 'replay' feeds a recorded JSON-lines session.",
    )
    parser.add_argument("--config", default="config.json", help="Path to the JSON config (hot reloaded in live mode).")
    parser.add_argument("--replay", help="Recording to feed in replay mode.")
    parser.add_argument("--record", help="Write processed frames to this JSON-lines file (live mode).")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    cfg = load_config(args.config)
    if not cfg:
        print("[PY] WARNING: no config or failed to load, running on defaults.")

    if args.mode == "replay":
        if not args.replay:
            print("[PY] ERROR: --replay PATH is required in replay mode")
            return 2
        run_replay(cfg, args.replay)
    else:
        run_live(cfg, args.config, args.record)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
