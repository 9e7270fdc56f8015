import time
from pathlib import Path

import cv2
import mediapipe as mp
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision

from HandData import HandData

script_dir = Path(__file__).parent


class HandTracker:
    """
    MediaPipe GestureRecognizer in VIDEO mode. One call per captured frame
    gives the first hand's 21 landmarks plus its top gesture category.
    """

    def __init__(self, cfg):
        self.cfg = cfg
        tcfg = cfg.get("tracker", {})

        model_path = Path(tcfg.get("model_path", "gesture_recognizer.task"))
        if not model_path.is_absolute() and not model_path.exists():
            model_path = script_dir / model_path
        model_path = str(model_path)
        if not Path(model_path).exists():
            raise FileNotFoundError(f"Missing model file: {model_path}")

        options = vision.GestureRecognizerOptions(
            base_options=mp_tasks.BaseOptions(model_asset_path=model_path),
            running_mode=vision.RunningMode.VIDEO,
            num_hands=tcfg.get("num_hands", 1),
            min_hand_detection_confidence=tcfg.get("min_detection_confidence", 0.5),
            min_hand_presence_confidence=tcfg.get("min_presence_confidence", 0.5),
            min_tracking_confidence=tcfg.get("min_tracking_confidence", 0.5),
        )
        self.recognizer = vision.GestureRecognizer.create_from_options(options)

        self.start_time = None
        self.last_timestamp_ms = 0
        self.last_result = None

    def close(self):
        self.recognizer.close()

    def _timestamp_ms(self, timestamp):
        # VIDEO mode rejects repeated or decreasing timestamps
        if self.start_time is None:
            self.start_time = timestamp
        computed_ms = int((timestamp - self.start_time) * 1000)
        timestamp_ms = max(self.last_timestamp_ms + 1, computed_ms)
        self.last_timestamp_ms = timestamp_ms
        return timestamp_ms

    def process_frame(self, frame_rgb, timestamp):
        """
        Process an RGB frame.
        Returns a HandData for the first detected hand, or None.
        timestamp: monotonic time (seconds) for this frame.
        """
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        result = self.recognizer.recognize_for_video(mp_image, self._timestamp_ms(timestamp))
        self.last_result = result

        if not result.hand_landmarks:
            return None

        gesture, confidence = None, 0.0
        if result.gestures and result.gestures[0]:
            top = result.gestures[0][0]
            gesture, confidence = top.category_name, top.score

        handedness = "Unknown"
        if result.handedness and result.handedness[0]:
            handedness = result.handedness[0][0].category_name

        return HandData(
            landmarks=result.hand_landmarks[0],
            gesture=gesture,
            confidence=confidence,
            timestamp=timestamp,
            handedness=handedness,
        )


class CameraSource:
    """
    Lazy, effectively infinite, non-restartable sequence of frames from the
    webcam. Each item is (bgr_frame, HandData or None).
    """

    def __init__(self, cfg, stop_event=None):
        self.cfg = cfg
        self.stop_event = stop_event
        camera_cfg = cfg.get("camera", {})
        self.device = camera_cfg.get("device", 0)
        self.mirror = camera_cfg.get("mirror", True)
        self.width = camera_cfg.get("capture_width", 640)
        self.height = camera_cfg.get("capture_height", 480)
        self._consumed = False

    def __iter__(self):
        if self._consumed:
            raise RuntimeError("CameraSource can only be iterated once")
        self._consumed = True
        return self._frames()

    def _frames(self):
        cap = cv2.VideoCapture(self.device)
        if not cap.isOpened():
            print("[PY] ERROR: Cannot open camera")
            if self.stop_event is not None:
                self.stop_event.set()
            return

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        tracker = HandTracker(self.cfg)

        try:
            while self.stop_event is None or not self.stop_event.is_set():
                ok, frame = cap.read()
                if not ok:
                    time.sleep(0.01)
                    continue
                if self.mirror:
                    frame = cv2.flip(frame, 1)

                now = time.monotonic()
                rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
                yield frame, tracker.process_frame(rgb, now)
        finally:
            cap.release()
            tracker.close()
