import cv2

from helpers import centroid2d

HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),          # thumb
    (0, 5), (5, 6), (6, 7), (7, 8),          # index
    (0, 9), (9, 10), (10, 11), (11, 12),     # middle
    (0, 13), (13, 14), (14, 15), (15, 16),   # ring
    (0, 17), (17, 18), (18, 19), (19, 20),   # pinky
    (5, 9), (9, 13), (13, 17),               # palm
]
TIP_COLORS = [(255, 102, 0), (0, 255, 0), (0, 255, 255), (0, 136, 255), (255, 0, 255)]
TIP_NAMES = ["THUMB", "INDEX", "MIDDLE", "RING", "PINKY"]


def draw_hand_debug(frame, hand):
    """Draw the 21-point skeleton for one hand."""
    if hand is None or not hand.valid:
        return frame
    h, w = frame.shape[:2]
    lm = hand.landmarks
    for a, b in HAND_CONNECTIONS:
        pa = (int(lm[a][0] * w), int(lm[a][1] * h))
        pb = (int(lm[b][0] * w), int(lm[b][1] * h))
        cv2.line(frame, pa, pb, (0, 255, 0), 2)
    for x, y, _ in lm:
        cv2.circle(frame, (int(x * w), int(y * h)), 4, (0, 255, 255), -1)
    return frame


def draw_dial_overlay(frame, hand):
    """Fingertip centroid with spokes to the five tips (dial mode)."""
    if hand is None or not hand.valid:
        return frame
    h, w = frame.shape[:2]
    tips = hand.fingertips()
    cx, cy = centroid2d(tips)
    center = (int(cx * w), int(cy * h))

    for tip, color, name in zip(tips, TIP_COLORS, TIP_NAMES):
        pt = (int(tip[0] * w), int(tip[1] * h))
        cv2.line(frame, center, pt, (255, 255, 255), 1, cv2.LINE_AA)
        cv2.circle(frame, pt, 6, color, -1)
        cv2.putText(frame, name, (pt[0] + 10, pt[1] - 10), cv2.FONT_HERSHEY_SIMPLEX, 0.35, (255, 255, 255), 1, cv2.LINE_AA)

    cv2.circle(frame, center, 8, (255, 255, 255), -1)
    return frame


def draw_status(frame, processor, hand=None, fps=None):
    """Text block: gesture label, mode, focus, detail level, zoom."""
    state = processor.snapshot()
    lines = []
    if hand is not None and hand.gesture:
        lines.append(f"Gesture: {hand.gesture} ({hand.confidence * 100:.1f}%)")
    else:
        lines.append("Gesture: None detected")
    lines.append("Mode: LOCKED (Rotary Dial)" if state["locked"] else "Mode: UNLOCKED (Swipe)")
    lines.append(f"Body: {state['body']}")
    lines.append(f"Detail: {state['detail_level'].upper()}")
    if state["zoomed_in"]:
        lines.append("Zoom: IN (orbit halted)")
    if state["calibration_depth"] is not None:
        lines.append(f"Calibrated z: {state['calibration_depth']:+.3f}")
    if state["locked"]:
        lines.append(f"Dial avg: {processor.dial.last_average:+.3f} rad")
    else:
        lines.append(f"Palm velocity: {processor.swipe.last_velocity:.2f}/s")
    if fps is not None:
        lines.append(f"FPS: {fps:.1f}")

    for i, line in enumerate(lines):
        cv2.putText(frame, line, (10, 30 + i * 24), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 2, cv2.LINE_AA)
    return frame
