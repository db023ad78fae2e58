"""
Gesture Mirror - Main Entry Point.
==================================

This module serves as the bootloader for the Gesture Mirror desktop runtime.
It wires the "Layer Cake" together:
1. Perception Layer (Camera Thread + MediaPipe Hands).
2. The Engine (MirrorController: pinch, swipe and capture handlers).
3. Feedback Loop (HUD rendered over the mirrored frame).

Usage:
    $ gesture-mirror           (or: python -m gesture_mirror.main)

Keys:
    ESC quit · R reset panels · E toggle move mode · SPACE shutter · M switch mode
"""
import logging
import threading
import time
from datetime import datetime
from typing import Dict, Optional, Tuple

import cv2
import mediapipe as mp
import numpy as np

from gesture_mirror.config import CONFIG, PATHS, init_environment
from gesture_mirror.control.capture_surface import CaptureSurface
from gesture_mirror.control.controller import MirrorController
from gesture_mirror.core.types import Action, Mode, ORIGIN, Point2D, Rect
from gesture_mirror.ui.hud import HUD

class ThreadedCamera:
    """
    Frame grabber for the mirror loop.

    The reader thread scales every frame to the current display size and
    stamps it with its capture time, so the engine sees when the hand was
    actually there rather than when tracking got round to it. A failed read
    stops the thread and leaves the reason in `failure`.
    """
    def __init__(self, src: int, size: Tuple[int, int]):
        self.cap = cv2.VideoCapture(src)
        if not self.cap.isOpened():
            raise IOError(f"Cannot open camera #{src}")
        self.cap.set(cv2.CAP_PROP_FPS, CONFIG["TARGET_FPS"])

        self.size = size
        self.frame: Optional[np.ndarray] = None
        self.stamp: Optional[float] = None
        self.failure: Optional[str] = None
        self.running = True
        self.lock = threading.Lock()

        self.thread = threading.Thread(target=self._reader, daemon=True)
        self.thread.start()

    def _reader(self):
        while self.running:
            ret, raw = self.cap.read()
            stamp = time.time()
            if not ret:
                if self.running:
                    self.failure = "camera stream ended"
                    logging.warning("Camera read failed, stopping reader")
                self.running = False
                break
            with self.lock:
                size = self.size
            frame = cv2.resize(raw, size)
            with self.lock:
                self.frame, self.stamp = frame, stamp

    def resize(self, size: Tuple[int, int]):
        with self.lock:
            self.size = size

    def read(self) -> Tuple[Optional[np.ndarray], Optional[float]]:
        """Latest frame and its capture time (None, None before the first one)."""
        with self.lock:
            if self.frame is None:
                return None, None
            return self.frame.copy(), self.stamp

    def release(self):
        self.running = False
        self.cap.release()

# Cards and controls as fractions of the display, so a resize can rebuild them
def card_rects(w: int, h: int) -> Dict[str, Rect]:
    card_w, card_h = w * 0.22, h * 0.2
    return {
        "Clock": Rect.from_center(Point2D(w * 0.16, h * 0.25), card_w, card_h),
        "Weather": Rect.from_center(Point2D(w * 0.84, h * 0.25), card_w, card_h),
        "Calendar": Rect.from_center(Point2D(w * 0.16, h * 0.55), card_w, card_h),
        "News": Rect.from_center(Point2D(w * 0.84, h * 0.55), card_w, card_h),
    }

def button_rects(w: int, h: int) -> Dict[Action, Rect]:
    bar_y = h - 70
    return {
        Action.TOGGLE_EDIT: Rect(w * 0.30, bar_y, w * 0.48, bar_y + 44),
        Action.RESET: Rect(w * 0.52, bar_y, w * 0.66, bar_y + 44),
        Action.SHUTTER: Rect(w * 0.43, bar_y, w * 0.57, bar_y + 44),
    }

BUTTON_MODES = {
    Action.TOGGLE_EDIT: [Mode.MIRROR],
    Action.RESET: [Mode.MIRROR],
    Action.SHUTTER: [Mode.TRY_ON],
}

def build_layout(pilot: MirrorController, w: int, h: int):
    """Enumerates the mirror's cards and controls once for the process lifetime."""
    for widget_id, rect in card_rects(w, h).items():
        pilot.add_widget(widget_id, rect)
    for action, rect in button_rects(w, h).items():
        pilot.add_button(action, rect, modes=BUTTON_MODES[action])

def relayout(pilot: MirrorController, w: int, h: int):
    """Window resized: new anchors for every card, user offsets kept."""
    logging.info(f"Display resized to {w}x{h}")
    pilot.set_display(Rect(0, 0, w, h))
    rendered = {}
    for widget_id, rect in card_rects(w, h).items():
        widget = pilot.state.widgets.get(widget_id)
        offset = widget.offset if widget is not None else ORIGIN
        rendered[widget_id] = Rect.from_center(rect.center + offset, rect.width, rect.height)
    pilot.layout_changed(rendered)
    for action, rect in button_rects(w, h).items():
        pilot.move_button(action, rect)

def save_photo(payload: bytes) -> str:
    path = PATHS["CAPTURES_DIR"] / f"photo_{datetime.now():%Y%m%d_%H%M%S}.jpg"
    path.write_bytes(payload)
    return str(path)

def main():
    """
    Main Event Loop.
    """
    # 1. Boot Sequence
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    init_environment()
    print("🪞 GESTURE MIRROR: ONLINE")
    print("   -> Press 'ESC' to Exit")
    print("   -> Swipe right for Try-On, left for Mirror")

    # 2. Initialize Subsystems
    w, h = CONFIG["DISPLAY_WIDTH"], CONFIG["DISPLAY_HEIGHT"]
    hud = HUD()
    surface = CaptureSurface(mirror=True)
    pilot = MirrorController(sink=hud, grab=surface.capture)
    build_layout(pilot, w, h)

    window_name = "Gesture Mirror"
    cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
    cv2.resizeWindow(window_name, w, h)

    # The Vision Input
    cam = None
    try:
        cam = ThreadedCamera(CONFIG["CAMERA_INDEX"], (w, h))
        pilot.camera_ready()
    except IOError as exc:
        # Acquisition stops here; the window stays up to show the warning
        pilot.camera_failed(exc)

    mp_hands = mp.solutions.hands
    hands = mp_hands.Hands(
        max_num_hands=CONFIG["MAX_HANDS"],
        min_detection_confidence=CONFIG["MP_MIN_DETECTION_CONFIDENCE"],
        min_tracking_confidence=CONFIG["MP_MIN_TRACKING_CONFIDENCE"],
        model_complexity=CONFIG["MP_MODEL_COMPLEXITY"],
    )

    keymap = {ord('r'): Action.RESET, ord('e'): Action.TOGGLE_EDIT, ord(' '): Action.SHUTTER}
    prev_time = 0
    last_stamp = None
    view = None

    try:
        while True:
            # --- 0. VIEWPORT ---
            _, _, win_w, win_h = cv2.getWindowImageRect(window_name)
            if win_w > 0 and win_h > 0 and (win_w, win_h) != (w, h):
                w, h = win_w, win_h
                relayout(pilot, w, h)
                if cam is not None: cam.resize((w, h))
                view = None

            # --- 1. PERCEPTION ---
            if cam is not None and not cam.running:
                pilot.camera_lost(cam.failure)
                cam.release()
                cam = None

            frame, stamp = cam.read() if cam is not None else (None, None)
            if frame is None or stamp == last_stamp or frame.shape[:2] != (h, w):
                # No fresh frame: timers still run, the last picture stays up
                pilot.tick()
                if cam is None or view is None:
                    view = np.zeros((h, w, 3), dtype=np.uint8)
            else:
                last_stamp = stamp
                surface.update(frame)
                # MediaPipe requires RGB; OpenCV uses BGR. Landmarks stay in camera space.
                results = hands.process(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
                raw_hands = results.multi_hand_landmarks or []

                # --- 2. ENGINE ---
                pilot.process(raw_hands, now=stamp)

                hud.draw_skeletons(frame, raw_hands)
                view = cv2.flip(frame, 1)

            # --- 3. FEEDBACK ---
            frame = view.copy()
            hud.render(frame, pilot)
            while hud.saved:
                print(f"💾 Saved {save_photo(hud.saved.pop(0))}")

            curr = time.time()
            fps = 1/(curr-prev_time) if (curr-prev_time)>0 else 0
            prev_time = curr
            hud.draw_fps(frame, fps)

            cv2.imshow(window_name, frame)

            # Input Handling
            k = cv2.waitKey(1) & 0xFF
            if k == 27: break # ESC
            elif k in keymap: pilot.press_button(keymap[k], time.time())
            elif k == ord('m'):
                pilot.set_mode(Mode.TRY_ON if pilot.state.mode == Mode.MIRROR else Mode.MIRROR)

    finally:
        if cam is not None: cam.release()
        hands.close()
        cv2.destroyAllWindows()
        print("🔴 SYSTEM OFFLINE")

if __name__ == "__main__":
    main()
