"""
Gesture Mirror HUD.
Draws the engine's output channels (widgets, buttons, pointer, status,
countdown, photo preview) over the mirrored camera frame.
"""

import time
from typing import Dict, Optional

import cv2
import numpy as np
import mediapipe as mp

from gesture_mirror.control.render_sink import RecordingRenderSink
from gesture_mirror.core.types import Action, Mode, Point2D, StatusLevel, Transition

BUTTON_LABELS = {
    Action.RESET: "Reset Panels",
    Action.TOGGLE_EDIT: "Change Panel Position",
    Action.SHUTTER: "Take Photo",
}

class HUD(RecordingRenderSink):
    def __init__(self, history: int = 256):
        super().__init__(history)
        self.mp_draw = mp.solutions.drawing_utils
        self.mp_hands = mp.solutions.hands

        # --- THEME COLORS (BGR) ---
        self.C_CYAN   = (255, 255, 0)    # Standard UI
        self.C_RED    = (90, 90, 240)    # Warn
        self.C_AMBER  = (45, 180, 240)   # Idle
        self.C_GREEN  = (122, 217, 59)   # OK
        self.C_WHITE  = (245, 245, 245)
        self.C_DARK   = (20, 20, 20)     # Backgrounds

        self.level_colors = {
            StatusLevel.IDLE: self.C_AMBER,
            StatusLevel.OK: self.C_GREEN,
            StatusLevel.WARN: self.C_RED,
        }

        # --- ANIMATION STATE ---
        self._shown: Dict[str, np.ndarray] = {}
        self._last_render = time.time()
        self._preview: Optional[np.ndarray] = None

    # --- SINK OVERRIDES ---
    def show_photo(self, payload):
        super().show_photo(payload)
        if payload is None:
            self._preview = None
            return
        buf = np.frombuffer(payload, dtype=np.uint8)
        self._preview = cv2.imdecode(buf, cv2.IMREAD_COLOR)

    # --- DRAW HELPERS ---
    def _draw_glass_panel(self, img, x, y, w, h, color, alpha=0.6):
        """Draws a semi-transparent 'Glass' background, clipped to the frame."""
        x1, y1 = max(int(x), 0), max(int(y), 0)
        x2, y2 = min(int(x + w), img.shape[1]), min(int(y + h), img.shape[0])
        if x2 <= x1 or y2 <= y1: return

        sub_img = img[y1:y2, x1:x2]
        tint = np.full(sub_img.shape, color, dtype=np.uint8)
        img[y1:y2, x1:x2] = cv2.addWeighted(sub_img, 1 - alpha, tint, alpha, 1.0)
        cv2.rectangle(img, (x1, y1), (x2, y2), color, 1)

    def _animated_offset(self, widget_id: str, dt: float) -> Point2D:
        target = self.offsets.get(widget_id, Point2D(0.0, 0.0))
        goal = np.array([target.x, target.y], dtype=np.float64)
        shown = self._shown.get(widget_id)
        transition = self.transitions.get(widget_id, Transition.NONE)

        if shown is None or transition.duration <= 0:
            shown = goal
        else:
            t = min(dt / transition.duration, 1.0)
            shown = shown + (goal - shown) * t
        self._shown[widget_id] = shown
        return Point2D(float(shown[0]), float(shown[1]))

    # --- MAIN RENDER ---
    def render(self, frame, controller):
        now = time.time()
        dt = now - self._last_render
        self._last_render = now

        h, w, _ = frame.shape
        state = controller.state
        ui_color = self.C_CYAN if self.mode == Mode.MIRROR else self.C_GREEN

        # 1. WIDGETS
        for widget_id, widget in state.widgets.items():
            off = self._animated_offset(widget_id, dt)
            x = widget.base_center.x + off.x - widget.width / 2
            y = widget.base_center.y + off.y - widget.height / 2
            color = self.C_GREEN if state.session.dragged_widget == widget_id else self.C_DARK
            self._draw_glass_panel(frame, x, y, widget.width, widget.height, color, 0.45)
            cv2.putText(frame, widget_id, (int(x) + 12, int(y) + 28),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, self.C_WHITE, 1)

        # 2. BUTTONS
        for button in state.buttons:
            if not button.is_live(self.mode): continue
            r = button.rect
            color = ui_color if button.action in self.active_buttons else self.C_DARK
            self._draw_glass_panel(frame, r.left, r.top, r.width, r.height, color, 0.7)
            cv2.putText(frame, BUTTON_LABELS.get(button.action, button.action.value),
                        (int(r.left) + 10, int(r.center_y) + 6),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, self.C_WHITE, 1)

        # 3. POINTER
        if self.pointer is not None:
            center = (int(self.pointer.x), int(self.pointer.y))
            cv2.circle(frame, center, 16, ui_color, 2)
            if state.session.active:
                cv2.circle(frame, center, 6, ui_color, -1)

        # 4. STATUS BAR
        self._draw_glass_panel(frame, 20, 20, 520, 44, self.C_DARK, 0.4)
        cv2.circle(frame, (42, 42), 8, self.level_colors[self.status_level], -1)
        cv2.putText(frame, self.status, (60, 48), cv2.FONT_HERSHEY_SIMPLEX, 0.55, self.C_WHITE, 1)

        mode_label = "MIRROR" if self.mode == Mode.MIRROR else "TRY-ON"
        if self.edit_mode: mode_label += " // MOVE"
        cv2.putText(frame, mode_label, (w - 240, 48), cv2.FONT_HERSHEY_PLAIN, 1.4, ui_color, 2)

        # 5. COUNTDOWN
        if self.countdown is not None:
            text = str(self.countdown)
            (tw, th), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_DUPLEX, 6, 8)
            cv2.putText(frame, text, ((w - tw) // 2, (h + th) // 2),
                        cv2.FONT_HERSHEY_DUPLEX, 6, self.C_WHITE, 8)

        # 6. PHOTO PREVIEW
        if self._preview is not None:
            pw, ph = w // 3, h // 3
            thumb = cv2.resize(self._preview, (pw, ph), interpolation=cv2.INTER_AREA)
            x0, y0 = w - pw - 20, h - ph - 20
            frame[y0:y0 + ph, x0:x0 + pw] = thumb
            cv2.rectangle(frame, (x0, y0), (x0 + pw, y0 + ph), self.C_WHITE, 2)

    def draw_skeletons(self, frame, raw_hands):
        """Call on the raw (un-mirrored) frame: MediaPipe landmarks are in camera space."""
        color = self.C_CYAN if self.mode == Mode.MIRROR else self.C_GREEN
        for lms in raw_hands or []:
            self.mp_draw.draw_landmarks(
                frame, lms, self.mp_hands.HAND_CONNECTIONS,
                self.mp_draw.DrawingSpec(color=self.C_DARK, thickness=4, circle_radius=2),
                self.mp_draw.DrawingSpec(color=color, thickness=2, circle_radius=2)
            )

    def draw_fps(self, frame, fps):
        cv2.putText(frame, f"{int(fps)} FPS", (frame.shape[1]-100, frame.shape[0]-20),
                    cv2.FONT_HERSHEY_PLAIN, 1.2, self.C_GREEN, 1)
