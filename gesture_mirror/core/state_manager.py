"""
Gesture Mirror State Management.
One explicit EngineState is passed by reference into every handler.
No module-level globals: every timer handle and cooldown lives here.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from gesture_mirror.config import CONFIG
from gesture_mirror.core.timers import TimerHandle, TimerScheduler
from gesture_mirror.core.types import (
    Action, CaptureStage, Interactable, Mode, PinchMode, Point2D, Rect, StatusLevel, Widget,
)

NEVER = float("-inf")

@dataclass
class PinchSession:
    """One pinch lifecycle across all hands."""
    active: bool = False
    mode: PinchMode = PinchMode.NONE
    dragged_widget: Optional[str] = None

    def reset(self):
        self.active = False
        self.mode = PinchMode.NONE
        self.dragged_widget = None

@dataclass
class SwipeTracker:
    """
    Baseline for one hand slot.
    `still_x` is the centre of the resting neighbourhood: it only follows the
    fingertip once it has left by SWIPE_STILL_EPSILON, so stillness does not
    depend on how far the hand moves between two frames.
    """
    start_x: float
    start_time: float
    still_x: float
    last_move_time: float

    def anchor(self, x: float, now: float):
        self.start_x = x
        self.start_time = now
        self.still_x = x
        self.last_move_time = now

    def track(self, x: float, now: float, epsilon: float):
        if abs(x - self.still_x) >= epsilon:
            self.still_x = x
            self.last_move_time = now

@dataclass
class CaptureState:
    stage: CaptureStage = CaptureStage.IDLE
    remaining: int = 0
    photo: Optional[bytes] = None

    def reset(self):
        self.stage = CaptureStage.IDLE
        self.remaining = 0
        self.photo = None

class EngineState:
    def __init__(self, config: Optional[dict] = None):
        config = config if config is not None else CONFIG

        # --- LAYOUT (process lifetime) ---
        self.widgets: Dict[str, Widget] = {}
        self.buttons: List[Interactable] = []
        self.display = Rect(0, 0, config["DISPLAY_WIDTH"], config["DISPLAY_HEIGHT"])

        # --- MODES ---
        self.mode = Mode.MIRROR
        self.edit_mode = False

        # --- TRANSIENT SESSIONS ---
        self.session = PinchSession()
        self.swipe_trackers: Dict[int, SwipeTracker] = {}
        self.capture = CaptureState()
        self.pointer: Optional[Point2D] = None
        self.hands_present = False

        # --- STATUS ---
        # (text, level, expires_at): one-off message outranking the per-frame status
        self.notice: Optional[Tuple[str, StatusLevel, float]] = None
        self.camera_failed = False

        # --- COOLDOWNS (timestamps of last firing) ---
        self.last_button_press = NEVER
        self.last_swipe = NEVER
        self.last_thumb_gesture = NEVER

        # --- TIMERS & HANDLES ---
        self.timers = TimerScheduler()
        self.countdown_timer: Optional[TimerHandle] = None
        self.transition_timer: Optional[TimerHandle] = None
        self.transition_widgets: set = set()
        self.flash_timers: Dict[Action, TimerHandle] = {}

    @property
    def is_dragging(self) -> bool:
        return self.session.active and self.session.mode == PinchMode.DRAG

    def reset_hands(self):
        """No hands in frame: drop everything tied to a live hand."""
        self.session.reset()
        self.swipe_trackers.clear()
        self.pointer = None
        self.hands_present = False

    def post_notice(self, text: str, level: StatusLevel, now: float, duration: float):
        self.notice = (text, level, now + duration)

    def active_notice(self, now: float) -> Optional[Tuple[str, StatusLevel]]:
        if self.notice is None:
            return None
        text, level, expires_at = self.notice
        if now >= expires_at:
            self.notice = None
            return None
        return text, level

    def cancel_countdown(self):
        if self.countdown_timer is not None:
            self.countdown_timer.cancel()
            self.countdown_timer = None
