"""
Gesture Mirror Controller.
Acts as the frame dispatcher: one tracker callback in, handler pipeline out.
Also owns the UI command surface (reset / toggle-edit / shutter / mode).
"""

import logging
import time
from functools import partial
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from gesture_mirror.config import CONFIG, STATUS_TEXT
from gesture_mirror.core.interfaces import IRenderSink
from gesture_mirror.core.kinematics import KinematicsEngine
from gesture_mirror.core.state_manager import EngineState
from gesture_mirror.core.types import Action, CaptureStage, Mode, Rect, StatusLevel
from gesture_mirror.control.layout import LayoutEngine
from gesture_mirror.control.render_sink import RecordingRenderSink
from gesture_mirror.control.handlers import HandlerContext
from gesture_mirror.hand_utils import collect_hands

# HANDLERS
from gesture_mirror.control.handlers.pinch_handler import PinchHandler
from gesture_mirror.control.handlers.swipe_handler import SwipeHandler
from gesture_mirror.control.handlers.capture_handler import CaptureHandler

class MirrorController:
    def __init__(self, sink: Optional[IRenderSink] = None,
                 grab: Optional[Callable[[], bytes]] = None,
                 config: Optional[dict] = None):
        self.config = config if config is not None else CONFIG
        self.sink = sink if sink is not None else RecordingRenderSink()
        self.state = EngineState(self.config)
        self.physics = KinematicsEngine(self.config)
        self.layout = LayoutEngine(self.sink, self.config)

        # Handlers
        self.pinch_handler = PinchHandler(self.press_button, self.physics)
        self.swipe_handler = SwipeHandler(self.set_mode, self.physics)
        self.capture_handler = CaptureHandler(self.sink, grab, self.config, self.physics)

        # Closed command set: every Action must have a handler
        self._actions: Dict[Action, Callable[[float], None]] = {
            Action.RESET: self._on_reset,
            Action.TOGGLE_EDIT: self._on_toggle_edit,
            Action.SHUTTER: self._on_shutter,
        }
        missing = set(Action) - set(self._actions)
        if missing:
            raise RuntimeError(f"Unhandled actions: {sorted(a.value for a in missing)}")

        self.sink.set_status(STATUS_TEXT["WAITING"], StatusLevel.IDLE)
        self.sink.set_mode(self.state.mode)
        self.sink.set_edit_mode(self.state.edit_mode)

    # --- LAYOUT ENUMERATION ---
    def add_widget(self, widget_id: str, rect: Rect):
        return self.layout.add_widget(self.state, widget_id, rect)

    def add_button(self, action: Action, rect: Rect, modes: Optional[Iterable[Mode]] = None):
        return self.layout.add_button(self.state, action, rect, modes)

    def set_button_enabled(self, action: Action, enabled: bool):
        self.layout.set_button_enabled(self.state, action, enabled)

    def move_button(self, action: Action, rect: Rect):
        self.layout.move_button(self.state, action, rect)

    def set_display(self, rect: Rect):
        self.state.display = rect

    def layout_changed(self, rendered: Optional[Mapping[str, Rect]] = None):
        """Viewport resize: re-anchor widgets, keep their offsets."""
        self.layout.init_widget_state(self.state, rendered)

    # --- CAMERA LIFECYCLE ---
    def camera_ready(self):
        self.state.camera_failed = False
        self.sink.set_status(STATUS_TEXT["CAMERA_ON"], StatusLevel.OK)

    def camera_failed(self, reason: Any = None):
        logging.error(f"Camera unavailable: {reason}")
        self.state.camera_failed = True
        self.sink.set_status(STATUS_TEXT["CAMERA_BLOCKED"], StatusLevel.WARN)

    def camera_lost(self, reason: Any = None, now: Optional[float] = None):
        """Stream ended mid-session: warn and release everything tied to a live hand."""
        self.camera_failed(reason)
        self.process([], now)

    # --- FRAME PIPELINE ---
    def tick(self, now: Optional[float] = None) -> int:
        """Runs due timers without a frame (tracker stalled)."""
        now = time.time() if now is None else now
        fired = self.state.timers.run_due(now)
        self._reconcile_status(now)
        return fired

    def process(self, frame_hands, now: Optional[float] = None):
        now = time.time() if now is None else now

        # 1. Timers first: a countdown tick due before this frame lands before it
        self.state.timers.run_due(now)

        # 2. Normalize
        hands = collect_hands(frame_hands, self.config["LANDMARK_COUNT"])
        ctx = HandlerContext(hands, now, self.state,
                             self.sink, self.layout, self.config)
        self.state.hands_present = ctx.has_hands
        if not ctx.has_hands:
            self.state.reset_hands()

        # 3. Execution Pipeline
        self.pinch_handler.handle(ctx)
        self.swipe_handler.handle(ctx)
        self.capture_handler.handle(ctx)

        # 4. Status
        self._reconcile_status(now)

    def _reconcile_status(self, now: float):
        st = self.state
        notice = st.active_notice(now)
        if st.camera_failed:
            text, level = STATUS_TEXT["CAMERA_BLOCKED"], StatusLevel.WARN
        elif notice is not None:
            text, level = notice
        elif st.capture.stage == CaptureStage.PHOTO_READY:
            text, level = STATUS_TEXT["PHOTO_READY"], StatusLevel.OK
        elif st.capture.stage == CaptureStage.COUNTING_DOWN:
            text, level = STATUS_TEXT["COUNTDOWN"], StatusLevel.OK
        elif st.mode == Mode.TRY_ON:
            if st.hands_present:
                text, level = STATUS_TEXT["TRY_ON_TRACKING"], StatusLevel.OK
            else:
                text, level = STATUS_TEXT["TRY_ON_IDLE"], StatusLevel.IDLE
        elif st.hands_present:
            text = STATUS_TEXT["TRACKING_EDIT"] if st.edit_mode else STATUS_TEXT["TRACKING_LOCKED"]
            level = StatusLevel.OK
        else:
            text = STATUS_TEXT["IDLE_EDIT"] if st.edit_mode else STATUS_TEXT["IDLE_LOCKED"]
            level = StatusLevel.IDLE
        self.sink.set_status(text, level)

    # --- COMMANDS ---
    def run_action(self, action: Union[Action, str], now: Optional[float] = None) -> bool:
        """UI shell entry point. Unknown labels are ignored."""
        now = time.time() if now is None else now
        if not isinstance(action, Action):
            parsed = Action.from_label(action)
            if parsed is None:
                logging.debug(f"Ignoring unknown action {action!r}")
                return False
            action = parsed
        self._actions[action](now)
        return True

    def press_button(self, action: Action, now: float):
        """A button was hit (pinch or click): run it and flash it."""
        self.run_action(action, now)
        self._flash_button(action, now)

    def _on_reset(self, now: float):
        self.capture_handler.cancel(self.state)
        self.layout.reset(self.state, now)

    def _on_toggle_edit(self, now: float):
        if self.state.mode == Mode.TRY_ON:
            return
        self.set_edit_mode(not self.state.edit_mode, now)

    def _on_shutter(self, now: float):
        self.capture_handler.start_countdown(self.state, now)

    def set_edit_mode(self, enabled: bool, now: Optional[float] = None):
        now = time.time() if now is None else now
        st = self.state
        st.edit_mode = enabled
        self.sink.set_edit_mode(enabled)
        self.sink.set_button_active(Action.TOGGLE_EDIT, enabled)
        key = "EDIT_ON" if enabled else "EDIT_OFF"
        st.post_notice(STATUS_TEXT[key], StatusLevel.OK if enabled else StatusLevel.IDLE,
                       now, self.config["NOTICE_S"])
        if not enabled:
            st.session.dragged_widget = None

    def set_mode(self, mode: Mode, now: Optional[float] = None):
        now = time.time() if now is None else now
        st = self.state
        if mode == st.mode:
            return
        logging.info(f"Mode -> {mode.value}")

        st.mode = mode
        if mode == Mode.TRY_ON and st.edit_mode:
            self.set_edit_mode(False, now)

        # Stale timers must not fire into the new mode
        self.capture_handler.cancel(st)
        self.layout.cancel_transitions(st)
        self._settle_flashes()

        st.session.reset()
        st.swipe_trackers.clear()
        st.notice = None
        self.sink.set_mode(mode)
        self._reconcile_status(now)

    # --- BUTTON FLASH ---
    def _flash_button(self, action: Action, now: float):
        st = self.state
        previous = st.flash_timers.pop(action, None)
        if previous is not None:
            previous.cancel()
        self.sink.set_button_active(action, True)
        st.flash_timers[action] = st.timers.schedule(
            now, self.config["BUTTON_FLASH_S"], partial(self._on_flash_end, action), "flash"
        )

    def _on_flash_end(self, action: Action, handle, now: float):
        if self.state.flash_timers.get(action) is not handle:
            return
        del self.state.flash_timers[action]
        self._restore_button(action)

    def _settle_flashes(self):
        for action, handle in list(self.state.flash_timers.items()):
            handle.cancel()
            self._restore_button(action)
        self.state.flash_timers.clear()

    def _restore_button(self, action: Action):
        # Toggle-edit stays lit while edit mode is on
        active = self.state.edit_mode if action == Action.TOGGLE_EDIT else False
        self.sink.set_button_active(action, active)
