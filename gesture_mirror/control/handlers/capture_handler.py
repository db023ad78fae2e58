"""
Gesture Mirror Capture Flow.
============================

Runs the photo booth in Try-On mode:

    IDLE --shutter--> COUNTING_DOWN(3,2,1) --tick 0--> PHOTO_READY
    PHOTO_READY --thumbs up--> IDLE (save requested)
    PHOTO_READY --thumbs down--> COUNTING_DOWN (retake, no shutter needed)

Countdown ticks are scheduler timers. Every tick re-checks that it is still
the live countdown before touching state, so a tick that survives a mode
switch is a no-op.
"""
import logging
from functools import partial
from typing import Callable, Optional

from gesture_mirror.config import CONFIG, STATUS_TEXT
from gesture_mirror.control.capture_surface import CaptureError
from gesture_mirror.control.handlers import HandlerContext
from gesture_mirror.core.interfaces import IRenderSink
from gesture_mirror.core.kinematics import KinematicsEngine
from gesture_mirror.core.state_manager import EngineState
from gesture_mirror.core.types import CaptureStage, Mode, StatusLevel, ThumbSignal

class CaptureHandler:
    def __init__(self, sink: IRenderSink, grab: Optional[Callable[[], bytes]] = None,
                 config: Optional[dict] = None, physics: Optional[KinematicsEngine] = None):
        self.sink = sink
        self.grab = grab
        self.config = config if config is not None else CONFIG
        self.physics = physics or KinematicsEngine(self.config)

    # --- COUNTDOWN ---
    def start_countdown(self, state: EngineState, now: float) -> bool:
        """Shutter. Try-On only; ignored while already counting down."""
        if state.mode != Mode.TRY_ON:
            return False
        if state.capture.stage == CaptureStage.COUNTING_DOWN:
            return False

        state.cancel_countdown()
        if state.capture.photo is not None:
            self.sink.show_photo(None)
        state.capture.photo = None
        state.capture.stage = CaptureStage.COUNTING_DOWN
        state.capture.remaining = self.config["COUNTDOWN_TICKS"]
        self.sink.set_countdown(state.capture.remaining)
        self._schedule_tick(state, now)
        return True

    def _schedule_tick(self, state: EngineState, now: float):
        state.countdown_timer = state.timers.schedule(
            now, self.config["COUNTDOWN_TICK_S"], partial(self._on_tick, state), "countdown"
        )

    def _on_tick(self, state: EngineState, handle, now: float):
        if handle is not state.countdown_timer or state.capture.stage != CaptureStage.COUNTING_DOWN:
            return

        state.capture.remaining -= 1
        if state.capture.remaining > 0:
            self.sink.set_countdown(state.capture.remaining)
            self._schedule_tick(state, now)
            return

        state.countdown_timer = None
        self.sink.set_countdown(None)
        self._take_photo(state, now)

    def _take_photo(self, state: EngineState, now: float):
        try:
            if self.grab is None:
                raise CaptureError("No capture source attached")
            payload = self.grab()
        except CaptureError as exc:
            logging.warning(f"Capture failed: {exc}")
            state.capture.reset()
            state.post_notice(STATUS_TEXT["CAPTURE_FAILED"], StatusLevel.WARN, now, self.config["NOTICE_S"])
            return

        state.capture.stage = CaptureStage.PHOTO_READY
        state.capture.remaining = 0
        state.capture.photo = payload
        self.sink.show_photo(payload)

    def cancel(self, state: EngineState):
        """Mode switch / reset: kill the countdown and drop any pending photo."""
        state.cancel_countdown()
        if state.capture.stage == CaptureStage.COUNTING_DOWN:
            self.sink.set_countdown(None)
        if state.capture.photo is not None:
            self.sink.show_photo(None)
        state.capture.reset()

    # --- THUMB CONFIRMATION ---
    def handle(self, ctx: HandlerContext):
        state = ctx.state
        if state.capture.stage != CaptureStage.PHOTO_READY:
            return
        if (ctx.now - state.last_thumb_gesture) <= ctx.config["GESTURE_COOLDOWN_S"]:
            return

        for slot, lms in ctx.valid_hands:
            signal = self.physics.classify_thumb(lms)
            if signal == ThumbSignal.NONE:
                continue

            state.last_thumb_gesture = ctx.now
            photo = state.capture.photo
            state.capture.reset()
            self.sink.show_photo(None)

            if signal == ThumbSignal.UP:
                logging.info("Thumbs up: saving photo")
                self.sink.request_save(photo)
                state.post_notice(STATUS_TEXT["PHOTO_SAVED"], StatusLevel.OK, ctx.now, ctx.config["NOTICE_S"])
            else:
                logging.info("Thumbs down: retaking photo")
                self.start_countdown(state, ctx.now)
            return
