"""Gesture Mirror Swipe Navigation (Mirror <-> Try-On)."""
import logging
from typing import Callable, Optional

from gesture_mirror.control.handlers import HandlerContext
from gesture_mirror.core.kinematics import KinematicsEngine
from gesture_mirror.core.state_manager import SwipeTracker
from gesture_mirror.core.types import Mode

class SwipeHandler:
    def __init__(self, on_switch: Callable[[Mode, float], None], physics: Optional[KinematicsEngine] = None):
        self.physics = physics or KinematicsEngine()
        self.on_switch = on_switch

    def handle(self, ctx: HandlerContext):
        state = ctx.state
        trackers = state.swipe_trackers
        now = ctx.now

        if not ctx.has_hands:
            trackers.clear()
            return

        max_window = ctx.config["SWIPE_MAX_WINDOW_S"]
        idle_window = ctx.config["SWIPE_IDLE_WINDOW_S"]
        still_eps = ctx.config["SWIPE_STILL_EPSILON"]

        live = set()
        for slot, lms in ctx.valid_hands:
            live.add(slot)
            x = self.physics.mirrored_x(lms)

            tracker = trackers.get(slot)
            if tracker is None:
                trackers[slot] = SwipeTracker(x, now, x, now)
                continue

            tracker.track(x, now, still_eps)

            # Pinch motion belongs to the drag, so it never counts towards a swipe.
            # Stale gesture or a hand resting in place -> new baseline
            if (state.session.active
                    or (now - tracker.start_time) > max_window
                    or (now - tracker.last_move_time) > idle_window):
                tracker.anchor(x, now)
                continue

            target = self._target_mode(state.mode, x - tracker.start_x, ctx.config["SWIPE_THRESHOLD"])
            if target is None:
                continue
            if (now - state.last_swipe) <= ctx.config["SWIPE_COOLDOWN_S"]:
                continue

            logging.debug(f"swipe slot={slot} dx={x - tracker.start_x:+.3f} -> {target.value}")
            state.last_swipe = now
            trackers.clear()
            self.on_switch(target, now)
            return

        for slot in [s for s in trackers if s not in live]:
            del trackers[slot]

    @staticmethod
    def _target_mode(mode: Mode, dx: float, threshold: float) -> Optional[Mode]:
        """Swipes only work in the direction that leaves the current mode."""
        if mode == Mode.MIRROR and dx > threshold:
            return Mode.TRY_ON
        if mode == Mode.TRY_ON and dx < -threshold:
            return Mode.MIRROR
        return None
