"""
Gesture Mirror Pinch Logic.
Classifies every hand as pinching / not pinching and runs the single, global
pinch lifecycle: press a button OR drag a widget, never both.
"""
import logging
from typing import Callable, Optional

from gesture_mirror.control.handlers import HandlerContext
from gesture_mirror.core.kinematics import KinematicsEngine
from gesture_mirror.core.types import Action, PinchMode, Point2D

class PinchHandler:
    def __init__(self, on_button: Callable[[Action, float], None], physics: Optional[KinematicsEngine] = None):
        self.physics = physics or KinematicsEngine()
        self.on_button = on_button

    def handle(self, ctx: HandlerContext):
        state = ctx.state

        # --- 0. NO HANDS ---
        if not ctx.has_hands:
            state.session.reset()
            state.pointer = None
            ctx.sink.set_pointer(None)
            return

        # --- 1. CLASSIFY (tracker order, lowest pinching slot drives) ---
        driver: Optional[Point2D] = None
        first_point: Optional[Point2D] = None
        for slot, lms in ctx.valid_hands:
            point = self.physics.map_to_display(lms, state.display)
            if first_point is None:
                first_point = point
            pinching, _, _ = self.physics.check_pinch(lms)
            if pinching and driver is None:
                driver = point

        state.pointer = driver or first_point
        ctx.sink.set_pointer(state.pointer)

        # --- 2. RELEASE ---
        if driver is None:
            if state.session.active:
                self._release(ctx)
            return

        # --- 3. PRESS ---
        if not state.session.active:
            self._begin(ctx, driver)

        # --- 4. DRAG ---
        if state.session.mode == PinchMode.DRAG and state.edit_mode:
            ctx.layout.set_position(state, state.session.dragged_widget, driver.x, driver.y)

    def _begin(self, ctx: HandlerContext, point: Point2D):
        state = ctx.state
        session = state.session
        session.active = True
        session.mode = PinchMode.IDLE

        # Buttons take priority over widgets
        button = ctx.layout.hit_test_buttons(state, point)
        cooldown = ctx.config["BUTTON_COOLDOWN_S"]
        if button is not None and (ctx.now - state.last_button_press) > cooldown:
            state.last_button_press = ctx.now
            session.mode = PinchMode.BUTTON
            logging.debug(f"pinch -> button {button.action.value}")
            self.on_button(button.action, ctx.now)
            return

        if state.edit_mode:
            target = ctx.layout.widget_under_point(state, point)
            if target is not None:
                session.mode = PinchMode.DRAG
                session.dragged_widget = target
                logging.debug(f"pinch -> drag {target}")

    def _release(self, ctx: HandlerContext):
        state = ctx.state
        session = state.session
        if session.mode == PinchMode.DRAG and session.dragged_widget and state.edit_mode:
            ctx.layout.snap(state, session.dragged_widget, ctx.now)
        session.reset()
