"""
Gesture Mirror Layout Engine.
=============================

Tracks where every widget sits and where it *would* sit untouched.

Key Concept: "Anchor + Offset"
Each widget owns a base center (its natural position from the surrounding
layout) and a user offset applied on top: `center = base_center + offset`.
Layout changes (viewport resize) move the anchor; the offset survives.

Snapping is two-stage:
1. **Alignment:** on release, look for the nearest edge/center of any sibling
   within ALIGN_THRESHOLD_PX and shift onto it (per axis).
2. **Grid:** round the resulting offset to SNAP_SIZE_PX.
"""

import logging
from functools import partial
from typing import Iterable, Mapping, Optional

from gesture_mirror.config import CONFIG
from gesture_mirror.core import geometry
from gesture_mirror.core.interfaces import IRenderSink
from gesture_mirror.core.state_manager import EngineState
from gesture_mirror.core.types import (
    Action, Interactable, Mode, ORIGIN, Point2D, Rect, Transition, Widget,
)

class LayoutEngine:
    """
    Stateless over EngineState: every method takes the state explicitly.
    """
    def __init__(self, sink: IRenderSink, config: Optional[dict] = None):
        self.sink = sink
        self.config = config if config is not None else CONFIG

    # --- ENUMERATION ---
    def add_widget(self, state: EngineState, widget_id: str, rect: Rect) -> Widget:
        widget = Widget(widget_id, rect.width, rect.height, rect.center)
        state.widgets[widget_id] = widget
        return widget

    def add_button(self, state: EngineState, action: Action, rect: Rect,
                   modes: Optional[Iterable[Mode]] = None) -> Interactable:
        button = Interactable(action, rect)
        if modes is not None:
            button.modes = frozenset(modes)
        state.buttons.append(button)
        return button

    def set_button_enabled(self, state: EngineState, action: Action, enabled: bool):
        """Rendering layer reports a button hidden/disabled."""
        for button in state.buttons:
            if button.action == action:
                button.enabled = enabled

    def move_button(self, state: EngineState, action: Action, rect: Rect):
        for button in state.buttons:
            if button.action == action:
                button.rect = rect

    # --- HIT TESTING ---
    def hit_test_buttons(self, state: EngineState, point: Point2D) -> Optional[Interactable]:
        margin = self.config["BUTTON_HIT_EXPAND_PX"]
        for button in state.buttons:
            if not button.is_live(state.mode):
                continue
            if geometry.contains(geometry.expand(button.rect, margin), point):
                return button
        return None

    def widget_under_point(self, state: EngineState, point: Point2D) -> Optional[str]:
        """No margin. Later widgets are painted on top, so the last hit wins."""
        target = None
        for widget_id, widget in state.widgets.items():
            if geometry.contains(widget.rect, point):
                target = widget_id
        return target

    # --- POSITIONING ---
    def set_position(self, state: EngineState, widget_id: str, x: float, y: float) -> bool:
        widget = state.widgets.get(widget_id)
        if widget is None or not state.edit_mode:
            return False
        widget.offset = Point2D(x - widget.base_center.x, y - widget.base_center.y)
        self.sink.apply_widget_transform(widget_id, widget.offset, Transition.DRAG)
        return True

    def snap(self, state: EngineState, widget_id: str, now: float) -> Optional[Point2D]:
        """
        Aligns the widget to its siblings, then quantizes its offset to the grid.
        Returns the final offset (None if the widget is unknown).
        """
        widget = state.widgets.get(widget_id)
        if widget is None:
            return None

        threshold = self.config["ALIGN_THRESHOLD_PX"]
        unit = self.config["SNAP_SIZE_PX"]
        me = widget.rect

        delta_x, delta_y = 0.0, 0.0
        best_x = best_y = threshold + 1

        for other_id, other in state.widgets.items():
            if other_id == widget_id:
                continue
            r = other.rect

            # Leading edge, center, trailing edge
            for mine, theirs in ((me.left, r.left), (me.center_x, r.center_x), (me.right, r.right)):
                dist = abs(mine - theirs)
                if dist < best_x and dist <= threshold:
                    best_x, delta_x = dist, theirs - mine

            for mine, theirs in ((me.top, r.top), (me.center_y, r.center_y), (me.bottom, r.bottom)):
                dist = abs(mine - theirs)
                if dist < best_y and dist <= threshold:
                    best_y, delta_y = dist, theirs - mine

        widget.offset = Point2D(
            geometry.snap_to_grid(widget.offset.x + delta_x, unit),
            geometry.snap_to_grid(widget.offset.y + delta_y, unit),
        )
        logging.debug(f"snap {widget_id}: align=({delta_x:.1f}, {delta_y:.1f}) offset={widget.offset}")

        self.sink.apply_widget_transform(widget_id, widget.offset, Transition.SNAP)
        self._schedule_transition_clear(state, [widget_id], now)
        return widget.offset

    def init_widget_state(self, state: EngineState, rendered: Optional[Mapping[str, Rect]] = None):
        """
        Re-derives every base center from rendered geometry minus the current offset.
        `rendered` maps widget id -> on-screen rect (offset included). Widgets
        missing from it keep their modelled geometry.
        """
        rendered = rendered or {}
        for widget_id, widget in state.widgets.items():
            rect = rendered.get(widget_id, widget.rect)
            widget.width, widget.height = rect.width, rect.height
            widget.base_center = rect.center - widget.offset
            if widget.offset != ORIGIN:
                self.sink.apply_widget_transform(widget_id, widget.offset, Transition.NONE)

    def reset(self, state: EngineState, now: float):
        """Discards every user offset."""
        self.cancel_transitions(state)
        for widget_id, widget in state.widgets.items():
            widget.offset = ORIGIN
            self.sink.apply_widget_transform(widget_id, ORIGIN, Transition.SMOOTH)
        self._schedule_transition_clear(state, list(state.widgets), now)
        self.init_widget_state(state)

    # --- TRANSITION TIMERS ---
    def _schedule_transition_clear(self, state: EngineState, widget_ids, now: float):
        if state.transition_timer is not None:
            state.transition_timer.cancel()
        state.transition_widgets.update(widget_ids)
        state.transition_timer = state.timers.schedule(
            now, self.config["TRANSITION_CLEAR_S"],
            partial(self._on_transition_clear, state), "transition-clear"
        )

    def _on_transition_clear(self, state: EngineState, handle, now: float):
        # Superseded by a newer snap/reset -> that timer owns the clear
        if handle is not state.transition_timer:
            return
        self._flush_transitions(state)

    def cancel_transitions(self, state: EngineState):
        """Mode switch / reset: drop the pending timer and settle transitions now."""
        if state.transition_timer is not None:
            state.transition_timer.cancel()
            state.transition_timer = None
        self._flush_transitions(state)

    def _flush_transitions(self, state: EngineState):
        for widget_id in sorted(state.transition_widgets):
            widget = state.widgets.get(widget_id)
            if widget is not None:
                self.sink.apply_widget_transform(widget_id, widget.offset, Transition.NONE)
        state.transition_widgets.clear()
        state.transition_timer = None
