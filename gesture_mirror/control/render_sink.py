"""
Gesture Mirror Render Sinks.
============================

The engine talks to the screen through `IRenderSink`. This module holds the
backend that simply remembers what it was told:

- **Tests / Headless:** inspect `.status`, `.offsets`, `.events` after a frame.
- **HUD:** the OpenCV overlay subclasses it and draws the remembered state
  once per camera frame, so the engine never waits on drawing.
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from gesture_mirror.core.interfaces import IRenderSink
from gesture_mirror.core.types import Mode, Point2D, StatusLevel, Transition

class RecordingRenderSink(IRenderSink):
    """
    Keeps the latest value of every output channel plus an ordered event log.
    `history` bounds the log (None = unbounded, for tests).
    """
    def __init__(self, history: Optional[int] = None):
        self.events: Deque[Tuple[str, tuple]] = deque(maxlen=history)

        self.offsets: Dict[str, Point2D] = {}
        self.transitions: Dict[str, Transition] = {}
        self.pointer: Optional[Point2D] = None
        self.status = ""
        self.status_level = StatusLevel.IDLE
        self.active_buttons = set()
        self.mode = Mode.MIRROR
        self.edit_mode = False
        self.countdown: Optional[int] = None
        self.photo: Optional[bytes] = None
        self.saved: List[bytes] = []

    def _log(self, name: str, *args):
        self.events.append((name, args))

    def events_named(self, name: str) -> List[tuple]:
        return [args for ev, args in self.events if ev == name]

    # --- WIDGETS ---
    def apply_widget_transform(self, widget_id, offset, transition):
        self.offsets[widget_id] = offset
        self.transitions[widget_id] = transition
        self._log("transform", widget_id, offset, transition)

    # --- POINTER & STATUS ---
    def set_pointer(self, point):
        self.pointer = point

    def set_status(self, text, level):
        if (text, level) != (self.status, self.status_level):
            self._log("status", text, level)
        self.status, self.status_level = text, level

    # --- CONTROLS ---
    def set_button_active(self, action, active):
        if active:
            self.active_buttons.add(action)
        else:
            self.active_buttons.discard(action)
        self._log("button", action, active)

    def set_mode(self, mode):
        self.mode = mode
        self._log("mode", mode)

    def set_edit_mode(self, enabled):
        self.edit_mode = enabled
        self._log("edit", enabled)

    # --- CAPTURE ---
    def set_countdown(self, value):
        self.countdown = value
        self._log("countdown", value)

    def show_photo(self, payload):
        self.photo = payload
        self._log("photo", payload is not None)

    def request_save(self, payload):
        self.saved.append(payload)
        self._log("save", len(payload))
        logging.info(f"Save requested ({len(payload)} bytes)")
