"""
Gesture Mirror Capture Surface.
===============================

Turns the latest live camera frame into a still photo payload (JPEG bytes).

Why a reusable surface?
Allocating a full-resolution image on every shot causes GC spikes mid-frame.
The surface owns one preallocated BGR buffer; every capture resizes into it
and encodes from it.
"""

from typing import Optional
import threading
import numpy as np
import cv2

from gesture_mirror.config import CONFIG

class CaptureError(RuntimeError):
    """Raised when no still could be produced."""

class CaptureSurface:
    def __init__(self, width: Optional[int] = None, height: Optional[int] = None,
                 mirror: bool = True, quality: Optional[int] = None):
        self.width = width or CONFIG["CAPTURE_WIDTH"]
        self.height = height or CONFIG["CAPTURE_HEIGHT"]
        self.mirror = mirror
        self.quality = quality or CONFIG["CAPTURE_JPEG_QUALITY"]

        self._buffer = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        self._latest: Optional[np.ndarray] = None
        self.lock = threading.Lock()

    def update(self, frame: np.ndarray):
        """Remember the freshest camera frame (raw, un-mirrored, BGR)."""
        with self.lock:
            self._latest = frame

    def capture(self) -> bytes:
        with self.lock:
            frame = self._latest
        if frame is None:
            raise CaptureError("No camera frame available yet")

        if frame.ndim == 2:
            frame = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
        if self.mirror:
            frame = cv2.flip(frame, 1)

        cv2.resize(frame, (self.width, self.height), dst=self._buffer, interpolation=cv2.INTER_AREA)

        ok, encoded = cv2.imencode(".jpg", self._buffer, [cv2.IMWRITE_JPEG_QUALITY, int(self.quality)])
        if not ok:
            raise CaptureError("JPEG encoding failed")
        return encoded.tobytes()

    __call__ = capture
