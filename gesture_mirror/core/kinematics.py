"""
Gesture Mirror Kinematics.
Pure per-hand measurements on (21, 3) landmark arrays.
"""
from typing import Optional, Tuple
import numpy as np

from gesture_mirror.config import CONFIG
from gesture_mirror.core.types import Point2D, Rect, ThumbSignal
from gesture_mirror.hand_utils import (
    FOLD_PAIRS, INDEX_BASE, INDEX_TIP, THUMB_BASE, THUMB_TIP, WRIST,
)

class KinematicsEngine:
    def __init__(self, config: Optional[dict] = None):
        self.config = config if config is not None else CONFIG

    # --- PINCH ---
    def get_pinch_strength(self, lms: np.ndarray) -> float:
        """Distance between Thumb(4) and Index(8). Smaller = tighter pinch."""
        return float(np.linalg.norm(lms[THUMB_TIP, :2] - lms[INDEX_TIP, :2]))

    def get_hand_scale(self, lms: np.ndarray) -> float:
        """Wrist(0) to Index base(9). Shrinks as the hand moves away."""
        return float(np.linalg.norm(lms[WRIST, :2] - lms[INDEX_BASE, :2]))

    def get_pinch_threshold(self, hand_scale: float) -> float:
        return max(hand_scale * self.config["PINCH_SCALE_RATIO"],
                   self.config["PINCH_MIN_THRESHOLD"])

    @staticmethod
    def is_pinching(strength: float, threshold: float) -> bool:
        # Strict: exactly at threshold is NOT a pinch
        return strength < threshold

    def check_pinch(self, lms: np.ndarray) -> Tuple[bool, float, float]:
        """Returns (is_pinching, strength, threshold)."""
        strength = self.get_pinch_strength(lms)
        threshold = self.get_pinch_threshold(self.get_hand_scale(lms))
        return self.is_pinching(strength, threshold), strength, threshold

    # --- POINTER ---
    def mirrored_x(self, lms: np.ndarray) -> float:
        """Index tip X as seen in the mirrored display (0..1)."""
        return 1.0 - float(lms[INDEX_TIP, 0])

    def map_to_display(self, lms: np.ndarray, display: Rect, mirrored: Optional[bool] = None) -> Point2D:
        """
        Maps the index fingertip into display pixels.
        Mirroring applies in camera/reflection contexts only; overlay UIs map directly.
        """
        if mirrored is None:
            mirrored = self.config["MIRROR_POINTER"]
        nx = self.mirrored_x(lms) if mirrored else float(lms[INDEX_TIP, 0])
        ny = float(lms[INDEX_TIP, 1])
        return Point2D(display.left + nx * display.width, display.top + ny * display.height)

    # --- THUMB SIGNALS ---
    def fingers_folded(self, lms: np.ndarray) -> bool:
        """
        Index, middle, ring and pinky tips all sit below their PIP joints.
        Image Y grows downwards, so "below" means a larger y.
        """
        margin = self.config["FINGER_FOLD_MARGIN"]
        return all(lms[tip, 1] > lms[pip, 1] + margin for tip, pip in FOLD_PAIRS)

    def classify_thumb(self, lms: np.ndarray) -> ThumbSignal:
        if not self.fingers_folded(lms):
            return ThumbSignal.NONE

        tip_y = lms[THUMB_TIP, 1]
        base_y = lms[THUMB_BASE, 1]
        wrist_y = lms[WRIST, 1]
        base_m = self.config["THUMB_BASE_MARGIN"]
        wrist_m = self.config["THUMB_WRIST_MARGIN"]

        if tip_y < base_y - base_m and tip_y < wrist_y - wrist_m:
            return ThumbSignal.UP
        if tip_y > base_y + base_m and tip_y > wrist_y + wrist_m:
            return ThumbSignal.DOWN
        return ThumbSignal.NONE
