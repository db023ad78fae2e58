"""
Gesture Mirror Landmark Processing Utilities.
=============================================

Normalizes whatever the hand tracker hands us into one shape.
The tracker may deliver:
1. A MediaPipe NormalizedLandmarkList (has `.landmark`).
2. A plain sequence of landmark objects (have `.x`, `.y`, `.z`).
3. Raw numbers: a (21, 3) / (21, 2) array or a flat list of 63 floats.

Everything downstream consumes a (21, 3) float numpy array in normalized
camera coordinates, with `None` meaning "skip this hand".
"""

import logging
import numpy as np
from typing import Any, List, Optional

from gesture_mirror.config import CONFIG

# MediaPipe landmark indices consumed by the engine
WRIST = 0
THUMB_BASE = 2
THUMB_TIP = 4
INDEX_PIP, INDEX_TIP = 6, 8
INDEX_BASE = 9  # Middle MCP: the hand-span reference
MIDDLE_PIP, MIDDLE_TIP = 10, 12
RING_PIP, RING_TIP = 14, 16
PINKY_PIP, PINKY_TIP = 18, 20

# (tip, pip) for every finger but the thumb
FOLD_PAIRS = (
    (INDEX_TIP, INDEX_PIP),
    (MIDDLE_TIP, MIDDLE_PIP),
    (RING_TIP, RING_PIP),
    (PINKY_TIP, PINKY_PIP),
)

def to_landmark_array(hand: Any, count: Optional[int] = None) -> Optional[np.ndarray]:
    """
    Converts one hand observation into a (count, 3) float matrix.
    Returns None for absent, short or non-finite observations.
    """
    count = CONFIG["LANDMARK_COUNT"] if count is None else count
    if hand is None:
        return None

    # 1. Unwrap MediaPipe container
    points = getattr(hand, "landmark", hand)

    # 2. Data Structuring
    try:
        if len(points) == 0:
            return None
        if hasattr(points[0], "x"):
            coords = np.array([[lm.x, lm.y, getattr(lm, "z", 0.0)] for lm in points], dtype=np.float64)
        else:
            coords = np.asarray(points, dtype=np.float64)
            if coords.ndim == 1:
                coords = coords.reshape(-1, 3)
            if coords.ndim == 2 and coords.shape[1] == 2:
                coords = np.hstack([coords, np.zeros((coords.shape[0], 1))])
    except (TypeError, ValueError) as exc:
        logging.debug(f"Unreadable hand observation skipped: {exc}")
        return None

    # 3. Validation
    if coords.ndim != 2 or coords.shape[0] < count or coords.shape[1] != 3:
        logging.debug(f"Short hand observation skipped: shape={coords.shape}")
        return None
    if not np.all(np.isfinite(coords[:count])):
        return None

    return coords[:count]

def collect_hands(frame_hands: Any, count: Optional[int] = None) -> List[Optional[np.ndarray]]:
    """
    Converts a tracker callback payload to a list aligned with tracker order.
    Invalid hands stay in the list as None so slot indices remain stable.
    """
    if frame_hands is None or len(frame_hands) == 0:
        return []
    return [to_landmark_array(hand, count) for hand in frame_hands]
