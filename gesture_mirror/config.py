"""
Gesture Mirror Configuration Management.
========================================

This module defines the tunable parameters for the Gesture Mirror engine.
The parameters are organized into the same "Layer Cake" model the engine is
built on: input signal -> pinch physics -> layout -> navigation -> capture.

! WARNING !
Thresholds are expressed in normalized camera units unless the name ends in
`_PX` (display pixels) or `_S` (seconds). Mixing the two breaks hit-testing.
"""

from pathlib import Path
import os

# --- SYSTEM PATHS ---
FILE_PATH = Path(__file__).resolve()
PROJECT_ROOT = FILE_PATH.parent.parent
DATA_DIR = PROJECT_ROOT / "data"

PATHS = {
    "CAPTURES_DIR": DATA_DIR / "captures",
}

# --- STATUS LINES ---
# Shown by the rendering layer next to the camera dot.
STATUS_TEXT = {
    "WAITING": "Waiting for camera...",
    "CAMERA_ON": "Camera on · Ready to track",
    "CAMERA_BLOCKED": "Camera blocked. Allow access to move widgets.",
    "IDLE_EDIT": "Show your hand to reposition cards",
    "IDLE_LOCKED": "Pinch Change Panel Position to enable moving",
    "TRACKING_EDIT": "Tracking hands · Move mode on",
    "TRACKING_LOCKED": "Tracking hands · Move mode off",
    "EDIT_ON": "Move mode on · Pinch to drag cards",
    "EDIT_OFF": "Move mode off · Pinch Change Panel Position to move",
    "TRY_ON_IDLE": "Try-On mode · Show your hand to take a photo",
    "TRY_ON_TRACKING": "Try-On mode · Pinch the shutter · Swipe left to go back",
    "COUNTDOWN": "Hold still...",
    "PHOTO_READY": "Thumbs up to save · Thumbs down to retake",
    "PHOTO_SAVED": "Photo saved",
    "CAPTURE_FAILED": "Could not capture a photo. Try again.",
}

# --- MASTER CONFIGURATION ---
CONFIG = {
    # =========================================================
    # LAYER 1: INPUT SIGNAL (Tracker Output)
    # =========================================================
    "LANDMARK_COUNT": 21,           # MediaPipe hand skeleton size
    "MAX_HANDS": 2,                 # Tracker hand limit
    "DISPLAY_WIDTH": 1280,          # Mirror display rect (px)
    "DISPLAY_HEIGHT": 720,
    "MIRROR_POINTER": True,         # Camera context: flip X for reflection

    # =========================================================
    # LAYER 2: PINCH PHYSICS (Intention)
    # =========================================================
    "PINCH_SCALE_RATIO": 0.7,       # Threshold = ratio * hand span (wrist -> index base)
    "PINCH_MIN_THRESHOLD": 0.05,    # Absolute floor when the hand is tiny/far
    "BUTTON_HIT_EXPAND_PX": 24,     # Forgiveness margin around buttons
    "BUTTON_COOLDOWN_S": 0.8,       # Min gap between two button actions
    "BUTTON_FLASH_S": 0.18,         # Active highlight after a press

    # =========================================================
    # LAYER 3: LAYOUT (Snap & Grid)
    # =========================================================
    "SNAP_SIZE_PX": 16,             # Grid unit for the final offset
    "ALIGN_THRESHOLD_PX": 140,      # Max edge/center misalignment we correct
    "TRANSITION_CLEAR_S": 0.2,      # Drop eased transition after snap/reset
    "NOTICE_S": 1.5,                # One-off status messages ("Photo saved")

    # =========================================================
    # LAYER 4: SWIPE NAVIGATION (Mode Switch)
    # =========================================================
    "SWIPE_THRESHOLD": 0.18,        # Net mirrored X travel to switch mode
    "SWIPE_MAX_WINDOW_S": 0.6,      # Gesture must complete inside this window
    "SWIPE_IDLE_WINDOW_S": 0.25,    # Stationary longer than this -> re-anchor
    "SWIPE_STILL_EPSILON": 0.01,    # Movement below this counts as stationary
    "SWIPE_COOLDOWN_S": 0.9,        # Min gap between two mode switches

    # =========================================================
    # LAYER 5: CAPTURE FLOW (Countdown & Thumbs)
    # =========================================================
    "COUNTDOWN_TICKS": 3,           # Numbers shown before the shot
    "COUNTDOWN_TICK_S": 1.0,
    "GESTURE_COOLDOWN_S": 1.0,      # Shared thumbs up/down rate limit
    "FINGER_FOLD_MARGIN": 0.02,     # Tip must sit this far below its PIP joint
    "THUMB_BASE_MARGIN": 0.03,      # Thumb tip vs thumb base (landmark 2)
    "THUMB_WRIST_MARGIN": 0.05,     # Thumb tip vs wrist
    "CAPTURE_WIDTH": 1280,          # Reusable capture surface size
    "CAPTURE_HEIGHT": 720,
    "CAPTURE_JPEG_QUALITY": 92,

    # =========================================================
    # RUNTIME
    # =========================================================
    "CAMERA_INDEX": 0,              # OpenCV device ID
    "TARGET_FPS": 30,
    "MP_MIN_DETECTION_CONFIDENCE": 0.6,
    "MP_MIN_TRACKING_CONFIDENCE": 0.6,
    "MP_MODEL_COMPLEXITY": 1,       # 0=Fast, 1=Balanced
}

def init_environment():
    """
    Creates necessary directories safely at runtime.
    """
    os.makedirs(PATHS["CAPTURES_DIR"], exist_ok=True)
