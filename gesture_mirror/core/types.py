"""
Gesture Mirror Types.
Central definition of Data Contracts to prevent circular imports.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional
import re

# --- GEOMETRY TYPES ---
@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    def __add__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point2D") -> "Point2D":
        return Point2D(self.x - other.x, self.y - other.y)

ORIGIN = Point2D(0.0, 0.0)

@dataclass(frozen=True)
class Rect:
    """Screen-space rectangle in display pixels (y grows downwards)."""
    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_center(cls, center: Point2D, width: float, height: float) -> "Rect":
        return cls(center.x - width / 2, center.y - height / 2,
                   center.x + width / 2, center.y + height / 2)

    @property
    def width(self) -> float: return self.right - self.left
    @property
    def height(self) -> float: return self.bottom - self.top
    @property
    def center_x(self) -> float: return self.left + self.width / 2
    @property
    def center_y(self) -> float: return self.top + self.height / 2
    @property
    def center(self) -> Point2D: return Point2D(self.center_x, self.center_y)

# --- SESSION TYPES ---
class Mode(Enum):
    MIRROR = "mirror"
    TRY_ON = "try-on"

class PinchMode(Enum):
    NONE = auto()
    IDLE = auto()    # Pinching empty space
    DRAG = auto()    # Bound to a widget
    BUTTON = auto()  # Fired a button; inert until release

class CaptureStage(Enum):
    IDLE = auto()
    COUNTING_DOWN = auto()
    PHOTO_READY = auto()

class ThumbSignal(Enum):
    NONE = auto()
    UP = auto()
    DOWN = auto()

class StatusLevel(Enum):
    IDLE = "idle"
    OK = "ok"
    WARN = "warn"

class Transition(Enum):
    """Widget transform speeds. Value is (seconds, easing)."""
    NONE = (0.0, "")
    DRAG = (0.05, "linear")
    SMOOTH = (0.15, "ease")
    SNAP = (0.18, "ease")

    @property
    def duration(self) -> float:
        return self.value[0]

    @property
    def easing(self) -> str:
        return self.value[1]

# --- COMMAND TYPES ---
class Action(Enum):
    RESET = "reset"
    TOGGLE_EDIT = "toggle-edit"
    SHUTTER = "shutter"

    @classmethod
    def from_label(cls, raw_label) -> Optional["Action"]:
        """Parses a UI label ("toggle-edit", "Toggle_Edit"). Unknown -> None."""
        if not raw_label or not isinstance(raw_label, str):
            return None
        clean = re.sub(r'[\s_]+', '-', raw_label.strip().lower())
        for member in cls:
            if member.value == clean:
                return member
        return None

# --- LAYOUT TYPES ---
@dataclass
class Widget:
    id: str
    width: float
    height: float
    base_center: Point2D
    offset: Point2D = ORIGIN

    @property
    def center(self) -> Point2D:
        return self.base_center + self.offset

    @property
    def rect(self) -> Rect:
        return Rect.from_center(self.center, self.width, self.height)

@dataclass
class Interactable:
    """A virtual button. `modes` lists the modes it is rendered in."""
    action: Action
    rect: Rect
    enabled: bool = True
    modes: frozenset = field(default_factory=lambda: frozenset(Mode))

    def is_live(self, mode: Mode) -> bool:
        return self.enabled and mode in self.modes
