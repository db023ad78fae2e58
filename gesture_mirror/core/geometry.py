"""Pure geometry helpers shared by the layout engine and the handlers."""
import math
from gesture_mirror.core.types import Point2D, Rect

def contains(rect: Rect, point: Point2D) -> bool:
    """Edges are inclusive."""
    return rect.left <= point.x <= rect.right and rect.top <= point.y <= rect.bottom

def expand(rect: Rect, margin: float) -> Rect:
    return Rect(rect.left - margin, rect.top - margin,
                rect.right + margin, rect.bottom + margin)

def snap_to_grid(value: float, unit: float) -> float:
    # round() is banker's rounding; the grid needs half-up like the renderer
    return math.floor(value / unit + 0.5) * unit
