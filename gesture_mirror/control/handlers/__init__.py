"""
Handler Context Definition.
Defines the Data Transfer Object (DTO) for the Control Layer.
"""

from typing import List, Optional
import numpy as np

from gesture_mirror.core.state_manager import EngineState

class HandlerContext:
    """
    A unified context object containing all data required for a Handler to make decisions
    about one tracker frame. Wraps the validated hands, the frame clock, the shared
    EngineState, the render sink, the layout engine and the configuration.
    """
    def __init__(self, hands: List[Optional[np.ndarray]], now: float, state: EngineState,
                 sink, layout, config):
        # 1. Hand Data (tracker order; invalid hands are None)
        self.hands = hands
        self.now = now

        # 2. Global Resources
        self.state = state     # Shared EngineState
        self.sink = sink       # IRenderSink
        self.layout = layout   # LayoutEngine
        self.config = config   # Master Config Dict

    @property
    def valid_hands(self):
        """(slot, landmarks) for every usable hand, in tracker order."""
        return [(slot, lms) for slot, lms in enumerate(self.hands) if lms is not None]

    @property
    def has_hands(self) -> bool:
        return any(lms is not None for lms in self.hands)
