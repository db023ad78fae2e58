"""
Gesture Mirror Core Interfaces.
Defines the abstract contract between the engine and whatever draws it.
"""

from abc import ABC, abstractmethod
from typing import Optional

from gesture_mirror.core.types import Action, Mode, Point2D, StatusLevel, Transition

class IRenderSink(ABC):
    """
    Abstract Protocol for the Rendering Layer.
    The engine never draws; it only pushes state changes through here.
    """

    # --- WIDGETS ---
    @abstractmethod
    def apply_widget_transform(self, widget_id: str, offset: Point2D, transition: Transition) -> None: pass

    # --- POINTER & STATUS ---
    @abstractmethod
    def set_pointer(self, point: Optional[Point2D]) -> None: pass
    @abstractmethod
    def set_status(self, text: str, level: StatusLevel) -> None: pass

    # --- CONTROLS ---
    @abstractmethod
    def set_button_active(self, action: Action, active: bool) -> None: pass
    @abstractmethod
    def set_mode(self, mode: Mode) -> None: pass
    @abstractmethod
    def set_edit_mode(self, enabled: bool) -> None: pass

    # --- CAPTURE ---
    @abstractmethod
    def set_countdown(self, value: Optional[int]) -> None: pass
    @abstractmethod
    def show_photo(self, payload: Optional[bytes]) -> None: pass
    @abstractmethod
    def request_save(self, payload: bytes) -> None: pass
