"""
Keyboard and scroll events

Immutable values passed through ScrollViewFilter.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from PyQt6.QtCore import QRect
from PyQt6.QtWidgets import QWidget

# Navigation transitions take ~0.35s, keyboard presentation ~0.25s
NAVIGATION_TRANSITION_THRESHOLD = 0.3


class KeyboardNotificationKind(Enum):
    WILL_SHOW = "will_show"
    WILL_HIDE = "will_hide"


@dataclass(frozen=True)
class KeyboardNotification:
    """A keyboard will-show/will-hide notification as posted by the host"""
    kind: KeyboardNotificationKind
    frame: QRect  # final keyboard frame, global coordinates
    duration: float = 0.25

    @property
    def is_hide(self) -> bool:
        return self.kind is KeyboardNotificationKind.WILL_HIDE


@dataclass(frozen=True)
class KeyboardFrameEvent:
    """The keyboard's frame in global coordinates and its transition duration."""
    frame: QRect
    transition_duration: float

    def is_likely_navigation_transition(self, threshold: float = NAVIGATION_TRANSITION_THRESHOLD) -> bool:
        """True if the event was most likely caused by a page transition
        rather than the keyboard itself being presented or dismissed."""
        return self.transition_duration > threshold


@dataclass(frozen=True)
class ContainerRect:
    """A rectangle in the scroll area's content coordinates"""
    rect: QRect


@dataclass(frozen=True)
class DescendantRect:
    """A rectangle in the coordinates of a descendant of the content widget.

    If rect is None, the descendant's bounds at delivery time are used.
    """
    rect: Optional[QRect]
    descendant: QWidget


ScrollTarget = Union[ContainerRect, DescendantRect]


@dataclass(frozen=True)
class ScrollRectEvent:
    """A deferred request to scroll part of the content into view"""
    target: ScrollTarget
    animated: bool = False
    margin: int = 0
