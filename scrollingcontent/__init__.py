# Keyboard-aware scrolling content for PyQt6
import logging

from .core.errors import KeyboardStateError, ScrollingContentError
from .core.settings import KeyboardDismissMode, KeyboardLayoutSettings
from .keyboard.events import (
    ContainerRect,
    DescendantRect,
    KeyboardFrameEvent,
    KeyboardNotification,
    KeyboardNotificationKind,
    ScrollRectEvent,
)
from .keyboard.notifications import KeyboardNotificationCenter
from .keyboard.observer import KeyboardObserver
from .layout.filter import ScrollViewFilter
from .ui.keyboard_panel import KeyboardPanelManager
from .ui.manager import ScrollingContentManager
from .ui.scroll_area import ScrollingContentScrollArea

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'ContainerRect',
    'DescendantRect',
    'KeyboardDismissMode',
    'KeyboardFrameEvent',
    'KeyboardLayoutSettings',
    'KeyboardNotification',
    'KeyboardNotificationCenter',
    'KeyboardNotificationKind',
    'KeyboardObserver',
    'KeyboardPanelManager',
    'KeyboardStateError',
    'ScrollRectEvent',
    'ScrollViewFilter',
    'ScrollingContentError',
    'ScrollingContentManager',
    'ScrollingContentScrollArea',
]
