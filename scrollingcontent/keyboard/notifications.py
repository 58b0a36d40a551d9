"""
Keyboard Notification Center

Process-wide fanout of keyboard will-show/will-hide notifications.

The last notification is retained so that pages created while the keyboard is
already visible can still find out where it is.
"""
import logging
import weakref
from typing import List, Optional

from PyQt6.QtCore import QObject, QPoint, QRect
from PyQt6.QtGui import QGuiApplication

from .events import KeyboardNotification, KeyboardNotificationKind

logger = logging.getLogger(__name__)


class KeyboardNotificationCenter(QObject):
    """Forwards keyboard notifications to weakly held observers.

    Observers implement ``did_receive_keyboard_notification(notification)``.
    """

    _shared: Optional['KeyboardNotificationCenter'] = None

    def __init__(self, keyboard_animation_duration: float = 0.25, parent=None):
        super().__init__(parent)
        self._observers: List[weakref.ref] = []
        self.last_notification: Optional[KeyboardNotification] = None
        self.keyboard_animation_duration = keyboard_animation_duration
        self._input_method = None
        self._connect_input_method()

    @classmethod
    def shared(cls) -> 'KeyboardNotificationCenter':
        """The process-wide instance, created on first use."""
        if cls._shared is None:
            cls._shared = cls()
            logger.debug("Created shared keyboard notification center")
        return cls._shared

    @classmethod
    def reset_shared(cls):
        """Drop the process-wide instance. Only meant for test isolation."""
        if cls._shared is not None:
            cls._shared._disconnect_input_method()
        cls._shared = None

    def _connect_input_method(self):
        app = QGuiApplication.instance()
        if app is None:
            logger.debug("No QGuiApplication, input method notifications unavailable")
            return
        self._input_method = QGuiApplication.inputMethod()
        self._input_method.visibleChanged.connect(self._on_input_method_changed)
        self._input_method.keyboardRectangleChanged.connect(self._on_input_method_changed)

    def _disconnect_input_method(self):
        if self._input_method is None:
            return
        self._input_method.visibleChanged.disconnect(self._on_input_method_changed)
        self._input_method.keyboardRectangleChanged.disconnect(self._on_input_method_changed)
        self._input_method = None

    def _on_input_method_changed(self):
        """Translate QInputMethod state into a notification"""
        input_method = self._input_method
        if input_method is None:
            return

        if not input_method.isVisible():
            self.post_will_hide(QRect(), self.keyboard_animation_duration)
            return

        # keyboardRectangle() is in window coordinates
        frame = input_method.keyboardRectangle().toAlignedRect()
        window = QGuiApplication.focusWindow()
        if window is not None:
            frame.translate(window.mapToGlobal(QPoint(0, 0)))
        self.post_will_show(frame, self.keyboard_animation_duration)

    def add_observer(self, observer):
        """Register an observer. The center never takes ownership of it."""
        self._observers.append(weakref.ref(observer))

    def remove_observer(self, observer):
        """Unregister an observer, pruning any that have been destroyed."""
        self._observers = [
            ref for ref in self._observers
            if ref() is not None and ref() is not observer
        ]

    @property
    def observer_count(self) -> int:
        return sum(1 for ref in self._observers if ref() is not None)

    def notify(self, notification: KeyboardNotification):
        """Store the notification and pass it to every live observer."""
        self.last_notification = notification
        logger.debug("Keyboard notification %s frame=%s", notification.kind.value, notification.frame)

        # Copy, observers may unregister from their callback
        for ref in list(self._observers):
            observer = ref()
            if observer is None:
                continue
            observer.did_receive_keyboard_notification(notification)

    def post_will_show(self, frame: QRect, duration: float = 0.25):
        self.notify(KeyboardNotification(KeyboardNotificationKind.WILL_SHOW, QRect(frame), duration))

    def post_will_hide(self, frame: QRect = None, duration: float = 0.25):
        self.notify(KeyboardNotification(
            KeyboardNotificationKind.WILL_HIDE, QRect(frame) if frame is not None else QRect(), duration))
