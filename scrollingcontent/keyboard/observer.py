"""
Keyboard Observer

Turns keyboard notifications into bottom inset adjustments for a host widget,
filtered through a ScrollViewFilter.
"""
import logging
import weakref

from PyQt6.QtCore import QPoint, QRect

from ..core.errors import KeyboardStateError
from ..layout.filter import ScrollViewFilter
from ..layout.geometry import keyboard_overlap
from .events import NAVIGATION_TRANSITION_THRESHOLD, KeyboardFrameEvent, KeyboardNotification
from .notifications import KeyboardNotificationCenter

logger = logging.getLogger(__name__)


class KeyboardObserver:
    """Observes the keyboard on behalf of a ScrollingContentManager.

    The delegate provides ``host_widget`` and ``scroll_area`` and implements
    ``adjust_view_for_keyboard(bottom_inset)``.
    """

    def __init__(self, scroll_view_filter: ScrollViewFilter, delegate,
                 notification_center: KeyboardNotificationCenter = None,
                 navigation_transition_threshold: float = NAVIGATION_TRANSITION_THRESHOLD):
        self.scroll_view_filter = scroll_view_filter
        self.scroll_view_filter.keyboard_delegate = self
        self._delegate = weakref.ref(delegate)
        self.navigation_transition_threshold = navigation_transition_threshold
        self._last_bottom_inset = 0

        if notification_center is None:
            notification_center = KeyboardNotificationCenter.shared()
        self.notification_center = notification_center
        self.notification_center.add_observer(self)

        # The keyboard may already be up, e.g. when a page is pushed while editing
        last_notification = self.notification_center.last_notification
        if last_notification is not None and not last_notification.is_hide:
            self.did_receive_keyboard_notification(last_notification)

    @property
    def delegate(self):
        return self._delegate()

    @property
    def is_suspended(self) -> bool:
        return self.scroll_view_filter.is_suspended

    def close(self):
        """Stop observing keyboard notifications."""
        self.notification_center.remove_observer(self)
        self.scroll_view_filter.cancel()

    def suspend(self):
        self.scroll_view_filter.suspend()

    def resume(self):
        self.scroll_view_filter.resume()

    def did_receive_keyboard_notification(self, notification: KeyboardNotification):
        frame = QRect() if notification.is_hide else notification.frame
        self.scroll_view_filter.submit_keyboard_frame_event(KeyboardFrameEvent(frame, notification.duration))

    def host_geometry_changed(self):
        """Re-evaluate the keyboard overlap after the host widget moved or resized."""
        notification = self.notification_center.last_notification
        if notification is None:
            return
        self.did_receive_keyboard_notification(notification)

    def inject_keyboard_frame_event(self, event: KeyboardFrameEvent):
        """Apply a keyboard frame immediately, bypassing notifications.

        Real input panel notifications can't be triggered from automated tests.
        """
        self.scroll_view_filter.submit_keyboard_frame_event(event)
        self.scroll_view_filter.flush()

    def scroll_view_filter_adjust_for_keyboard_frame_event(self, scroll_view_filter, event: KeyboardFrameEvent):
        delegate = self.delegate
        if delegate is None:
            return
        host_widget = delegate.host_widget
        if host_widget is None:
            raise KeyboardStateError("The host widget is undefined")

        host_rect = QRect(host_widget.mapToGlobal(QPoint(0, 0)), host_widget.size())
        bottom_inset = keyboard_overlap(host_rect, event.frame)
        navigation = event.is_likely_navigation_transition(self.navigation_transition_threshold)
        logger.debug("Keyboard frame %s overlaps host by %d (navigation transition: %s)",
                     event.frame, bottom_inset, navigation)

        delegate.adjust_view_for_keyboard(bottom_inset)

        previous_inset = self._last_bottom_inset
        self._last_bottom_inset = bottom_inset

        # Qt doesn't scroll the focused field into view on its own
        if bottom_inset != 0 and bottom_inset != previous_inset:
            scroll_area = delegate.scroll_area
            if scroll_area is not None:
                scroll_area.scroll_first_responder_to_visible(animated=not navigation)
