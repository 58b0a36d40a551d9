"""
Scrolling Content Manager

Hosts a content widget inside a ScrollingContentScrollArea and keeps it usable
while an on-screen keyboard is presented: keyboard frame changes are filtered,
the host widget's bottom margin reserves room for the keyboard, and overshoot
is enabled so dragging can dismiss the keyboard.
"""
import logging
from typing import Optional

from PyQt6.QtCore import QEvent, QMargins, QObject, QPoint, QTimer
from PyQt6.QtWidgets import QVBoxLayout, QWidget

from ..core.errors import KeyboardStateError
from ..core.logging_config import configure_logging
from ..core.settings import KeyboardLayoutSettings
from ..keyboard.notifications import KeyboardNotificationCenter
from ..keyboard.observer import KeyboardObserver
from ..layout.bounce import ScrollViewBounceController
from ..layout.filter import ScrollViewFilter
from ..layout.geometry import constrain_content_offset
from ..layout.margins import AdditionalMarginsController
from .scroll_area import ScrollingContentScrollArea

logger = logging.getLogger(__name__)


class ScrollingContentManager(QObject):
    """Manages a single scrolling content widget for a host widget."""

    def __init__(self, host_widget: QWidget, settings: Optional[KeyboardLayoutSettings] = None,
                 notification_center: Optional[KeyboardNotificationCenter] = None):
        super().__init__(host_widget)
        if host_widget is None:
            raise KeyboardStateError("A host widget is required")

        self.host_widget = host_widget
        self.settings = settings if settings is not None else KeyboardLayoutSettings()
        configure_logging(self.settings)

        self.should_adjust_margins_for_keyboard = self.settings.should_adjust_margins_for_keyboard
        self.should_resize_content_for_keyboard = self.settings.should_resize_content_for_keyboard

        self.scroll_view_filter = ScrollViewFilter(self.settings.debounce_delay, parent=self)
        self.scroll_area = ScrollingContentScrollArea(self.scroll_view_filter)
        self.scroll_area.visibility_scroll_margin = self.settings.visibility_scroll_margin
        self.scroll_area.scroll_animation_duration_ms = self.settings.scroll_animation_duration_ms
        self.scroll_area.keyboard_dismiss_mode = self.settings.keyboard_dismiss_mode

        self._content_widget: Optional[QWidget] = None
        self._bottom_inset = 0
        # Content minimum height before it was pinned for the keyboard
        self._pinned_minimum_height: Optional[int] = None

        self._transition_inset: Optional[QMargins] = None
        self._transition_offset: Optional[QPoint] = None
        self._transition_timer = QTimer(self)
        self._transition_timer.setSingleShot(True)
        self._transition_timer.timeout.connect(self.complete_size_transition)

        self.bounce_controller = ScrollViewBounceController(self)
        self.margins_controller = AdditionalMarginsController(self)
        self.keyboard_observer = KeyboardObserver(
            self.scroll_view_filter, self,
            notification_center=notification_center,
            navigation_transition_threshold=self.settings.navigation_transition_threshold,
        )

        host_widget.installEventFilter(self)

    # -- Content ------------------------------------------------------------

    @property
    def content_widget(self) -> Optional[QWidget]:
        return self._content_widget

    @content_widget.setter
    def content_widget(self, content_widget: QWidget):
        if content_widget is self._content_widget:
            return
        if content_widget is None:
            raise KeyboardStateError("The content widget must not be None")
        if content_widget is self.host_widget:
            raise KeyboardStateError("The content widget must not be the host widget")

        if self._content_widget is None:
            self._add_scroll_area()
        else:
            # QScrollArea deletes the widget it replaces
            old = self.scroll_area.takeWidget()
            if old is not None:
                old.setParent(None)

        self._content_widget = content_widget
        self._pinned_minimum_height = None
        self.scroll_area.setWidget(content_widget)
        logger.debug("Content widget set to %s", type(content_widget).__name__)

    def _add_scroll_area(self):
        """Parent the scroll area into the host widget's layout."""
        layout = self.host_widget.layout()
        if layout is None:
            layout = QVBoxLayout(self.host_widget)
            layout.setContentsMargins(0, 0, 0, 0)
            layout.setSpacing(0)
        layout.addWidget(self.scroll_area)

    # -- Keyboard -----------------------------------------------------------

    @property
    def bottom_inset(self) -> int:
        return self._bottom_inset

    def adjust_view_for_keyboard(self, bottom_inset: int):
        """Compensate for the part of the keyboard overlapping the host widget."""
        if bottom_inset == self._bottom_inset:
            return
        self._bottom_inset = bottom_inset
        logger.info("Adjusting for keyboard, bottom inset %d", bottom_inset)

        self.bounce_controller.set_bottom_inset(bottom_inset)

        if self.should_adjust_margins_for_keyboard:
            self.margins_controller.set_bottom_inset(bottom_inset)
            # Scroll requests delivered next must see the new geometry
            layout = self.host_widget.layout()
            if layout is not None:
                layout.activate()

    def margins_controller_will_adjust_for_presented_keyboard(self, controller):
        """Keep the content from shrinking while the keyboard is up."""
        if self.should_resize_content_for_keyboard or self._content_widget is None:
            return
        self._pinned_minimum_height = self._content_widget.minimumHeight()
        self._content_widget.setMinimumHeight(max(self._pinned_minimum_height, self._content_widget.height()))

    def margins_controller_did_restore_for_dismissed_keyboard(self, controller):
        if self._pinned_minimum_height is None or self._content_widget is None:
            return
        self._content_widget.setMinimumHeight(self._pinned_minimum_height)
        self._pinned_minimum_height = None

    # -- Size transitions ---------------------------------------------------

    def eventFilter(self, obj, event):
        if obj is self.host_widget:
            event_type = event.type()
            if event_type == QEvent.Type.Resize:
                if not self.keyboard_observer.is_suspended:
                    self.begin_size_transition()
                # Complete after the layout pass that follows the resize
                self._transition_timer.start(0)
            elif event_type == QEvent.Type.Move:
                self.keyboard_observer.host_geometry_changed()
        return super().eventFilter(obj, event)

    def begin_size_transition(self):
        """Start a window size change.

        Keyboard notifications posted during the transition are held back so
        only the keyboard's final frame is acted upon.
        """
        self._transition_inset = self.scroll_area.adjusted_content_inset
        self._transition_offset = self.scroll_area.content_offset
        self.keyboard_observer.suspend()
        logger.debug("Size transition started at offset %s", self._transition_offset)

    def complete_size_transition(self):
        """Pin the top-left corner of the content and resume keyboard handling."""
        if self._transition_offset is not None:
            initial_inset = self._transition_inset
            inset = self.scroll_area.adjusted_content_inset
            offset = QPoint(
                self._transition_offset.x() + initial_inset.left() - inset.left(),
                self._transition_offset.y() + initial_inset.top() - inset.top(),
            )
            self.scroll_area.content_offset = self.constrain_content_offset(offset)
            self._transition_offset = None
            self._transition_inset = None

        if self.keyboard_observer.is_suspended:
            self.keyboard_observer.resume()
        self.keyboard_observer.host_geometry_changed()

    def constrain_content_offset(self, offset: QPoint) -> QPoint:
        return constrain_content_offset(
            offset,
            self.scroll_area.content_size,
            self.scroll_area.visible_content_size,
            self.scroll_area.adjusted_content_inset,
        )

    def close(self):
        """Stop observing the keyboard and detach from the host widget."""
        self._transition_timer.stop()
        self.host_widget.removeEventFilter(self)
        self.keyboard_observer.close()
