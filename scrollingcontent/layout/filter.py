"""
Scroll View Filter

A temporal filter over keyboard frame changes and scroll-to-visible requests.

Changing focus between text fields can make the input panel post several
show/hide notifications in quick succession, for example hide + show + show
within 0.1s when autofill moves focus to the next field. Responding to each
one makes the content jump around. The filter collapses such a burst into a
single update acting on the last keyboard frame only.

Scroll requests go through the same countdown. During a window resize the
focused widget asks to be scrolled into view before the viewport margins have
been updated, which would scroll too far. Deferring it until after the
keyboard update fixes that, and because both kinds share one countdown the
keyboard adjustment is always delivered before the scroll.
"""
import logging
import time
import weakref
from typing import Callable, Optional

from PyQt6.QtCore import QObject, Qt, QTimer

from ..keyboard.events import KeyboardFrameEvent, ScrollRectEvent

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.1


class ScrollViewFilter(QObject):
    """Debounces keyboard frame and scroll rect events.

    The keyboard delegate implements
    ``scroll_view_filter_adjust_for_keyboard_frame_event(filter, event)`` and
    the scroll delegate
    ``scroll_view_filter_adjust_for_scroll_rect_event(filter, event)``.
    Both are held weakly.
    """

    def __init__(self, delay: float = DEFAULT_DELAY, clock: Callable[[], float] = time.monotonic, parent=None):
        super().__init__(parent)
        self.delay = delay
        self._clock = clock

        self._keyboard_delegate = None
        self._scroll_delegate = None

        self._keyboard_frame_event: Optional[KeyboardFrameEvent] = None
        self._scroll_rect_event: Optional[ScrollRectEvent] = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        # Must keep firing while the user drags the scroll area
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._on_timeout)

        self._timer_start: Optional[float] = None
        self._timer_interval: Optional[float] = None

        self._is_suspended = False
        self._restart_on_resume = False
        self._suspended_interval = 0.0

    @property
    def keyboard_delegate(self):
        return self._keyboard_delegate() if self._keyboard_delegate is not None else None

    @keyboard_delegate.setter
    def keyboard_delegate(self, delegate):
        self._keyboard_delegate = weakref.ref(delegate) if delegate is not None else None

    @property
    def scroll_delegate(self):
        return self._scroll_delegate() if self._scroll_delegate is not None else None

    @scroll_delegate.setter
    def scroll_delegate(self, delegate):
        self._scroll_delegate = weakref.ref(delegate) if delegate is not None else None

    @property
    def has_pending_events(self) -> bool:
        return self._keyboard_frame_event is not None or self._scroll_rect_event is not None

    @property
    def is_suspended(self) -> bool:
        return self._is_suspended

    @property
    def is_active(self) -> bool:
        """True while a countdown is running"""
        return self._timer_start is not None

    def submit_keyboard_frame_event(self, event: KeyboardFrameEvent):
        """Replace the pending keyboard event and restart the countdown."""
        self._keyboard_frame_event = event
        self._start_timer(self.delay)

    def submit_scroll_rect_event(self, event: ScrollRectEvent):
        """Replace the pending scroll event and restart the countdown."""
        self._scroll_rect_event = event
        self._start_timer(self.delay)

    def cancel(self):
        """Drop pending events without notifying the delegates."""
        self._invalidate()
        self._keyboard_frame_event = None
        self._scroll_rect_event = None
        self._restart_on_resume = False
        self._suspended_interval = 0.0

    def flush(self):
        """Deliver pending events immediately.

        While suspended nothing is delivered, but the countdown restarts with
        zero length, so pending events are delivered as soon as the filter is
        resumed.
        """
        if self.is_suspended:
            self._suspended_interval = 0.0
            return

        self._invalidate()
        self._call_delegates_if_needed()

    def suspend(self):
        """Pause the countdown, keeping the time remaining on it."""
        if self.is_suspended:
            return

        if self.is_active:
            self._restart_on_resume = True
            self._suspended_interval = self.remaining_time()
        else:
            self._restart_on_resume = False
            self._suspended_interval = 0.0

        self._is_suspended = True
        self._invalidate()
        logger.debug("Filter suspended with %.3fs remaining", self._suspended_interval)

    def resume(self):
        """Restart a countdown paused by suspend()."""
        if not self.is_suspended:
            return

        self._is_suspended = False
        logger.debug("Filter resumed")

        if self._restart_on_resume:
            self._restart_on_resume = False
            interval = self._suspended_interval
            self._suspended_interval = 0.0
            self._start_timer(interval)

    def remaining_time(self) -> float:
        """Seconds left on the countdown, or zero if none is running."""
        if self._timer_start is None or self._timer_interval is None:
            return 0.0
        return max(0.0, self._timer_interval - (self._clock() - self._timer_start))

    def _invalidate(self):
        self._timer.stop()
        self._timer_start = None
        self._timer_interval = None

    def _start_timer(self, interval: float):
        if self.is_suspended:
            self._restart_on_resume = True
            self._suspended_interval = max(self._suspended_interval, interval)
            return

        # The deadline may move later, never earlier
        interval = max(interval, self.remaining_time())
        self._invalidate()

        if interval == 0:
            self._call_delegates_if_needed()
            return

        self._timer_start = self._clock()
        self._timer_interval = interval
        self._timer.start(max(1, round(interval * 1000)))

    def _on_timeout(self):
        self._timer_start = None
        self._timer_interval = None
        self._call_delegates_if_needed()

    def _call_delegates_if_needed(self):
        keyboard_frame_event = self._keyboard_frame_event
        if keyboard_frame_event is not None:
            self._keyboard_frame_event = None
            delegate = self.keyboard_delegate
            if delegate is not None:
                delegate.scroll_view_filter_adjust_for_keyboard_frame_event(self, keyboard_frame_event)

        # The keyboard delegate may have submitted a scroll event, which is
        # handled right here
        scroll_rect_event = self._scroll_rect_event
        if scroll_rect_event is not None:
            self._scroll_rect_event = None
            delegate = self.scroll_delegate
            if delegate is not None:
                delegate.scroll_view_filter_adjust_for_scroll_rect_event(self, scroll_rect_event)

        if not self.has_pending_events:
            self._invalidate()
