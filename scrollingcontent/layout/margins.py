"""
Additional Margins Controller

Adjusts the bottom contents margin of the host widget to make room for the
part of the keyboard that covers it, and restores the original margin when
the keyboard is dismissed.
"""
import logging
import weakref
from typing import Optional

from ..core.errors import KeyboardStateError

logger = logging.getLogger(__name__)


class AdditionalMarginsController:
    """Tracks the keyboard's bottom inset and reserves it as a bottom margin.

    The delegate provides ``host_widget`` and is told about presentation and
    dismissal through
    ``margins_controller_will_adjust_for_presented_keyboard(controller)`` and
    ``margins_controller_did_restore_for_dismissed_keyboard(controller)``.
    """

    def __init__(self, delegate):
        self._delegate = weakref.ref(delegate)
        self._bottom_inset = 0
        # Bottom margin before the keyboard was presented
        self.initial_bottom_margin: Optional[int] = None

    @property
    def delegate(self):
        return self._delegate()

    @property
    def bottom_inset(self) -> int:
        return self._bottom_inset

    def set_bottom_inset(self, bottom_inset: int):
        """Apply a new keyboard overlap to the host widget's bottom margin."""
        old_value = self._bottom_inset
        self._bottom_inset = bottom_inset

        delegate = self.delegate
        host_widget = delegate.host_widget if delegate is not None else None
        if host_widget is None:
            return

        if bottom_inset != 0 and old_value == 0:
            # Presented
            self.initial_bottom_margin = host_widget.contentsMargins().bottom()
            margin = max(bottom_inset, self.initial_bottom_margin)
            logger.debug("Keyboard presented, bottom margin %d -> %d", self.initial_bottom_margin, margin)
            delegate.margins_controller_will_adjust_for_presented_keyboard(self)
            self._set_bottom_margin(margin)
        elif bottom_inset == 0 and old_value != 0:
            # Dismissed
            if self.initial_bottom_margin is None:
                raise KeyboardStateError("Keyboard dismissed without a recorded bottom margin")
            margin = self.initial_bottom_margin
            self.initial_bottom_margin = None
            logger.debug("Keyboard dismissed, restoring bottom margin %d", margin)
            self._set_bottom_margin(margin)
            delegate.margins_controller_did_restore_for_dismissed_keyboard(self)
        elif bottom_inset != old_value:
            # Resized
            if self.initial_bottom_margin is None:
                raise KeyboardStateError("Keyboard resized without a recorded bottom margin")
            self._set_bottom_margin(max(bottom_inset, self.initial_bottom_margin))

    def _set_bottom_margin(self, bottom_margin: int):
        delegate = self.delegate
        host_widget = delegate.host_widget if delegate is not None else None
        if host_widget is None:
            return
        margins = host_widget.contentsMargins()
        margins.setBottom(bottom_margin)
        host_widget.setContentsMargins(margins)
