"""
Scroll View Bounce Controller

Forces vertical overshoot on while the keyboard is presented, so dragging
can dismiss it interactively even when the content is too short to scroll.
"""
import weakref
from typing import Optional

from ..core.errors import KeyboardStateError
from ..core.settings import KeyboardDismissMode


class ScrollViewBounceController:
    """Toggles ``always_bounce_vertical`` on the delegate's ``scroll_area``."""

    def __init__(self, delegate):
        self._delegate = weakref.ref(delegate)
        self._bottom_inset = 0
        self.initial_always_bounce_vertical: Optional[bool] = None
        self._is_adjusted = False

    @property
    def bottom_inset(self) -> int:
        return self._bottom_inset

    def set_bottom_inset(self, bottom_inset: int):
        old_value = self._bottom_inset
        self._bottom_inset = bottom_inset

        delegate = self._delegate()
        scroll_area = delegate.scroll_area if delegate is not None else None
        if scroll_area is None:
            return

        if bottom_inset != 0 and old_value == 0:
            if scroll_area.keyboard_dismiss_mode == KeyboardDismissMode.NONE:
                return
            if self.initial_always_bounce_vertical is None:
                self.initial_always_bounce_vertical = scroll_area.always_bounce_vertical
            scroll_area.always_bounce_vertical = True
            self._is_adjusted = True
        elif bottom_inset == 0 and old_value != 0:
            # Inert when the keyboard was presented, even if the dismiss mode
            # has been changed since
            if not self._is_adjusted:
                return
            if self.initial_always_bounce_vertical is None:
                raise KeyboardStateError("Keyboard dismissed without a recorded bounce setting")
            scroll_area.always_bounce_vertical = self.initial_always_bounce_vertical
            self.initial_always_bounce_vertical = None
            self._is_adjusted = False
