"""
Error types raised by scrollingcontent.
"""


class ScrollingContentError(Exception):
    """Base class for scrollingcontent errors"""


class KeyboardStateError(ScrollingContentError):
    """Keyboard presentation state is out of sync with the layout state.

    Raised when a dismissal is observed without a matching presentation, or a
    required host object is missing. These are programming defects; the
    visual state can no longer be trusted once one is raised.
    """
