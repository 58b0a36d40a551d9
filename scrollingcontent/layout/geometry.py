"""
Geometry helpers for keyboard overlap and scroll offsets.
"""
from PyQt6.QtCore import QMargins, QPoint, QRect, QSize


def keyboard_overlap(host_rect: QRect, keyboard_frame: QRect) -> int:
    """Height of the part of the keyboard covering the bottom of host_rect.

    Both rectangles must be in the same (global) coordinate space. An empty
    keyboard frame, or one that does not intersect the host, yields 0.
    """
    if keyboard_frame.isEmpty() or host_rect.isEmpty():
        return 0
    if not host_rect.intersects(keyboard_frame):
        return 0
    host_bottom = host_rect.y() + host_rect.height()
    return max(0, host_bottom - keyboard_frame.y())


def expand_vertically(rect: QRect, margin: int) -> QRect:
    """Grow a rectangle by margin above and below."""
    return rect.adjusted(0, -margin, 0, margin)


def constrain_content_offset(offset: QPoint, content_size: QSize, visible_size: QSize,
                             inset: QMargins) -> QPoint:
    """Clamp a content offset to the legal resting range of a scroll area.

    Keeps the view from being scrolled past its right/bottom extent (which
    would otherwise leave content permanently unreachable after a size
    change), then past its left/top extent.
    """
    x = min(offset.x(), content_size.width() - visible_size.width() - inset.left())
    y = min(offset.y(), content_size.height() - visible_size.height() - inset.top())
    x = max(x, -inset.left())
    y = max(y, -inset.top())
    return QPoint(x, y)


def offset_to_make_visible(rect: QRect, offset: QPoint, visible_size: QSize) -> QPoint:
    """Smallest change to offset that brings rect into the visible area.

    If rect is larger than the visible area along an axis, its top/left edge
    is aligned.
    """
    x, y = offset.x(), offset.y()

    if rect.width() > visible_size.width() or rect.x() < x:
        x = rect.x()
    elif rect.x() + rect.width() > x + visible_size.width():
        x = rect.x() + rect.width() - visible_size.width()

    if rect.height() > visible_size.height() or rect.y() < y:
        y = rect.y()
    elif rect.y() + rect.height() > y + visible_size.height():
        y = rect.y() + rect.height() - visible_size.height()

    return QPoint(x, y)
