"""
Scrolling Content Scroll Area

Scroll area whose scroll-to-visible requests are deferred through a
ScrollViewFilter, so they run only after the layout has been adjusted for the
keyboard.
"""
import logging
import weakref
from typing import Optional

from PyQt6 import sip
from PyQt6.QtCore import QEasingCurve, QEvent, QMargins, QPoint, QPropertyAnimation, QRect, QSize, Qt
from PyQt6.QtWidgets import QApplication, QScrollArea, QScroller, QScrollerProperties, QWidget

from ..core.settings import KeyboardDismissMode
from ..keyboard.events import ContainerRect, DescendantRect, ScrollRectEvent
from ..layout.filter import ScrollViewFilter
from ..layout.geometry import expand_vertically, offset_to_make_visible

logger = logging.getLogger(__name__)


class ScrollingContentScrollArea(QScrollArea):
    """Scroll area with deferred scroll-to-visible and drag-to-dismiss support"""

    def __init__(self, scroll_view_filter: Optional[ScrollViewFilter] = None, parent=None):
        super().__init__(parent)
        self.setWidgetResizable(True)
        self.setFrameShape(QScrollArea.Shape.NoFrame)

        # Margin applied when scrolling the focused widget into view, unless
        # overridden per call
        self.visibility_scroll_margin = 0
        self.scroll_animation_duration_ms = 250
        self.keyboard_dismiss_mode = KeyboardDismissMode.NONE
        self._always_bounce_vertical = False

        self._scroll_view_filter = None
        if scroll_view_filter is not None:
            self.set_scroll_view_filter(scroll_view_filter)

        self._animation = QPropertyAnimation(self.verticalScrollBar(), b"value", self)
        self._animation.setEasingCurve(QEasingCurve.Type.OutCubic)

        self._drag_start_pos = None
        self._drag_threshold = 10  # Minimum pixels to move before a drag counts
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)

    def set_scroll_view_filter(self, scroll_view_filter: ScrollViewFilter):
        self._scroll_view_filter = weakref.ref(scroll_view_filter)
        scroll_view_filter.scroll_delegate = self

    @property
    def scroll_view_filter(self) -> Optional[ScrollViewFilter]:
        return self._scroll_view_filter() if self._scroll_view_filter is not None else None

    # -- Geometry -----------------------------------------------------------

    @property
    def content_offset(self) -> QPoint:
        """Content coordinate at the scroll area's top-left corner.

        Measured from the area's edge rather than the viewport's, so at rest
        the offset is minus the viewport margins.
        """
        inset = self.adjusted_content_inset
        return QPoint(self.horizontalScrollBar().value() - inset.left(),
                      self.verticalScrollBar().value() - inset.top())

    @content_offset.setter
    def content_offset(self, offset: QPoint):
        inset = self.adjusted_content_inset
        self.horizontalScrollBar().setValue(offset.x() + inset.left())
        self.verticalScrollBar().setValue(offset.y() + inset.top())

    @property
    def content_size(self) -> QSize:
        content = self.widget()
        return content.size() if content is not None else QSize(0, 0)

    @property
    def adjusted_content_inset(self) -> QMargins:
        return self.viewportMargins()

    @property
    def visible_content_size(self) -> QSize:
        return self.viewport().size()

    # -- Bounce -------------------------------------------------------------

    @property
    def always_bounce_vertical(self) -> bool:
        return self._always_bounce_vertical

    @always_bounce_vertical.setter
    def always_bounce_vertical(self, value: bool):
        self._always_bounce_vertical = bool(value)
        scroller = QScroller.scroller(self.viewport())
        properties = scroller.scrollerProperties()
        policy = (QScrollerProperties.OvershootPolicy.OvershootAlwaysOn if value
                  else QScrollerProperties.OvershootPolicy.OvershootWhenScrollable)
        properties.setScrollMetric(QScrollerProperties.ScrollMetric.VerticalOvershootPolicy, policy)
        scroller.setScrollerProperties(properties)
        logger.debug("Always bounce vertical: %s", value)

    # -- Scrolling ----------------------------------------------------------

    def scroll_rect_to_visible(self, rect: QRect, animated: bool = False, margin: Optional[int] = None):
        """Scroll so that rect, in content coordinates, becomes visible.

        The scroll is deferred through the filter. Layout may change in the
        meantime, so the rect is tied to the deepest descendant containing it
        and re-resolved against that widget when the scroll is performed.
        """
        if margin is None:
            margin = self.visibility_scroll_margin

        content = self.widget()
        descendant = self._descendant_containing(content, rect) if content is not None else None
        if descendant is not None:
            bounds_rect = QRect(descendant.mapFrom(content, rect.topLeft()), rect.size())
            # Matching the whole widget means "all of it", even if it resizes
            target_rect = None if bounds_rect == descendant.rect() else bounds_rect
            target = DescendantRect(target_rect, descendant)
        else:
            target = ContainerRect(QRect(rect))

        self._submit(ScrollRectEvent(target, animated, margin))

    def scroll_widget_to_visible(self, widget: QWidget, animated: bool = False, margin: Optional[int] = None):
        """Scroll so that a descendant widget becomes visible."""
        if margin is None:
            margin = self.visibility_scroll_margin
        self._submit(ScrollRectEvent(DescendantRect(widget.rect(), widget), animated, margin))

    def scroll_first_responder_to_visible(self, animated: bool = False, margin: Optional[int] = None):
        """Scroll the focused widget into view. No-op without one in the content."""
        widget = self.first_responder()
        if widget is None:
            return
        self.scroll_widget_to_visible(widget, animated, margin)

    def first_responder(self) -> Optional[QWidget]:
        """The focused widget, if it is inside the content widget."""
        content = self.widget()
        focused = QApplication.focusWidget()
        if content is None or focused is None:
            return None
        if focused is content or content.isAncestorOf(focused):
            return focused
        return None

    def focusNextPrevChild(self, next):
        """Move focus like QWidget does, deferring the scroll through the filter.

        QScrollArea would call ensureWidgetVisible() right away, before the
        margins have been adjusted for the keyboard.
        """
        if not QWidget.focusNextPrevChild(self, next):
            return False
        focused = self.focusWidget()
        content = self.widget()
        if focused is not None and content is not None and (focused is content or content.isAncestorOf(focused)):
            self.scroll_widget_to_visible(focused)
        return True

    def _submit(self, event: ScrollRectEvent):
        scroll_view_filter = self.scroll_view_filter
        if scroll_view_filter is None:
            # Nothing to defer through
            self.scroll_view_filter_adjust_for_scroll_rect_event(None, event)
            return
        scroll_view_filter.submit_scroll_rect_event(event)

    def _descendant_containing(self, parent: QWidget, rect: QRect) -> Optional[QWidget]:
        """Deepest descendant of parent whose geometry contains rect.

        rect is in parent's coordinate space. Depth first, so the deepest
        match is found before its ancestors.
        """
        for child in parent.findChildren(QWidget, "", Qt.FindChildOption.FindDirectChildrenOnly):
            if child.isWindow():
                continue
            child_rect = rect.translated(-child.pos())
            found = self._descendant_containing(child, child_rect)
            if found is not None:
                return found
            if child.geometry().contains(rect):
                return child
        return None

    def scroll_view_filter_adjust_for_scroll_rect_event(self, scroll_view_filter, event: ScrollRectEvent):
        content = self.widget()
        target = event.target
        if isinstance(target, DescendantRect):
            descendant = target.descendant
            if sip.isdeleted(descendant):
                if target.rect is None:
                    logger.warning("Scroll target was destroyed before it could be scrolled to")
                    return
                logger.warning("Scroll target was destroyed, treating rect as content-relative")
                rect = target.rect
            else:
                rect = target.rect if target.rect is not None else descendant.rect()
                if content is not None and (descendant is content or content.isAncestorOf(descendant)):
                    rect = QRect(descendant.mapTo(content, rect.topLeft()), rect.size())
                else:
                    logger.warning("Scroll target %s is no longer in the content, treating rect as content-relative",
                                   type(descendant).__name__)
        else:
            rect = target.rect

        rect = expand_vertically(rect, event.margin)
        self._scroll_content_rect_to_visible(rect, event.animated)

    def _scroll_content_rect_to_visible(self, rect: QRect, animated: bool):
        current = QPoint(self.horizontalScrollBar().value(), self.verticalScrollBar().value())
        target = offset_to_make_visible(rect, current, self.visible_content_size)
        if target == current:
            return

        self.horizontalScrollBar().setValue(target.x())
        v_scrollbar = self.verticalScrollBar()
        target_y = max(v_scrollbar.minimum(), min(target.y(), v_scrollbar.maximum()))
        logger.debug("Scrolling %s to %d", rect, target_y)

        self._animation.stop()
        if animated and self.scroll_animation_duration_ms > 0:
            self._animation.setDuration(self.scroll_animation_duration_ms)
            self._animation.setStartValue(v_scrollbar.value())
            self._animation.setEndValue(target_y)
            self._animation.start()
        else:
            v_scrollbar.setValue(target_y)

    # -- Drag to dismiss ----------------------------------------------------

    def event(self, event):
        """Dismiss the keyboard when the user drags the content"""
        event_type = event.type()
        if event_type == QEvent.Type.TouchBegin:
            points = event.points()
            if points:
                self._drag_start_pos = points[0].position().toPoint()
        elif event_type == QEvent.Type.TouchUpdate:
            points = event.points()
            if points:
                self._check_drag(points[0].position().toPoint())
        elif event_type == QEvent.Type.TouchEnd:
            self._drag_start_pos = None
        return super().event(event)

    def viewportEvent(self, event):
        event_type = event.type()
        if event_type == QEvent.Type.MouseButtonPress and event.button() == Qt.MouseButton.LeftButton:
            self._drag_start_pos = event.position().toPoint()
        elif event_type == QEvent.Type.MouseMove and event.buttons() & Qt.MouseButton.LeftButton:
            self._check_drag(event.position().toPoint())
        elif event_type == QEvent.Type.MouseButtonRelease:
            self._drag_start_pos = None
        return super().viewportEvent(event)

    def _check_drag(self, pos: QPoint):
        if self._drag_start_pos is None or self.keyboard_dismiss_mode == KeyboardDismissMode.NONE:
            return
        if (pos - self._drag_start_pos).manhattanLength() <= self._drag_threshold:
            return
        self._drag_start_pos = None
        responder = self.first_responder()
        if responder is not None:
            logger.debug("Drag dismissing keyboard for %s", type(responder).__name__)
            responder.clearFocus()
