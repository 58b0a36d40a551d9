"""
Keyboard Panel Manager

Shows an in-app virtual keyboard panel when a text widget gains focus and
publishes its frame through the KeyboardNotificationCenter, so scrolling
content reacts to it the same way it reacts to the system input panel.
"""
import logging
from typing import Optional

from PyQt6.QtCore import QEvent, QObject, QPoint, QRect, QTimer
from PyQt6.QtWidgets import QAbstractSpinBox, QApplication, QComboBox, QLineEdit, QPlainTextEdit, QTextEdit, QWidget

from ..keyboard.notifications import KeyboardNotificationCenter

logger = logging.getLogger(__name__)

TEXT_INPUT_TYPES = (QLineEdit, QTextEdit, QPlainTextEdit, QAbstractSpinBox, QComboBox)


def is_text_input(widget) -> bool:
    if isinstance(widget, QComboBox):
        return widget.isEditable()
    return isinstance(widget, TEXT_INPUT_TYPES)


class KeyboardEventFilter(QObject):
    """Event filter to detect focus changes on text widgets."""

    def __init__(self, panel_manager, parent=None):
        super().__init__(parent)
        self.panel_manager = panel_manager

    def eventFilter(self, obj, event):
        if event.type() == QEvent.Type.FocusIn:
            logger.debug("FocusIn on %s", type(obj).__name__)
            self.panel_manager.show_panel_for_widget(obj)
        elif event.type() == QEvent.Type.FocusOut:
            # Focus may be moving to another text field
            self.panel_manager.schedule_focus_check()
        return super().eventFilter(obj, event)


class KeyboardPanelManager(QObject):
    """Connects an in-app keyboard panel widget to text inputs."""

    def __init__(self, panel: QWidget, notification_center: Optional[KeyboardNotificationCenter] = None,
                 focus_check_delay_ms: int = 200, animation_duration: float = 0.25, parent=None):
        super().__init__(parent)
        self.panel = panel
        self.notification_center = notification_center or KeyboardNotificationCenter.shared()
        self.animation_duration = animation_duration
        self.current_widget = None
        self.event_filter = KeyboardEventFilter(self, self)

        self.hide_timer = QTimer(self)
        self.hide_timer.setSingleShot(True)
        self.hide_timer.setInterval(focus_check_delay_ms)
        self.hide_timer.timeout.connect(self.check_focus_and_hide)

    def setup_widget(self, widget):
        """Install the focus filter on a text widget."""
        if not is_text_input(widget):
            logger.debug("Widget type %s not supported", type(widget).__name__)
            return
        widget.installEventFilter(self.event_filter)

    def setup_children(self, root: QWidget):
        """Install the focus filter on every text widget below root."""
        for child in root.findChildren(QWidget):
            if is_text_input(child):
                self.setup_widget(child)

    def panel_frame(self) -> QRect:
        """The panel's frame in global coordinates."""
        return QRect(self.panel.mapToGlobal(QPoint(0, 0)), self.panel.size())

    def show_panel_for_widget(self, widget):
        self.hide_timer.stop()
        if self.current_widget is widget and self.panel.isVisible():
            return

        self.current_widget = widget
        was_visible = self.panel.isVisible()
        self.panel.show()
        self.panel.raise_()
        logger.info("Keyboard panel shown for %s", type(widget).__name__)

        if not was_visible:
            self.notification_center.post_will_show(self.panel_frame(), self.animation_duration)

    def hide_panel(self):
        self.hide_timer.stop()
        self.current_widget = None
        if not self.panel.isVisible():
            return
        frame = self.panel_frame()
        self.panel.hide()
        logger.info("Keyboard panel hidden")
        self.notification_center.post_will_hide(frame, self.animation_duration)

    def schedule_focus_check(self):
        self.hide_timer.start()

    def check_focus_and_hide(self):
        """Hide the panel unless focus is still on a text widget."""
        if is_text_input(QApplication.focusWidget()):
            return
        self.hide_panel()
