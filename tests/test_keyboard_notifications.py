from PyQt6.QtCore import QRect

from scrollingcontent.keyboard.events import (
    KeyboardFrameEvent,
    KeyboardNotification,
    KeyboardNotificationKind,
)
from scrollingcontent.keyboard.notifications import KeyboardNotificationCenter


class Observer:
    def __init__(self, name, log, on_notification=None):
        self.name = name
        self.log = log
        self.on_notification = on_notification

    def did_receive_keyboard_notification(self, notification):
        self.log.append((self.name, notification.kind))
        if self.on_notification is not None:
            self.on_notification()


def show_notification():
    return KeyboardNotification(KeyboardNotificationKind.WILL_SHOW, QRect(0, 662, 375, 258), 0.25)


def test_notify_reaches_observers_in_registration_order(qtbot):
    center = KeyboardNotificationCenter()
    log = []
    first, second = Observer("first", log), Observer("second", log)
    center.add_observer(first)
    center.add_observer(second)

    center.notify(show_notification())

    assert log == [("first", KeyboardNotificationKind.WILL_SHOW), ("second", KeyboardNotificationKind.WILL_SHOW)]


def test_last_notification_is_retained(qtbot):
    center = KeyboardNotificationCenter()
    assert center.last_notification is None

    center.post_will_show(QRect(0, 662, 375, 258), 0.25)
    center.post_will_hide(QRect(0, 920, 375, 258), 0.25)

    assert center.last_notification.kind is KeyboardNotificationKind.WILL_HIDE
    assert center.last_notification.frame == QRect(0, 920, 375, 258)


def test_observers_are_not_retained(qtbot):
    center = KeyboardNotificationCenter()
    log = []
    observer = Observer("gone", log)
    center.add_observer(observer)
    del observer

    center.notify(show_notification())
    assert log == []
    assert center.observer_count == 0


def test_observer_destroyed_mid_iteration_is_skipped(qtbot):
    center = KeyboardNotificationCenter()
    log = []
    holder = {}
    killer = Observer("killer", log, on_notification=lambda: holder.clear())
    holder["victim"] = Observer("victim", log)
    center.add_observer(killer)
    center.add_observer(holder["victim"])

    center.notify(show_notification())
    assert log == [("killer", KeyboardNotificationKind.WILL_SHOW)]


def test_remove_observer_prunes_dead_entries(qtbot):
    center = KeyboardNotificationCenter()
    log = []
    kept, removed, dead = Observer("kept", log), Observer("removed", log), Observer("dead", log)
    for observer in (kept, removed, dead):
        center.add_observer(observer)
    del dead

    center.remove_observer(removed)
    assert len(center._observers) == 1

    center.notify(show_notification())
    assert log == [("kept", KeyboardNotificationKind.WILL_SHOW)]


def test_shared_center_is_created_once(qtbot):
    assert KeyboardNotificationCenter.shared() is KeyboardNotificationCenter.shared()


def test_reset_shared_creates_a_fresh_center(qtbot):
    center = KeyboardNotificationCenter.shared()
    center.post_will_show(QRect(0, 662, 375, 258))
    KeyboardNotificationCenter.reset_shared()

    assert KeyboardNotificationCenter.shared() is not center
    assert KeyboardNotificationCenter.shared().last_notification is None


def test_navigation_transition_heuristic():
    assert not KeyboardFrameEvent(QRect(), 0.25).is_likely_navigation_transition()
    assert KeyboardFrameEvent(QRect(), 0.35).is_likely_navigation_transition()
    assert not KeyboardFrameEvent(QRect(), 0.35).is_likely_navigation_transition(threshold=0.4)
