import pytest
from PyQt6.QtWidgets import QWidget

from scrollingcontent.core.errors import KeyboardStateError
from scrollingcontent.core.settings import KeyboardDismissMode
from scrollingcontent.layout.bounce import ScrollViewBounceController
from scrollingcontent.layout.margins import AdditionalMarginsController
from scrollingcontent.ui.scroll_area import ScrollingContentScrollArea


class MarginsDelegate:
    def __init__(self, host_widget):
        self.host_widget = host_widget
        self.calls = []

    def margins_controller_will_adjust_for_presented_keyboard(self, controller):
        self.calls.append(("will_adjust", self.host_widget.contentsMargins().bottom()))

    def margins_controller_did_restore_for_dismissed_keyboard(self, controller):
        self.calls.append(("did_restore", self.host_widget.contentsMargins().bottom()))


class BounceDelegate:
    def __init__(self, scroll_area):
        self.scroll_area = scroll_area


@pytest.fixture
def host(qtbot):
    widget = QWidget()
    qtbot.addWidget(widget)
    return widget


def bottom_margin(widget):
    return widget.contentsMargins().bottom()


def test_show_then_hide_restores_margin(host):
    delegate = MarginsDelegate(host)
    controller = AdditionalMarginsController(delegate)

    controller.set_bottom_inset(258)
    assert bottom_margin(host) == 258
    assert controller.initial_bottom_margin == 0

    controller.set_bottom_inset(0)
    assert bottom_margin(host) == 0
    assert controller.initial_bottom_margin is None


def test_margin_never_shrinks_below_initial_value(host):
    host.setContentsMargins(0, 64, 0, 49)
    delegate = MarginsDelegate(host)
    controller = AdditionalMarginsController(delegate)

    controller.set_bottom_inset(30)
    assert bottom_margin(host) == 49

    controller.set_bottom_inset(258)
    assert bottom_margin(host) == 258
    # Other margins are left alone
    assert host.contentsMargins().top() == 64


def test_round_trip_over_two_presentations(host):
    host.setContentsMargins(0, 0, 0, 49)
    delegate = MarginsDelegate(host)
    controller = AdditionalMarginsController(delegate)

    controller.set_bottom_inset(258)
    controller.set_bottom_inset(0)
    controller.set_bottom_inset(300)
    controller.set_bottom_inset(0)

    assert bottom_margin(host) == 49


def test_resize_uses_recorded_initial_margin(host):
    host.setContentsMargins(0, 0, 0, 49)
    delegate = MarginsDelegate(host)
    controller = AdditionalMarginsController(delegate)

    controller.set_bottom_inset(258)
    host.setContentsMargins(0, 0, 0, 500)
    controller.set_bottom_inset(216)

    assert bottom_margin(host) == 216
    assert controller.initial_bottom_margin == 49
    assert [name for name, _ in delegate.calls] == ["will_adjust"]


def test_hooks_run_around_margin_changes(host):
    delegate = MarginsDelegate(host)
    controller = AdditionalMarginsController(delegate)

    controller.set_bottom_inset(258)
    controller.set_bottom_inset(0)

    # Notified before applying on show and after applying on hide
    assert delegate.calls == [("will_adjust", 0), ("did_restore", 0)]


def test_unchanged_inset_does_not_write_margins(host):
    delegate = MarginsDelegate(host)
    controller = AdditionalMarginsController(delegate)
    controller.set_bottom_inset(258)

    host.setContentsMargins(0, 0, 0, 10)
    controller.set_bottom_inset(258)
    assert bottom_margin(host) == 10


def test_hide_without_show_is_a_state_error(host):
    delegate = MarginsDelegate(host)
    controller = AdditionalMarginsController(delegate)
    controller.set_bottom_inset(258)
    controller.initial_bottom_margin = None

    with pytest.raises(KeyboardStateError):
        controller.set_bottom_inset(0)


def test_missing_host_widget_is_ignored():
    delegate = MarginsDelegate(None)
    controller = AdditionalMarginsController(delegate)

    controller.set_bottom_inset(258)
    controller.set_bottom_inset(0)
    assert delegate.calls == []


@pytest.fixture
def scroll_area(qtbot):
    area = ScrollingContentScrollArea()
    qtbot.addWidget(area)
    return area


def test_bounce_enabled_while_keyboard_is_presented(scroll_area):
    scroll_area.keyboard_dismiss_mode = KeyboardDismissMode.INTERACTIVE
    delegate = BounceDelegate(scroll_area)
    controller = ScrollViewBounceController(delegate)

    controller.set_bottom_inset(258)
    assert scroll_area.always_bounce_vertical is True

    controller.set_bottom_inset(0)
    assert scroll_area.always_bounce_vertical is False
    assert controller.initial_always_bounce_vertical is None


def test_bounce_restores_previous_true_value(scroll_area):
    scroll_area.keyboard_dismiss_mode = KeyboardDismissMode.INTERACTIVE
    scroll_area.always_bounce_vertical = True
    delegate = BounceDelegate(scroll_area)
    controller = ScrollViewBounceController(delegate)

    controller.set_bottom_inset(258)
    controller.set_bottom_inset(0)
    assert scroll_area.always_bounce_vertical is True


def test_second_show_does_not_overwrite_recorded_value(scroll_area):
    scroll_area.keyboard_dismiss_mode = KeyboardDismissMode.INTERACTIVE
    delegate = BounceDelegate(scroll_area)
    controller = ScrollViewBounceController(delegate)

    controller.set_bottom_inset(258)
    controller.set_bottom_inset(300)
    assert controller.initial_always_bounce_vertical is False

    controller.set_bottom_inset(0)
    assert scroll_area.always_bounce_vertical is False


def test_bounce_controller_is_inert_without_dismiss_mode(scroll_area):
    delegate = BounceDelegate(scroll_area)
    controller = ScrollViewBounceController(delegate)

    controller.set_bottom_inset(258)
    assert scroll_area.always_bounce_vertical is False
    assert controller.initial_always_bounce_vertical is None

    controller.set_bottom_inset(0)
    assert scroll_area.always_bounce_vertical is False


def test_bounce_hide_without_show_is_a_state_error(scroll_area):
    scroll_area.keyboard_dismiss_mode = KeyboardDismissMode.INTERACTIVE
    delegate = BounceDelegate(scroll_area)
    controller = ScrollViewBounceController(delegate)
    controller.set_bottom_inset(258)
    controller.initial_always_bounce_vertical = None

    with pytest.raises(KeyboardStateError):
        controller.set_bottom_inset(0)


def test_dismiss_mode_enabled_while_keyboard_is_presented(scroll_area):
    delegate = BounceDelegate(scroll_area)
    controller = ScrollViewBounceController(delegate)

    controller.set_bottom_inset(258)
    scroll_area.keyboard_dismiss_mode = KeyboardDismissMode.INTERACTIVE
    controller.set_bottom_inset(0)

    assert scroll_area.always_bounce_vertical is False
    assert controller.initial_always_bounce_vertical is None

    # The next presentation is handled normally
    controller.set_bottom_inset(258)
    assert scroll_area.always_bounce_vertical is True


def test_dismiss_mode_disabled_while_keyboard_is_presented(scroll_area):
    scroll_area.keyboard_dismiss_mode = KeyboardDismissMode.ON_DRAG
    delegate = BounceDelegate(scroll_area)
    controller = ScrollViewBounceController(delegate)

    controller.set_bottom_inset(258)
    scroll_area.keyboard_dismiss_mode = KeyboardDismissMode.NONE
    controller.set_bottom_inset(0)

    assert scroll_area.always_bounce_vertical is False
    assert controller.initial_always_bounce_vertical is None
