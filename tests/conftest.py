import os

import pytest

# Must be set before pytest-qt creates the QApplication
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from scrollingcontent.keyboard.notifications import KeyboardNotificationCenter


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolated_notification_center():
    # The shared center is process-wide; don't leak observers or the last
    # notification between tests
    KeyboardNotificationCenter.reset_shared()
    yield
    KeyboardNotificationCenter.reset_shared()
