"""Shared fixtures for the glosa test-suite."""

from collections.abc import Callable

import pytest

from glosa.config import reset_engine_config


class ManualTimer:
    """Timer that only fires when a test calls fire()."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.callback()


class ManualTimerFactory:
    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer


@pytest.fixture
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture(autouse=True)
def _default_engine_config():
    """Each test starts from the default EngineConfig."""
    reset_engine_config()
    yield
    reset_engine_config()
