"""Coalescing of update triggers.

Edits arrive in bursts; re-parsing after every keystroke is wasted work.
UpdateScheduler turns a burst of throttled triggers into one delayed call,
while immediate triggers (surface switch, explicit recompute) run at once.
Either kind cancels any delayed call still pending, so two passes are
never queued for the same surface. Runs are serialized: an immediate
trigger that arrives while a delayed run is in progress waits for it.

"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol

from glosa.config import get_engine_config
from glosa.utils.logger import get_logger

logger = get_logger(__name__)


class Cancellable(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Cancellable]


def _thread_timer(delay: float, callback: Callable[[], None]) -> Cancellable:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


class UpdateScheduler:
    """Debounce update triggers for one callback.

    Usage:
        >>> scheduler = UpdateScheduler(engine.update)
        >>> scheduler.trigger(throttle=True)   # runs after the delay
        >>> scheduler.trigger()                # cancels it, runs now

    """

    __slots__ = (
        "_callback",
        "_delay",
        "_timer_factory",
        "_pending",
        "_generation",
        "_lock",
        "_run_lock",
    )

    def __init__(
        self,
        callback: Callable[[], object],
        delay: float | None = None,
        *,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        """Initialize scheduler.

        Args:
            callback: Work to run, typically a surface's update pass
            delay: Coalescing window in seconds (EngineConfig.debounce_seconds
                when None)
            timer_factory: Creates a startable, cancellable timer; a daemon
                threading.Timer by default. Hosts with an event loop pass
                their own.
        """
        self._callback = callback
        self._delay = get_engine_config().debounce_seconds if delay is None else delay
        self._timer_factory = timer_factory or _thread_timer
        self._pending: Cancellable | None = None
        self._generation = 0
        self._lock = threading.Lock()
        self._run_lock = threading.Lock()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def trigger(self, throttle: bool = False) -> None:
        """Request a run.

        Args:
            throttle: Delay the run by the coalescing window instead of
                running now.
        """
        self.cancel()
        if not throttle:
            with self._run_lock:
                self._callback()
            return

        with self._lock:
            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(self._delay, lambda: self._fire(generation))
            self._pending = timer
        timer.start()

    def cancel(self) -> None:
        """Drop the pending delayed run, if any."""
        with self._lock:
            timer, self._pending = self._pending, None
            self._generation += 1
        if timer is not None:
            timer.cancel()

    def _fire(self, generation: int) -> None:
        with self._run_lock:
            with self._lock:
                if generation != self._generation:
                    # Superseded or cancelled after the timer had already fired
                    return
                self._pending = None
            self._callback()
