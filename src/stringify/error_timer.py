"""ErrorTimer — transient "show this error for N seconds" state.

One live timer per field at most. ``show_error`` while an error is showing
is ignored; a new cycle starts only after ``hide_error`` (explicit or
timer-driven).

Usage:
    timer = ErrorTimer(ThreadingScheduler(), on_show=banner.show, on_hide=banner.hide)
    timer.show_error("Card declined", 1.5)
"""

from __future__ import annotations
import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Runs a callback once after ``delay`` seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class ThreadingScheduler:
    """Waits on a ``threading.Timer`` worker thread.

    Without ``dispatch`` the callback runs on the worker thread. Pass the UI
    toolkit's "run this on the main thread" hook (``loop.call_soon_threadsafe``,
    ``widget.after(0, ...)``) to hand it back to the UI thread instead.
    """

    __slots__ = ("_dispatch",)

    def __init__(self, dispatch: Callable[[Callable[[], None]], Any] | None = None) -> None:
        self._dispatch = dispatch

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        if self._dispatch is not None:
            dispatch = self._dispatch
            timer = threading.Timer(delay, lambda: dispatch(callback))
        else:
            timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class AsyncioScheduler:
    """Fires on the event loop's own thread, like a UI run loop."""

    __slots__ = ("_loop",)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


@dataclass
class ErrorState:
    is_showing: bool = False
    message: str = ""
    pending: Optional[TimerHandle] = None


class ErrorTimer:
    """One-shot, cancellable auto-hide for a field's error message."""

    __slots__ = ("_scheduler", "_state", "_on_show", "_on_hide", "_lock")

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        on_show: Callable[[str], Any] | None = None,
        on_hide: Callable[[], Any] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._state: ErrorState | None = None
        self._on_show = on_show
        self._on_hide = on_hide
        # Held across on_show/on_hide so a worker-thread expiry can't
        # interleave with a UI-thread show/hide. Reentrant for callbacks.
        self._lock = threading.RLock()

    @property
    def state(self) -> ErrorState | None:
        return self._state

    @property
    def is_showing(self) -> bool:
        return self._state is not None and self._state.is_showing

    def show_error(self, message: str, duration: float) -> bool:
        """Show ``message`` and hide it after ``duration`` seconds.

        Returns False (and does nothing) if an error is already showing.
        """
        with self._lock:
            if self.is_showing:
                logger.debug("error already showing, ignoring %r", message)
                return False
            self._cancel_pending()
            state = ErrorState(is_showing=True, message=message)
            self._state = state
            state.pending = self._scheduler.call_later(duration, lambda: self._expire(state))
            logger.debug("showing error %r for %.2fs", message, duration)
            if self._on_show is not None:
                self._on_show(message)
        return True

    def hide_error(self) -> None:
        with self._lock:
            was_showing = self.is_showing
            self._cancel_pending()
            self._state = None
            if was_showing and self._on_hide is not None:
                self._on_hide()

    def cancel(self) -> None:
        """Drop any pending timer without notifying (owner is going away)."""
        with self._lock:
            self._cancel_pending()
            self._state = None

    def _expire(self, state: ErrorState) -> None:
        with self._lock:
            # A stale callback must not hide a newer cycle
            if self._state is not state:
                return
            state.pending = None
            self._state = None
            if self._on_hide is not None:
                self._on_hide()

    def _cancel_pending(self) -> None:
        if self._state is not None and self._state.pending is not None:
            self._state.pending.cancel()
            self._state.pending = None
            logger.debug("cancelled pending error timer")
