"""Shared fixtures: a fake clock scheduler and an event recorder."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from stringify import FieldEvents, InMemoryHost, MaskEngine, TextType, TextTypeConfig


class ManualHandle:
    def __init__(self, scheduler, due, callback):
        self._scheduler = scheduler
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by ``advance()`` instead of wall time."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def call_later(self, delay, callback):
        handle = ManualHandle(self, self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds):
        self.now += seconds
        due = [h for h in self.handles if not h.cancelled and h.due <= self.now]
        self.handles = [h for h in self.handles if h not in due]
        for h in due:
            h.callback()

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]


class EventRecorder:
    """Binds every FieldEvents slot and records (name, args-without-field)."""

    def __init__(self):
        self.calls = []
        self.events = FieldEvents(**{
            name: self._recorder(name) for name in FieldEvents.names()
        })

    def _recorder(self, name):
        def record(field, *args):
            self.calls.append((name, args))
        return record

    @property
    def names(self):
        return [name for name, _ in self.calls]

    def count(self, name):
        return self.names.count(name)

    def clear(self):
        self.calls.clear()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def make_field(scheduler, recorder):
    """Factory for an engine on a fresh in-memory host."""
    def make(text_type=TextType.AMOUNT, text="", **options):
        host = InMemoryHost(text)
        host.set_editing(True)
        return MaskEngine(
            host, text_type, TextTypeConfig(**options),
            events=recorder.events, scheduler=scheduler,
        )
    return make
