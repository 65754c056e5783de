"""Shared pytest fixtures: headless SDL, a manual clock and in-memory stores."""

import os

# Ensure pygame can initialize without a physical display/audio device.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest


class ManualClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now=1000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


class MemoryStore:
    def __init__(self, items=None):
        self.items = dict(items or {})

    def get_item(self, key):
        return self.items.get(key)

    def set_item(self, key, value):
        self.items[key] = value


class BrokenStore:
    """Behaves like storage that is denied or over quota."""

    def get_item(self, key):
        raise OSError("storage denied")

    def set_item(self, key, value):
        raise OSError("quota exceeded")


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def broken_store():
    return BrokenStore()
