"""Shared fixtures for the unit test suite."""

from datetime import datetime, timedelta, UTC

import pytest

from aliasnav.dao.memory import ShortcutMemoryDAO, FolderMemoryDAO
from aliasnav.core import NamespaceManager


class ManualScheduler:
    """Scheduler whose callbacks only run when the test fires them."""

    def __init__(self):
        self.pending = {}
        self.delays = []
        self._next_handle = 0

    def schedule(self, delay, callback):
        self._next_handle += 1
        self.pending[self._next_handle] = callback
        self.delays.append(delay)
        return self._next_handle

    def cancel(self, handle):
        self.pending.pop(handle, None)

    def fire_all(self):
        while self.pending:
            handle = min(self.pending)
            self.pending.pop(handle)()


class FakeClock:
    """Deterministic clock advancing only when told to."""

    def __init__(self, start=datetime(2025, 10, 15, 12, 0, tzinfo=UTC)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def shortcut_dao():
    return ShortcutMemoryDAO()


@pytest.fixture
def folder_dao():
    return FolderMemoryDAO()


@pytest.fixture
def namespace(shortcut_dao, folder_dao, clock):
    """Provide a NamespaceManager over empty in-memory stores."""
    return NamespaceManager(shortcut_dao, folder_dao, clock=clock)
