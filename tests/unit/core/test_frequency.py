"""Unit tests for the FrequencyTracker

Test coverage includes:

1. Access recording
   - record_access() increments access_count and stamps last_accessed_at.
   - last_accessed_at never moves backwards, even when the clock does.
   - Missing shortcuts raise ShortcutNotFoundError.

2. Top frequent view
   - Ordered by access count, then most recent access, then full alias.

3. Recent view
   - Only shortcuts accessed within the window, most recent first.

4. Reset
"""

from datetime import datetime, timedelta, UTC

import pytest
from freezegun import freeze_time

from aliasnav.core import FrequencyTracker
from aliasnav.models import ShortcutModel
from aliasnav.dao.memory import ShortcutMemoryDAO
from aliasnav.dao.exceptions import ShortcutNotFoundError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao():
    return ShortcutMemoryDAO(
        [
            ShortcutModel(id='a', url='https://a.com', alias='alpha'),
            ShortcutModel(id='b', url='https://b.com', alias='beta', folder='work'),
            ShortcutModel(id='c', url='https://c.com', alias='gamma'),
        ]
    )


@pytest.fixture
def tracker(dao, clock):
    return FrequencyTracker(dao, clock=clock)


# -------------------------------
# 1. Access recording
# -------------------------------


def test_record_access(tracker, dao, clock):
    first = tracker.record_access('a')
    clock.advance(minutes=1)
    second = tracker.record_access('a')

    assert first.access_count == 1
    assert second.access_count == 2
    assert second.last_accessed_at == clock.now
    assert dao.get('a') == second


def test_record_access_is_monotonic_when_clock_steps_back(tracker, clock):
    later = tracker.record_access('a').last_accessed_at
    clock.advance(hours=-2)

    again = tracker.record_access('a')

    assert again.access_count == 2
    assert again.last_accessed_at == later


@freeze_time('2025-10-15 08:00:00')
def test_record_access_uses_utc_now_by_default(dao):
    shortcut = FrequencyTracker(dao).record_access('b')
    assert shortcut.last_accessed_at == datetime(2025, 10, 15, 8, 0, tzinfo=UTC)


def test_record_access_missing_shortcut(tracker):
    with pytest.raises(ShortcutNotFoundError):
        tracker.record_access('missing')


# -------------------------------
# 2. Top frequent view
# -------------------------------


def test_top_frequent(tracker, clock):
    for shortcut_id in ('c', 'b', 'c', 'a'):
        clock.advance(minutes=1)
        tracker.record_access(shortcut_id)

    # 'c' twice; 'a' and 'b' once each, 'a' more recently
    assert [s.id for s in tracker.top_frequent(3)] == ['c', 'a', 'b']
    assert [s.id for s in tracker.top_frequent(1)] == ['c']


def test_top_frequent_ties_on_full_alias(tracker):
    # Nothing accessed: all tie, ordered by full alias
    assert [s.full_alias for s in tracker.top_frequent()] == ['alpha', 'gamma', 'work/beta']


@pytest.mark.parametrize('n', [0, -1])
def test_top_frequent_with_non_positive_n(tracker, n):
    assert tracker.top_frequent(n) == []


# -------------------------------
# 3. Recent view
# -------------------------------


def test_recent(tracker, clock):
    tracker.record_access('a')
    clock.advance(days=8)
    tracker.record_access('b')
    clock.advance(hours=1)
    tracker.record_access('c')

    assert [s.id for s in tracker.recent()] == ['c', 'b']
    assert [s.id for s in tracker.recent(within=timedelta(days=30))] == ['c', 'b', 'a']
    assert [s.id for s in tracker.recent(1)] == ['c']


# -------------------------------
# 4. Reset
# -------------------------------


def test_reset(tracker, dao):
    tracker.record_access('a')
    reset = tracker.reset('a')

    assert reset.access_count == 0
    assert reset.last_accessed_at is None
    assert dao.get('a').access_count == 0
