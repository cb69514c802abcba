"""Access frequency tracking

FrequencyTracker is the only writer of `access_count` and `last_accessed_at`. The
increment itself is delegated to the record store (ShortcutBaseDAO.record_access),
which performs it atomically, so concurrent accesses are never lost.

Monotonicity:
    - access_count only grows, except through the explicit reset().
    - last_accessed_at only moves forward: a clock stepping backwards never rewinds it.

Example:
    >>> tracker = FrequencyTracker(ShortcutMemoryDAO([meet, docs]))
    >>> tracker.record_access(meet.id).access_count
    1
    >>> [s.alias for s in tracker.top_frequent(2)]
    ['meet', 'docs']
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Optional

from aliasnav.models import ShortcutModel
from aliasnav.dao.base import ShortcutBaseDAO
from aliasnav.utils.helpers import utc_now
from aliasnav.utils.constants import DEFAULT_TOP_FREQUENT, DEFAULT_RECENT_DAYS


logger = logging.getLogger(__name__)


def _frequency_order(shortcut: ShortcutModel) -> tuple:
    last = shortcut.last_accessed_at
    # Most accessed first, then most recently accessed (never accessed last), then full alias
    return (-shortcut.access_count, last is None, -last.timestamp() if last else 0.0, shortcut.composite_key)


class FrequencyTracker:
    """Record shortcut accesses and answer frequency queries

    Attributes:
        shortcuts (ShortcutBaseDAO):
            Shortcut record store.

    Methods:
        record_access(shortcut_id) -> ShortcutModel
        top_frequent(n) -> list[ShortcutModel]
        recent(n, within) -> list[ShortcutModel]
        reset(shortcut_id) -> ShortcutModel
    """

    def __init__(self, shortcuts: ShortcutBaseDAO, clock: Optional[Callable[[], datetime]] = None):
        self.shortcuts = shortcuts
        self._clock = clock or utc_now

    def record_access(self, shortcut_id: str) -> ShortcutModel:
        """Count one access of a shortcut

        Raises:
            ShortcutNotFoundError:
                If the shortcut does not exist.
            StoreUnavailableError:
                If the record store cannot be reached.
        """
        now = self._clock()
        current = self.shortcuts.get(shortcut_id)
        if current is not None and current.last_accessed_at is not None and current.last_accessed_at > now:
            now = current.last_accessed_at

        shortcut = self.shortcuts.record_access(shortcut_id, now)
        logger.debug(
            'Recorded shortcut access.',
            extra={'shortcutId': shortcut_id, 'accessCount': shortcut.access_count},
        )
        return shortcut

    def top_frequent(self, n: int = DEFAULT_TOP_FREQUENT) -> list[ShortcutModel]:
        """Return the n most accessed shortcuts

        Ties are broken by most recent access, then by full alias. Shortcuts that
        were never accessed still appear (after every accessed one) when fewer than
        n shortcuts have been accessed.
        """
        if n <= 0:
            return []
        return sorted(self.shortcuts.all(), key=_frequency_order)[:n]

    def recent(self, n: int = DEFAULT_TOP_FREQUENT, within: timedelta = timedelta(days=DEFAULT_RECENT_DAYS)) -> list[ShortcutModel]:
        """Return the n most recently accessed shortcuts accessed within a time window"""
        if n <= 0:
            return []

        since = self._clock() - within
        accessed = [s for s in self.shortcuts.all() if s.last_accessed_at is not None and s.last_accessed_at >= since]
        accessed.sort(key=lambda s: (-s.last_accessed_at.timestamp(), s.composite_key))
        return accessed[:n]

    def reset(self, shortcut_id: str) -> ShortcutModel:
        """Reset the access counter of a shortcut (explicit, never automatic)"""
        shortcut = self.shortcuts.reset_access(shortcut_id)
        logger.info('Reset shortcut access counter.', extra={'shortcutId': shortcut_id})
        return shortcut
