"""In-process DAO implementation for shortcuts

Keeps shortcuts in a plain dict keyed by id. Used as the default backend for
single-process embedding and as the record store in tests. Returned models are
immutable, so handing them out never exposes internal state.

Classes:
    ShortcutMemoryDAO:
        Dict-backed implementation of ShortcutBaseDAO.
"""

import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from beartype import beartype

from aliasnav.models import ShortcutModel
from aliasnav.dao.base import ShortcutBaseDAO
from aliasnav.dao.exceptions import ShortcutNotFoundError


class ShortcutMemoryDAO(ShortcutBaseDAO):
    """Dict-backed shortcut store

    Attributes:
        records (dict[str, ShortcutModel]):
            Live shortcuts keyed by id.
    """

    def __init__(self, shortcuts: Iterable[ShortcutModel] = ()):
        self.records: dict[str, ShortcutModel] = {}
        self._counter = 0
        self._lock = threading.Lock()
        for shortcut in shortcuts:
            self.records[shortcut.id] = shortcut

    def __repr__(self) -> str:
        return '<ShortcutMemoryDAO>'

    def all(self, **kwargs) -> list[ShortcutModel]:
        with self._lock:
            return list(self.records.values())

    @beartype
    def get(self, shortcut_id: str, **kwargs) -> ShortcutModel | None:
        with self._lock:
            return self.records.get(shortcut_id)

    @beartype
    def put(self, shortcut: ShortcutModel, **kwargs) -> 'ShortcutMemoryDAO':
        with self._lock:
            self.records[shortcut.id] = shortcut
        return self

    def put_many(self, shortcuts: Iterable[ShortcutModel], **kwargs) -> 'ShortcutMemoryDAO':
        staged = list(shortcuts)
        for shortcut in staged:
            if not isinstance(shortcut, ShortcutModel):
                raise TypeError(f'Expected ShortcutModel (given type: {type(shortcut)}).')

        with self._lock:
            self.records.update({shortcut.id: shortcut for shortcut in staged})
        return self

    @beartype
    def delete(self, shortcut_id: str, **kwargs) -> bool:
        with self._lock:
            return self.records.pop(shortcut_id, None) is not None

    def count(self, increment: bool = False, **kwargs) -> int:
        with self._lock:
            if increment:
                self._counter += 1
            return self._counter

    @beartype
    def record_access(self, shortcut_id: str, accessed_at: datetime, **kwargs) -> ShortcutModel:
        with self._lock:
            shortcut = self.records.get(shortcut_id)
            if shortcut is None:
                raise ShortcutNotFoundError(f"Shortcut with id '{shortcut_id}' not found.")

            updated = replace(shortcut, access_count=shortcut.access_count + 1, last_accessed_at=accessed_at)
            self.records[shortcut_id] = updated
            return updated

    @beartype
    def reset_access(self, shortcut_id: str, **kwargs) -> ShortcutModel:
        with self._lock:
            shortcut = self.records.get(shortcut_id)
            if shortcut is None:
                raise ShortcutNotFoundError(f"Shortcut with id '{shortcut_id}' not found.")

            updated = replace(shortcut, access_count=0, last_accessed_at=None)
            self.records[shortcut_id] = updated
            return updated
