import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from aliasnav.utils.helpers import dump_datetime, load_datetime


@dataclass(frozen=True)
class ShortcutModel:
    """Represent a named shortcut (alias) resolving to a full URL.

    Attributes:
        id (str):
            Opaque unique identifier, assigned at creation and never changed.
        url (str):
            Absolute HTTP(S) URL the alias resolves to.
        alias (str):
            Alias as typed by the user (compared case-insensitively).
        folder (str):
            Optional single-level folder name. Empty string means root.
        tags (tuple[str, ...]):
            Normalized, deduplicated, sorted tags.
        created_at (Optional[datetime]):
            Creation time (UTC).
        updated_at (Optional[datetime]):
            Last write time (UTC), refreshed on every namespace mutation.
        last_accessed_at (Optional[datetime]):
            Last access time (UTC). Only written by the frequency tracker.
        access_count (int):
            Number of recorded accesses. Only written by the frequency tracker.

    Example:
        >>> shortcut = ShortcutModel(id='k3XbQ9aZpT', url='https://work.com/meet', alias='meet', folder='work')
        >>> shortcut.full_alias
        'work/meet'
        >>> shortcut.composite_key
        'work/meet'
    """

    id: str
    url: str
    alias: str
    folder: str = ''
    tags: tuple[str, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_accessed_at: Optional[datetime] = None
    access_count: int = 0

    @property
    def full_alias(self) -> str:
        return f'{self.folder}/{self.alias}' if self.folder else self.alias

    @property
    def composite_key(self) -> str:
        return self.full_alias.strip().casefold()

    def to_dict(self) -> dict[str, str]:
        """Serialize into a flat string mapping (record store representation)

        Timestamps become ISO-8601 strings ('' when unset) and tags a JSON list.
        """
        return {
            'id': self.id,
            'url': self.url,
            'alias': self.alias,
            'folder': self.folder,
            'tags': json.dumps(list(self.tags)),
            'created_at': dump_datetime(self.created_at),
            'updated_at': dump_datetime(self.updated_at),
            'last_accessed_at': dump_datetime(self.last_accessed_at),
            'access_count': str(self.access_count),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ShortcutModel':
        """Deserialize from the mapping produced by to_dict()"""
        tags = data.get('tags') or '[]'
        if isinstance(tags, str):
            tags = json.loads(tags)

        return cls(
            id=data['id'],
            url=data['url'],
            alias=data['alias'],
            folder=data.get('folder') or '',
            tags=tuple(sorted(tags)),
            created_at=load_datetime(data.get('created_at')),
            updated_at=load_datetime(data.get('updated_at')),
            last_accessed_at=load_datetime(data.get('last_accessed_at')),
            access_count=int(data.get('access_count') or 0),
        )
