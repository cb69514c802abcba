from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from aliasnav.utils.helpers import dump_datetime, load_datetime


@dataclass(frozen=True)
class FolderModel:
    """Represent an explicit folder record.

    Folder existence is derived from the shortcuts referencing it; this record only
    carries metadata (creation time). Names are unique case-insensitively.

    Attributes:
        name (str):
            Folder name as typed.
        created_at (Optional[datetime]):
            Creation time (UTC).
    """

    name: str
    created_at: Optional[datetime] = None

    @property
    def key(self) -> str:
        return self.name.strip().casefold()

    def to_dict(self) -> dict[str, str]:
        return {'name': self.name, 'created_at': dump_datetime(self.created_at)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'FolderModel':
        return cls(name=data['name'], created_at=load_datetime(data.get('created_at')))


@dataclass(frozen=True)
class FolderStats:
    """Folder listing entry with its derived shortcut count (never stored)."""

    name: str
    created_at: Optional[datetime]
    shortcut_count: int
