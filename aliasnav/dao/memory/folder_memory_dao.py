import threading

from beartype import beartype

from aliasnav.models import FolderModel
from aliasnav.dao.base import FolderBaseDAO
from aliasnav.utils.validators import fold


class FolderMemoryDAO(FolderBaseDAO):
    """Dict-backed folder store keyed by case-folded folder name"""

    def __init__(self):
        self.records: dict[str, FolderModel] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return '<FolderMemoryDAO>'

    def all(self, **kwargs) -> list[FolderModel]:
        with self._lock:
            return list(self.records.values())

    @beartype
    def get(self, name: str, **kwargs) -> FolderModel | None:
        with self._lock:
            return self.records.get(fold(name))

    @beartype
    def put(self, folder: FolderModel, **kwargs) -> 'FolderMemoryDAO':
        with self._lock:
            self.records[folder.key] = folder
        return self

    @beartype
    def delete(self, name: str, **kwargs) -> bool:
        with self._lock:
            return self.records.pop(fold(name), None) is not None
