"""Abstract base class for Folder data access objects (DAOs).

Folder records only carry metadata (name, creation time). Whether a folder exists
is derived from the shortcuts referencing it, so a missing record is never an error
for the namespace core. Records are keyed by the case-folded folder name.

Example:
    >>> from aliasnav.models import FolderModel
    >>> from aliasnav.dao.memory import FolderMemoryDAO

    >>> dao = FolderMemoryDAO()
    >>> dao.put(FolderModel(name='Work'))
    <FolderMemoryDAO>
    >>> dao.get('work').name
    'Work'
"""

from abc import ABC, abstractmethod

from aliasnav.models import FolderModel


class FolderBaseDAO(ABC):
    """Interface for Folder data access objects (DAOs).

    Methods:
        all(**kwargs) -> list[FolderModel]:
            Return every stored folder record.

        get(name: str, **kwargs) -> FolderModel | None:
            Return a folder record by name (case-insensitive), or None.

        put(folder: FolderModel, **kwargs) -> FolderBaseDAO:
            Insert or replace a folder record.

        delete(name: str, **kwargs) -> bool:
            Remove a folder record (case-insensitive). Returns False if absent.

    Every method raises StoreUnavailableError when the store cannot be reached.
    """

    @abstractmethod
    def all(self, **kwargs) -> list[FolderModel]:
        pass

    @abstractmethod
    def get(self, name: str, **kwargs) -> FolderModel | None:
        pass

    @abstractmethod
    def put(self, folder: FolderModel, **kwargs) -> 'FolderBaseDAO':
        pass

    @abstractmethod
    def delete(self, name: str, **kwargs) -> bool:
        pass
