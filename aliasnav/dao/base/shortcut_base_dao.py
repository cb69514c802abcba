"""Abstract base class for Shortcut data access objects (DAOs).

This class establishes a consistent contract for all record store implementations
(e.g., in-memory, Redis). The namespace core treats the store as its sole source of
truth and only ever talks to it through this interface.

Responsibilities:
    - Provide an interface for storing, loading and removing ShortcutModel objects.
    - Provide an all-or-nothing multi-record write (used by folder renames).
    - Provide the access counter primitives used by the frequency tracker.
    - Standardize error handling: unreachable stores raise StoreUnavailableError.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from aliasnav.models import ShortcutModel
        >>> from aliasnav.dao.memory import ShortcutMemoryDAO

        >>> dao = ShortcutMemoryDAO()
        >>> dao.put(ShortcutModel(id='k3XbQ9aZpT', url='https://work.com/meet', alias='meet', folder='work'))
        <ShortcutMemoryDAO>

        >>> dao.get('k3XbQ9aZpT').full_alias
        'work/meet'
        >>> dao.get('missing')
        None
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from aliasnav.models import ShortcutModel


class ShortcutBaseDAO(ABC):
    """Interface for Shortcut data access objects (DAOs).

    Methods:
        all(**kwargs) -> list[ShortcutModel]:
            Return every live shortcut (unordered snapshot).

        get(shortcut_id: str, **kwargs) -> ShortcutModel | None:
            Return a shortcut by id, or None if it does not exist.

        put(shortcut: ShortcutModel, **kwargs) -> ShortcutBaseDAO:
            Insert or replace a shortcut.

        put_many(shortcuts: Iterable[ShortcutModel], **kwargs) -> ShortcutBaseDAO:
            Insert or replace several shortcuts atomically (all or nothing).

        delete(shortcut_id: str, **kwargs) -> bool:
            Remove a shortcut. Returns False if it did not exist.

        count(increment: bool, **kwargs) -> int:
            Return the identifier counter, optionally incrementing it first.

        record_access(shortcut_id: str, accessed_at: datetime, **kwargs) -> ShortcutModel:
            Atomically increment access_count and set last_accessed_at.
            Raises ShortcutNotFoundError if the shortcut does not exist.

        reset_access(shortcut_id: str, **kwargs) -> ShortcutModel:
            Reset access_count to 0 and last_accessed_at to None.
            Raises ShortcutNotFoundError if the shortcut does not exist.

    Every method raises StoreUnavailableError when the store cannot be reached.

    Subclassing:
        Datastore-specific implementations (e.g., ShortcutMemoryDAO or
        ShortcutRedisDAO) must extend this class and implement all
        abstract methods.
    """

    @abstractmethod
    def all(self, **kwargs) -> list[ShortcutModel]:
        pass

    @abstractmethod
    def get(self, shortcut_id: str, **kwargs) -> ShortcutModel | None:
        pass

    @abstractmethod
    def put(self, shortcut: ShortcutModel, **kwargs) -> 'ShortcutBaseDAO':
        """Insert or replace a shortcut.

        Args:
            shortcut (ShortcutModel):
                The shortcut to persist (keyed by its id).

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortcutBaseDAO: self (for method chaining)

        Raises:
            StoreUnavailableError:
                If the data store cannot be reached.
        """
        pass

    @abstractmethod
    def put_many(self, shortcuts: Iterable[ShortcutModel], **kwargs) -> 'ShortcutBaseDAO':
        """Insert or replace several shortcuts in a single atomic write.

        Either every shortcut is persisted or none is.

        Args:
            shortcuts (Iterable[ShortcutModel]):
                Shortcuts to persist.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortcutBaseDAO: self (for method chaining)

        Raises:
            StoreUnavailableError:
                If the data store cannot be reached.
        """
        pass

    @abstractmethod
    def delete(self, shortcut_id: str, **kwargs) -> bool:
        pass

    @abstractmethod
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve the current identifier counter value from the data store.

        Args:
            increment (bool):
                If True, increment the counter by 1 before returning the value.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The current counter value.

        Raises:
            StoreUnavailableError:
                If the data store cannot be reached.
        """
        pass

    @abstractmethod
    def record_access(self, shortcut_id: str, accessed_at: datetime, **kwargs) -> ShortcutModel:
        pass

    @abstractmethod
    def reset_access(self, shortcut_id: str, **kwargs) -> ShortcutModel:
        pass
