"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortcutNotFoundError:
        Raised when a ShortcutModel is not found in the record store.

    FolderNotFoundError:
        Raised when a folder is neither stored nor referenced by any shortcut.

    StoreUnavailableError:
        Raised when the record store cannot be reached (connection issues, timeouts, OOM, etc.).
        This is the only retryable error kind.

Example:
    >>> from aliasnav.dao.exceptions import ShortcutNotFoundError
    >>> raise ShortcutNotFoundError("Shortcut with id 'k3XbQ9aZpT' not found.")
    Traceback (most recent call last):
        ...
    aliasnav.dao.exceptions.ShortcutNotFoundError: Shortcut with id 'k3XbQ9aZpT' not found.
"""

from aliasnav.exceptions import AliasNavError, NotFoundError


class DAOError(AliasNavError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'store:dao_error'


class ShortcutNotFoundError(DAOError, NotFoundError):
    """Exception raised when a ShortcutModel is not found in the record store."""

    error_code = 'store:shortcut_not_found'


class FolderNotFoundError(DAOError, NotFoundError):
    """Exception raised when a folder is not found in the record store."""

    error_code = 'store:folder_not_found'


class StoreUnavailableError(DAOError):
    """Exception raised when the record store is unreachable.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'store:store_unavailable'
    retryable = True
