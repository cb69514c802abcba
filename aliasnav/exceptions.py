"""Domain exceptions raised by the alias namespace and search core.

Every error carries a stable `error_code` ('<area>:<name>') so the presentation
layer can map failures to messages without string matching, and a `retryable`
flag. Only store unavailability is retryable (see aliasnav.dao.exceptions);
everything here is a caller-input error that must be corrected, not retried.

Classes:
    AliasNavError:
        Base exception for all application-specific errors.

    ValidationError:
        Base for field validation failures (InvalidUrlError, InvalidAliasError,
        InvalidFolderError, InvalidTagError).

    NamespaceError:
        Base for identity-space violations (DuplicateAliasError, FolderExistsError,
        FolderNotEmptyError, FolderRenameConflictError).

    NotFoundError:
        Base for lookups of records that do not exist.

    ConfigurationError:
        Base for configuration errors (BadConfigurationError).

Example:
    >>> from aliasnav.exceptions import DuplicateAliasError
    >>> raise DuplicateAliasError('work/meet')
    Traceback (most recent call last):
        ...
    aliasnav.exceptions.DuplicateAliasError: Alias already exists: work/meet
"""


class AliasNavError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:aliasnav_error'
    retryable = False


# -------------------------------
# Validation
# -------------------------------


class ValidationError(AliasNavError):
    """Base exception for field validation failures."""

    error_code = 'validation:validation_error'


class InvalidUrlError(ValidationError):
    """Raised when a URL is empty, malformed, too long or not HTTP(S)."""

    error_code = 'validation:invalid_url'


class InvalidAliasError(ValidationError):
    """Raised when an alias is empty, too long or has forbidden characters."""

    error_code = 'validation:invalid_alias'


class InvalidFolderError(ValidationError):
    """Raised when a folder name is too long or has forbidden characters."""

    error_code = 'validation:invalid_folder'


class InvalidTagError(ValidationError):
    """Raised when a tag (or the tag collection) is invalid."""

    error_code = 'validation:invalid_tag'


# -------------------------------
# Namespace
# -------------------------------


class NamespaceError(AliasNavError):
    """Base exception for violations of the (folder, alias) identity space."""

    error_code = 'namespace:namespace_error'


class DuplicateAliasError(NamespaceError):
    """Raised when a full alias is already taken by another shortcut."""

    error_code = 'namespace:duplicate_alias'

    def __init__(self, full_alias: str):
        self.full_alias = full_alias
        super().__init__(f'Alias already exists: {full_alias}')


class FolderExistsError(NamespaceError):
    """Raised when explicitly creating a folder whose name is already taken."""

    error_code = 'namespace:folder_exists'

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Folder already exists: {name}')


class FolderNotEmptyError(NamespaceError):
    """Raised when deleting a folder that shortcuts still reference."""

    error_code = 'namespace:folder_not_empty'

    def __init__(self, name: str, count: int):
        self.name = name
        self.count = count
        super().__init__(f"Cannot delete folder '{name}': contains {count} shortcut(s).")


class FolderRenameConflictError(NamespaceError):
    """Raised when renaming a folder would collide with aliases in the target folder."""

    error_code = 'namespace:folder_rename_conflict'

    def __init__(self, old_name: str, new_name: str, conflicts: list[str]):
        self.old_name = old_name
        self.new_name = new_name
        self.conflicts = conflicts
        super().__init__(
            f"Cannot rename folder '{old_name}' to '{new_name}': alias conflict for {', '.join(conflicts)}"
        )


# -------------------------------
# Lookups
# -------------------------------


class NotFoundError(AliasNavError):
    """Base exception for records that do not exist."""

    error_code = 'lookup:not_found'


# -------------------------------
# Configuration
# -------------------------------


class ConfigurationError(AliasNavError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
