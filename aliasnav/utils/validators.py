"""Normalization and validation of every field that participates in a shortcut identity

All validators are pure functions. Expected bad input never raises: each validator
returns a ValidationResult that is either a success (carrying the value as typed and
its case-folded comparison form) or a failure (carrying a reason and the matching
error class). Passing the wrong argument type is a contract violation and is rejected
by beartype instead.

Normalization rules:
    - Surrounding whitespace is trimmed from every field. This is the only change
      ever applied to a stored value.
    - Aliases and folders are stored as typed and compared case-insensitively
      through fold().
    - Tags must already be lowercase; they are deduplicated and sorted.

Functions:
    fold(text) -> str
        Trim and case-fold text (the single comparison rule).
    full_alias(folder, alias) -> str
        'folder/alias', or 'alias' for root shortcuts.
    composite_key(folder, alias) -> str
        Case-folded full alias used for uniqueness checks.
    validate_url(url) -> ValidationResult
    validate_alias(alias) -> ValidationResult
    validate_folder(folder) -> ValidationResult
    validate_tag(tag) -> ValidationResult
    validate_tags(tags) -> ValidationResult

Example:
    >>> from aliasnav.utils.validators import validate_alias, validate_tags
    >>> result = validate_alias('Meet')
    >>> result.valid, result.value, result.normalized
    (True, 'Meet', 'meet')
    >>> validate_tags('video, work,,video').value
    ('video', 'work')
    >>> validate_alias('no spaces').error
    'Alias can only contain letters, numbers, and hyphens (-)'
"""

import re
import urllib.parse
from dataclasses import dataclass
from typing import Any, Optional

from beartype import beartype

from aliasnav.exceptions import (
    ValidationError,
    InvalidUrlError,
    InvalidAliasError,
    InvalidFolderError,
    InvalidTagError,
)
from aliasnav.utils.constants import (
    MAX_URL_LENGTH,
    MIN_ALIAS_LENGTH,
    MAX_ALIAS_LENGTH,
    MAX_FOLDER_LENGTH,
    MAX_TAG_LENGTH,
    MAX_TAGS,
    URL_SCHEMES,
)


ALIAS_PATTERN = re.compile(r'^[A-Za-z0-9\-]+$')
FOLDER_PATTERN = re.compile(r'^[A-Za-z0-9\-_]+$')
TAG_PATTERN = re.compile(r'^[a-z0-9\-]+$')


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validator call

    Attributes:
        valid (bool):
            True on success.
        value (Any):
            Trimmed value as typed (display form). For tags, the canonical sorted tuple.
        normalized (Any):
            Case-folded comparison form (same as value for tags).
        error (Optional[str]):
            Failure reason, None on success.
        kind (Optional[type[ValidationError]]):
            Error class matching the failure, None on success.
    """

    valid: bool
    value: Any = None
    normalized: Any = None
    error: Optional[str] = None
    kind: Optional[type[ValidationError]] = None

    @classmethod
    def ok(cls, value: Any, normalized: Any = None) -> 'ValidationResult':
        return cls(valid=True, value=value, normalized=value if normalized is None else normalized)

    @classmethod
    def fail(cls, kind: type[ValidationError], error: str) -> 'ValidationResult':
        return cls(valid=False, error=error, kind=kind)

    def unwrap(self) -> Any:
        """Return the validated value or raise the matching ValidationError subclass"""
        if not self.valid:
            raise self.kind(self.error)
        return self.value

    def __bool__(self) -> bool:
        return self.valid


def fold(text: str) -> str:
    """Trim and case-fold text for comparisons"""
    return (text or '').strip().casefold()


def full_alias(folder: str, alias: str) -> str:
    folder = (folder or '').strip()
    alias = (alias or '').strip()
    return f'{folder}/{alias}' if folder else alias


def composite_key(folder: str, alias: str) -> str:
    return fold(full_alias(folder, alias))


@beartype
def validate_url(url: Optional[str]) -> ValidationResult:
    """Validate an absolute HTTP(S) URL

    Structural check only: no network access and no redirect resolution.

    Args:
        url (Optional[str]):
            URL to validate.

    Returns:
        ValidationResult: value is the trimmed URL.
    """
    if not url or not url.strip():
        return ValidationResult.fail(InvalidUrlError, 'URL is required')

    trimmed = url.strip()
    if len(trimmed) > MAX_URL_LENGTH:
        return ValidationResult.fail(InvalidUrlError, f'URL is too long (max {MAX_URL_LENGTH} characters)')

    try:
        components = urllib.parse.urlsplit(trimmed)
        # Accessing port validates it (raises ValueError when out of range)
        components.port
    except ValueError:
        return ValidationResult.fail(InvalidUrlError, 'Invalid URL format')

    if components.scheme.lower() not in URL_SCHEMES:
        return ValidationResult.fail(InvalidUrlError, 'URL must use HTTP or HTTPS protocol')
    if not components.hostname or any(char.isspace() for char in trimmed):
        return ValidationResult.fail(InvalidUrlError, 'Invalid URL format')

    return ValidationResult.ok(trimmed)


@beartype
def validate_alias(alias: Optional[str]) -> ValidationResult:
    """Validate an alias

    Args:
        alias (Optional[str]):
            Alias to validate. Letters, digits and hyphens, 1-50 characters.

    Returns:
        ValidationResult:
            value is the alias as typed (trimmed), normalized its case-folded form.
    """
    if not alias or not alias.strip():
        return ValidationResult.fail(InvalidAliasError, 'Alias is required')

    trimmed = alias.strip()
    if len(trimmed) < MIN_ALIAS_LENGTH:
        return ValidationResult.fail(InvalidAliasError, f'Alias must be at least {MIN_ALIAS_LENGTH} character')
    if len(trimmed) > MAX_ALIAS_LENGTH:
        return ValidationResult.fail(InvalidAliasError, f'Alias must be max {MAX_ALIAS_LENGTH} characters')
    if not ALIAS_PATTERN.match(trimmed):
        return ValidationResult.fail(InvalidAliasError, 'Alias can only contain letters, numbers, and hyphens (-)')

    return ValidationResult.ok(trimmed, fold(trimmed))


@beartype
def validate_folder(folder: Optional[str]) -> ValidationResult:
    """Validate a folder name

    An empty (or whitespace-only) name is always valid and means root.

    Args:
        folder (Optional[str]):
            Folder name. Letters, digits, hyphens and underscores, max 30 characters.

    Returns:
        ValidationResult:
            value is the trimmed name ('' for root), normalized its case-folded form.
    """
    if not folder or not folder.strip():
        return ValidationResult.ok('', '')

    trimmed = folder.strip()
    if len(trimmed) > MAX_FOLDER_LENGTH:
        return ValidationResult.fail(InvalidFolderError, f'Folder name must be max {MAX_FOLDER_LENGTH} characters')
    if not FOLDER_PATTERN.match(trimmed):
        return ValidationResult.fail(
            InvalidFolderError,
            'Folder name can only contain letters, numbers, hyphens (-), and underscores (_)',
        )

    return ValidationResult.ok(trimmed, fold(trimmed))


@beartype
def validate_tag(tag: Optional[str]) -> ValidationResult:
    """Validate a single tag (must already be lowercase)"""
    if not tag or not tag.strip():
        return ValidationResult.fail(InvalidTagError, 'Tag cannot be empty')

    trimmed = tag.strip()
    if len(trimmed) > MAX_TAG_LENGTH:
        return ValidationResult.fail(InvalidTagError, f'Each tag must be max {MAX_TAG_LENGTH} characters')
    if trimmed != trimmed.lower():
        return ValidationResult.fail(InvalidTagError, f"Tags must be lowercase only (given: '{trimmed}')")
    if not TAG_PATTERN.match(trimmed):
        return ValidationResult.fail(
            InvalidTagError,
            f"Tags can only contain lowercase letters, numbers, and hyphens (-) (given: '{trimmed}')",
        )

    return ValidationResult.ok(trimmed)


@beartype
def validate_tags(tags: str | list | tuple | set | frozenset | None) -> ValidationResult:
    """Validate a tag collection

    Accepts a comma-separated string or an iterable of strings. Entries are trimmed,
    empties dropped, the count checked, each tag validated, and duplicates collapsed
    (case-insensitively).

    Args:
        tags (str | list | tuple | set | frozenset | None):
            Tags to validate. None or '' means no tags.

    Returns:
        ValidationResult:
            value is the canonical sorted tuple of tags, or the first validation error.
    """
    if tags is None:
        return ValidationResult.ok(())

    if isinstance(tags, str):
        entries = tags.split(',')
    else:
        entries = list(tags)
        for entry in entries:
            if not isinstance(entry, str):
                return ValidationResult.fail(InvalidTagError, f'Tag must be a string (given type: {type(entry)})')

    entries = [entry.strip() for entry in entries]
    entries = [entry for entry in entries if entry]

    if len(entries) > MAX_TAGS:
        return ValidationResult.fail(InvalidTagError, f'Maximum {MAX_TAGS} tags allowed')

    unique = {}
    for entry in entries:
        result = validate_tag(entry)
        if not result.valid:
            return result
        unique.setdefault(fold(result.value), result.value)

    return ValidationResult.ok(tuple(sorted(unique.values())))
