"""General helper utilities.

Functions:
    utc_now() -> datetime
        Current moment as a timezone-aware UTC datetime
    dump_datetime(value: datetime | None) -> str
        Serialize a datetime to ISO-8601 ('' for None)
    load_datetime(value: Any) -> datetime | None
        Parse a value produced by dump_datetime()
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present

Example:
    >>> from aliasnav.utils.helpers import dump_datetime, load_datetime
    >>> dump_datetime(datetime(2025, 10, 15, tzinfo=UTC))
    '2025-10-15T00:00:00+00:00'
    >>> load_datetime('')
    None
"""

import os
import functools
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable


def utc_now() -> datetime:
    """Return the current moment in UTC"""
    return datetime.now(UTC)


def dump_datetime(value: datetime | None) -> str:
    return value.isoformat() if value is not None else ''


def load_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        KeyError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('ALIASNAV_CONFIG_FILE')
        ... def my_function():
        ...     pass
        >>> my_function()
        KeyError: "Missing required environment variables: 'ALIASNAV_CONFIG_FILE'"
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise KeyError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator
