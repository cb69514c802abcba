"""Utility functions for application configuration management.

Configuration is a plain JSON document. Built-in defaults are always present and an
optional JSON file (pointed to by `ALIASNAV_CONFIG_FILE`) is deep-merged on top of
them. The document follows this structure:

    {
        "active_backend": "memory",
        "configs": {
            "redis": {
                "host": "localhost",
                "port": 6379,
                "db": 0
            }
        },
        "search": {
            "debounce_ms": 300,
            "cache_size": 50
        },
        "ids": {
            "salt": "aliasnav",
            "length": 10
        }
    }

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return the record store key prefix, or None if `APP_NAME` is not set.

    default_config() -> dict
        Return a fresh copy of the built-in configuration document.

    load_config_file() -> dict
        Read the JSON document pointed to by `ALIASNAV_CONFIG_FILE`.

    load_config() -> dict
        Return defaults merged with the configuration file (when set), validated.

Example:
    >>> from aliasnav.utils.config import load_config
    >>> config = load_config()
    >>> config['active_backend']
    'memory'
    >>> config['search']['debounce_ms']
    300
"""

import os
import copy
import json
import logging
from pathlib import Path
from typing import Any

from aliasnav.exceptions import BadConfigurationError
from aliasnav.utils.helpers import require_environment
from aliasnav.utils.constants import (
    APP_ENV_ENV,
    APP_NAME_ENV,
    CONFIG_FILE_ENV,
    BACKENDS,
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_CACHE_SIZE,
    DEFAULT_ID_SALT,
    DEFAULT_ID_LENGTH,
)


logger = logging.getLogger(__name__)


_DEFAULTS = {
    'active_backend': 'memory',
    'configs': {
        'redis': {
            'host': 'localhost',
            'port': 6379,
            'db': 0,
        },
    },
    'search': {
        'debounce_ms': DEFAULT_DEBOUNCE_MS,
        'cache_size': DEFAULT_CACHE_SIZE,
    },
    'ids': {
        'salt': DEFAULT_ID_SALT,
        'length': DEFAULT_ID_LENGTH,
    },
}


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(APP_ENV_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'"""
    return os.environ.get(APP_NAME_ENV)


def app_prefix() -> str | None:
    """Return record store key prefix

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'aliasnav'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'aliasnav:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def default_config() -> dict[str, Any]:
    return copy.deepcopy(_DEFAULTS)


@require_environment(CONFIG_FILE_ENV)
def load_config_file() -> dict[str, Any]:
    """Read the JSON configuration document pointed to by `ALIASNAV_CONFIG_FILE`

    Returns:
        dict: parsed document (not merged with defaults).

    Raises:
        KeyError:
            If `ALIASNAV_CONFIG_FILE` is not set.
        FileNotFoundError:
            If the file does not exist.
        BadConfigurationError:
            If the file is not a JSON object.
    """
    path = Path(os.environ[CONFIG_FILE_ENV])
    logger.debug('Loading configuration file.', extra={'configFile': str(path)})

    with open(path, 'r', encoding='utf-8') as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise BadConfigurationError(f'Configuration file {path} is not valid JSON.') from e

    if not isinstance(document, dict):
        raise BadConfigurationError(f'Configuration file {path} must contain a JSON object.')
    return document


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate(config: dict[str, Any]) -> dict[str, Any]:
    backend = config.get('active_backend')
    if backend not in BACKENDS:
        raise BadConfigurationError(f"Unknown record store backend '{backend}' (expected one of: {', '.join(sorted(BACKENDS))}).")

    for section in ('configs', 'search', 'ids'):
        if not isinstance(config.get(section), dict):
            raise BadConfigurationError(f"'{section}' must be a JSON object.")

    search = config['search']
    if not isinstance(search.get('debounce_ms'), (int, float)) or search['debounce_ms'] < 0:
        raise BadConfigurationError(f"search.debounce_ms must be a non-negative number (given: {search.get('debounce_ms')!r}).")
    if not isinstance(search.get('cache_size'), int) or search['cache_size'] < 1:
        raise BadConfigurationError(f"search.cache_size must be a positive integer (given: {search.get('cache_size')!r}).")

    ids = config['ids']
    if not isinstance(ids.get('salt'), str) or not ids['salt']:
        raise BadConfigurationError('ids.salt must be a non-empty string.')
    if not isinstance(ids.get('length'), int) or ids['length'] < 1:
        raise BadConfigurationError(f"ids.length must be a positive integer (given: {ids.get('length')!r}).")

    return config


def load_config() -> dict[str, Any]:
    """Load the application configuration document

    Returns:
        dict: defaults, merged with the `ALIASNAV_CONFIG_FILE` document when set.

    Raises:
        BadConfigurationError:
            If the merged configuration is invalid.
    """
    config = default_config()
    if os.environ.get(CONFIG_FILE_ENV):
        config = _deep_merge(config, load_config_file())

    logger.debug('Loaded configuration.', extra={'backend': config.get('active_backend'), 'appPrefix': app_prefix()})
    return _validate(config)
