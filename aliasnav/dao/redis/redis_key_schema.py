import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing shortcuts and folders.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "aliasnav:prod" or "aliasnav:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def shortcut_key(self, shortcut_id: str) -> str:
        return f'shortcuts:{shortcut_id}'

    @prefix_key
    def shortcut_ids_key(self) -> str:
        return 'shortcuts:ids'

    @prefix_key
    def counter_key(self) -> str:
        return 'shortcuts:counter'

    @prefix_key
    def folder_key(self, folder_key: str) -> str:
        return f'folders:{folder_key}'

    @prefix_key
    def folder_names_key(self) -> str:
        return 'folders:names'
