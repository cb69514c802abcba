"""Shared Redis client plumbing for the Redis-backed record stores

Both ShortcutRedisDAO and FolderRedisDAO mix in RedisClientMixin so the two stores
can share one client (and one connection pool) and one key prefix.

Example:
    >>> shortcuts = ShortcutRedisDAO(redis_url='redis://localhost:6379/0', prefix='aliasnav:dev')
    >>> folders = FolderRedisDAO(redis_client=shortcuts.redis, prefix='aliasnav:dev')
"""

from typing import Optional

import redis

from aliasnav.dao.redis.redis_key_schema import RedisKeySchema
from aliasnav.dao.exceptions import StoreUnavailableError


_UNREACHABLE_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


class RedisClientMixin:
    """Redis client ownership, key schema and connectivity check for record stores

    Attributes:
        redis (redis.Redis):
            Client used for every store command.
        keys (RedisKeySchema):
            Key builder bound to the store's namespace prefix.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_socket_timeout: Optional[float] = 5.0,
        redis_url: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Attach to Redis and verify the server answers

        Client resolution order: an explicit `redis_client`, then `redis_url`,
        then the individual host/port/db parameters. Every client built here
        carries a socket timeout so a stalled server surfaces as
        StoreUnavailableError instead of hanging the caller.

        Raises:
            StoreUnavailableError:
                If the server does not answer PING.
        """
        if redis_client is None:
            if redis_url is not None:
                redis_client = redis.Redis.from_url(
                    redis_url,
                    decode_responses=redis_decode_responses,
                    socket_timeout=redis_socket_timeout,
                    socket_connect_timeout=redis_socket_timeout,
                )
            else:
                redis_client = redis.Redis(
                    host=redis_host,
                    port=int(redis_port),
                    db=int(redis_db),
                    decode_responses=redis_decode_responses,
                    username=redis_username,
                    password=redis_password,
                    socket_timeout=redis_socket_timeout,
                    socket_connect_timeout=redis_socket_timeout,
                )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)
        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server; return False (or raise) when it is unreachable"""
        try:
            self.redis.ping()
        except _UNREACHABLE_ERRORS as e:
            if not raise_error:
                return False
            location = self._describe_location()
            raise StoreUnavailableError(f"Can't connect to Redis at {location}. Check the provided configuration parameters.") from e
        return True

    def _describe_location(self) -> str:
        info = self.redis.connection_pool.connection_kwargs
        return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'

    def close(self) -> None:
        """Release the client's pooled connections"""
        self.redis.close()
