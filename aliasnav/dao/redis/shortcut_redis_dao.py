"""Data Access Object (DAO) implementation for managing shortcuts in Redis

This module provides a Redis-based implementation of ShortcutBaseDAO.

Key layout (see RedisKeySchema):
    <prefix>:shortcuts:<id>        -> hash with the ShortcutModel fields (ShortcutModel.to_dict())
    <prefix>:shortcuts:ids         -> set of live shortcut ids
    <prefix>:shortcuts:counter     -> identifier counter

Responsibilities:
    - Store, load and remove shortcuts;
    - Write several shortcuts in one MULTI/EXEC transaction (folder renames);
    - Increment the identifier counter;
    - Maintain per-shortcut access counters atomically;
    - Raise StoreUnavailableError on connectivity issues.

Classes:
    ShortcutRedisDAO:
        DAO for storing and retrieving ShortcutModel in a Redis datastore.

Example:
    >>> from aliasnav.models import ShortcutModel
    >>> from aliasnav.dao.redis import ShortcutRedisDAO

    >>> dao = ShortcutRedisDAO(prefix='aliasnav:dev')
    >>> dao.put(ShortcutModel(id='k3XbQ9aZpT', url='https://work.com/meet', alias='meet', folder='work'))
    <ShortcutRedisDAO>
    >>> dao.get('k3XbQ9aZpT').full_alias
    'work/meet'
    >>> dao.record_access('k3XbQ9aZpT', datetime.now(UTC)).access_count
    1
"""

from collections.abc import Iterable
from datetime import datetime

from beartype import beartype

from aliasnav.models import ShortcutModel
from aliasnav.dao.base import ShortcutBaseDAO
from aliasnav.dao.redis.mixins import RedisClientMixin
from aliasnav.dao.redis.helpers import handle_redis_connection_error
from aliasnav.dao.exceptions import ShortcutNotFoundError
from aliasnav.utils.helpers import dump_datetime


class ShortcutRedisDAO(RedisClientMixin, ShortcutBaseDAO):
    """Redis-based Data Access Object (DAO) for shortcuts

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
    """

    def __repr__(self) -> str:
        return '<ShortcutRedisDAO>'

    @handle_redis_connection_error
    def all(self, **kwargs) -> list[ShortcutModel]:
        """Load every live shortcut

        Ids are read first, then all hashes are fetched in a single pipeline round trip.
        Ids whose hash has vanished (concurrent delete) are skipped.
        """
        shortcut_ids = sorted(self.redis.smembers(self.keys.shortcut_ids_key()))
        if not shortcut_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for shortcut_id in shortcut_ids:
                pipe.hgetall(self.keys.shortcut_key(shortcut_id))
            records = pipe.execute()

        return [ShortcutModel.from_dict(record) for record in records if record]

    @handle_redis_connection_error
    @beartype
    def get(self, shortcut_id: str, **kwargs) -> ShortcutModel | None:
        record = self.redis.hgetall(self.keys.shortcut_key(shortcut_id))
        return ShortcutModel.from_dict(record) if record else None

    @handle_redis_connection_error
    @beartype
    def put(self, shortcut: ShortcutModel, **kwargs) -> 'ShortcutRedisDAO':
        """Insert or replace a shortcut

        The hash write and the id set membership are executed as one transaction
        so a reader never sees an id without its record.

        Args:
            shortcut (ShortcutModel):
                Shortcut to persist.

        Returns:
            ShortcutRedisDAO: self (for method chaining)

        Raises:
            StoreUnavailableError:
                If a Redis connection issue occurs during the transaction.
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(self.keys.shortcut_key(shortcut.id), mapping=shortcut.to_dict())
            pipe.sadd(self.keys.shortcut_ids_key(), shortcut.id)
            pipe.execute()
        return self

    @handle_redis_connection_error
    def put_many(self, shortcuts: Iterable[ShortcutModel], **kwargs) -> 'ShortcutRedisDAO':
        """Insert or replace several shortcuts in one MULTI/EXEC transaction

        NOTE: Redis applies the whole transaction or nothing, so a folder rename
              never becomes visible half way through.
        """
        staged = list(shortcuts)
        for shortcut in staged:
            if not isinstance(shortcut, ShortcutModel):
                raise TypeError(f'Expected ShortcutModel (given type: {type(shortcut)}).')
        if not staged:
            return self

        with self.redis.pipeline(transaction=True) as pipe:
            for shortcut in staged:
                pipe.hset(self.keys.shortcut_key(shortcut.id), mapping=shortcut.to_dict())
                pipe.sadd(self.keys.shortcut_ids_key(), shortcut.id)
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def delete(self, shortcut_id: str, **kwargs) -> bool:
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(self.keys.shortcut_key(shortcut_id))
            pipe.srem(self.keys.shortcut_ids_key(), shortcut_id)
            deleted, _ = pipe.execute()
        return bool(deleted)

    @handle_redis_connection_error
    def count(self, increment: bool = False, **kwargs) -> int:
        """Retrieve the identifier counter

        Example:
            >>> dao.count(increment=False)
            123
            >>> dao.count(increment=True)
            124
        """
        if increment:
            return int(self.redis.incr(self.keys.counter_key()))
        return int(self.redis.get(self.keys.counter_key()) or 0)

    @handle_redis_connection_error
    @beartype
    def record_access(self, shortcut_id: str, accessed_at: datetime, **kwargs) -> ShortcutModel:
        """Increment the access counter and stamp the access time

        NOTE: HINCRBY and HSET run in the same transaction, so the counter and the
              timestamp always move together even with concurrent readers.

        Raises:
            ShortcutNotFoundError:
                If no shortcut with the given id exists.
            StoreUnavailableError:
                If Redis connectivity issues occur.
        """
        shortcut_key = self.keys.shortcut_key(shortcut_id)
        if not self.redis.exists(shortcut_key):
            raise ShortcutNotFoundError(f"Shortcut with id '{shortcut_id}' not found.")

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hincrby(shortcut_key, 'access_count', 1)
            pipe.hset(shortcut_key, 'last_accessed_at', dump_datetime(accessed_at))
            pipe.hgetall(shortcut_key)
            _, _, record = pipe.execute()

        return self._counted_model(shortcut_id, record)

    @handle_redis_connection_error
    @beartype
    def reset_access(self, shortcut_id: str, **kwargs) -> ShortcutModel:
        shortcut_key = self.keys.shortcut_key(shortcut_id)
        if not self.redis.exists(shortcut_key):
            raise ShortcutNotFoundError(f"Shortcut with id '{shortcut_id}' not found.")

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(shortcut_key, mapping={'access_count': '0', 'last_accessed_at': ''})
            pipe.hgetall(shortcut_key)
            _, record = pipe.execute()

        return self._counted_model(shortcut_id, record)

    def _counted_model(self, shortcut_id: str, record: dict) -> ShortcutModel:
        """Build the model from a counter update, discarding a hash recreated by a concurrent delete

        A delete landing between the existence check and the transaction leaves a hash
        holding only the counter fields.
        """
        if not record.get('id'):
            self.redis.delete(self.keys.shortcut_key(shortcut_id))
            raise ShortcutNotFoundError(f"Shortcut with id '{shortcut_id}' not found.")
        return ShortcutModel.from_dict(record)
