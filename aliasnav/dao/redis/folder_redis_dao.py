"""Redis DAO for folder metadata records

Key layout (see RedisKeySchema):
    <prefix>:folders:<folded name>  -> hash with FolderModel fields
    <prefix>:folders:names          -> set of folded folder names
"""

from beartype import beartype

from aliasnav.models import FolderModel
from aliasnav.dao.base import FolderBaseDAO
from aliasnav.dao.redis.mixins import RedisClientMixin
from aliasnav.dao.redis.helpers import handle_redis_connection_error
from aliasnav.utils.validators import fold


class FolderRedisDAO(RedisClientMixin, FolderBaseDAO):
    """Redis-based Data Access Object (DAO) for folder records"""

    def __repr__(self) -> str:
        return '<FolderRedisDAO>'

    @handle_redis_connection_error
    def all(self, **kwargs) -> list[FolderModel]:
        names = sorted(self.redis.smembers(self.keys.folder_names_key()))
        if not names:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for name in names:
                pipe.hgetall(self.keys.folder_key(name))
            records = pipe.execute()

        return [FolderModel.from_dict(record) for record in records if record]

    @handle_redis_connection_error
    @beartype
    def get(self, name: str, **kwargs) -> FolderModel | None:
        record = self.redis.hgetall(self.keys.folder_key(fold(name)))
        return FolderModel.from_dict(record) if record else None

    @handle_redis_connection_error
    @beartype
    def put(self, folder: FolderModel, **kwargs) -> 'FolderRedisDAO':
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(self.keys.folder_key(folder.key), mapping=folder.to_dict())
            pipe.sadd(self.keys.folder_names_key(), folder.key)
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def delete(self, name: str, **kwargs) -> bool:
        key = fold(name)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(self.keys.folder_key(key))
            pipe.srem(self.keys.folder_names_key(), key)
            deleted, _ = pipe.execute()
        return bool(deleted)
