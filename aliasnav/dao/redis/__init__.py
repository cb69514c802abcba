from aliasnav.dao.redis.redis_key_schema import RedisKeySchema
from aliasnav.dao.redis.mixins import RedisClientMixin
from aliasnav.dao.redis.shortcut_redis_dao import ShortcutRedisDAO
from aliasnav.dao.redis.folder_redis_dao import FolderRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortcutRedisDAO',
    'FolderRedisDAO',
]
