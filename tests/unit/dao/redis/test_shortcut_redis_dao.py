"""Unit tests for the ShortcutRedisDAO and FolderRedisDAO

Test coverage includes:

1. Retrieval behavior
   - Ensures all() reads the id set and fetches hashes in one pipeline.
   - Ensures get() returns a populated ShortcutModel or None.
   - Validates invalid parameter types raise type errors.
   - Confirms Redis connection errors raise StoreUnavailableError.

2. Write behavior
   - Validates put() writes the hash and id set membership in one transaction.
   - Validates put_many() writes every shortcut in a single transaction.
   - Ensures delete() removes hash and id and reports existence.

3. Counter operations
   - Ensures the identifier counter increments or retrieves correctly.

4. Access counters
   - Ensures record_access() uses HINCRBY and stamps the access time transactionally.
   - Confirms missing shortcuts raise ShortcutNotFoundError.
   - A delete racing the counter update discards the partial hash and reports not found.

5. Folder records
   - Ensures folder hashes are keyed by the case-folded name.
"""

from datetime import datetime, UTC
from unittest.mock import MagicMock, call

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation

from aliasnav.models import ShortcutModel, FolderModel
from aliasnav.dao.exceptions import ShortcutNotFoundError, StoreUnavailableError
from aliasnav.dao.redis import ShortcutRedisDAO, FolderRedisDAO


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def redis_client():
    """Mock a Redis pipeline-compatible client."""
    _redis_client = MagicMock(spec=redis.client.Pipeline)
    _redis_client.pipeline.return_value = _redis_client
    _redis_client.__enter__.return_value = _redis_client
    _redis_client.__exit__.return_value = None
    _redis_client.connection_pool = MagicMock()
    _redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}
    return _redis_client


@pytest.fixture
def dao(redis_client):
    return ShortcutRedisDAO(redis_client=redis_client, prefix='aliasnav:test')


@pytest.fixture
def folder_dao(redis_client):
    return FolderRedisDAO(redis_client=redis_client, prefix='aliasnav:test')


@pytest.fixture
def shortcut():
    return ShortcutModel(
        id='k3XbQ9aZpT',
        url='https://work.com/meet',
        alias='meet',
        folder='work',
        tags=('video',),
        created_at=datetime(2025, 10, 15, tzinfo=UTC),
        updated_at=datetime(2025, 10, 15, tzinfo=UTC),
    )


# -------------------------------
# 1. Retrieval behavior
# -------------------------------


def test_all(dao, redis_client, shortcut):
    redis_client.smembers.return_value = {'k3XbQ9aZpT', 'vanished'}
    redis_client.execute.return_value = [shortcut.to_dict(), {}]

    shortcuts = dao.all()

    assert shortcuts == [shortcut]
    redis_client.smembers.assert_called_once_with('aliasnav:test:shortcuts:ids')
    redis_client.pipeline.assert_called_once_with(transaction=False)
    redis_client.hgetall.assert_has_calls([call('aliasnav:test:shortcuts:k3XbQ9aZpT'), call('aliasnav:test:shortcuts:vanished')])


def test_all_when_empty(dao, redis_client):
    redis_client.smembers.return_value = set()
    assert dao.all() == []
    redis_client.pipeline.assert_not_called()


def test_get(dao, redis_client, shortcut):
    redis_client.hgetall.return_value = shortcut.to_dict()
    assert dao.get('k3XbQ9aZpT') == shortcut
    redis_client.hgetall.assert_called_once_with('aliasnav:test:shortcuts:k3XbQ9aZpT')


def test_get_missing(dao, redis_client):
    redis_client.hgetall.return_value = {}
    assert dao.get('missing') is None


def test_get_with_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.get(12345)


def test_get_with_redis_connection_error(dao, redis_client):
    redis_client.hgetall.side_effect = redis.exceptions.ConnectionError('Connection Error')
    with pytest.raises(StoreUnavailableError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.get('k3XbQ9aZpT')


# -------------------------------
# 2. Write behavior
# -------------------------------


def test_put(dao, redis_client, shortcut):
    assert dao.put(shortcut) is dao

    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.hset.assert_called_once_with('aliasnav:test:shortcuts:k3XbQ9aZpT', mapping=shortcut.to_dict())
    redis_client.sadd.assert_called_once_with('aliasnav:test:shortcuts:ids', 'k3XbQ9aZpT')
    redis_client.execute.assert_called_once()


def test_put_with_invalid_type(dao):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.put({'id': 'k3XbQ9aZpT'})


def test_put_with_redis_connection_error(dao, redis_client, shortcut):
    redis_client.execute.side_effect = redis.exceptions.TimeoutError('Timeout')
    with pytest.raises(StoreUnavailableError):
        dao.put(shortcut)


def test_put_many(dao, redis_client, shortcut):
    other = ShortcutModel(id='p9QmZ2xLkA', url='https://work.com/docs', alias='docs', folder='work')

    dao.put_many([shortcut, other])

    redis_client.pipeline.assert_called_once_with(transaction=True)
    assert redis_client.hset.call_count == 2
    assert redis_client.sadd.call_count == 2
    redis_client.execute.assert_called_once()


def test_put_many_rejects_invalid_items_before_writing(dao, redis_client, shortcut):
    with pytest.raises(TypeError, match='Expected ShortcutModel'):
        dao.put_many([shortcut, 'not-a-model'])
    redis_client.execute.assert_not_called()


def test_put_many_with_nothing_to_write(dao, redis_client):
    dao.put_many([])
    redis_client.pipeline.assert_not_called()


@pytest.mark.parametrize('deleted, expected', [(1, True), (0, False)])
def test_delete(dao, redis_client, deleted, expected):
    redis_client.execute.return_value = [deleted, deleted]

    assert dao.delete('k3XbQ9aZpT') is expected
    redis_client.delete.assert_called_once_with('aliasnav:test:shortcuts:k3XbQ9aZpT')
    redis_client.srem.assert_called_once_with('aliasnav:test:shortcuts:ids', 'k3XbQ9aZpT')


# -------------------------------
# 3. Counter operations
# -------------------------------


def test_count_with_increment(dao, redis_client):
    redis_client.incr.return_value = 43
    assert dao.count(increment=True) == 43
    redis_client.incr.assert_called_once_with('aliasnav:test:shortcuts:counter')
    redis_client.get.assert_not_called()


def test_count_without_increment(dao, redis_client):
    redis_client.get.return_value = '42'
    assert dao.count(increment=False) == 42
    redis_client.get.assert_called_once_with('aliasnav:test:shortcuts:counter')


def test_count_when_counter_missing(dao, redis_client):
    redis_client.get.return_value = None
    assert dao.count() == 0


def test_count_with_redis_connection_error(dao, redis_client):
    redis_client.incr.side_effect = redis.exceptions.ConnectionError('Connection error')
    with pytest.raises(StoreUnavailableError):
        dao.count(increment=True)


# -------------------------------
# 4. Access counters
# -------------------------------


def test_record_access(dao, redis_client, shortcut):
    accessed_at = datetime(2025, 10, 20, 9, 0, tzinfo=UTC)
    record = {**shortcut.to_dict(), 'access_count': '4', 'last_accessed_at': accessed_at.isoformat()}
    redis_client.exists.return_value = True
    redis_client.execute.return_value = [4, 1, record]

    updated = dao.record_access('k3XbQ9aZpT', accessed_at)

    assert updated.access_count == 4
    assert updated.last_accessed_at == accessed_at
    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.hincrby.assert_called_once_with('aliasnav:test:shortcuts:k3XbQ9aZpT', 'access_count', 1)
    redis_client.hset.assert_called_once_with('aliasnav:test:shortcuts:k3XbQ9aZpT', 'last_accessed_at', '2025-10-20T09:00:00+00:00')


def test_record_access_on_missing_shortcut(dao, redis_client):
    redis_client.exists.return_value = False
    with pytest.raises(ShortcutNotFoundError, match="Shortcut with id 'missing' not found."):
        dao.record_access('missing', datetime(2025, 10, 20, tzinfo=UTC))
    redis_client.hincrby.assert_not_called()


def test_reset_access(dao, redis_client, shortcut):
    redis_client.exists.return_value = True
    redis_client.execute.return_value = [2, shortcut.to_dict()]

    reset = dao.reset_access('k3XbQ9aZpT')

    assert reset.access_count == 0
    redis_client.hset.assert_called_once_with('aliasnav:test:shortcuts:k3XbQ9aZpT', mapping={'access_count': '0', 'last_accessed_at': ''})


@pytest.mark.parametrize(
    'method, args, results',
    [
        ('record_access', (datetime(2025, 10, 20, tzinfo=UTC),), [1, 1, {'access_count': '1', 'last_accessed_at': '2025-10-20T00:00:00+00:00'}]),
        ('reset_access', (), [2, {'access_count': '0', 'last_accessed_at': ''}]),
    ],
)
def test_counter_update_racing_delete(dao, redis_client, method, args, results):
    redis_client.exists.return_value = True
    redis_client.execute.return_value = results

    with pytest.raises(ShortcutNotFoundError, match="Shortcut with id 'k3XbQ9aZpT' not found."):
        getattr(dao, method)('k3XbQ9aZpT', *args)

    redis_client.delete.assert_called_once_with('aliasnav:test:shortcuts:k3XbQ9aZpT')



# -------------------------------
# 5. Folder records
# -------------------------------


def test_folder_put_and_get(folder_dao, redis_client):
    folder = FolderModel(name='Work', created_at=datetime(2025, 10, 15, tzinfo=UTC))

    folder_dao.put(folder)
    redis_client.hset.assert_called_once_with('aliasnav:test:folders:work', mapping=folder.to_dict())
    redis_client.sadd.assert_called_once_with('aliasnav:test:folders:names', 'work')

    redis_client.hgetall.return_value = folder.to_dict()
    assert folder_dao.get('WORK') == folder
    redis_client.hgetall.assert_called_once_with('aliasnav:test:folders:work')


def test_folder_all(folder_dao, redis_client):
    redis_client.smembers.return_value = {'work'}
    redis_client.execute.return_value = [{'name': 'Work', 'created_at': ''}]
    assert folder_dao.all() == [FolderModel(name='Work')]


def test_folder_delete(folder_dao, redis_client):
    redis_client.execute.return_value = [1, 1]
    assert folder_dao.delete(' Work ') is True
    redis_client.delete.assert_called_once_with('aliasnav:test:folders:work')
