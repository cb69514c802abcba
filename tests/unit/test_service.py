"""Unit tests for the ShortcutService facade and build_service()

Test coverage includes:

1. End-to-end scenarios
   - Duplicate aliases, same alias in different folders, folder-scoped and plain search,
     conflicting folder rename and non-empty folder deletion.

2. Cache invalidation
   - Every successful mutation invalidates cached query results.
   - Failed mutations leave the cache untouched.

3. Navigation and frequency views

4. build_service()
   - Memory backend by default, Redis backend from configuration.
   - Unknown backends raise BadConfigurationError.
"""

from unittest.mock import patch

import pytest

from aliasnav.service import ShortcutService, build_service
from aliasnav.core import Tier
from aliasnav.dao.memory import ShortcutMemoryDAO, FolderMemoryDAO
from aliasnav.exceptions import (
    BadConfigurationError,
    DuplicateAliasError,
    FolderNotEmptyError,
    FolderRenameConflictError,
)
from aliasnav.utils.config import default_config


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def service(shortcut_dao, folder_dao, scheduler, clock):
    return ShortcutService(shortcut_dao, folder_dao, scheduler=scheduler, clock=clock)


@pytest.fixture
def work_meet(service):
    return service.create({'url': 'https://work.com/meet', 'alias': 'meet', 'folder': 'work'})


@pytest.fixture
def root_meet(service):
    return service.create({'url': 'https://meet.google.com', 'alias': 'meet'})


# -------------------------------
# 1. End-to-end scenarios
# -------------------------------


def test_duplicate_alias_in_same_folder(service, work_meet):
    with pytest.raises(DuplicateAliasError):
        service.create({'url': 'https://x.com', 'alias': 'meet', 'folder': 'work'})


def test_same_alias_in_different_folders(service, work_meet, root_meet):
    assert sorted(s.full_alias for s in service.all()) == ['meet', 'work/meet']


def test_folder_scoped_search(service, work_meet, root_meet):
    results = service.search('work/me')
    assert [(r.shortcut.full_alias, r.tier) for r in results] == [('work/meet', Tier.PARTIAL)]


def test_plain_search(service, work_meet, root_meet):
    results = service.search('meet')
    assert [(r.shortcut.full_alias, r.tier) for r in results] == [('meet', Tier.EXACT), ('work/meet', Tier.EXACT)]
    assert len(service.search('meet', limit=1)) == 1


def test_rename_folder_conflict(service, work_meet):
    service.create({'url': 'https://team.com/meet', 'alias': 'meet', 'folder': 'team'})

    with pytest.raises(FolderRenameConflictError):
        service.rename_folder('work', 'team')
    assert service.get(work_meet.id).folder == 'work'


def test_delete_non_empty_folder(service, work_meet):
    with pytest.raises(FolderNotEmptyError):
        service.delete_folder('work')


def test_folder_management(service, work_meet):
    service.create_folder('archive')
    assert service.folder_suggestions() == ['archive', 'work']
    assert [(f.name, f.shortcut_count) for f in service.list_folders()] == [('archive', 0), ('work', 1)]
    assert service.cleanup_empty_folders() == 1
    assert service.rename_folder('work', 'team') == 1


def test_bulk_and_statistics(service, work_meet, root_meet):
    result = service.bulk([work_meet.id, root_meet.id], 'add_tags', ['video'])
    assert result.updated == 2

    stats = service.statistics()
    assert stats['total'] == 2
    assert stats['by_folder'] == {'work': 1, 'ungrouped': 1}


# -------------------------------
# 2. Cache invalidation
# -------------------------------


def test_mutations_invalidate_cached_results(service, scheduler, work_meet):
    received = []
    service.subscribe(lambda query, results: received.append([r.shortcut.full_alias for r in results]))

    service.on_query_changed('meet')
    scheduler.fire_all()
    assert received[-1] == ['work/meet']

    created = service.create({'url': 'https://meet.google.com', 'alias': 'meet'})
    scheduler.fire_all()
    assert received[-1] == ['meet', 'work/meet']

    service.update(created.id, {'alias': 'hangout'})
    scheduler.fire_all()
    assert received[-1] == ['work/meet', 'hangout']  # URL tier

    service.delete(work_meet.id)
    scheduler.fire_all()
    assert received[-1] == ['hangout']


def test_failed_mutation_keeps_cache(service, work_meet):
    service.controller.evaluate('meet')

    with pytest.raises(DuplicateAliasError):
        service.create({'url': 'https://x.com', 'alias': 'meet', 'folder': 'work'})

    assert 'meet' in service.controller.cache


def test_rename_invalidates_cache(service, work_meet):
    service.controller.evaluate('work')
    service.rename_folder('work', 'team')
    assert len(service.controller.cache) == 0


def test_clear_query(service, scheduler):
    service.on_query_changed('meet')
    service.clear_query()
    assert scheduler.pending == {}
    assert service.controller.query == ''


# -------------------------------
# 3. Navigation and frequency views
# -------------------------------


def test_resolve_records_access(service, work_meet, root_meet):
    assert service.resolve('WORK/MEET').access_count == 1
    assert service.resolve('work/meet').access_count == 2
    assert service.resolve('unknown') is None
    assert [s.id for s in service.top_frequent(1)] == [work_meet.id]


def test_recent_and_reset(service, work_meet, root_meet, clock):
    service.record_access(root_meet.id)
    clock.advance(minutes=1)
    service.record_access(work_meet.id)

    assert [s.id for s in service.recent()] == [work_meet.id, root_meet.id]
    assert service.reset_access(work_meet.id).access_count == 0
    assert [s.id for s in service.recent()] == [root_meet.id]


# -------------------------------
# 4. build_service()
# -------------------------------


def test_build_service_with_memory_backend(monkeypatch, scheduler):
    monkeypatch.delenv('ALIASNAV_CONFIG_FILE', raising=False)

    service = build_service(scheduler=scheduler)

    assert isinstance(service.namespace.shortcuts, ShortcutMemoryDAO)
    assert isinstance(service.namespace.folders, FolderMemoryDAO)
    assert service.controller.debounce_seconds == 0.3
    assert service.controller.cache.capacity == 50


def test_build_service_with_redis_backend(monkeypatch):
    monkeypatch.setenv('APP_NAME', 'aliasnav')
    monkeypatch.setenv('APP_ENV', 'test')
    config = default_config()
    config['active_backend'] = 'redis'
    config['configs']['redis'] = {'host': 'redis', 'port': 6380, 'db': 2}
    config['search'] = {'debounce_ms': 150, 'cache_size': 10}

    with (
        patch('aliasnav.service.ShortcutRedisDAO') as shortcut_dao_cls,
        patch('aliasnav.service.FolderRedisDAO') as folder_dao_cls,
    ):
        shortcut_dao_cls.return_value.all.return_value = []
        service = build_service(config)

    shortcut_dao_cls.assert_called_once_with(redis_host='redis', redis_port=6380, redis_db=2, prefix='aliasnav:test')
    folder_dao_cls.assert_called_once_with(redis_client=shortcut_dao_cls.return_value.redis, prefix='aliasnav:test')
    assert service.controller.debounce_seconds == 0.15
    assert service.controller.cache.capacity == 10


def test_build_service_with_unknown_backend():
    config = default_config()
    config['active_backend'] = 'dynamodb'
    with pytest.raises(BadConfigurationError, match="Unknown record store backend 'dynamodb'"):
        build_service(config)
