"""Presentation-facing facade wiring the namespace, search, frequency and query components

ShortcutService is the only surface a presentation layer needs. It forwards
mutations to the NamespaceManager and invalidates the QueryController cache after
every successful one, so cached rankings never outlive the candidate snapshot they
were computed from.

Functions:
    build_service(config=None) -> ShortcutService
        Build a service from the configuration document (see aliasnav.utils.config).

Example:
    >>> from aliasnav.service import build_service
    >>> service = build_service()
    >>> service.create({'url': 'https://work.com/meet', 'alias': 'meet', 'folder': 'work'})
    >>> service.create({'url': 'https://meet.google.com', 'alias': 'meet'})
    >>> [r.shortcut.full_alias for r in service.search('meet')]
    ['meet', 'work/meet']
    >>> service.resolve('WORK/meet').access_count
    1
"""

import logging
from collections.abc import Callable, Iterable
from datetime import timedelta
from typing import Any, Optional

from aliasnav.types import AppConfig, ShortcutDraft, ShortcutPatch, ResultsListener, Statistics
from aliasnav.models import ShortcutModel, FolderModel, FolderStats
from aliasnav.dao.base import ShortcutBaseDAO, FolderBaseDAO
from aliasnav.dao.memory import ShortcutMemoryDAO, FolderMemoryDAO
from aliasnav.dao.redis import ShortcutRedisDAO, FolderRedisDAO
from aliasnav.core import (
    NamespaceManager,
    BulkResult,
    SearchEngine,
    TieredSearchEngine,
    RankedResult,
    FrequencyTracker,
    QueryController,
    Scheduler,
)
from aliasnav.exceptions import BadConfigurationError
from aliasnav.utils.config import app_prefix, load_config
from aliasnav.utils.constants import (
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_CACHE_SIZE,
    DEFAULT_ID_SALT,
    DEFAULT_ID_LENGTH,
    DEFAULT_TOP_FREQUENT,
    DEFAULT_RECENT_DAYS,
)


logger = logging.getLogger(__name__)


class ShortcutService:
    """Facade over the alias namespace and ranked search engine

    Attributes:
        namespace (NamespaceManager):
            Owner of every shortcut and folder mutation.
        engine (SearchEngine):
            Ranking engine used by search() and the query controller.
        frequency (FrequencyTracker):
            Access counter bookkeeping.
        controller (QueryController):
            Debounced, cached query session.
    """

    def __init__(
        self,
        shortcuts: ShortcutBaseDAO,
        folders: FolderBaseDAO,
        engine: Optional[SearchEngine] = None,
        scheduler: Optional[Scheduler] = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_MS / 1000,
        cache_size: int = DEFAULT_CACHE_SIZE,
        id_salt: str = DEFAULT_ID_SALT,
        id_length: int = DEFAULT_ID_LENGTH,
        clock: Optional[Callable] = None,
    ):
        self.namespace = NamespaceManager(shortcuts, folders, clock=clock, id_salt=id_salt, id_length=id_length)
        self.engine = engine or TieredSearchEngine()
        self.frequency = FrequencyTracker(shortcuts, clock=clock)
        self.controller = QueryController(
            lambda query: self.engine.search(query, self.namespace.all()),
            scheduler=scheduler,
            debounce_seconds=debounce_seconds,
            cache_size=cache_size,
        )

    # -------------------------------
    # Shortcuts
    # -------------------------------

    def create(self, draft: ShortcutDraft) -> ShortcutModel:
        shortcut = self.namespace.create(draft)
        self.controller.invalidate()
        return shortcut

    def update(self, shortcut_id: str, patch: ShortcutPatch) -> ShortcutModel:
        shortcut = self.namespace.update(shortcut_id, patch)
        self.controller.invalidate()
        return shortcut

    def delete(self, shortcut_id: str) -> None:
        self.namespace.delete(shortcut_id)
        self.controller.invalidate()

    def get(self, shortcut_id: str) -> Optional[ShortcutModel]:
        return self.namespace.get(shortcut_id)

    def all(self) -> list[ShortcutModel]:
        return self.namespace.all()

    def resolve(self, full_alias: str) -> Optional[ShortcutModel]:
        """Navigate by full alias ('folder/alias' or 'alias')

        Records the access when the alias exists.

        Returns:
            ShortcutModel | None: the shortcut with its updated access counter, or None.
        """
        shortcut = self.namespace.get_by_full_alias(full_alias)
        if shortcut is None:
            logger.debug('Unknown alias.', extra={'fullAlias': full_alias})
            return None
        return self.frequency.record_access(shortcut.id)

    # -------------------------------
    # Folders
    # -------------------------------

    def create_folder(self, name: str) -> FolderModel:
        return self.namespace.create_folder(name)

    def rename_folder(self, old_name: str, new_name: str) -> int:
        moved = self.namespace.rename_folder(old_name, new_name)
        if moved:
            self.controller.invalidate()
        return moved

    def delete_folder(self, name: str) -> None:
        self.namespace.delete_folder(name)

    def cleanup_empty_folders(self) -> int:
        return self.namespace.cleanup_empty_folders()

    def list_folders(self) -> list[FolderStats]:
        return self.namespace.list_folders()

    def folder_suggestions(self) -> list[str]:
        return self.namespace.folder_suggestions()

    # -------------------------------
    # Bulk operations and statistics
    # -------------------------------

    def bulk(self, ids: Iterable[str], operation: str, data: Any = None) -> BulkResult:
        result = self.namespace.bulk(ids, operation, data)
        if result.updated:
            self.controller.invalidate()
        return result

    def statistics(self) -> Statistics:
        return self.namespace.statistics()

    # -------------------------------
    # Search
    # -------------------------------

    def search(self, query: str, limit: Optional[int] = None) -> list[RankedResult]:
        """Synchronous relevance computation against the current candidate snapshot"""
        return self.engine.search(query, self.namespace.all(), limit=limit)

    def on_query_changed(self, text: str) -> None:
        self.controller.on_query_changed(text)

    def clear_query(self) -> None:
        self.controller.clear()

    def subscribe(self, callback: ResultsListener) -> Callable[[], None]:
        return self.controller.subscribe(callback)

    # -------------------------------
    # Frequency
    # -------------------------------

    def record_access(self, shortcut_id: str) -> ShortcutModel:
        return self.frequency.record_access(shortcut_id)

    def top_frequent(self, n: int = DEFAULT_TOP_FREQUENT) -> list[ShortcutModel]:
        return self.frequency.top_frequent(n)

    def recent(self, n: int = DEFAULT_TOP_FREQUENT, within: timedelta = timedelta(days=DEFAULT_RECENT_DAYS)) -> list[ShortcutModel]:
        return self.frequency.recent(n, within=within)

    def reset_access(self, shortcut_id: str) -> ShortcutModel:
        return self.frequency.reset(shortcut_id)


def _redis_options(config: AppConfig) -> dict[str, Any]:
    redis_config = config['configs'].get('redis', {})
    options = {f'redis_{key}': value for key, value in redis_config.items()}
    options.setdefault('prefix', app_prefix())
    return options


def build_service(config: Optional[AppConfig] = None, scheduler: Optional[Scheduler] = None) -> ShortcutService:
    """Build a ShortcutService from a configuration document

    Args:
        config (Optional[AppConfig]):
            Configuration document. Loaded with load_config() when omitted.
        scheduler (Optional[Scheduler]):
            Scheduler for debounced evaluation. Defaults to TimerScheduler.

    Returns:
        ShortcutService: service wired to the configured record store backend.

    Raises:
        BadConfigurationError:
            If the configured backend is unknown.
        StoreUnavailableError:
            If the Redis backend is selected and Redis cannot be reached.
    """
    if config is None:
        config = load_config()

    backend = config.get('active_backend')
    if backend == 'memory':
        shortcuts, folders = ShortcutMemoryDAO(), FolderMemoryDAO()
    elif backend == 'redis':
        options = _redis_options(config)
        shortcuts = ShortcutRedisDAO(**options)
        folders = FolderRedisDAO(redis_client=shortcuts.redis, prefix=options['prefix'])
    else:
        raise BadConfigurationError(f"Unknown record store backend '{backend}'.")

    search = config.get('search', {})
    ids = config.get('ids', {})

    logger.info('Initialized shortcut service.', extra={'backend': backend})
    return ShortcutService(
        shortcuts,
        folders,
        scheduler=scheduler,
        debounce_seconds=search.get('debounce_ms', DEFAULT_DEBOUNCE_MS) / 1000,
        cache_size=search.get('cache_size', DEFAULT_CACHE_SIZE),
        id_salt=ids.get('salt', DEFAULT_ID_SALT),
        id_length=ids.get('length', DEFAULT_ID_LENGTH),
    )
