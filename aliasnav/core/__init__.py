from aliasnav.core.namespace import NamespaceManager, BulkResult
from aliasnav.core.search import (
    SearchEngine,
    TieredSearchEngine,
    RankedResult,
    ParsedQuery,
    QueryKind,
    Tier,
    parse_query,
)
from aliasnav.core.frequency import FrequencyTracker
from aliasnav.core.scheduler import Scheduler, TimerScheduler
from aliasnav.core.controller import QueryController, QueryState, ResultCache


__all__ = [
    'NamespaceManager',
    'BulkResult',
    'SearchEngine',
    'TieredSearchEngine',
    'RankedResult',
    'ParsedQuery',
    'QueryKind',
    'Tier',
    'parse_query',
    'FrequencyTracker',
    'Scheduler',
    'TimerScheduler',
    'QueryController',
    'QueryState',
    'ResultCache',
]
