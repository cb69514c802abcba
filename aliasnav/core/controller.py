"""Debounced, cached incremental search

QueryController sits in front of a search function. It records every keystroke
immediately but only evaluates the latest query once no new input has arrived for
the debounce window. Superseded queries are never evaluated, and the result of an
evaluation that was overtaken by newer input is discarded.

State machine (single pending slot):

    IDLE --on_query_changed--> SCHEDULED --timer fires--> EVALUATING --done--> IDLE
                                   ^                          |
                                   +------on_query_changed----+   (result discarded)

Every transition bumps a generation counter; a scheduled or in-flight evaluation
only publishes its result if its generation is still current.

Results are cached by folded query text in a bounded FIFO cache. The cache holds
rankings of a candidate snapshot, so any mutation of the candidate set must call
invalidate().

Classes:
    QueryState:
        IDLE / SCHEDULED / EVALUATING.
    ResultCache:
        Bounded cache with insertion-order (oldest first) eviction.
    QueryController:
        Debounced query session.

Example:
    >>> controller = QueryController(lambda q: engine.search(q, namespace.all()))
    >>> unsubscribe = controller.subscribe(lambda query, results: print(query, len(results)))
    >>> for text in ('m', 'me', 'met'):
    ...     controller.on_query_changed(text)
    >>> # ... 300ms later, a single evaluation runs for 'met'
    met 1
"""

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from enum import Enum
from typing import Any, Optional

from aliasnav.types import SearchFunction, ResultsListener
from aliasnav.core.scheduler import Scheduler, TimerScheduler
from aliasnav.utils.validators import fold
from aliasnav.utils.constants import DEFAULT_DEBOUNCE_MS, DEFAULT_CACHE_SIZE


logger = logging.getLogger(__name__)


class QueryState(Enum):
    IDLE = 'idle'
    SCHEDULED = 'scheduled'
    EVALUATING = 'evaluating'


class ResultCache:
    """Bounded query -> results cache evicting in insertion order (not LRU)

    Example:
        >>> cache = ResultCache(capacity=2)
        >>> cache.put('a', [1]); cache.put('b', [2]); cache.get('a')
        [1]
        >>> cache.put('c', [3])
        >>> cache.get('a') is None
        True
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_SIZE):
        if capacity < 1:
            raise ValueError(f'Cache capacity must be a positive integer (given value: {capacity}).')
        self.capacity = capacity
        self._entries: OrderedDict[str, list] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[list]:
        # Reads never refresh an entry's position
        entry = self._entries.get(key)
        return list(entry) if entry is not None else None

    def put(self, key: str, results: list) -> None:
        self._entries[key] = list(results)
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()


class QueryController:
    """Debounced query session with result caching

    Attributes:
        query (str):
            Latest query text, updated on every keystroke.
        results (list):
            Results of the latest completed evaluation.
        state (QueryState):
            Current state of the pending-request slot.
        is_searching (bool):
            True while an evaluation is scheduled or running.

    Methods:
        on_query_changed(text) -> None
        evaluate(text) -> list
        clear() -> None
        invalidate() -> None
        subscribe(callback) -> Callable[[], None]
    """

    def __init__(
        self,
        search_fn: SearchFunction,
        scheduler: Optional[Scheduler] = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_MS / 1000,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ):
        if debounce_seconds < 0:
            raise ValueError(f'Debounce window must be non-negative (given value: {debounce_seconds}).')

        self._search_fn = search_fn
        self._scheduler = scheduler or TimerScheduler()
        self.debounce_seconds = debounce_seconds
        self.cache = ResultCache(cache_size)

        self._lock = threading.RLock()
        self._listeners: list[ResultsListener] = []
        self._query = ''
        self._results: list = []
        self._state = QueryState.IDLE
        self._generation = 0
        self._cache_epoch = 0
        self._handle: Any = None

    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> list:
        return list(self._results)

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def is_searching(self) -> bool:
        return self._state is not QueryState.IDLE

    def subscribe(self, callback: ResultsListener) -> Callable[[], None]:
        """Register a listener called with (query, results) after each published evaluation

        Listeners run with the controller lock held. They may call back into the
        controller from the same thread but must not wait on another thread that does.

        Returns:
            Callable[[], None]: function removing the listener (safe to call twice).
        """
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def on_query_changed(self, text: str) -> None:
        """Record the latest query text and (re)start the debounce window

        An empty or whitespace-only query publishes an empty result list right away
        without evaluating anything.
        """
        with self._lock:
            self._query = text
            self._cancel_pending()
            if fold(text):
                self._schedule(self.debounce_seconds)
                return
            self._results = []
            self._state = QueryState.IDLE
            self._publish(text, [])

    def clear(self) -> None:
        """Reset query and results, cancelling any pending evaluation"""
        with self._lock:
            self._cancel_pending()
            self._query = ''
            self._results = []
            self._state = QueryState.IDLE
            self._publish('', [])

    def invalidate(self) -> None:
        """Drop every cached result; re-evaluate the active query, if any"""
        with self._lock:
            self.cache.clear()
            self._cache_epoch += 1
            if fold(self._query):
                self._cancel_pending()
                self._schedule(0.0)

        logger.debug('Invalidated query cache.', extra={'query': self._query})

    def evaluate(self, text: str) -> list:
        """Evaluate a query synchronously, serving and filling the cache"""
        key = fold(text)
        if not key:
            return []

        with self._lock:
            cached = self.cache.get(key)
            epoch = self._cache_epoch
        if cached is not None:
            logger.debug('Serving cached query results.', extra={'query': key, 'count': len(cached)})
            return cached

        results = list(self._search_fn(text))

        with self._lock:
            # Results computed against a snapshot that was invalidated meanwhile are not cached
            if epoch == self._cache_epoch:
                self.cache.put(key, results)

        logger.debug('Evaluated query.', extra={'query': key, 'count': len(results)})
        return results

    # -------------------------------
    # Internals
    # -------------------------------

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None

    def _schedule(self, delay: float) -> None:
        generation = self._generation
        self._state = QueryState.SCHEDULED
        self._handle = self._scheduler.schedule(delay, lambda: self._run(generation))

    def _run(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None
            self._state = QueryState.EVALUATING
            text = self._query

        try:
            results = self.evaluate(text)
        except Exception:
            with self._lock:
                if generation == self._generation:
                    self._state = QueryState.IDLE
            logger.exception('Query evaluation failed.', extra={'query': text})
            raise

        with self._lock:
            if generation != self._generation:
                logger.debug('Discarded superseded query results.', extra={'query': text})
                return
            self._results = results
            self._state = QueryState.IDLE
            self._publish(text, results)

    def _publish(self, text: str, results: list) -> None:
        # Called with the lock held, so a newer publication never precedes an older one
        for listener in list(self._listeners):
            listener(text, list(results))
