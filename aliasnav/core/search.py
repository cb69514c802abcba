"""Tiered relevance search over shortcuts

The engine is a pure function of (query, candidate snapshot): it performs no I/O and
always returns the same ordered list for the same inputs.

Query classification (first match wins):
    1. The trimmed, case-folded query contains '/': split on the first '/' into
       (folder part, alias part).
         - 'work/'    -> folder listing: every shortcut whose folder contains 'work',
                         ordered by alias.
         - 'work/me'  -> folder-scoped: shortcuts whose folder contains 'work' and whose
                         alias matches 'me' (exact > prefix > substring), exact folder
                         matches scoring above partial ones.
    2. Anything else is a plain query ranked into four mutually exclusive tiers:
         EXACT    alias or full alias equals the query
         PARTIAL  alias, full alias or folder contains the query
         TAG      a tag contains the query
         URL      the URL contains the query
       Each tier is ordered by full alias.

An empty or whitespace-only query yields no results.

Example:
    >>> engine = TieredSearchEngine()
    >>> [r.shortcut.full_alias for r in engine.search('meet', shortcuts)]
    ['meet', 'work/meet']
    >>> [r.tier for r in engine.search('work/me', shortcuts)]
    [<Tier.PARTIAL: 2>]
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Protocol

from aliasnav.models import ShortcutModel
from aliasnav.utils.validators import fold


# Folder-scoped scoring
FOLDER_EXACT_SCORE = 100
FOLDER_PARTIAL_SCORE = 50
ALIAS_EXACT_SCORE = 100
ALIAS_PREFIX_SCORE = 75
ALIAS_SUBSTRING_SCORE = 25


class Tier(IntEnum):
    EXACT = 1
    PARTIAL = 2
    TAG = 3
    URL = 4


class QueryKind(Enum):
    EMPTY = 'empty'
    PLAIN = 'plain'
    FOLDER_LISTING = 'folder_listing'
    FOLDER_SCOPED = 'folder_scoped'


@dataclass(frozen=True)
class ParsedQuery:
    kind: QueryKind
    text: str
    folder_part: str = ''
    alias_part: str = ''


@dataclass(frozen=True)
class RankedResult:
    """A search hit: the shortcut, its relevance tier and its score within the tier"""

    shortcut: ShortcutModel
    tier: Tier
    score: int = 0


class SearchEngine(Protocol):
    """Protocol for search engines to allow extensibility."""

    def search(self, query: str, candidates: Iterable[ShortcutModel], limit: Optional[int] = None) -> list[RankedResult]:
        """Rank candidates against a query.

        Args:
            query: Free-text query
            candidates: Snapshot of live shortcuts
            limit: Maximum number of results to return (None for all)

        Returns:
            Ordered list of ranked results
        """
        ...


def parse_query(query: str) -> ParsedQuery:
    """Classify a raw query string

    Args:
        query (str): Raw query text as typed.

    Returns:
        ParsedQuery: kind plus the folded text and, for folder queries, both parts.

    Example:
        >>> parse_query(' Work/ ')
        ParsedQuery(kind=<QueryKind.FOLDER_LISTING: 'folder_listing'>, text='work/', folder_part='work', alias_part='')
    """
    text = fold(query)
    if not text:
        return ParsedQuery(kind=QueryKind.EMPTY, text='')

    if '/' in text:
        folder_part, alias_part = text.split('/', 1)
        folder_part = folder_part.strip()
        alias_part = alias_part.strip()
        kind = QueryKind.FOLDER_SCOPED if alias_part else QueryKind.FOLDER_LISTING
        return ParsedQuery(kind=kind, text=text, folder_part=folder_part, alias_part=alias_part)

    return ParsedQuery(kind=QueryKind.PLAIN, text=text)


def _full_alias_key(shortcut: ShortcutModel) -> str:
    return fold(shortcut.full_alias)


class TieredSearchEngine:
    """Search engine ranking shortcuts into exact, partial, tag and URL tiers"""

    def search(self, query: str, candidates: Iterable[ShortcutModel], limit: Optional[int] = None) -> list[RankedResult]:
        """Rank candidates against a query.

        Args:
            query (str):
                Free-text query (plain, 'folder/' or 'folder/alias').
            candidates (Iterable[ShortcutModel]):
                Snapshot of live shortcuts supplied by the caller.
            limit (Optional[int]):
                Maximum number of results to return. None returns all of them.

        Returns:
            list[RankedResult]:
                Ordered results; every shortcut appears at most once and results of a
                lower tier never precede results of a higher one.
        """
        parsed = parse_query(query)
        candidates = list(candidates)

        if parsed.kind is QueryKind.EMPTY:
            results = []
        elif parsed.kind is QueryKind.FOLDER_LISTING:
            results = self._folder_listing(parsed, candidates)
        elif parsed.kind is QueryKind.FOLDER_SCOPED:
            results = self._folder_scoped(parsed, candidates)
        else:
            results = self._plain(parsed, candidates)

        return results if limit is None else results[: max(limit, 0)]

    def _folder_listing(self, parsed: ParsedQuery, candidates: list[ShortcutModel]) -> list[RankedResult]:
        matches = [shortcut for shortcut in candidates if parsed.folder_part in fold(shortcut.folder)]
        matches.sort(key=lambda shortcut: (fold(shortcut.alias), _full_alias_key(shortcut), shortcut.id))
        return [RankedResult(shortcut=shortcut, tier=Tier.PARTIAL) for shortcut in matches]

    def _folder_scoped(self, parsed: ParsedQuery, candidates: list[ShortcutModel]) -> list[RankedResult]:
        results = []
        for shortcut in candidates:
            folder = fold(shortcut.folder)
            if parsed.folder_part not in folder:
                continue

            alias = fold(shortcut.alias)
            if alias == parsed.alias_part:
                tier, alias_score = Tier.EXACT, ALIAS_EXACT_SCORE
            elif alias.startswith(parsed.alias_part):
                tier, alias_score = Tier.PARTIAL, ALIAS_PREFIX_SCORE
            elif parsed.alias_part in alias:
                tier, alias_score = Tier.PARTIAL, ALIAS_SUBSTRING_SCORE
            else:
                continue

            folder_score = FOLDER_EXACT_SCORE if folder == parsed.folder_part else FOLDER_PARTIAL_SCORE
            results.append(RankedResult(shortcut=shortcut, tier=tier, score=folder_score + alias_score))

        results.sort(key=lambda r: (r.tier, -r.score, _full_alias_key(r.shortcut), r.shortcut.id))
        return results

    def _plain(self, parsed: ParsedQuery, candidates: list[ShortcutModel]) -> list[RankedResult]:
        q = parsed.text
        results = []
        for shortcut in candidates:
            tier = self._classify(q, shortcut)
            if tier is not None:
                results.append(RankedResult(shortcut=shortcut, tier=tier))

        results.sort(key=lambda r: (r.tier, _full_alias_key(r.shortcut), r.shortcut.id))
        return results

    @staticmethod
    def _classify(q: str, shortcut: ShortcutModel) -> Optional[Tier]:
        alias = fold(shortcut.alias)
        folder = fold(shortcut.folder)
        full_alias = _full_alias_key(shortcut)

        # First match wins, so every shortcut lands in at most one tier
        if alias == q or full_alias == q:
            return Tier.EXACT
        if q in alias or q in full_alias or q in folder:
            return Tier.PARTIAL
        if any(q in fold(tag) for tag in shortcut.tags):
            return Tier.TAG
        if q in shortcut.url.casefold():
            return Tier.URL
        return None
