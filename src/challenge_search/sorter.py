"""
Result sorting and materialisation.

Sorting is done by Redis itself: SORT over the combined result set,
weighted BY the per-record sort values written by IndexWriter. Text
fields compare lexically (ALPHA, case-sensitive), numeric fields compare
as numbers.
"""

from typing import List, Optional

import redis

from config.constants import SORT_FIELD_ALIASES, SORT_FIELDS
from core.logging import get_logger
from core.utils import as_text
from challenge_search.errors import UnknownSortFieldError
from challenge_search.keys import KeyBuilder
from challenge_search.models import Challenge

logger = get_logger(__name__)


def resolve_sort_field(sort_by: str) -> str:
    """Canonical sort field for `sort_by`, accepting legacy aliases."""
    name = sort_by.strip().lower()
    name = SORT_FIELD_ALIASES.get(name, name)
    if name not in SORT_FIELDS:
        raise UnknownSortFieldError(sort_by, list(SORT_FIELDS) + list(SORT_FIELD_ALIASES))
    return name


def is_descending(order: Optional[str]) -> bool:
    return isinstance(order, str) and order.strip().lower() == "desc"


class ResultSorter:
    """Orders a result set and loads the raw records behind it."""

    def __init__(self, client: redis.Redis, keys: KeyBuilder):
        self._redis = client
        self.keys = keys

    def sorted_ids(
        self,
        set_key: str,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> List[str]:
        """
        Members of `set_key`, ordered by `sort_by` when given.

        Without `sort_by` the members come back in Redis' own set order.
        """
        if not sort_by:
            ids = self._redis.smembers(set_key)
        else:
            field = resolve_sort_field(sort_by)
            ids = self._redis.sort(
                set_key,
                by=self.keys.sort_pattern(field),
                alpha=SORT_FIELDS[field],
                desc=is_descending(order),
            )
        return [as_text(record_id) for record_id in ids]

    def materialize(self, ids: List[str]) -> List[Challenge]:
        """
        Raw records for `ids`, same order.

        Ids without raw data are stale set members left by an interrupted
        write; they are skipped.
        """
        if not ids:
            return []
        payloads = self._redis.hmget(self.keys.raw_data, ids)
        results = []
        stale = 0
        for data in payloads:
            if not data:
                stale += 1
                continue
            results.append(Challenge.from_json(data))
        if stale:
            logger.debug("Skipped ids without raw data", stale=stale)
        return results
