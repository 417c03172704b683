"""
Challenge search index facade.

Wires the key builder, writer, planner, sorter and reconciler to one
Redis client. Tests and callers that need an isolated keyspace inject
their own client and settings; application code can use
get_challenge_search_index() for a process-wide instance.

Examples:
    index = ChallengeSearchIndex(redis.Redis(decode_responses=True))
    index.upsert(challenge)
    index.search(query="ruby", state="closed")
    index.search({"categories": ["code", "design"]}, sort_by="prize_money", order="desc")
"""

import threading
from typing import Any, Iterable, List, Mapping, Optional

import redis

from config.database import get_redis_client
from config.settings import Settings, get_settings
from core.logging import get_logger
from core.utils import merge_dicts
from challenge_search.keys import REGISTRY_SEGMENTS, KeyBuilder
from challenge_search.models import Challenge, IndexStats, ReconcileResult
from challenge_search.phonetics import PhoneticNormalizer
from challenge_search.planner import QueryPlanner, SearchPlan
from challenge_search.reconciler import BulkReconciler
from challenge_search.sorter import ResultSorter
from challenge_search.writer import IndexWriter

logger = get_logger(__name__)

# Public facet names accepted by facet_values().
_REGISTRY_ALIASES = {
    "categories": "category",
    "platforms": "platform",
    "technologies": "technology",
    "communities": "community",
}


class ChallengeSearchIndex:
    """Secondary search index over challenges, backed by Redis sets."""

    def __init__(
        self,
        client: redis.Redis,
        settings: Optional[Settings] = None,
        normalizer: Optional[PhoneticNormalizer] = None,
    ):
        self.settings = settings or get_settings()
        self._redis = client
        self.keys = KeyBuilder(self.settings.key_root)
        self.normalizer = normalizer or PhoneticNormalizer()
        self.writer = IndexWriter(client, self.keys, self.normalizer)
        self.planner = QueryPlanner(client, self.keys, self.normalizer, self.settings)
        self.sorter = ResultSorter(client, self.keys)
        self.reconciler = BulkReconciler(self.writer)

    # =========================================================================
    # Writes
    # =========================================================================

    def upsert(self, challenge: Any) -> Challenge:
        """Index a Challenge (or a mapping parsed into one), replacing any previous version."""
        if not isinstance(challenge, Challenge):
            challenge = Challenge.model_validate(challenge)
        self.writer.upsert(challenge)
        return challenge

    # lifecycle hook name used by the record store
    sync = upsert

    def remove(self, record_id: str) -> bool:
        return self.writer.remove(record_id)

    def reconcile(self, challenges: Iterable[Any]) -> ReconcileResult:
        parsed = [c if isinstance(c, Challenge) else Challenge.model_validate(c) for c in challenges]
        return self.reconciler.reconcile(parsed)

    # =========================================================================
    # Reads
    # =========================================================================

    def find(self, record_id: str) -> Optional[Challenge]:
        return self.writer.find(record_id)

    def plan(self, filters: Optional[Mapping[str, Any]] = None, **options: Any) -> SearchPlan:
        return self.planner.plan(merge_dicts(filters, options))

    def search(self, filters: Optional[Mapping[str, Any]] = None, **options: Any) -> List[Challenge]:
        """
        Challenges matching every filter, ordered by sort_by/order.

        Filters: query, categories, platforms, technologies, community,
        state, prize_money, participants; options: sort_by, order. Keyword
        arguments are merged over `filters`.

        Raises:
            UnknownFacetError: a filter name has no resolver
            InvalidFilterError: a filter value is malformed
            UnknownSortFieldError: sort_by is not sortable
        """
        plan = self.plan(filters, **options)
        if plan.matches_nothing:
            return []
        if not self._redis.scard(plan.result_key):
            return []

        ids = self.sorter.sorted_ids(plan.result_key, plan.sort_by, plan.order)
        results = self.sorter.materialize(ids)
        logger.debug("Search complete", facets=list(plan.filters), matched=len(ids), returned=len(results))
        return results

    def facet_values(self, facet: str) -> List[str]:
        """Known names for categories, platforms, technologies or communities."""
        facet = _REGISTRY_ALIASES.get(facet, facet)
        if facet not in REGISTRY_SEGMENTS:
            raise ValueError(f"Facet {facet!r} has no name registry")
        return self.writer.facet_values(facet)

    def get_stats(self) -> IndexStats:
        k = self.keys
        pipe = self._redis.pipeline(transaction=False)
        pipe.hlen(k.raw_data)
        pipe.scard(k.state(True))
        pipe.scard(k.state(False))
        for facet in ("category", "platform", "technology", "community"):
            pipe.scard(k.registry(facet))
        indexed, open_, closed, categories, platforms, technologies, communities = pipe.execute()
        return IndexStats(
            key_root=k.root,
            indexed=indexed,
            open=open_,
            closed=closed,
            categories=categories,
            platforms=platforms,
            technologies=technologies,
            communities=communities,
        )


# =============================================================================
# Singleton
# =============================================================================

_index: Optional[ChallengeSearchIndex] = None
_index_lock = threading.Lock()


def get_challenge_search_index() -> ChallengeSearchIndex:
    """Get or create the process-wide ChallengeSearchIndex (thread-safe)."""
    global _index
    if _index is None:
        with _index_lock:
            if _index is None:
                _index = ChallengeSearchIndex(get_redis_client(), get_settings())
    return _index
