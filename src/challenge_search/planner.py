"""
Query planner for challenge search.

Turns a filter mapping into one Redis set key holding the matching ids:

- each filter is resolved to a single key by the resolver registered for
  its facet name (an unregistered name raises UnknownFacetError);
- several values inside one facet are OR-ed into an ephemeral union key;
- numeric ranges are materialised from the sorted facet into an ephemeral
  set;
- the per-facet keys are AND-ed into one ephemeral intersection key.

Ephemeral keys are named after the content they hold (see
KeyBuilder.temp), written atomically and expire after
EPHEMERAL_KEY_TTL_SECONDS, so concurrent identical queries may share them.

Examples:
    planner.plan({"query": "ruby", "state": "closed"})
    planner.plan({"categories": ["code", "design"]})
    planner.plan({"prize_money": {"min": 1000, "max": 3000}})
    planner.plan({"participants": 3, "sort_by": "prize_money", "order": "DESC"})
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import redis
from pydantic import ValidationError

from config.constants import STATE_CLOSED, STATE_OPEN
from config.settings import Settings, get_settings
from core.logging import get_logger
from core.utils import is_blank, normalize_string_list
from challenge_search.errors import InvalidFilterError, UnknownFacetError
from challenge_search.keys import KeyBuilder
from challenge_search.models import RangeFilter
from challenge_search.phonetics import PhoneticNormalizer
from challenge_search.sorter import resolve_sort_field

logger = get_logger(__name__)

SORT_OPTIONS = ("sort_by", "order")


@dataclass
class SearchPlan:
    """Resolved form of one search request."""
    filters: Dict[str, Any] = field(default_factory=dict)
    # facet name -> resolved key; None means the filter matches nothing
    facet_keys: Dict[str, Optional[str]] = field(default_factory=dict)
    result_key: Optional[str] = None
    sort_by: Optional[str] = None
    order: str = "asc"

    @property
    def matches_nothing(self) -> bool:
        return self.result_key is None


class QueryPlanner:
    """Resolves filters to Redis keys and combines them."""

    def __init__(
        self,
        client: redis.Redis,
        keys: KeyBuilder,
        normalizer: Optional[PhoneticNormalizer] = None,
        settings: Optional[Settings] = None,
    ):
        self._redis = client
        self.keys = keys
        self.normalizer = normalizer or PhoneticNormalizer()
        self.settings = settings or get_settings()
        self._resolvers: Dict[str, Callable[[Any], Optional[str]]] = {
            "query": self._resolve_query,
            "categories": self._resolve_categories,
            "platforms": self._resolve_platforms,
            "technologies": self._resolve_technologies,
            "community": self._resolve_community,
            "state": self._resolve_state,
            "prize_money": self._resolve_prize_money,
            "participants": self._resolve_participants,
        }

    @property
    def facets(self) -> List[str]:
        return list(self._resolvers)

    # =========================================================================
    # Planning
    # =========================================================================

    def plan(self, filters: Optional[Mapping[str, Any]] = None) -> SearchPlan:
        filters = dict(filters or {})
        for name in filters:
            if name not in self._resolvers and name not in SORT_OPTIONS:
                raise UnknownFacetError(name, self.facets + list(SORT_OPTIONS))

        cleaned = {name: value for name, value in filters.items() if not is_blank(value)}
        sort_by, order = self._sort_options(cleaned)
        facet_filters = {n: v for n, v in cleaned.items() if n not in SORT_OPTIONS}

        plan = SearchPlan(filters=facet_filters, sort_by=sort_by, order=order)
        if not facet_filters:
            plan.result_key = self.keys.all_ids if self.settings.empty_filters_match_all else None
            logger.debug("Planned unfiltered search", result_key=plan.result_key)
            return plan

        for name, value in facet_filters.items():
            plan.facet_keys[name] = self.resolve(name, value)

        resolved = list(plan.facet_keys.values())
        if any(key is None for key in resolved):
            plan.result_key = None
        elif len(resolved) == 1:
            plan.result_key = resolved[0]
        else:
            plan.result_key = self._intersect(resolved)

        logger.debug(
            "Planned search",
            facets=list(facet_filters),
            result_key=plan.result_key,
            sort_by=sort_by,
            order=order,
        )
        return plan

    def resolve(self, name: str, value: Any) -> Optional[str]:
        """Key of the id set matching one filter, or None if it can match nothing."""
        try:
            resolver = self._resolvers[name]
        except KeyError:
            raise UnknownFacetError(name, self.facets) from None
        return resolver(value)

    def _sort_options(self, cleaned: Dict[str, Any]):
        sort_by = cleaned.get("sort_by")
        if sort_by is None:
            sort_by = self.settings.default_sort_by
            order = cleaned.get("order", self.settings.default_sort_order)
        else:
            order = cleaned.get("order", "asc")
        if sort_by is not None:
            if not isinstance(sort_by, str):
                raise InvalidFilterError("sort_by", sort_by, "expected a field name")
            sort_by = resolve_sort_field(sort_by)
        if not isinstance(order, str):
            raise InvalidFilterError("order", order, "expected 'asc' or 'desc'")
        return sort_by, order.strip().lower()

    # =========================================================================
    # Resolvers
    # =========================================================================

    def _resolve_query(self, query: Any) -> Optional[str]:
        if isinstance(query, (list, tuple, set)):
            query = " ".join(str(q) for q in query if q)
        codes = self.normalizer.codes(str(query))
        if not codes:
            return None
        return self._union([self.keys.facet("keyword", code) for code in codes])

    def _resolve_names(self, facet: str, filter_name: str, values: Any) -> Optional[str]:
        if isinstance(values, str):
            values = [values]
        if not isinstance(values, (list, tuple, set, frozenset)):
            raise InvalidFilterError(filter_name, values, "expected a name or a list of names")
        names = normalize_string_list(str(v) for v in values if v is not None)
        if not names:
            return None
        return self._union([self.keys.facet(facet, name) for name in names])

    def _resolve_categories(self, categories: Any) -> Optional[str]:
        return self._resolve_names("category", "categories", categories)

    def _resolve_platforms(self, platforms: Any) -> Optional[str]:
        return self._resolve_names("platform", "platforms", platforms)

    def _resolve_technologies(self, technologies: Any) -> Optional[str]:
        return self._resolve_names("technology", "technologies", technologies)

    def _resolve_community(self, name: Any) -> Optional[str]:
        if not isinstance(name, (str, int, float)) or isinstance(name, bool):
            raise InvalidFilterError("community", name, "expected a community name")
        return self.keys.facet("community", str(name))

    def _resolve_state(self, state: Any) -> str:
        value = state.strip().lower() if isinstance(state, str) else state
        if value == STATE_OPEN:
            return self.keys.state(True)
        if value == STATE_CLOSED:
            return self.keys.state(False)
        raise InvalidFilterError("state", state, f"expected {STATE_OPEN!r} or {STATE_CLOSED!r}")

    def _resolve_prize_money(self, value: Any) -> str:
        return self._resolve_numeric(
            "prize_money",
            value,
            self.settings.prize_money_range_min,
            self.settings.prize_money_range_max,
        )

    def _resolve_participants(self, value: Any) -> str:
        return self._resolve_numeric(
            "participants",
            value,
            self.settings.participants_range_min,
            self.settings.participants_range_max,
        )

    def _resolve_numeric(self, facet: str, value: Any, default_min: float, default_max: float) -> str:
        if isinstance(value, (dict, RangeFilter)):
            try:
                bounds = value if isinstance(value, RangeFilter) else RangeFilter.model_validate(value)
            except ValidationError as e:
                raise InvalidFilterError(facet, value, str(e)) from e
            low, high = bounds.bounds(default_min, default_max)
            return self._range(facet, low, high)

        if isinstance(value, bool):
            raise InvalidFilterError(facet, value, "expected a number or a {min, max} range")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidFilterError(facet, value, "expected a number or a {min, max} range") from None
        return self.keys.facet(facet, number)

    # =========================================================================
    # Ephemeral keys
    # =========================================================================

    def _union(self, keys: List[str]) -> str:
        if len(keys) == 1:
            return keys[0]
        target = self.keys.temp({"union": sorted(keys)})
        pipe = self._redis.pipeline(transaction=True)
        pipe.sunionstore(target, keys)
        pipe.expire(target, self.settings.ephemeral_key_ttl_seconds)
        pipe.execute()
        return target

    def _intersect(self, keys: List[str]) -> str:
        target = self.keys.temp({"inter": sorted(keys)})
        pipe = self._redis.pipeline(transaction=True)
        pipe.sinterstore(target, keys)
        pipe.expire(target, self.settings.ephemeral_key_ttl_seconds)
        pipe.execute()
        return target

    def _range(self, facet: str, low: float, high: float) -> str:
        scores_key = self.keys.scores(facet)
        target = self.keys.temp({"range": scores_key, "min": low, "max": high})
        ids = self._redis.zrangebyscore(scores_key, low, high)
        pipe = self._redis.pipeline(transaction=True)
        pipe.delete(target)
        if ids:
            pipe.sadd(target, *ids)
            pipe.expire(target, self.settings.ephemeral_key_ttl_seconds)
        pipe.execute()
        return target
