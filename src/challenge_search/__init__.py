"""
Challenge Search Module: facet-searchable Redis projection of challenges.

Provides:
- ChallengeSearchIndex: upsert/remove/search/reconcile facade
- IndexWriter: record -> facet sets, sorted facets, sort values, raw data
- QueryPlanner: filters -> union/intersection keys
- ResultSorter: SORT BY sort values, raw record materialisation
- BulkReconciler: full resync against the record store
- PhoneticNormalizer: Metaphone keyword codes
"""

from challenge_search.errors import (
    InvalidFilterError,
    SearchError,
    UnknownFacetError,
    UnknownSortFieldError,
)
from challenge_search.keys import KeyBuilder
from challenge_search.models import Challenge, IndexStats, RangeFilter, ReconcileResult
from challenge_search.phonetics import PhoneticNormalizer
from challenge_search.planner import QueryPlanner, SearchPlan
from challenge_search.reconciler import BulkReconciler
from challenge_search.service import ChallengeSearchIndex, get_challenge_search_index
from challenge_search.sorter import ResultSorter
from challenge_search.writer import IndexWriter

__all__ = [
    "BulkReconciler",
    "Challenge",
    "ChallengeSearchIndex",
    "IndexStats",
    "IndexWriter",
    "InvalidFilterError",
    "KeyBuilder",
    "PhoneticNormalizer",
    "QueryPlanner",
    "RangeFilter",
    "ReconcileResult",
    "ResultSorter",
    "SearchError",
    "SearchPlan",
    "UnknownFacetError",
    "UnknownSortFieldError",
    "get_challenge_search_index",
]
