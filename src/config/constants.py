"""
Index constants.

These are values that don't change based on environment but are
referenced across the indexing and query code.
"""

from typing import Dict, FrozenSet


# =============================================================================
# Keyword Normalisation
# =============================================================================

# Words dropped before phonetic encoding, on both the write and read side.
STOP_WORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "is", "are", "on", "at", "then",
    "for", "from", "this", "that", "more",
})


# =============================================================================
# Facets
# =============================================================================

PUBLIC_COMMUNITY = "public"

STATE_OPEN = "open"
STATE_CLOSED = "closed"


# =============================================================================
# Sorting
# =============================================================================

# Sortable field -> whether SORT must compare lexically (ALPHA).
SORT_FIELDS: Dict[str, bool] = {
    "title": True,
    "end_date": True,
    "category": True,
    "prize_money": False,
    "participants": False,
}

# Older callers name the category sort after the record attribute.
SORT_FIELD_ALIASES: Dict[str, str] = {
    "challenge_type": "category",
    "name": "title",
}
