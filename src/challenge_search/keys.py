"""
Key namespace for the challenge search index.

Every Redis key the index touches is built here so that writer, planner
and sorter cannot disagree on naming. Text facet values are lowercased;
numeric values are rendered with core.utils.format_number.

Redis query examples (default root "search:challenge"):
    smembers search:challenge:platforms:heroku
    smembers search:challenge:categories:code
    smembers search:challenge:open
    smembers search:challenge:community_names
    zrangebyscore search:challenge:prize_money 1000 3000
"""

from typing import Any, Union

from core.utils import content_hash, format_number

# Facet name -> key segment of its Facet Sets.
FACET_SEGMENTS = {
    "keyword": "metaphones",
    "category": "categories",
    "platform": "platforms",
    "technology": "technologies",
    "community": "community",
    "prize_money": "prize_money",
    "participants": "participants",
}

# Facets with a "known names" registry set.
REGISTRY_SEGMENTS = {
    "category": "category_names",
    "platform": "platform_names",
    "technology": "technology_names",
    "community": "community_names",
}

NUMERIC_FACETS = frozenset({"prize_money", "participants"})


class KeyBuilder:
    """Builds stable key names under one root (e.g. "search:challenge")."""

    def __init__(self, root: str = "search:challenge"):
        if not root:
            raise ValueError("key root must not be empty")
        # SORT BY treats these as pattern syntax
        if "*" in root or "->" in root:
            raise ValueError(f"key root must not contain '*' or '->': {root!r}")
        self.root = root

    def key(self, *parts: Any) -> str:
        return ":".join([self.root, *(str(p) for p in parts)])

    # -------------------------------------------------------------------
    # Raw data / membership
    # -------------------------------------------------------------------

    @property
    def raw_data(self) -> str:
        return self.key("raw_data")

    @property
    def all_ids(self) -> str:
        return self.key("ids")

    # -------------------------------------------------------------------
    # Facet Sets
    # -------------------------------------------------------------------

    def facet(self, facet: str, value: Union[str, int, float]) -> str:
        """Facet Set holding every id whose `facet` attribute contains `value`."""
        try:
            segment = FACET_SEGMENTS[facet]
        except KeyError:
            raise ValueError(f"Unknown facet: {facet!r}") from None
        if facet in NUMERIC_FACETS:
            return self.key(segment, format_number(value))
        if facet == "keyword":
            # phonetic codes are upper case by convention
            return self.key(segment, str(value))
        return self.key(segment, str(value).strip().lower())

    def registry(self, facet: str) -> str:
        try:
            return self.key(REGISTRY_SEGMENTS[facet])
        except KeyError:
            raise ValueError(f"Facet {facet!r} has no name registry") from None

    def state(self, is_open: bool) -> str:
        return self.key("open" if is_open else "closed")

    # -------------------------------------------------------------------
    # Sorted Facets / Sort Field Store
    # -------------------------------------------------------------------

    def scores(self, facet: str) -> str:
        """Sorted set scoring each id by its numeric `facet` value."""
        if facet not in NUMERIC_FACETS:
            raise ValueError(f"Facet {facet!r} is not numeric")
        return self.key(FACET_SEGMENTS[facet])

    def sort_value(self, field: str, record_id: str) -> str:
        return self.key("sort", field, record_id)

    def sort_pattern(self, field: str) -> str:
        """BY pattern for SORT; Redis substitutes each member for '*'."""
        return self.key("sort", field, "*")

    # -------------------------------------------------------------------
    # Ephemeral keys
    # -------------------------------------------------------------------

    def temp(self, payload: Any) -> str:
        """
        Name an ephemeral key after the content of the query that builds it.

        Identical payloads map to the same key, so repeated identical
        queries overwrite rather than accumulate.
        """
        return self.key("temp", content_hash(payload))
