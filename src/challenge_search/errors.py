"""
Exceptions raised by the challenge search index.

Store failures are not wrapped: redis.RedisError propagates to the caller
unchanged.
"""


class SearchError(ValueError):
    """Base class for malformed search requests."""
    pass


class UnknownFacetError(SearchError):
    """A filter names a facet that has no resolver."""

    def __init__(self, facet: str, known):
        self.facet = facet
        super().__init__(f"Unknown search filter {facet!r}; expected one of {sorted(known)}")


class InvalidFilterError(SearchError):
    """A filter value cannot be interpreted for its facet."""

    def __init__(self, facet: str, value, reason: str):
        self.facet = facet
        self.value = value
        super().__init__(f"Invalid value for {facet!r} ({value!r}): {reason}")


class UnknownSortFieldError(SearchError):
    """sort_by names a field that has no sort values."""

    def __init__(self, field: str, known):
        self.field = field
        super().__init__(f"Cannot sort by {field!r}; expected one of {sorted(known)}")
