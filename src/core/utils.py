"""
Core Utility Functions.

Small pure helpers shared by the index writer and the query planner.
"""

import hashlib
import json
from typing import Any, Dict, Iterable, List, Optional, Union


def is_blank(value: Any) -> bool:
    """
    Check whether a filter value carries no information.

    None, whitespace-only strings and empty collections are blank, as is a
    collection whose every element is blank. Zero and False are not blank.

    Examples:
        >>> is_blank("  ")
        True
        >>> is_blank(["", None])
        True
        >>> is_blank(0)
        False
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, dict):
        return not value or all(is_blank(v) for v in value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return not value or all(is_blank(v) for v in value)
    return False


def normalize_string_list(items: Iterable[Optional[str]]) -> List[str]:
    """
    Normalize strings to lowercase, stripped, de-duplicated values.

    Blank entries and None are dropped; first-seen order is kept.

    Args:
        items: Strings (may contain None, empty strings)

    Returns:
        List of normalized strings
    """
    seen: Dict[str, None] = {}
    for s in items:
        if s and s.strip():
            seen.setdefault(s.lower().strip(), None)
    return list(seen)


def format_number(value: Union[int, float]) -> str:
    """
    Render a number for use inside a key name.

    Integral floats lose their trailing ".0" so that 1500 and 1500.0
    address the same key.

    Examples:
        >>> format_number(1500.0)
        '1500'
        >>> format_number(12.5)
        '12.5'
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def content_hash(payload: Any) -> str:
    """
    Deterministic digest of a JSON-serialisable payload.

    Dict key order does not matter; list order does.
    """
    encoded = json.dumps(payload, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.md5(encoded.encode("utf-8")).hexdigest()


def merge_dicts(*dicts: Optional[Dict]) -> Dict:
    """
    Merge multiple dictionaries, later dicts override earlier ones.

    Args:
        *dicts: Dictionaries to merge (None entries are skipped)

    Returns:
        Merged dictionary
    """
    result = {}
    for d in dicts:
        if d:
            result.update(d)
    return result


def as_text(value: Union[str, bytes]) -> str:
    """Redis reply as str, whether or not the client decodes responses."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value
