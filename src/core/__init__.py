"""
Core module for cross-cutting concerns.

This module provides:
- Structured logging configuration
- Common utilities
"""

from core.logging import configure_logging, get_logger
from core.utils import as_text, content_hash, format_number, is_blank, normalize_string_list

__all__ = [
    "as_text",
    "configure_logging",
    "get_logger",
    "content_hash",
    "format_number",
    "is_blank",
    "normalize_string_list",
]
