"""
Literal-erasing normalization of SQL statements.
"""

from .normalizer import NORMALIZE_PATTERNS, NormalizePattern, normalize_query

__all__ = [
    "NORMALIZE_PATTERNS",
    "NormalizePattern",
    "normalize_query",
]
