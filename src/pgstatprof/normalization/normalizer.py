"""
Query normalization.

Turns a SQL statement into its "shape" by erasing literal values, so that
statements differing only in their literals are counted together. The
rewrite is an ordered list of regex substitutions; each rule runs on the
output of the previous one.
"""

import logging
import re
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizePattern:
    """A compiled find pattern and the literal text that replaces each match."""

    pattern: re.Pattern
    replacement: str

    @classmethod
    def compile(cls, pattern: str, replacement: str) -> "NormalizePattern":
        return cls(re.compile(pattern), replacement)

    def apply(self, text: str) -> str:
        # A function replacement keeps backslashes in `replacement` literal.
        return self.pattern.sub(lambda _match: self.replacement, text)


# Order matters: string literals are only recognized after escaped quotes are
# gone, and the list collapse only sees placeholders produced by earlier rules.
NORMALIZE_PATTERNS: Tuple[NormalizePattern, ...] = (
    # runs of spaces
    NormalizePattern.compile(r" +", " "),
    # integers, with an optional sign, as whole tokens
    NormalizePattern.compile(r"[+-]?\b\d+\b", "N"),
    # hexadecimal literals
    NormalizePattern.compile(r"\b0x[0-9A-Fa-f]+\b", "0xN"),
    # escaped quotes
    NormalizePattern.compile(r"\\'", ""),
    NormalizePattern.compile(r'\\"', ""),
    # quoted strings
    NormalizePattern.compile(r"'[^']+'", "S"),
    NormalizePattern.compile(r'"[^"]+"', "S"),
    # four or more placeholders in a list: keep only the last one
    NormalizePattern.compile(r"(?:\b[NS]\s*,\s*){3,}(?=[NS]\b)", "..."),
)


def _apply_patterns(text: str) -> str:
    for normalize_pattern in NORMALIZE_PATTERNS:
        text = normalize_pattern.apply(text)
    return text


def normalize_query(text: str) -> str:
    """Return the shape of a SQL statement.

    The rule list is applied until the text no longer changes, so the result
    is always a fixed point: ``normalize_query(normalize_query(s)) ==
    normalize_query(s)``. Every changing pass shortens the text or replaces
    digits, so the loop terminates.

    Examples:
        >>> normalize_query("SELECT * FROM t WHERE id IN (1, 2, 3)")
        'SELECT * FROM t WHERE id IN (N, N, N)'
        >>> normalize_query("SELECT * FROM t WHERE name IN ('a', 'b', 'c', 'd', 'e')")
        'SELECT * FROM t WHERE name IN (...S)'
    """
    current = text
    while True:
        rewritten = _apply_patterns(current)
        if rewritten == current:
            return current
        current = rewritten
