"""
Summarizers aggregating per-tick query batches into ranked counts.
"""

from .base import AbstractSummarizer, format_summary_line, rank_counts
from .cumulative import CumulativeSummarizer
from .factory import create_summarizer
from .window import RecentSummarizer

__all__ = [
    "AbstractSummarizer",
    "CumulativeSummarizer",
    "RecentSummarizer",
    "create_summarizer",
    "format_summary_line",
    "rank_counts",
]
