"""
Defines the base class and shared ranking helpers for summarizers.

This module provides:
- rank_counts: orders query shapes by descending occurrence count.
- format_summary_line: renders one line of a report.
- AbstractSummarizer: the interface shared by the cumulative and the
  sliding-window implementations.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Mapping, Optional, TextIO, Tuple

logger = logging.getLogger(__name__)


def rank_counts(counts: Mapping[str, int], limit: int) -> List[Tuple[str, int]]:
    """Return at most `limit` (shape, count) pairs, most frequent first.

    Ties are ordered by shape text so that a report is deterministic.
    """
    if limit <= 0:
        return []
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]


def format_summary_line(count: int, shape: str) -> str:
    return f"{count:4d} {shape}"


class AbstractSummarizer(ABC):
    """
    Abstract base class for summarizers.

    A summarizer receives the batch of query texts seen in each tick and
    answers which texts were seen most often. `update` returns a scalar
    change signature that the sampling loop compares between reports.
    """

    @abstractmethod
    def update(self, queries: Iterable[str]) -> int:
        """
        Record one tick's batch of query texts.

        Returns:
            The change signature for this tick.
        """
        pass

    @abstractmethod
    def summary(self) -> Dict[str, int]:
        """Return the current total count per query text."""
        pass

    def top(self, n_query: int) -> List[Tuple[str, int]]:
        return rank_counts(self.summary(), n_query)

    def show(self, n_query: int, stream: Optional[TextIO] = None) -> None:
        """
        Print the `n_query` most frequent query texts, one per line.

        Args:
            n_query: Maximum number of lines to print.
            stream: Output stream, stdout by default.
        """
        out = stream if stream is not None else sys.stdout
        for shape, count in self.top(n_query):
            print(format_summary_line(count, shape), file=out)
