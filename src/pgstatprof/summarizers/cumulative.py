"""
Summarizer counting every query seen since the profiler started.
"""

import logging
from collections import Counter
from typing import Dict, Iterable

from .base import AbstractSummarizer

logger = logging.getLogger(__name__)


class CumulativeSummarizer(AbstractSummarizer):
    """
    Keeps an all-time running total per query text.

    The totals only ever grow; memory use is bounded by the number of
    distinct query texts observed during the run.
    """

    def __init__(self):
        self.counts: Counter = Counter()

    def update(self, queries: Iterable[str]) -> int:
        """
        Add one to the total of each query in the batch.

        Returns:
            The number of distinct query texts seen so far.
        """
        self.counts.update(queries)
        return len(self.counts)

    def summary(self) -> Dict[str, int]:
        return dict(self.counts)
