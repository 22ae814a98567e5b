"""
Summarizer over a sliding window of recent samples.

Each call to `update` stores one sample: the per-query counts of that tick.
Only the most recent `window_size` samples are kept, and a report is the
plain sum over them, so a sample stops influencing reports as soon as it is
evicted.
"""

import logging
from collections import Counter, deque
from typing import Deque, Dict, Iterable

from .base import AbstractSummarizer

logger = logging.getLogger(__name__)


class RecentSummarizer(AbstractSummarizer):
    """
    Summarizes the last `window_size` samples.

    Attributes:
        window_size: Maximum number of samples retained.
        samples: Per-tick query counts, oldest first.
    """

    def __init__(self, window_size: int):
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self.window_size = window_size
        self.samples: Deque[Counter] = deque(maxlen=window_size)
        logger.debug(f"RecentSummarizer initialized with window of {window_size} samples")

    def update(self, queries: Iterable[str]) -> int:
        """
        Append one sample, evicting the oldest when the window is full.

        Returns:
            The number of samples currently retained. This is a fill level,
            not a distinct-query count; once the window is full it stays
            constant.
        """
        self.samples.append(Counter(queries))
        return len(self.samples)

    def summary(self) -> Dict[str, int]:
        totals: Counter = Counter()
        for sample in self.samples:
            totals.update(sample)
        return dict(totals)
