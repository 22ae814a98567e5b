"""
Selection of the summarizer implementation.
"""

import logging

from .base import AbstractSummarizer
from .cumulative import CumulativeSummarizer
from .window import RecentSummarizer

logger = logging.getLogger(__name__)


def create_summarizer(window_size: int) -> AbstractSummarizer:
    """
    Create the summarizer for a window size.

    Args:
        window_size: Number of recent samples to summarize; 0 summarizes
            every sample since startup.

    Returns:
        A CumulativeSummarizer for 0, otherwise a RecentSummarizer.

    Raises:
        ValueError: If window_size is negative.
    """
    if window_size < 0:
        raise ValueError(f"window_size must be >= 0, got {window_size}")
    if window_size == 0:
        logger.info("Summarizing all samples since startup")
        return CumulativeSummarizer()
    logger.info(f"Summarizing the last {window_size} samples")
    return RecentSummarizer(window_size)
