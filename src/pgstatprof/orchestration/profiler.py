"""
The sampling loop.

QueryProfiler ties a statement source to a summarizer: every tick it polls
the source, normalizes the statement texts, feeds them to the summarizer and
decides whether to print a report, then sleeps for the configured interval.
The loop has no natural end. It stops when shutdown is requested or when the
source raises, which is fatal.
"""

import logging
import sys
from datetime import datetime
from typing import List, Optional, TextIO

from ..collectors.base import AbstractStatementSource
from ..models.config import ProfilerConfig
from ..models.runtime import ProfilerRuntimeState
from ..normalization import normalize_query
from ..summarizers.base import AbstractSummarizer

logger = logging.getLogger(__name__)


def format_report_header(now: Optional[datetime] = None) -> str:
    """Return the header line of a report, e.g.
    ``## 2024-05-01 12:30:05.042 +0900``.

    Args:
        now: Timestamp to render; the current local time by default. A naive
            datetime is taken as local time; an aware one keeps its offset.
    """
    if now is None:
        now = datetime.now()
    if now.tzinfo is None:
        now = now.astimezone()
    millis = now.microsecond // 1000
    return f"## {now:%Y-%m-%d %H:%M:%S}.{millis:03d} {now:%z}"


class QueryProfiler:
    """
    Drives the fetch, normalize, aggregate, report, sleep cycle.

    Attributes:
        source: Where active statements come from.
        summarizer: Aggregates query texts across ticks.
        config: Loop settings.
        stream: Where reports are printed.
        state: Counters and the shutdown event.
    """

    def __init__(
        self,
        source: AbstractStatementSource,
        summarizer: AbstractSummarizer,
        config: ProfilerConfig,
        stream: Optional[TextIO] = None,
        state: Optional[ProfilerRuntimeState] = None,
    ):
        self.source = source
        self.summarizer = summarizer
        self.config = config
        self.stream = stream if stream is not None else sys.stdout
        self.state = state if state is not None else ProfilerRuntimeState()

    def collect_queries(self) -> List[str]:
        """Poll the source and return the texts to aggregate for this tick."""
        statements = self.source.list_active_statements()
        if self.config.normalize:
            return [normalize_query(statement.text) for statement in statements]
        return [statement.text for statement in statements]

    def should_report(self, signature: int) -> bool:
        """
        Decide whether a report is due at this decision point.

        Without diff mode every decision point reports. In diff mode a report
        is printed only when the change signature differs from the one
        recorded at the previous report. The signature is a count, not the
        aggregate itself, so a changed mix with an unchanged count is not
        reported.
        """
        if not self.config.diff:
            return True
        return signature != self.state.last_signature

    def emit_report(self) -> None:
        print(format_report_header(), file=self.stream)
        self.summarizer.show(self.config.top, stream=self.stream)
        self.stream.flush()
        self.state.reports_emitted += 1

    def tick(self) -> bool:
        """
        Run one iteration without the trailing sleep.

        Returns:
            True if a report was printed.

        Raises:
            DataSourceError: If polling the source fails.
        """
        queries = self.collect_queries()
        signature = self.summarizer.update(queries)
        self.state.current_signature = signature
        self.state.ticks_total += 1

        self.state.tick_counter += 1
        if self.state.tick_counter < self.config.delay:
            return False
        self.state.tick_counter = 0

        if not self.should_report(signature):
            logger.debug(f"Signature unchanged ({signature}), report suppressed")
            return False

        self.emit_report()
        self.state.last_signature = signature
        return True

    def request_shutdown(self) -> None:
        logger.info("Shutdown requested for profiler loop")
        self.state.shutdown_requested.set()

    def run(self) -> None:
        """
        Loop until shutdown is requested.

        The sleep between ticks is a wait on the shutdown event, so a
        shutdown request interrupts it immediately. A poll already in
        progress is not interrupted.

        Raises:
            DataSourceError: If polling the source fails.
        """
        interval = self.config.interval_millis / 1000
        logger.info(
            f"Profiler loop started: interval={self.config.interval_millis}ms, "
            f"delay={self.config.delay}, top={self.config.top}, "
            f"diff={self.config.diff}, normalize={self.config.normalize}"
        )
        while not self.state.shutdown_requested.is_set():
            self.tick()
            if self.state.shutdown_requested.wait(interval):
                break
        logger.info(
            f"Profiler loop stopped after {self.state.ticks_total} ticks, "
            f"{self.state.reports_emitted} reports"
        )
