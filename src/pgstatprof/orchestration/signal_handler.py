"""
Signal handling for the profiler loop.

SIGINT and SIGTERM are turned into a shutdown request on the running
QueryProfiler so the process exits cleanly instead of with a traceback.
"""

import logging
import signal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .profiler import QueryProfiler

logger = logging.getLogger(__name__)


class SignalHandler:
    """
    Manages signal registration and cleanup for a QueryProfiler.

    Usable as a context manager: handlers are installed on entry and the
    previous handlers restored on exit, or as soon as the first signal
    arrives.
    """

    def __init__(self, profiler: "QueryProfiler"):
        self.profiler = profiler
        self._original_sigint_handler = None
        self._original_sigterm_handler = None
        self._signal_handlers_set = False

    def setup_signal_handlers(self) -> None:
        """Install handlers for SIGINT and SIGTERM."""
        try:
            self._original_sigint_handler = signal.signal(signal.SIGINT, self._handle_signal)
            self._original_sigterm_handler = signal.signal(signal.SIGTERM, self._handle_signal)
            self._signal_handlers_set = True
            logger.debug("Signal handlers set up for profiler")
        except ValueError as e:
            # signal.signal only works from the main thread
            logger.warning(f"Failed to set up signal handlers: {e}")

    def cleanup_signal_handlers(self) -> None:
        """Restore the handlers that were active before setup."""
        if not self._signal_handlers_set:
            return
        try:
            if self._original_sigint_handler is not None:
                signal.signal(signal.SIGINT, self._original_sigint_handler)
            if self._original_sigterm_handler is not None:
                signal.signal(signal.SIGTERM, self._original_sigterm_handler)
            logger.debug("Signal handlers restored")
        finally:
            self._signal_handlers_set = False

    def _handle_signal(self, signum: int, frame: Any) -> None:
        """Request a clean stop and hand later signals back to the previous
        handlers, so a second Ctrl-C interrupts a poll that hangs."""
        logger.info(f"Signal {signal.strsignal(signum)} received. Stopping profiler...")
        self.profiler.request_shutdown()
        self.cleanup_signal_handlers()

    def __enter__(self) -> "SignalHandler":
        self.setup_signal_handlers()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup_signal_handlers()
