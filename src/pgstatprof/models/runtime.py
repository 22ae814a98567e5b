"""
Runtime data models.

This module contains the state owned by the sampling loop for the lifetime
of one profiler run.
"""

import threading
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ProfilerRuntimeState:
    """
    Mutable state of the sampling loop.

    Only the loop itself touches these fields; the shutdown event is the
    single piece that signal handlers may set from outside.
    """

    # Ticks since the last report decision.
    tick_counter: int = 0
    # Change signature recorded at the previous emitted report.
    last_signature: int = 0
    # Change signature returned by the most recent update.
    current_signature: Optional[int] = None
    ticks_total: int = 0
    reports_emitted: int = 0
    shutdown_requested: threading.Event = field(default_factory=threading.Event)
