"""
Unit tests for the sampling loop.

The statement source is the scripted test double from conftest; no database
is involved.
"""

import re
import signal
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from pgstatprof.models.config import ProfilerConfig
from pgstatprof.orchestration import QueryProfiler, SignalHandler, format_report_header
from pgstatprof.summarizers import CumulativeSummarizer, RecentSummarizer
from pgstatprof.validation import DataSourceError

HEADER_RE = re.compile(r"^## \d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3} [+-]\d{4}$")


def _make_profiler(source, output_stream, summarizer=None, **config_kwargs):
    config = ProfilerConfig(interval_seconds=0.001, **config_kwargs)
    profiler = QueryProfiler(
        source, summarizer or CumulativeSummarizer(), config, stream=output_stream
    )
    source.profiler = profiler
    return profiler


def _reports(text):
    """Split captured output into reports, each a list of body lines."""
    reports = []
    for line in text.splitlines():
        if line.startswith("## "):
            reports.append([])
        else:
            reports[-1].append(line)
    return reports


@pytest.mark.unit
class TestReportHeader:
    """Test cases for the report header line."""

    def test_format_with_offset(self):
        now = datetime(2024, 5, 1, 12, 30, 5, 42_999, tzinfo=timezone(timedelta(hours=9)))
        assert format_report_header(now) == "## 2024-05-01 12:30:05.042 +0900"

    def test_negative_offset(self):
        now = datetime(2024, 1, 2, 3, 4, 5, 999_999, tzinfo=timezone(timedelta(hours=-5)))
        assert format_report_header(now) == "## 2024-01-02 03:04:05.999 -0500"

    def test_default_is_local_now(self):
        assert HEADER_RE.match(format_report_header())


@pytest.mark.unit
class TestQueryProfilerTick:
    """Test cases for a single iteration."""

    def test_normalizes_before_aggregating(self, scripted_source, output_stream):
        source = scripted_source([["SELECT * FROM t WHERE id = 1", "SELECT * FROM t WHERE id = 2"]])
        profiler = _make_profiler(source, output_stream)

        assert profiler.tick() is True

        lines = output_stream.getvalue().splitlines()
        assert HEADER_RE.match(lines[0])
        assert lines[1:] == ["   2 SELECT * FROM t WHERE id = N"]

    def test_raw_text_when_normalization_disabled(self, scripted_source, output_stream):
        source = scripted_source([["SELECT 1", "SELECT 2"]])
        profiler = _make_profiler(source, output_stream, normalize=False)

        profiler.tick()

        assert sorted(profiler.summarizer.summary()) == ["SELECT 1", "SELECT 2"]

    def test_delay_reports_every_nth_tick(self, scripted_source, output_stream):
        source = scripted_source([["a"]] * 7)
        profiler = _make_profiler(source, output_stream, delay=3)

        emitted = [profiler.tick() for _ in range(7)]

        assert emitted == [False, False, True, False, False, True, False]
        assert profiler.state.tick_counter == 1

    def test_top_limits_report(self, scripted_source, output_stream):
        source = scripted_source([[f"SELECT col{i} FROM t" for i in range(8)]])
        profiler = _make_profiler(source, output_stream, top=3)

        profiler.tick()

        assert len(_reports(output_stream.getvalue())[0]) == 3

    def test_fetch_failure_propagates(self, scripted_source, output_stream):
        source = scripted_source([], fail_when_exhausted=True)
        profiler = _make_profiler(source, output_stream)

        with pytest.raises(DataSourceError):
            profiler.tick()
        assert output_stream.getvalue() == ""


@pytest.mark.unit
class TestDiffMode:
    """Report suppression keyed on the change signature."""

    def test_identical_signature_suppresses_second_report(self, scripted_source, output_stream):
        source = scripted_source([["SELECT 1"], ["SELECT 2"]])
        profiler = _make_profiler(source, output_stream, diff=True)

        assert profiler.tick() is True
        # Same shape after normalization: distinct count stays 1.
        assert profiler.tick() is False
        assert profiler.state.reports_emitted == 1

    def test_new_shape_triggers_report(self, scripted_source, output_stream):
        source = scripted_source([["SELECT 1"], ["SELECT 1"], ["UPDATE t SET a = 1"]])
        profiler = _make_profiler(source, output_stream, diff=True)

        assert [profiler.tick() for _ in range(3)] == [True, False, True]

    def test_first_tick_with_no_queries_is_suppressed(self, scripted_source, output_stream):
        source = scripted_source([[], ["SELECT 1"]])
        profiler = _make_profiler(source, output_stream, diff=True)

        assert profiler.tick() is False
        assert profiler.tick() is True

    def test_window_signature_is_fill_level(self, scripted_source, output_stream):
        source = scripted_source([["a"], ["b"], ["c"], ["d"]])
        profiler = _make_profiler(
            source, output_stream, summarizer=RecentSummarizer(2), diff=True, normalize=False
        )

        # Fill level 1, 2, then constant at 2 even though the content changes.
        assert [profiler.tick() for _ in range(4)] == [True, True, False, False]

    def test_without_diff_always_reports(self, scripted_source, output_stream):
        source = scripted_source([["SELECT 1"]] * 3)
        profiler = _make_profiler(source, output_stream, diff=False)

        assert [profiler.tick() for _ in range(3)] == [True, True, True]

    def test_signature_compared_at_decision_points_only(self, scripted_source, output_stream):
        source = scripted_source([["a"], ["b"], ["b"], ["b"]])
        profiler = _make_profiler(source, output_stream, diff=True, delay=2, normalize=False)

        assert [profiler.tick() for _ in range(4)] == [False, True, False, False]
        assert profiler.state.last_signature == 2


@pytest.mark.unit
class TestQueryProfilerRun:
    """Test cases for the loop."""

    def test_runs_until_shutdown(self, scripted_source, output_stream):
        source = scripted_source([["a"], ["b"], ["a"]])
        profiler = _make_profiler(source, output_stream, normalize=False)

        profiler.run()

        assert source.polls == 3
        assert profiler.state.ticks_total == 3
        reports = _reports(output_stream.getvalue())
        assert len(reports) == 3
        assert reports[-1] == ["   2 a", "   1 b"]

    def test_window_report_forgets_old_samples(self, scripted_source, output_stream):
        source = scripted_source([["old"], ["x"], ["y"]])
        profiler = _make_profiler(
            source, output_stream, summarizer=RecentSummarizer(2), normalize=False
        )

        profiler.run()

        assert _reports(output_stream.getvalue())[-1] == ["   1 x", "   1 y"]

    def test_fetch_failure_ends_loop(self, scripted_source, output_stream):
        source = scripted_source([["a"]], fail_when_exhausted=True)
        profiler = _make_profiler(source, output_stream)
        source.profiler = None

        with pytest.raises(DataSourceError):
            profiler.run()
        assert source.polls == 2

    def test_sleeps_configured_interval(self, scripted_source, output_stream):
        source = scripted_source([["a"], ["b"]])
        profiler = QueryProfiler(
            source, CumulativeSummarizer(), ProfilerConfig(interval_seconds=0.25), stream=output_stream
        )
        source.profiler = None
        waits = []

        def fake_wait(timeout):
            waits.append(timeout)
            return len(waits) >= 2

        with patch.object(profiler.state.shutdown_requested, "wait", side_effect=fake_wait):
            profiler.run()

        assert waits == [0.25, 0.25]

    def test_shutdown_before_start(self, scripted_source, output_stream):
        source = scripted_source([["a"]])
        profiler = _make_profiler(source, output_stream)
        profiler.request_shutdown()

        profiler.run()

        assert source.polls == 0


@pytest.mark.unit
class TestSignalHandler:
    """Test cases for signal-driven shutdown."""

    def test_sigint_requests_shutdown_and_restores(self, scripted_source, output_stream):
        profiler = _make_profiler(scripted_source([]), output_stream)
        previous = signal.getsignal(signal.SIGINT)

        with SignalHandler(profiler) as handler:
            assert signal.getsignal(signal.SIGINT) == handler._handle_signal
            handler._handle_signal(signal.SIGINT, None)
            assert profiler.state.shutdown_requested.is_set()
            # Previous handlers are back as soon as the first signal arrives.
            assert signal.getsignal(signal.SIGINT) == previous

        assert signal.getsignal(signal.SIGINT) == previous

    def test_second_sigint_raises_keyboard_interrupt(self, scripted_source, output_stream):
        profiler = _make_profiler(scripted_source([]), output_stream)
        previous = signal.signal(signal.SIGINT, signal.default_int_handler)
        try:
            with SignalHandler(profiler):
                signal.raise_signal(signal.SIGINT)
                assert profiler.state.shutdown_requested.is_set()

                with pytest.raises(KeyboardInterrupt):
                    signal.raise_signal(signal.SIGINT)
        finally:
            signal.signal(signal.SIGINT, previous)

    def test_setup_outside_main_thread_is_tolerated(self, scripted_source, output_stream):
        profiler = _make_profiler(scripted_source([]), output_stream)
        handler = SignalHandler(profiler)

        thread = threading.Thread(target=handler.setup_signal_handlers)
        thread.start()
        thread.join()

        assert handler._signal_handlers_set is False
        handler.cleanup_signal_handlers()
