"""Tests for the daily scheduler."""

import logging
import threading
from datetime import datetime, time

from rtotrack.core.scheduler import DailyScheduler


def _wait(now: datetime, at: time) -> float:
    return DailyScheduler(lambda: None, at=at, clock=lambda: now).seconds_until_next_run()


class TestSecondsUntilNextRun:
    def test_later_today(self):
        assert _wait(datetime(2025, 6, 1, 10, 0), time(23, 0)) == 13 * 3600

    def test_tomorrow(self):
        assert _wait(datetime(2025, 6, 1, 10, 0), time(0, 0)) == 14 * 3600

    def test_exactly_now_moves_to_tomorrow(self):
        assert _wait(datetime(2025, 6, 1, 0, 0), time(0, 0)) == 24 * 3600

    def test_minutes_respected(self):
        assert _wait(datetime(2025, 6, 1, 2, 0), time(2, 30)) == 30 * 60

    def test_month_end(self):
        assert _wait(datetime(2025, 12, 31, 12, 0), time(0, 0)) == 12 * 3600

    def test_just_before_run_time(self):
        assert _wait(datetime(2025, 6, 1, 23, 59, 59, 999999), time(0, 0)) < 1


class TestRunOnce:
    def test_returns_job_result(self):
        scheduler = DailyScheduler(lambda: 42)
        assert scheduler.run_once() == 42
        assert scheduler.runs == 1
        assert scheduler.failures == 0

    def test_failure_logged_not_raised(self, caplog):
        def boom():
            raise RuntimeError("storage down")

        scheduler = DailyScheduler(boom)
        with caplog.at_level(logging.ERROR, logger="rtotrack"):
            assert scheduler.run_once() is None
        assert scheduler.failures == 1
        assert "Scheduled job failed" in caplog.text


class TestRunForever:
    def test_stop_before_start(self):
        calls = []
        stop = threading.Event()
        stop.set()
        DailyScheduler(lambda: calls.append(1)).run_forever(stop)
        assert calls == []

    def test_runs_at_startup_then_waits(self):
        stop = threading.Event()
        calls = []

        def job():
            calls.append(1)
            stop.set()

        scheduler = DailyScheduler(job, clock=lambda: datetime(2025, 6, 1, 12, 0))
        scheduler.run_forever(stop)
        assert calls == [1]
        assert scheduler.runs == 1

    def test_scheduled_runs_continue_after_failure(self):
        stop = threading.Event()
        outcomes = iter([RuntimeError("first"), None, None])

        def job():
            outcome = next(outcomes)
            if scheduler.runs >= 3:
                stop.set()
            if outcome is not None:
                raise outcome

        # One microsecond before the run time, so every wait is near zero
        scheduler = DailyScheduler(
            job,
            at=time(0, 0),
            clock=lambda: datetime(2025, 6, 1, 23, 59, 59, 999999),
        )
        scheduler.run_forever(stop)
        assert scheduler.runs == 3
        assert scheduler.failures == 1
