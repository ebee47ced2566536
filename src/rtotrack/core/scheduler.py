"""Daily scheduling for the status refresh."""

import logging
import threading
from datetime import datetime, time
from typing import Callable, Optional

from celery.schedules import crontab

logger = logging.getLogger(__name__)


class DailyScheduler:
    """Runs a job once at start-up and then every day at a fixed time.

    The daily trigger is a celery ``crontab``; the loop itself runs in
    process, so no broker or beat worker is needed. Running at start-up
    corrects statuses that went stale while the process was down. Job
    failures are logged and the loop keeps going.
    """

    def __init__(
        self,
        job: Callable[[], object],
        at: time = time(0, 0),
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.job = job
        self.at = at
        self._clock = clock
        self.schedule = crontab(minute=at.minute, hour=at.hour, nowfun=clock)
        self.runs = 0
        self.failures = 0

    def seconds_until_next_run(self) -> float:
        """Seconds from the clock's now to the next scheduled run."""
        remaining = self.schedule.remaining_estimate(self._clock())
        return max(remaining.total_seconds(), 0.0)

    def run_once(self) -> Optional[object]:
        """Run the job, logging instead of raising on failure."""
        self.runs += 1
        try:
            return self.job()
        except Exception:
            self.failures += 1
            logger.exception("Scheduled job failed; will retry at next run")
            return None

    def run_forever(
        self,
        stop_event: Optional[threading.Event] = None,
        run_immediately: bool = True,
    ) -> None:
        """Loop until ``stop_event`` is set.

        The event is checked between runs only; a running job is never
        interrupted.
        """
        stop = stop_event or threading.Event()
        if run_immediately and not stop.is_set():
            self.run_once()

        while not stop.is_set():
            wait_seconds = self.seconds_until_next_run()
            logger.debug("Next scheduled run in %.0fs (%s)", wait_seconds, self.schedule)
            if stop.wait(wait_seconds):
                break
            self.run_once()

        logger.info("Scheduler stopped after %d run(s)", self.runs)
