"""
Time-agnostic job scheduler.

The scheduler never starts threads or timers of its own. The host calls
run_pending(now) whenever it likes (or uses run_forever(), which sleeps
until the next due job) and every job that is due runs synchronously.
"""

import itertools
import logging
import threading
import time as _time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, List, Optional

from home_scenarios.core.clock import Clock, SystemClock
from home_scenarios.utils.durations import DurationLike, ScheduleDescriptor, to_timedelta

logger = logging.getLogger(__name__)

_sequence = itertools.count()


@dataclass
class Job:
    """
    A scheduled callback.

    Attributes:
        callback: Zero-argument callable to run when due
        next_run: When the job is next due
        schedule: Periodic schedule, or None for one-shot jobs
        name: Label used in logs
        cancelled: True once cancel() has been called
    """

    callback: Callable[[], Any]
    next_run: datetime
    schedule: Optional[ScheduleDescriptor] = None
    name: str = ""
    cancelled: bool = False
    run_count: int = 0
    seq: int = field(default_factory=lambda: next(_sequence))

    @property
    def periodic(self) -> bool:
        return self.schedule is not None

    def cancel(self) -> None:
        """Stop the job from running again."""
        self.cancelled = True


class Scheduler:
    """
    Runs periodic and one-shot jobs against a Clock.

    Responsibilities:
    - Align periodic jobs to their cron boundary
    - Fire due jobs in due-time order
    - Isolate job failures so one broken job never stops the others
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or SystemClock()
        self._jobs: List[Job] = []

    @property
    def clock(self) -> Clock:
        return self._clock

    # =========================================================================
    # Registration
    # =========================================================================

    def every(
        self,
        schedule: ScheduleDescriptor,
        callback: Callable[[], Any],
        name: Optional[str] = None,
    ) -> Job:
        """
        Register a periodic job.

        Args:
            schedule: Parsed schedule (see parse_schedule)
            callback: Zero-argument callable
            name: Optional label for logs

        Returns:
            The registered Job
        """
        job = Job(
            callback=callback,
            next_run=schedule.next_fire_after(self._clock.now()),
            schedule=schedule,
            name=name or str(schedule),
        )
        self._jobs.append(job)
        logger.debug(f"Scheduled '{job.name}' ({schedule.cron_expression}), next at {job.next_run}")
        return job

    def call_at(
        self,
        when: datetime,
        callback: Callable[[], Any],
        name: Optional[str] = None,
    ) -> Job:
        """
        Register a one-shot job at a point in time.

        Args:
            when: When the job becomes due
            callback: Zero-argument callable
            name: Optional label for logs

        Returns:
            The registered Job
        """
        job = Job(callback=callback, next_run=when, name=name or "one-shot")
        self._jobs.append(job)
        logger.debug(f"Scheduled '{job.name}' at {when}")
        return job

    def call_later(
        self,
        delay: DurationLike,
        callback: Callable[[], Any],
        name: Optional[str] = None,
    ) -> Job:
        """Register a one-shot job after a delay (seconds, timedelta or duration string)."""
        return self.call_at(self._clock.now() + to_timedelta(delay), callback, name)

    def jobs(self) -> List[Job]:
        """Get all live (not cancelled) jobs."""
        return [job for job in self._jobs if not job.cancelled]

    # =========================================================================
    # Execution
    # =========================================================================

    def next_run(self) -> Optional[datetime]:
        """
        Get when the next job is due.

        Returns:
            Earliest due time, or None if nothing is scheduled
        """
        pending = self.jobs()
        if not pending:
            return None
        return min(job.next_run for job in pending)

    def run_pending(self, now: Optional[datetime] = None) -> int:
        """
        Run every job that is due.

        A periodic job runs at most once per call, even if several of its
        boundaries have passed, and is then rescheduled after now.

        Args:
            now: Current time (defaults to the clock)

        Returns:
            Number of jobs run
        """
        if now is None:
            now = self._clock.now()

        due = sorted(
            (job for job in self._jobs if not job.cancelled and job.next_run <= now),
            key=lambda job: (job.next_run, job.seq),
        )

        ran = 0
        for job in due:
            # An earlier job in this pass may have cancelled it
            if job.cancelled:
                continue

            if job.schedule is not None:
                job.next_run = job.schedule.next_fire_after(now)
            else:
                job.cancelled = True

            job.run_count += 1
            ran += 1
            try:
                job.callback()
            except Exception as e:
                logger.error(f"Error in scheduled job '{job.name}': {e}", exc_info=True)

        self._jobs = [job for job in self._jobs if not job.cancelled]
        return ran

    def run_forever(
        self,
        stop: Optional[threading.Event] = None,
        max_sleep: float = 1.0,
    ) -> None:
        """
        Blocking host loop: sleep until the next job is due, then run it.

        Args:
            stop: Optional event; the loop exits once it is set
            max_sleep: Upper bound on a single sleep, in seconds
        """
        logger.info("Scheduler loop started")
        while stop is None or not stop.is_set():
            self.run_pending()

            next_run = self.next_run()
            delay = max_sleep
            if next_run is not None:
                remaining = (next_run - self._clock.now()).total_seconds()
                delay = min(max(remaining, 0.0), max_sleep)

            if stop is not None:
                stop.wait(delay)
            else:
                _time.sleep(delay)
        logger.info("Scheduler loop stopped")

    def clear(self) -> None:
        """Cancel and drop every job."""
        for job in self._jobs:
            job.cancel()
        self._jobs.clear()

    def advance_to(self, target: datetime, step: timedelta = timedelta(seconds=1)) -> int:
        """
        Walk a manual clock forward to target, running jobs at every step.

        Only meaningful with a clock that supports set() (e.g. ManualClock).

        Returns:
            Total number of jobs run
        """
        setter = getattr(self._clock, "set", None)
        if setter is None:
            raise TypeError("advance_to() requires a settable clock")

        ran = 0
        current = self._clock.now()
        while current < target:
            current = min(current + step, target)
            setter(current)
            ran += self.run_pending(current)
        return ran
