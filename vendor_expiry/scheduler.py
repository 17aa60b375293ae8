"""
Scheduler Loop

Runs the daily tasks once a day at 12:00 local time, in a background thread,
until the service is stopped. A missed trigger (e.g. the process was down at
12:00) is not caught up; the loop waits for the next one.
"""

import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from vendor_expiry.config import SCHEDULE_HOUR, SCHEDULE_MINUTE, STOP_JOIN_TIMEOUT_SECONDS
from vendor_expiry.logger import configure_logging, get_logger
from vendor_expiry.models import ServiceContext
from vendor_expiry.orchestrator import run_daily_tasks

logger = get_logger(__name__)


def compute_next_run(now: datetime) -> datetime:
    """
    Return the next daily trigger time after (or at) now.

    Examples:
        13:00 -> 12:00 the following day
        11:00 -> 12:00 the same day
    """
    next_run = now.replace(hour=SCHEDULE_HOUR, minute=SCHEDULE_MINUTE, second=0, microsecond=0)
    if now > next_run:
        next_run += timedelta(days=1)
    return next_run


def run_daily_task_loop(
    context: ServiceContext,
    clock: Callable[[], datetime] = datetime.now
) -> None:
    """
    Wait for each daily trigger and run the daily tasks, until a stop is requested.

    Setting context.stop_event interrupts the wait; the tasks are not run for
    that iteration and the loop returns.

    Args:
        context: Service context holding the stop event
        clock: Returns the current local time
    """
    while not context.stop_requested:
        now = clock()
        next_run = compute_next_run(now)
        logger.info(f"Next email scheduled at {next_run}")

        delay = (next_run - now).total_seconds()
        if context.stop_event.wait(timeout=max(delay, 0.0)):
            logger.debug("Stop requested while waiting for the next run")
            return

        run_daily_tasks(context)


class VendorExpiryService:
    """Starts and stops the scheduler loop in a background thread."""

    def __init__(self, context: Optional[ServiceContext] = None):
        self.context = context or ServiceContext()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            logger.warning("Service is already running")
            return

        configure_logging(self.context.log_path)
        self.context.stop_event = threading.Event()
        self._thread = threading.Thread(
            target=run_daily_task_loop,
            args=(self.context,),
            name="vendor-expiry-scheduler",
            daemon=True,
        )
        self._thread.start()
        logger.info("Service started.")

    def stop(self, timeout: float = STOP_JOIN_TIMEOUT_SECONDS) -> None:
        self.context.stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning(f"Scheduler thread did not finish within {timeout} seconds")
            self._thread = None
        logger.info("Service stopped.")

    def wait(self) -> None:
        """Block until the scheduler thread exits."""
        thread = self._thread
        while thread is not None and thread.is_alive():
            thread.join(1.0)
