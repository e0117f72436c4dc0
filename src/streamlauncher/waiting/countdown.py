"""In-process countdown to the activation time.

Blocks the calling thread until the target time, reporting the remaining
time on a fixed period. The only way to cancel is to interrupt the process.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TypeVar

from streamlauncher.utils.datetime import now_local

logger = logging.getLogger(__name__)

T = TypeVar("T")


def format_remaining(remaining: timedelta) -> str:
    """Format a duration as "M minutes S seconds"."""
    total = max(int(remaining.total_seconds()), 0)
    return f"{total // 60} minutes {total % 60} seconds"


def _log_tick(remaining: timedelta) -> None:
    logger.info(f"Time remaining: {format_remaining(remaining)}")


class Countdown:
    """Waits until a deadline, ticking on a fixed period.

    Each iteration sleeps until the earlier of the deadline and the next
    tick.
    """

    def __init__(
        self,
        tick_seconds: float = 30.0,
        clock: Callable[[], datetime] = now_local,
        sleep: Callable[[float], None] = time.sleep,
        on_tick: Callable[[timedelta], None] | None = None,
    ):
        """Initialize the countdown.

        Args:
            tick_seconds: Period of progress reports
            clock: Returns the current aware time
            sleep: Sleep function
            on_tick: Receives the remaining time on every tick (default: log it)
        """
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self.tick_seconds = tick_seconds
        self._clock = clock
        self._sleep = sleep
        self._on_tick = on_tick or _log_tick

    def wait_until(self, target: datetime) -> bool:
        """Block until ``target``.

        Returns:
            False if the target had already passed (no waiting done), True otherwise
        """
        remaining = target - self._clock()
        if remaining <= timedelta(0):
            logger.warning("Scheduled time is in the past. Going live immediately...")
            return False

        logger.info(f"Waiting {format_remaining(remaining)} until scheduled start time...")
        logger.info(f"Will go live at: {target:%Y-%m-%d %H:%M:%S}")

        while True:
            self._sleep(min(self.tick_seconds, remaining.total_seconds()))
            remaining = target - self._clock()
            if remaining <= timedelta(0):
                logger.info("Scheduled time reached!")
                return True
            self._on_tick(remaining)

    def run(self, target: datetime, action: Callable[[], T]) -> T:
        """Wait until ``target`` then call ``action`` exactly once."""
        self.wait_until(target)
        return action()
