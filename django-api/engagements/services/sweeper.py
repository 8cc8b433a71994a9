"""Periodic lifecycle sweep for server deployments.

The on-read sweep in ``list_my_events`` keeps an organizer's own view fresh;
the Sweeper advances every event on a fixed interval regardless of reads.
"""

import logging
import threading

from engagements.domain.errors import StoreUnavailableError
from engagements.services.lifecycle_service import LifecycleService

logger = logging.getLogger(__name__)


class Sweeper:
    """Run ``LifecycleService.sweep`` every ``interval_seconds`` until stopped."""

    def __init__(self, lifecycle: LifecycleService, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("Sweep interval must be positive")
        self._lifecycle = lifecycle
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()

    def run_once(self) -> int:
        """Sweep once and return the number of events moved.

        A store outage is logged and skipped; the next tick retries.
        """
        try:
            moved = self._lifecycle.sweep()
        except StoreUnavailableError as e:
            logger.error(f"Lifecycle sweep skipped: {e}")
            return 0
        if moved:
            logger.info(f"Lifecycle sweep finished {len(moved)} event(s)")
        return len(moved)

    def run_forever(self) -> None:
        logger.info(f"Lifecycle sweeper started (every {self.interval_seconds}s)")
        while not self._stop.is_set():
            self.run_once()
            self._stop.wait(self.interval_seconds)
        logger.info("Lifecycle sweeper stopped")

    def stop(self) -> None:
        self._stop.set()
