# Overview: Background task that restores every product's stock to its maximum once per day.

"""
Inventory reset scheduler.

The scheduler is an explicitly owned object with start()/stop(), created by
create_app() and stopped at interpreter exit. A failed run is logged and
the loop carries on to the next day. Runs may overlap in time with
checkouts; that race is accepted (last write wins on Product.inventory).
"""

from __future__ import annotations

import threading
from datetime import datetime, time, timedelta
from typing import Callable

from flask import Flask

from . import inventory_service


def next_run_after(now: datetime, at: time) -> datetime:
    """First datetime strictly after `now` whose time of day is `at`."""
    candidate = now.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


class InventoryResetScheduler:
    def __init__(
        self,
        app: Flask,
        at: time,
        *,
        clock: Callable[[], datetime] = datetime.now,
        job: Callable[[], int] = inventory_service.reset_all_to_max,
    ):
        self.app = app
        self.at = at
        self._clock = clock
        self._job = job
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.next_run_at: datetime | None = None
        self.last_run_at: datetime | None = None
        self.last_result: int | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self.next_run_at = next_run_after(self._clock(), self.at)
        self._thread = threading.Thread(
            target=self._loop,
            name="inventory-reset-scheduler",
            daemon=True,
        )
        self._thread.start()
        self.app.logger.info(
            "Inventory reset scheduler started - runs daily at %s (next run %s)",
            self.at.strftime("%H:%M"), self.next_run_at.isoformat(timespec="minutes"),
        )

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

    def run_once(self) -> int | None:
        """
        Execute one reset inside an application context.

        Returns the number of products modified, or None when the run failed.
        Never raises; the loop keeps its daily schedule after a failure.
        """
        self.last_run_at = self._clock()
        with self.app.app_context():
            try:
                modified = self._job()
            except Exception:
                self.app.logger.exception("Error resetting inventory")
                self.last_result = None
                return None
        self.app.logger.info("Inventory reset completed. %s products updated.", modified)
        self.last_result = modified
        return modified

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            wait_seconds = max((self.next_run_at - self._clock()).total_seconds(), 0.0)
            if self._stop_event.wait(wait_seconds):
                break
            self.app.logger.info("Running EOD inventory reset...")
            self.run_once()
            self.next_run_at = next_run_after(self._clock(), self.at)

    def status(self) -> dict:
        return {
            "running": self.running,
            "time_of_day": self.at.strftime("%H:%M"),
            "next_run_at": self.next_run_at.isoformat(timespec="seconds") if self.next_run_at else None,
            "last_run_at": self.last_run_at.isoformat(timespec="seconds") if self.last_run_at else None,
            "last_result": self.last_result,
        }
