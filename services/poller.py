"""Poll loop that races redundant fetches and shows the first fresh reading."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from queue import Queue
from threading import Event, Lock
from typing import Callable, Optional, cast

from models.records import Reading
from services.dedup import PollState
from services.fetcher import Fetcher
from services.selector import select_reading

logger = logging.getLogger(__name__)

_CLOSED = object()


class PollCycle:
    """Coordinates fan-out fetches, admission, and hand-off of readings.

    Each cycle submits ``fan_out`` identical fetch tasks to a shared pool.
    Tasks that find the sensor push the reading onto a bounded queue; once
    all of them have finished, a close marker follows. The consumer admits
    at most one reading per cycle and stops draining as soon as it does.
    Tasks still in flight are left to finish on their own.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        sensor_id: str,
        state: PollState,
        on_reading: Callable[[Reading], None],
        fan_out: int = 5,
        interval: float = 1.0,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        if fan_out < 1:
            raise ValueError("fan_out must be at least 1.")
        if interval < 0:
            raise ValueError("interval must not be negative.")
        self.fetcher = fetcher
        self.sensor_id = sensor_id
        self.state = state
        self.on_reading = on_reading
        self.fan_out = fan_out
        self.interval = interval
        self._owns_executor = executor is None
        # Stragglers from the previous cycle may still hold workers.
        self.executor = executor or ThreadPoolExecutor(
            max_workers=fan_out * 2, thread_name_prefix="fetch"
        )
        self._stop = Event()

    def run_once(self) -> Optional[Reading]:
        """Run a single cycle and return the reading it admitted, if any."""
        # One slot per task plus the close marker, so producers never block.
        completions: Queue[object] = Queue(maxsize=self.fan_out + 1)
        pending = self.fan_out
        pending_lock = Lock()

        def _task_done(future: Future[None]) -> None:
            nonlocal pending
            if not future.cancelled() and future.exception() is not None:
                logger.error(
                    "Fetch task failed: %s",
                    future.exception(),
                    extra={"sensor_id": self.sensor_id},
                )
            with pending_lock:
                pending -= 1
                finished = pending == 0
            if finished:
                completions.put(_CLOSED)

        for _ in range(self.fan_out):
            future = self.executor.submit(self._fetch_and_select, completions)
            future.add_done_callback(_task_done)

        while True:
            item = completions.get()
            if item is _CLOSED:
                return None
            reading = cast(Reading, item)
            if self.state.admit(reading):
                self._emit(reading)
                return reading
            logger.debug(
                "Discarding stale reading",
                extra={"sensor_id": reading.sensor_id, "timestamp_ms": reading.timestamp_ms},
            )

    def run_forever(self, max_cycles: Optional[int] = None) -> int:
        """Poll until stopped (or ``max_cycles`` is reached); return cycles run."""
        cycles = 0
        while not self._stop.is_set():
            self.run_once()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            self._stop.wait(self.interval)
        return cycles

    def stop(self) -> None:
        self._stop.set()

    def shutdown(self) -> None:
        """Release the pool without waiting on fetches that are still running."""
        self.stop()
        if self._owns_executor:
            self.executor.shutdown(wait=False)

    def _fetch_and_select(self, completions: Queue[object]) -> None:
        envelope = self.fetcher.fetch()
        if envelope is None:
            return
        reading = select_reading(envelope, self.sensor_id)
        if reading is None:
            logger.debug("Sensor missing from response", extra={"sensor_id": self.sensor_id})
            return
        completions.put(reading)

    def _emit(self, reading: Reading) -> None:
        try:
            self.on_reading(reading)
        except Exception:
            logger.exception(
                "Failed to present reading",
                extra={"sensor_id": reading.sensor_id, "timestamp_ms": reading.timestamp_ms},
            )
