"""
Throttled, non-overlapping detector scheduling.

Drawing runs on every refresh; detection runs on a background worker no more
often than the configured interval. The renderer always reads the most recent
completed result, which may be up to one interval (plus inference time) old.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, List, Optional

import numpy as np

from inference.backend import InferenceBackend
from models.detection import Detection


class DetectionScheduler:
    """
    Runs `detector.detect(frame)` at most once per `interval` seconds.

    - Only one call is in flight at a time.
    - The interval is measured between scheduling times, so two calls are
      never started less than `interval` apart, whatever the refresh rate.
    - A call that raises is logged and counted; the previous result stays.
    - `stop()` does not wait for an in-flight call; its result is dropped.
    """

    def __init__(
        self,
        detector: InferenceBackend,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        executor: Optional[Executor] = None,
    ):
        self._detector = detector
        self._interval = interval
        self._clock = clock
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="detector")
        self._in_flight: Optional[Future] = None
        self._last_scheduled: Optional[float] = None
        self._latest: List[Detection] = []
        self._active = True
        self.runs = 0
        self.errors = 0

    @property
    def latest(self) -> List[Detection]:
        return self._latest

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    @property
    def last_scheduled(self) -> Optional[float]:
        return self._last_scheduled

    def due(self, now: float) -> bool:
        if self._last_scheduled is None:
            return True
        return now - self._last_scheduled >= self._interval

    def poll(self) -> bool:
        """Collect a finished call. Returns True if a new result was accepted."""
        future = self._in_flight
        if future is None or not future.done():
            return False
        self._in_flight = None

        try:
            result = future.result()
        except Exception as e:
            self.errors += 1
            logging.warning(f"Detection error: {e}")
            return False

        if not self._active:
            return False
        self._latest = list(result or [])
        self.runs += 1
        return True

    def tick(self, frame: np.ndarray) -> List[Detection]:
        """
        Called once per refresh with the current frame.

        Schedules a detection when due and idle, then returns the most recent
        completed result.
        """
        if not self._active:
            return self._latest

        self.poll()
        now = self._clock()
        if self._in_flight is None and self.due(now):
            self._last_scheduled = now
            self._in_flight = self._executor.submit(self._detector.detect, frame)
            # Executors that run inline hand back a finished future.
            self.poll()
        return self._latest

    def stop(self) -> None:
        """Stop scheduling; an in-flight call finishes in the background and is discarded."""
        self._active = False
        self._in_flight = None
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
