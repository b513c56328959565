"""
Pipeline engine for the corridor renderer.

Drives a CorridorSession at the display's refresh rate: one session step and
one draw per refresh, with detection throttled inside the session.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from corridor.session import CorridorSession
from models.status import SessionStatus
from rendering.canvas import blank_canvas
from rendering.display import Display

FrameCallback = Callable[[np.ndarray, SessionStatus], None]


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline engine.

    Attributes:
        refresh_hz: Target draw rate.
        max_consecutive_failures: Failed frame reads in a row before stopping.
        stats_log_interval: Seconds between status log messages.
        hold_on_error: Keep showing the start-up error message until the
            viewer quits, instead of returning straight away.
    """
    refresh_hz: float = 60.0
    max_consecutive_failures: int = 10
    stats_log_interval: float = 60.0
    hold_on_error: bool = True

    @property
    def refresh_interval(self) -> float:
        return 1.0 / self.refresh_hz if self.refresh_hz > 0 else 0.0


@dataclass
class PipelineStats:
    """Runtime statistics for the pipeline."""
    frame_count: int = 0
    person_frames: int = 0
    start_time: float = field(default_factory=time.monotonic)
    last_stats_log_time: float = field(default_factory=time.monotonic)
    consecutive_failures: int = 0


class PipelineEngine:
    """
    Main render loop.

    - Starts the session (camera, then model)
    - Each refresh: session.step() at the display's current size, show, pace
    - On a failed start: shows the error message on the display
    - On exit: stops the session (releases the camera) and clears the display

    Example:
        session = CorridorSession(corridor_cfg, open_camera, load_detector)
        engine = PipelineEngine(session, WindowDisplay(), PipelineConfig())
        engine.run()
    """

    def __init__(
        self,
        session: CorridorSession,
        display: Display,
        config: PipelineConfig,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session = session
        self.display = display
        self.config = config
        self.stats = PipelineStats()
        self._clock = clock
        self._running = False
        self._callbacks: List[FrameCallback] = []

    @property
    def running(self) -> bool:
        return self._running

    def add_callback(self, callback: FrameCallback) -> None:
        """
        Add a callback to be called with every canvas shown.

        Args:
            callback: Function taking (canvas, session_status).
        """
        self._callbacks.append(callback)

    def run(self) -> None:
        """Start the session and render until stopped, quit or out of frames."""
        self._running = True
        self.stats = PipelineStats()

        try:
            if not self.session.start():
                self._show_error()
                return

            logging.info(f"Pipeline started: refresh_hz={self.config.refresh_hz}")
            while self._running:
                started = self._clock()
                if not self._render_once():
                    break
                self._handle_periodic_tasks()

                delay = max(self.config.refresh_interval - (self._clock() - started), 0.001)
                if not self.display.wait(delay):
                    logging.info("Display closed by viewer")
                    break

        except KeyboardInterrupt:
            logging.info("Pipeline interrupted by user")
        except Exception:
            logging.exception("Pipeline error")
        finally:
            self._cleanup()

    def stop(self) -> None:
        """Signal the loop to stop after the current refresh."""
        self._running = False

    def _render_once(self) -> bool:
        """One refresh. Returns False when the loop should end."""
        canvas = self.session.step(self.display.size())

        if canvas is None:
            self.stats.consecutive_failures += 1
            if self.stats.consecutive_failures >= self.config.max_consecutive_failures:
                logging.error(
                    f"Too many consecutive failures ({self.stats.consecutive_failures}), stopping"
                )
                return False
            logging.warning(
                f"Frame read failed ({self.stats.consecutive_failures}/"
                f"{self.config.max_consecutive_failures})"
            )
            return True

        self.stats.consecutive_failures = 0
        self.stats.frame_count += 1
        status = self.session.status()
        if status.person_visible:
            self.stats.person_frames += 1

        self.display.show(canvas)
        self._notify(canvas, status)
        return True

    def _show_error(self) -> None:
        """Draw the start-up error; keep it up until the viewer quits if configured."""
        while True:
            canvas = self.session.message_canvas(self.display.size())
            if canvas is None:
                return
            self.display.show(canvas)
            self._notify(canvas, self.session.status())
            if not self.config.hold_on_error or not self._running:
                return
            if not self.display.wait(max(self.config.refresh_interval, 0.05)):
                return

    def _notify(self, canvas: np.ndarray, status: SessionStatus) -> None:
        for callback in self._callbacks:
            try:
                callback(canvas, status)
            except Exception as e:
                logging.warning(f"Callback error: {e}")

    def _handle_periodic_tasks(self) -> None:
        now = self._clock()
        if now - self.stats.last_stats_log_time >= self.config.stats_log_interval:
            status = self.session.status()
            elapsed = max(now - self.stats.start_time, 1e-6)
            logging.info(
                f"Pipeline stats: frames={self.stats.frame_count}, "
                f"fps={self.stats.frame_count / elapsed:.1f}, "
                f"person_frames={self.stats.person_frames}, "
                f"detections={status.detections_run}, "
                f"detection_errors={status.detection_errors}"
            )
            self.stats.last_stats_log_time = now

    def _cleanup(self) -> None:
        self._running = False
        self.session.stop()

        cleared = blank_canvas(self.display.size())
        self.display.show(cleared)
        self._notify(cleared, self.session.status())
        self.display.close()

        logging.info("Pipeline stopped")


def create_engine(
    session: CorridorSession,
    display: Display,
    refresh_hz: float = 60.0,
    hold_on_error: bool = True,
) -> PipelineEngine:
    """Factory: engine with the given refresh rate and default failure limits."""
    return PipelineEngine(
        session,
        display,
        PipelineConfig(refresh_hz=refresh_hz, hold_on_error=hold_on_error),
    )
