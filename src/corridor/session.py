"""
Corridor session: the state machine that owns the camera and the detector.

    idle -> requesting_camera -> loading_model -> running -> stopped

A failed camera or model step returns the session to idle with an error
message for the viewer. There are no retries.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from concurrent.futures import Executor
from typing import Callable, Optional, Tuple

import numpy as np

from inference.backend import InferenceBackend
from models.config import CorridorConfig
from models.detection import PERSON_CLASS
from models.status import SessionState, SessionStatus
from observation.base import ObservationSource
from rendering.canvas import draw_fit, draw_message, draw_scaled_region
from .errors import CameraAccessError, CorridorError, ModelLoadError
from .regions import select_person, shoe_region
from .scaling import calculate_inverse_scale, normalized_height
from .scheduler import DetectionScheduler


class CorridorSession:
    """
    One run of the installation.

    Holds everything that changes while the piece runs (camera handle,
    detector, latest detections, state) so that independent sessions can
    coexist, e.g. in tests.

    Example:
        session = CorridorSession(CorridorConfig(), open_camera, load_detector)
        if session.start():
            canvas = session.step((1280, 720))
        session.stop()
    """

    def __init__(
        self,
        config: CorridorConfig,
        source_factory: Callable[[], ObservationSource],
        detector_factory: Callable[[], InferenceBackend],
        person_class: str = PERSON_CLASS,
        clock: Callable[[], float] = time.monotonic,
        executor: Optional[Executor] = None,
    ):
        self.config = config
        self._source_factory = source_factory
        self._detector_factory = detector_factory
        self._person_class = person_class
        self._clock = clock
        self._executor = executor

        self._source: Optional[ObservationSource] = None
        self._detector: Optional[InferenceBackend] = None
        self._scheduler: Optional[DetectionScheduler] = None
        self._error: Optional[CorridorError] = None
        self._status = SessionStatus()

    @property
    def state(self) -> SessionState:
        return self._status.state

    @property
    def error(self) -> Optional[CorridorError]:
        return self._error

    @property
    def scheduler(self) -> Optional[DetectionScheduler]:
        return self._scheduler

    def status(self) -> SessionStatus:
        """Copy of the current status, refreshed with scheduler counters."""
        if self._scheduler is not None:
            self._status.detections_run = self._scheduler.runs
            self._status.detection_errors = self._scheduler.errors
        return replace(self._status)

    def _set_state(self, state: SessionState) -> None:
        logging.info(f"Session state: {self._status.state.value} -> {state.value}")
        self._status.state = state

    def start(self) -> bool:
        """
        Acquire the camera, then load the detector.

        Returns True once running. On failure the session is back in idle,
        `error` holds the cause and the camera is released.
        """
        if self.state != SessionState.IDLE:
            logging.warning(f"Session start ignored in state {self.state.value}")
            return False

        self._error = None
        self._status.error = None

        self._set_state(SessionState.REQUESTING_CAMERA)
        try:
            source = self._source_factory()
            source.open()
        except Exception as e:
            return self._fail(CameraAccessError(str(e)))
        self._source = source

        self._set_state(SessionState.LOADING_MODEL)
        try:
            self._detector = self._detector_factory()
        except Exception as e:
            self._release_camera()
            return self._fail(ModelLoadError(str(e)))

        self._scheduler = DetectionScheduler(
            self._detector,
            interval=self.config.detection_interval,
            clock=self._clock,
            executor=self._executor,
        )
        self._set_state(SessionState.RUNNING)
        return True

    def _fail(self, error: CorridorError) -> bool:
        logging.error(f"Error starting experience: {type(error).__name__}: {error}")
        self._error = error
        self._status.error = " ".join(error.message_lines)
        self._set_state(SessionState.IDLE)
        return False

    def step(self, size: Tuple[int, int]) -> Optional[np.ndarray]:
        """
        Run one refresh: read a frame, maybe schedule detection, draw.

        Returns the canvas, or None if not running or no frame was available.
        """
        if self.state != SessionState.RUNNING or self._source is None:
            return None

        frame_data = self._source.read()
        if frame_data is None:
            return None

        detections = self._scheduler.tick(frame_data.frame)
        person = select_person(detections, self._person_class)

        if person is None:
            canvas = draw_fit(frame_data.frame, size)
            self._status.person_visible = False
            self._status.last_scale = None
        else:
            region = shoe_region(person.bbox)
            scale = calculate_inverse_scale(
                normalized_height(person.bbox.height, frame_data.height),
                min_scale=self.config.min_scale,
                max_scale=self.config.max_scale,
            )
            canvas = draw_scaled_region(frame_data, region, scale, size)
            self._status.person_visible = True
            self._status.last_scale = scale

        self._status.frames_drawn += 1
        return canvas

    def message_canvas(self, size: Tuple[int, int]) -> Optional[np.ndarray]:
        """Canvas with the start-up error message, if the last start failed."""
        if self._error is None:
            return None
        return draw_message(size, self._error.message_lines)

    def stop(self) -> None:
        """Stop scheduling detection and release the camera."""
        if self.state == SessionState.STOPPED:
            return
        if self._scheduler is not None:
            self._scheduler.stop()
        self._release_camera()
        self._set_state(SessionState.STOPPED)

    def _release_camera(self) -> None:
        if self._source is None:
            return
        try:
            self._source.close()
        except Exception as e:
            logging.warning(f"Error closing source: {e}")
        self._source = None
