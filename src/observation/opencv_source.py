"""
OpenCV-based observation source.

Supports:
- USB/built-in webcams (device_id as int, e.g. 0)
- Video files (device_id as file path), looped for unattended playback
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Optional, Union

import cv2
import numpy as np

from models.config import CameraConfig
from models.frame import FrameData
from .base import ObservationSource, ObservationConfig


@dataclass
class OpenCVSourceConfig(ObservationConfig):
    """
    Configuration for OpenCV-based observation sources.

    Attributes:
        device_id: Camera index (int) or video file path (str).
        buffer_size: Capture buffer size; 1 keeps live frames fresh.
        flip_horizontal: Mirror frames, as a front camera preview does.
        loop: Rewind video files at the end instead of running dry.
    """
    device_id: Union[int, str] = 0
    buffer_size: int = 1
    flip_horizontal: bool = False
    loop: bool = True

    @classmethod
    def from_camera_config(cls, camera_cfg: CameraConfig, source_id: str = "camera") -> "OpenCVSourceConfig":
        resolution = tuple(camera_cfg.resolution) if camera_cfg.resolution else None
        return cls(
            source_id=source_id,
            resolution=resolution,
            fps=camera_cfg.fps,
            device_id=camera_cfg.device_id,
            flip_horizontal=camera_cfg.flip_horizontal,
        )


class OpenCVSource(ObservationSource):
    """
    Wraps cv2.VideoCapture. Opening fails fast: there is no retry, a camera
    that cannot be opened ends the session.

    Example:
        config = OpenCVSourceConfig(device_id=0, resolution=(1280, 720))
        with OpenCVSource(config) as source:
            frame_data = source.read()
    """

    def __init__(self, config: OpenCVSourceConfig):
        super().__init__(config)
        self._opencv_config = config
        self._cap: Optional[cv2.VideoCapture] = None

    @property
    def device_id(self) -> Union[int, str]:
        return self._opencv_config.device_id

    @property
    def is_file(self) -> bool:
        return isinstance(self.device_id, str) and os.path.exists(self.device_id)

    def open(self) -> None:
        if self._is_open:
            return

        self._cap = cv2.VideoCapture(self.device_id)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise RuntimeError(f"Failed to open camera device {self.device_id}")

        if isinstance(self.device_id, int):
            self._apply_hints()

        self._is_open = True
        self._frame_index = 0
        logging.info(
            f"OpenCVSource opened: source_id={self.source_id}, device={self.device_id}, "
            f"requested_resolution={self._opencv_config.resolution}"
        )

    def _apply_hints(self) -> None:
        """Request resolution/fps. Drivers treat these as hints."""
        cfg = self._opencv_config
        if cfg.resolution:
            w, h = cfg.resolution
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, w)
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, h)
        if cfg.fps:
            self._cap.set(cv2.CAP_PROP_FPS, cfg.fps)
        self._cap.set(cv2.CAP_PROP_BUFFERSIZE, cfg.buffer_size)

        actual_w = self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)
        actual_h = self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)
        actual_fps = self._cap.get(cv2.CAP_PROP_FPS)
        logging.info(f"Camera actual settings - Resolution: ({actual_w}x{actual_h}), FPS: {actual_fps}")

    def read(self) -> Optional[FrameData]:
        if not self._is_open or self._cap is None:
            return None

        ret, frame = self._cap.read()
        if (not ret or frame is None) and self.is_file and self._opencv_config.loop:
            self._cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
            ret, frame = self._cap.read()

        if not ret or frame is None:
            return None

        frame = self._apply_transforms(frame)
        self._frame_index += 1
        return FrameData.from_numpy(
            frame,
            timestamp=time.monotonic(),
            frame_index=self._frame_index,
            source=self.source_id,
        )

    def _apply_transforms(self, frame: np.ndarray) -> np.ndarray:
        if self._opencv_config.flip_horizontal:
            frame = cv2.flip(frame, 1)
        return frame

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        if self._is_open:
            logging.info(f"OpenCVSource closed: source_id={self.source_id}")
        self._is_open = False

