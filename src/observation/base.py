"""
ObservationSource interface for the camera boundary.

The renderer owns exactly one open source per session: it acquires the camera
when the session starts and releases it on stop. Sources hand out FrameData
so the pipeline never touches capture handles directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from models.frame import FrameData


@dataclass
class ObservationConfig:
    """
    Base configuration for observation sources.

    Attributes:
        source_id: Identifier used in logs and on FrameData.
        resolution: Requested (width, height). None = driver default.
        fps: Requested frames per second. None = driver default.
    """
    source_id: str = "camera"
    resolution: Optional[tuple[int, int]] = None
    fps: Optional[int] = None


class ObservationSource(ABC):
    """
    Lifecycle:
        1. open() acquires the device; raises RuntimeError if unavailable
        2. read() returns the current frame, or None if none is available
        3. close() releases the device; safe to call more than once

    Can be used as a context manager.
    """

    def __init__(self, config: ObservationConfig):
        self._config = config
        self._is_open = False
        self._frame_index = 0

    @property
    def source_id(self) -> str:
        return self._config.source_id

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def frame_index(self) -> int:
        """Frames read since open()."""
        return self._frame_index

    @abstractmethod
    def open(self) -> None:
        pass

    @abstractmethod
    def read(self) -> Optional[FrameData]:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self) -> "ObservationSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
