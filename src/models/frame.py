"""
FrameData model for captured camera frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .detection import BoundingBox


@dataclass
class FrameData:
    """
    A captured camera frame plus the metadata the renderer needs.

    Attributes:
        frame: The raw frame as a numpy array (BGR).
        width: Frame width in pixels.
        height: Frame height in pixels.
        timestamp: Monotonic timestamp (seconds) when the frame was captured.
        frame_index: Sequential frame number since the source was opened.
        source: Identifier of the camera the frame came from.
    """
    frame: np.ndarray
    width: int
    height: int
    timestamp: float
    frame_index: int = 0
    source: Optional[str] = None

    @classmethod
    def from_numpy(
        cls,
        frame: np.ndarray,
        timestamp: float,
        frame_index: int = 0,
        source: Optional[str] = None,
    ) -> "FrameData":
        h, w = frame.shape[:2]
        return cls(
            frame=frame,
            width=w,
            height=h,
            timestamp=timestamp,
            frame_index=frame_index,
            source=source,
        )

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    def clip(self, box: BoundingBox) -> Optional[BoundingBox]:
        """
        Intersection of `box` with the frame, on whole pixels.

        Returns None when the intersection is empty (box entirely off-frame or
        narrower than one pixel).
        """
        x1 = max(0, int(round(box.x)))
        y1 = max(0, int(round(box.y)))
        x2 = min(self.width, int(round(box.x2)))
        y2 = min(self.height, int(round(box.y2)))
        if x2 <= x1 or y2 <= y1:
            return None
        return BoundingBox.from_xyxy(x1, y1, x2, y2)

    def crop(self, box: BoundingBox) -> Optional[np.ndarray]:
        """Return the pixels under `box`, clipped to the frame, or None if none are."""
        clipped = self.clip(box)
        if clipped is None:
            return None
        x1, y1 = int(clipped.x), int(clipped.y)
        x2, y2 = int(clipped.x2), int(clipped.y2)
        return self.frame[y1:y2, x1:x2]
