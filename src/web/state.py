import threading
import time
from typing import Any, Dict, Optional

import cv2
import numpy as np

from models.status import SessionStatus


class ViewerState:
    """
    Latest rendered canvas and session status, shared between the render
    loop and the web server threads.

    The render loop writes through `update` (registered as a pipeline
    callback); request handlers only read.
    """

    def __init__(self, jpeg_quality: int = 80):
        self._lock = threading.Lock()
        self._frame: Optional[np.ndarray] = None
        self._frame_seq = 0
        self._status: Dict[str, Any] = SessionStatus().to_dict()
        self._last_frame_ts: Optional[float] = None
        self._jpeg_quality = jpeg_quality
        self.start_time = time.time()

    def update(self, canvas: np.ndarray, status: SessionStatus) -> None:
        """Pipeline callback: store a copy of the canvas and the status."""
        with self._lock:
            self._frame = canvas.copy()
            self._frame_seq += 1
            self._status = status.to_dict()
            self._last_frame_ts = time.time()

    @property
    def frame_seq(self) -> int:
        """Increments on every update; lets streams skip unchanged frames."""
        with self._lock:
            return self._frame_seq

    def get_frame(self) -> Optional[np.ndarray]:
        with self._lock:
            if self._frame is None:
                return None
            return self._frame.copy()

    def get_jpeg(self) -> Optional[bytes]:
        """JPEG-encoded latest canvas, or None before the first frame."""
        frame = self.get_frame()
        if frame is None:
            return None
        ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self._jpeg_quality])
        if not ok:
            return None
        return buf.tobytes()

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            status = dict(self._status)
            last_frame_ts = self._last_frame_ts
        now = time.time()
        status["last_frame_age_s"] = now - last_frame_ts if last_frame_ts else None
        status["uptime_seconds"] = int(now - self.start_time)
        return status
