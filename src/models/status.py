"""
Session state and status snapshot models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class SessionState(str, Enum):
    """Lifecycle states of a corridor session."""
    IDLE = "idle"
    REQUESTING_CAMERA = "requesting_camera"
    LOADING_MODEL = "loading_model"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class SessionStatus:
    """
    Point-in-time view of a session, for logs and the status endpoint.

    Attributes:
        state: Current lifecycle state.
        error: Message shown to the viewer after a failed start, if any.
        frames_drawn: Canvases rendered since the session started running.
        detections_run: Detector results accepted.
        detection_errors: Detector calls that raised.
        person_visible: Whether the latest result contains a person.
        last_scale: Scale applied to the most recent crop, if any.
    """
    state: SessionState = SessionState.IDLE
    error: Optional[str] = None
    frames_drawn: int = 0
    detections_run: int = 0
    detection_errors: int = 0
    person_visible: bool = False
    last_scale: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "error": self.error,
            "frames_drawn": self.frames_drawn,
            "detections_run": self.detections_run,
            "detection_errors": self.detection_errors,
            "person_visible": self.person_visible,
            "last_scale": self.last_scale,
        }
