"""
Typed models for the corridor renderer.
"""

from .frame import FrameData
from .detection import BoundingBox, Detection, PERSON_CLASS, filter_people
from .status import SessionState, SessionStatus
from .config import (
    Config,
    CameraConfig,
    DetectionConfig,
    YoloConfig,
    CorridorConfig,
    DisplayConfig,
    WebConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Detection
    "BoundingBox",
    "Detection",
    "PERSON_CLASS",
    "filter_people",
    # Session
    "SessionState",
    "SessionStatus",
    # Config
    "Config",
    "CameraConfig",
    "DetectionConfig",
    "YoloConfig",
    "CorridorConfig",
    "DisplayConfig",
    "WebConfig",
]
