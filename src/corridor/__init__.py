"""
Corridor renderer core.

Maps a detected person's apparent height to a display scale, extracts the
shoe region of their bounding box and runs the start/run/stop session that
ties camera, detector and canvas together.
"""

from .errors import CameraAccessError, CorridorError, ModelLoadError
from .regions import SHOE_REGION_FRACTION, select_person, shoe_region
from .scaling import SCALE_EXPONENT, calculate_inverse_scale, normalized_height
from .scheduler import DetectionScheduler
from .session import CorridorSession

__all__ = [
    "CameraAccessError",
    "CorridorError",
    "ModelLoadError",
    "SHOE_REGION_FRACTION",
    "select_person",
    "shoe_region",
    "SCALE_EXPONENT",
    "calculate_inverse_scale",
    "normalized_height",
    "DetectionScheduler",
    "CorridorSession",
]
