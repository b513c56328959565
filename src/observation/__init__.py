"""
Observation layer: the camera boundary.

Sources implement the ObservationSource interface and return FrameData, so
the pipeline does not depend on how frames are captured.
"""

from models.config import CameraConfig
from .base import ObservationSource, ObservationConfig
from .opencv_source import OpenCVSource, OpenCVSourceConfig


def create_source_from_config(camera_cfg: CameraConfig, source_id: str = "camera") -> ObservationSource:
    """Build an unopened source for the configured camera backend."""
    if camera_cfg.backend == "opencv":
        return OpenCVSource(OpenCVSourceConfig.from_camera_config(camera_cfg, source_id=source_id))
    raise ValueError(f"Unknown camera backend: {camera_cfg.backend}")


__all__ = [
    "ObservationSource",
    "ObservationConfig",
    "OpenCVSource",
    "OpenCVSourceConfig",
    "create_source_from_config",
]
