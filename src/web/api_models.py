from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    state: str = Field(..., description="idle|requesting_camera|loading_model|running|stopped")
    error: Optional[str] = Field(None, description="Start-up failure shown to the viewer")
    frames_drawn: int = 0
    detections_run: int = 0
    detection_errors: int = 0
    person_visible: bool = False
    last_scale: Optional[float] = Field(None, description="Scale of the most recent crop")
    last_frame_age_s: Optional[float] = Field(None, description="Seconds since the last canvas")
    uptime_seconds: int = 0


class CorridorConfigResponse(BaseModel):
    min_scale: float
    max_scale: float
    detection_interval_ms: float
