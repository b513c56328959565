"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union


DEFAULT_MIN_SCALE = 0.2
DEFAULT_MAX_SCALE = 2.0
DEFAULT_DETECTION_INTERVAL_MS = 150


@dataclass
class CameraConfig:
    """Camera configuration. Resolution is a hint; the driver may pick another."""
    backend: str = "opencv"
    device_id: Union[int, str] = 0
    resolution: List[int] = field(default_factory=lambda: [1280, 720])
    fps: int = 30
    flip_horizontal: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        return cls(
            backend=d.get("backend", "opencv"),
            device_id=d.get("device_id", 0),
            resolution=list(d.get("resolution", [1280, 720])),
            fps=d.get("fps", 30),
            flip_horizontal=d.get("flip_horizontal", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "device_id": self.device_id,
            "resolution": self.resolution,
            "fps": self.fps,
            "flip_horizontal": self.flip_horizontal,
        }


@dataclass
class YoloConfig:
    """YOLO detector configuration."""
    model: str = "yolov8n.pt"
    conf_threshold: float = 0.5
    iou_threshold: float = 0.45
    person_class: str = "person"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "YoloConfig":
        return cls(
            model=d.get("model", "yolov8n.pt"),
            conf_threshold=d.get("conf_threshold", 0.5),
            iou_threshold=d.get("iou_threshold", 0.45),
            person_class=d.get("person_class", "person"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "conf_threshold": self.conf_threshold,
            "iou_threshold": self.iou_threshold,
            "person_class": self.person_class,
        }


@dataclass
class DetectionConfig:
    """Detection configuration."""
    backend: str = "yolo"
    yolo: YoloConfig = field(default_factory=YoloConfig)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            backend=d.get("backend", "yolo"),
            yolo=YoloConfig.from_dict(d.get("yolo") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "yolo": self.yolo.to_dict(),
        }


@dataclass(frozen=True)
class CorridorConfig:
    """
    Renderer parameters, fixed for the lifetime of a session.

    Attributes:
        min_scale: Display scale when the person fills the frame height.
        max_scale: Display scale as the person shrinks toward nothing.
        detection_interval_ms: Minimum time between detector invocations.
    """
    min_scale: float = DEFAULT_MIN_SCALE
    max_scale: float = DEFAULT_MAX_SCALE
    detection_interval_ms: float = DEFAULT_DETECTION_INTERVAL_MS

    @property
    def detection_interval(self) -> float:
        """Detection interval in seconds."""
        return self.detection_interval_ms / 1000.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CorridorConfig":
        return cls(
            min_scale=float(d.get("min_scale", DEFAULT_MIN_SCALE)),
            max_scale=float(d.get("max_scale", DEFAULT_MAX_SCALE)),
            detection_interval_ms=float(d.get("detection_interval_ms", DEFAULT_DETECTION_INTERVAL_MS)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_scale": self.min_scale,
            "max_scale": self.max_scale,
            "detection_interval_ms": self.detection_interval_ms,
        }


@dataclass
class DisplayConfig:
    """Output window configuration. `size` is used when no window exists."""
    enabled: bool = True
    window_name: str = "Border"
    fullscreen: bool = True
    refresh_hz: int = 60
    size: List[int] = field(default_factory=lambda: [1280, 720])

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DisplayConfig":
        return cls(
            enabled=d.get("enabled", True),
            window_name=d.get("window_name", "Border"),
            fullscreen=d.get("fullscreen", True),
            refresh_hz=d.get("refresh_hz", 60),
            size=list(d.get("size", [1280, 720])),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "window_name": self.window_name,
            "fullscreen": self.fullscreen,
            "refresh_hz": self.refresh_hz,
            "size": self.size,
        }


@dataclass
class WebConfig:
    """Browser viewer configuration."""
    enabled: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    stream_fps: int = 15

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            enabled=d.get("enabled", False),
            host=d.get("host", "0.0.0.0"),
            port=d.get("port", 5000),
            stream_fps=d.get("stream_fps", 15),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "host": self.host,
            "port": self.port,
            "stream_fps": self.stream_fps,
        }


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    corridor: CorridorConfig = field(default_factory=CorridorConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/border.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera") or {}),
            detection=DetectionConfig.from_dict(d.get("detection") or {}),
            corridor=CorridorConfig.from_dict(d.get("corridor") or {}),
            display=DisplayConfig.from_dict(d.get("display") or {}),
            web=WebConfig.from_dict(d.get("web") or {}),
            log_path=d.get("log_path", "logs/border.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "camera": self.camera.to_dict(),
            "detection": self.detection.to_dict(),
            "corridor": self.corridor.to_dict(),
            "display": self.display.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
