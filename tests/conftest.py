"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))
# Shared test doubles live next to this file
sys.path.insert(0, os.path.dirname(__file__))


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  backend: "opencv"
  device_id: 0
  resolution: [640, 480]
  fps: 30

detection:
  backend: "yolo"
  yolo:
    model: "yolov8n.pt"

corridor:
  min_scale: 0.2
  max_scale: 2.0
  detection_interval_ms: 150

display:
  enabled: false
  size: [640, 480]

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "backend": "opencv",
            "device_id": 0,
            "resolution": [1280, 720],
            "fps": 30,
        },
        "detection": {
            "backend": "yolo",
            "yolo": {
                "model": "yolov8n.pt",
                "conf_threshold": 0.5,
                "iou_threshold": 0.45,
            },
        },
        "corridor": {
            "min_scale": 0.2,
            "max_scale": 2.0,
            "detection_interval_ms": 150,
        },
        "display": {
            "enabled": True,
            "refresh_hz": 60,
            "size": [1280, 720],
        },
        "web": {
            "enabled": False,
            "port": 5000,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
