"""
Border: a performance corridor for shoes.

Captures the webcam, finds a person, crops the bottom of their bounding box
and shows it fullscreen at a size that grows as they walk away and shrinks
as they come closer.

Usage:
    python src/main.py --config config/config.yaml

Arguments:
    --config: Path to configuration file (default: config/config.yaml in the
        project checkout, found relative to this file, not the working directory)
    --windowed: Do not request fullscreen
    --no-display: Do not open a local window (use with --web)
    --web: Serve the browser viewer
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

import yaml

from corridor.session import CorridorSession
from inference import create_backend_from_config
from models.config import Config
from observation import create_source_from_config
from ops.logging import VALID_LOG_LEVELS, setup_logging
from ops.process import ensure_single_instance, install_stop_handlers
from pipeline.engine import create_engine
from rendering.display import Display, HeadlessDisplay, WindowDisplay
from web.app import start_web_server
from web.state import ViewerState

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "config.yaml")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        config_dir = os.path.dirname(config_path)
        base_path = os.path.join(config_dir, "default.yaml")
        local_overrides_path = os.path.join(config_dir, "config.yaml")

        merged: Dict[str, Any] = _read_yaml(base_path) if os.path.exists(base_path) else {}
        if os.path.exists(local_overrides_path):
            merged = _deep_merge(merged, _read_yaml(local_overrides_path))

        # Finally apply explicit config_path if it's not one of the files above
        explicit = os.path.abspath(config_path)
        if os.path.exists(config_path) and explicit not in (
            os.path.abspath(base_path),
            os.path.abspath(local_overrides_path),
        ):
            merged = _deep_merge(merged, _read_yaml(config_path))

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_size(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) == 2
        and all(isinstance(x, int) and not isinstance(x, bool) and x > 0 for x in value)
    )


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ["camera", "detection", "corridor", "log_level"]
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Camera
    camera = config.get("camera") or {}
    if camera.get("backend", "opencv") != "opencv":
        return False, "camera.backend must be: opencv"
    if "device_id" not in camera:
        return False, "Missing camera.device_id"
    device_id = camera["device_id"]
    if isinstance(device_id, bool) or not isinstance(device_id, (int, str)):
        return False, "camera.device_id must be an integer (index) or string (file path)"
    if isinstance(device_id, int) and device_id < 0:
        return False, "camera.device_id integer must be non-negative"
    if "resolution" in camera and not _is_size(camera["resolution"]):
        return False, "camera.resolution must be a list of two positive integers [width, height]"
    if "fps" in camera:
        fps = camera["fps"]
        if not isinstance(fps, int) or isinstance(fps, bool) or fps <= 0:
            return False, "camera.fps must be a positive integer"

    # Detection
    detection = config.get("detection") or {}
    backend = detection.get("backend", "yolo")
    if backend != "yolo":
        return False, "detection.backend must be: yolo"
    yolo_cfg = detection.get("yolo") or {}
    if "model" in yolo_cfg and (not isinstance(yolo_cfg["model"], str) or not yolo_cfg["model"]):
        return False, "detection.yolo.model must be a non-empty string"
    for key in ("conf_threshold", "iou_threshold"):
        if key in yolo_cfg:
            value = yolo_cfg[key]
            if not _is_number(value) or not (0 <= value <= 1):
                return False, f"detection.yolo.{key} must be a number between 0 and 1"

    # Corridor
    corridor = config.get("corridor") or {}
    min_scale = corridor.get("min_scale", 0.2)
    max_scale = corridor.get("max_scale", 2.0)
    interval = corridor.get("detection_interval_ms", 150)
    if not _is_number(min_scale) or min_scale <= 0:
        return False, "corridor.min_scale must be a positive number"
    if not _is_number(max_scale) or max_scale < min_scale:
        return False, "corridor.max_scale must be a number >= corridor.min_scale"
    if not _is_number(interval) or interval <= 0:
        return False, "corridor.detection_interval_ms must be a positive number"

    # Display
    display = config.get("display") or {}
    if "refresh_hz" in display:
        hz = display["refresh_hz"]
        if not _is_number(hz) or hz <= 0:
            return False, "display.refresh_hz must be a positive number"
    if "size" in display and not _is_size(display["size"]):
        return False, "display.size must be a list of two positive integers [width, height]"

    # Web
    web = config.get("web") or {}
    if "port" in web:
        port = web["port"]
        if not isinstance(port, int) or isinstance(port, bool) or not (0 < port < 65536):
            return False, "web.port must be an integer between 1 and 65535"
    if "stream_fps" in web:
        stream_fps = web["stream_fps"]
        if not isinstance(stream_fps, int) or isinstance(stream_fps, bool) or stream_fps <= 0:
            return False, "web.stream_fps must be a positive integer"

    # Logging
    if config["log_level"] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


def build_session(cfg: Config) -> CorridorSession:
    """Session wired to the configured camera and detector (both opened lazily on start)."""
    return CorridorSession(
        cfg.corridor,
        source_factory=lambda: create_source_from_config(cfg.camera, source_id="main-camera"),
        detector_factory=lambda: create_backend_from_config(cfg.detection),
        person_class=cfg.detection.yolo.person_class,
    )


def build_display(cfg: Config) -> Display:
    if cfg.display.enabled:
        return WindowDisplay(
            window_name=cfg.display.window_name,
            fullscreen=cfg.display.fullscreen,
            fallback_size=tuple(cfg.display.size),
        )
    return HeadlessDisplay(size=tuple(cfg.display.size))


def main(argv: Optional[list] = None) -> int:
    """Main application function."""
    parser = argparse.ArgumentParser(description="Border - performance corridor renderer")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG_PATH,
                        help="Path to configuration file; default.yaml and config.yaml in the "
                             "same directory are loaded first (default: the checkout's "
                             "config/config.yaml, %(default)s)")
    parser.add_argument("--windowed", action="store_true",
                        help="Do not request fullscreen")
    parser.add_argument("--no-display", action="store_true",
                        help="Do not open a local window")
    parser.add_argument("--web", action="store_true",
                        help="Serve the browser viewer")
    parser.add_argument("--pid-file", type=str, default=None,
                        help="PID file used to keep a single instance")
    args = parser.parse_args(argv)

    raw_config = load_config(args.config)
    if not raw_config:
        logging.error(
            f"No configuration found next to {args.config}; "
            f"pass --config pointing into a checkout's config/ directory"
        )
        return 1

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return 1

    cfg = Config.from_dict(raw_config)
    if args.windowed:
        cfg.display.fullscreen = False
    if args.no_display:
        cfg.display.enabled = False
    if args.web:
        cfg.web.enabled = True

    setup_logging(cfg.log_path, cfg.log_level)
    logging.info("Starting Border")

    if not cfg.display.enabled and not cfg.web.enabled:
        logging.warning("Neither display nor web viewer enabled; rendering offscreen only")

    if not ensure_single_instance(args.pid_file):
        return 1

    session = build_session(cfg)
    display = build_display(cfg)
    engine = create_engine(session, display, refresh_hz=cfg.display.refresh_hz)

    if cfg.web.enabled:
        viewer = ViewerState()
        engine.add_callback(viewer.update)
        start_web_server(viewer, cfg.corridor, cfg.web)

    install_stop_handlers(engine.stop)
    engine.run()

    logging.info("Border stopped")
    return 1 if session.error is not None else 0


if __name__ == "__main__":
    sys.exit(main())
