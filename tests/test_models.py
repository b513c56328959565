"""
Tests for data models and typed configuration.
"""

import numpy as np
import pytest

from models.config import (
    Config,
    CorridorConfig,
    DEFAULT_DETECTION_INTERVAL_MS,
    DEFAULT_MAX_SCALE,
    DEFAULT_MIN_SCALE,
)
from models.detection import BoundingBox, Detection, filter_people
from models.frame import FrameData
from models.status import SessionState, SessionStatus


class TestBoundingBox:
    def test_from_xyxy(self):
        bbox = BoundingBox.from_xyxy(10, 20, 110, 220)
        assert bbox.width == 100
        assert bbox.height == 200
        assert bbox.x2 == 110
        assert bbox.y2 == 220

    def test_contains(self):
        outer = BoundingBox(0, 0, 100, 100)
        assert outer.contains(BoundingBox(10, 10, 20, 20))
        assert not outer.contains(BoundingBox(90, 90, 20, 20))


class TestDetection:
    def test_from_xywh(self):
        det = Detection.from_xywh(1, 2, 3, 4, class_name="person", confidence=0.8, class_id=0)
        assert det.bbox == BoundingBox(1, 2, 3, 4)
        assert det.class_name == "person"
        assert det.confidence == 0.8

    def test_filter_people_keeps_order(self):
        a = Detection.from_xywh(0, 0, 1, 1, class_name="person")
        b = Detection.from_xywh(0, 0, 1, 1, class_name="cat")
        c = Detection.from_xywh(5, 5, 1, 1, class_name="person")
        assert filter_people([a, b, c]) == [a, c]


class TestFrameData:
    def test_from_numpy(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        fd = FrameData.from_numpy(frame, timestamp=1.0, frame_index=3, source="cam")
        assert fd.size == (640, 480)
        assert fd.frame_index == 3
        assert fd.source == "cam"

    def test_crop_inside(self):
        frame = np.arange(100 * 100 * 3, dtype=np.uint8).reshape(100, 100, 3)
        fd = FrameData.from_numpy(frame, timestamp=0.0)
        crop = fd.crop(BoundingBox(10, 20, 30, 40))
        assert crop.shape == (40, 30, 3)
        assert np.array_equal(crop, frame[20:60, 10:40])

    def test_crop_clipped_to_frame(self):
        fd = FrameData.from_numpy(np.zeros((100, 100, 3), dtype=np.uint8), timestamp=0.0)
        crop = fd.crop(BoundingBox(80, 90, 50, 50))
        assert crop.shape == (10, 20, 3)

    def test_clip(self):
        fd = FrameData.from_numpy(np.zeros((100, 100, 3), dtype=np.uint8), timestamp=0.0)
        assert fd.clip(BoundingBox(50, -10, 100, 40)) == BoundingBox(50, 0, 50, 30)
        assert fd.clip(BoundingBox(10, 10, 20, 20)) == BoundingBox(10, 10, 20, 20)
        assert fd.clip(BoundingBox(-30, 0, 20, 20)) is None

    def test_crop_off_frame(self):
        fd = FrameData.from_numpy(np.zeros((100, 100, 3), dtype=np.uint8), timestamp=0.0)
        assert fd.crop(BoundingBox(200, 200, 10, 10)) is None
        assert fd.crop(BoundingBox(10, 10, 0.2, 10)) is None


class TestCorridorConfig:
    def test_defaults(self):
        cfg = CorridorConfig()
        assert cfg.min_scale == DEFAULT_MIN_SCALE == 0.2
        assert cfg.max_scale == DEFAULT_MAX_SCALE == 2.0
        assert cfg.detection_interval_ms == DEFAULT_DETECTION_INTERVAL_MS == 150
        assert cfg.detection_interval == pytest.approx(0.15)

    def test_round_trip(self):
        cfg = CorridorConfig.from_dict({"min_scale": 0.5, "max_scale": 3.0, "detection_interval_ms": 200})
        assert CorridorConfig.from_dict(cfg.to_dict()) == cfg


class TestConfig:
    def test_from_dict(self, valid_config):
        cfg = Config.from_dict(valid_config)
        assert cfg.camera.resolution == [1280, 720]
        assert cfg.detection.yolo.model == "yolov8n.pt"
        assert cfg.corridor.max_scale == 2.0
        assert cfg.display.size == [1280, 720]
        assert cfg.web.port == 5000
        assert cfg.log_level == "INFO"

    def test_missing_sections_use_defaults(self):
        cfg = Config.from_dict({})
        assert cfg.camera.backend == "opencv"
        assert cfg.detection.backend == "yolo"
        assert cfg.corridor == CorridorConfig()
        assert cfg.web.enabled is False


class TestSessionStatus:
    def test_to_dict(self):
        status = SessionStatus(state=SessionState.RUNNING, frames_drawn=5, last_scale=1.5)
        d = status.to_dict()
        assert d["state"] == "running"
        assert d["frames_drawn"] == 5
        assert d["last_scale"] == 1.5
        assert d["error"] is None
