"""
Tests for the browser viewer API.
"""

import time

import numpy as np
import pytest
from fastapi.testclient import TestClient

from models.config import CorridorConfig
from models.status import SessionState, SessionStatus
from web.app import create_app
from web.routes.api import MJPEG_BOUNDARY, mjpeg_chunks
from web.state import ViewerState


def _canvas(value=128):
    return np.full((48, 64, 3), value, dtype=np.uint8)


@pytest.fixture
def viewer():
    return ViewerState()


@pytest.fixture
def client(viewer):
    app = create_app(viewer, CorridorConfig(min_scale=0.3, max_scale=2.5), stream_fps=30)
    return TestClient(app)


class TestViewerState:
    def test_empty(self, viewer):
        assert viewer.get_frame() is None
        assert viewer.get_jpeg() is None
        assert viewer.frame_seq == 0

    def test_update_stores_copy(self, viewer):
        canvas = _canvas()
        viewer.update(canvas, SessionStatus(state=SessionState.RUNNING))
        canvas[:] = 0

        assert viewer.get_frame().max() == 128
        assert viewer.frame_seq == 1

    def test_jpeg(self, viewer):
        viewer.update(_canvas(), SessionStatus())
        jpg = viewer.get_jpeg()
        assert jpg[:2] == b"\xff\xd8"

    def test_status(self, viewer):
        viewer.update(_canvas(), SessionStatus(state=SessionState.RUNNING, frames_drawn=7))
        status = viewer.get_status()
        assert status["state"] == "running"
        assert status["frames_drawn"] == 7
        assert status["last_frame_age_s"] >= 0
        assert status["uptime_seconds"] >= 0


class TestMjpegChunks:
    def test_bounded_stream(self, viewer):
        viewer.update(_canvas(), SessionStatus())
        parts = list(mjpeg_chunks(viewer, fps=60, frames=1))

        assert len(parts) == 1
        assert parts[0].startswith(f"--{MJPEG_BOUNDARY}\r\nContent-Type: image/jpeg\r\n\r\n".encode())
        assert parts[0].endswith(b"\r\n")

    def test_ends_when_no_frame_arrives(self, viewer):
        started = time.monotonic()
        parts = list(mjpeg_chunks(viewer, fps=60, frames=1, idle_timeout=0.1))

        assert parts == []
        assert time.monotonic() - started < 1.0

    def test_ends_when_canvas_stops_changing(self, viewer):
        viewer.update(_canvas(), SessionStatus())
        parts = list(mjpeg_chunks(viewer, fps=60, idle_timeout=0.1))
        assert len(parts) == 1


class TestApi:
    def test_index_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "/api/stream.mjpg" in response.text

    def test_status_before_first_frame(self, client):
        response = client.get("/api/status")
        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "idle"
        assert data["last_frame_age_s"] is None

    def test_status_after_update(self, client, viewer):
        viewer.update(_canvas(), SessionStatus(state=SessionState.RUNNING, person_visible=True, last_scale=1.2))
        data = client.get("/api/status").json()
        assert data["state"] == "running"
        assert data["person_visible"] is True
        assert data["last_scale"] == pytest.approx(1.2)

    def test_status_shows_start_error(self, client, viewer):
        viewer.update(_canvas(), SessionStatus(error="Unable to access webcam. Please grant camera permissions and reload."))
        assert client.get("/api/status").json()["error"].startswith("Unable to access webcam.")

    def test_config(self, client):
        data = client.get("/api/config").json()
        assert data == {"min_scale": 0.3, "max_scale": 2.5, "detection_interval_ms": 150}

    def test_snapshot_unavailable(self, client):
        assert client.get("/api/snapshot.jpg").status_code == 503

    def test_snapshot(self, client, viewer):
        viewer.update(_canvas(), SessionStatus())
        response = client.get("/api/snapshot.jpg")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.content[:2] == b"\xff\xd8"

    def test_stream_unavailable_before_first_frame(self, client):
        response = client.get("/api/stream.mjpg?frames=1")
        assert response.status_code == 503

    def test_stream_single_frame(self, client, viewer):
        viewer.update(_canvas(), SessionStatus())
        response = client.get("/api/stream.mjpg?frames=1")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("multipart/x-mixed-replace")
        assert f"--{MJPEG_BOUNDARY}".encode() in response.content
