from __future__ import annotations

import time
from typing import Iterable, Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response, StreamingResponse

from ..api_models import CorridorConfigResponse, StatusResponse
from ..state import ViewerState

router = APIRouter()

MJPEG_BOUNDARY = "frame"
STREAM_IDLE_TIMEOUT = 30.0


def _viewer(request: Request) -> ViewerState:
    return request.app.state.viewer


def mjpeg_chunks(
    viewer: ViewerState,
    fps: int,
    frames: Optional[int] = None,
    idle_timeout: float = STREAM_IDLE_TIMEOUT,
) -> Iterable[bytes]:
    """
    Yield multipart MJPEG parts of the rendered canvas.

    Only new canvases are sent. The stream waits while nothing changes and
    ends after `idle_timeout` seconds without a new canvas.
    `frames` bounds the number of parts (None streams until the client leaves).
    """
    fps = max(1, min(60, int(fps)))
    delay = 1.0 / fps
    sent = 0
    last_seq = -1
    last_sent_at = time.monotonic()

    while frames is None or sent < frames:
        seq = viewer.frame_seq
        jpg = viewer.get_jpeg() if seq != last_seq else None
        if jpg is None:
            if time.monotonic() - last_sent_at >= idle_timeout:
                return
            time.sleep(delay)
            continue
        last_seq = seq
        last_sent_at = time.monotonic()
        yield (
            f"--{MJPEG_BOUNDARY}\r\nContent-Type: image/jpeg\r\n\r\n".encode()
            + jpg
            + b"\r\n"
        )
        sent += 1
        time.sleep(delay)


@router.get("/status", response_model=StatusResponse)
def status(request: Request):
    return _viewer(request).get_status()


@router.get("/config", response_model=CorridorConfigResponse)
def corridor_config(request: Request):
    return request.app.state.corridor_config.to_dict()


@router.get("/snapshot.jpg")
def snapshot(request: Request):
    jpg = _viewer(request).get_jpeg()
    if jpg is None:
        raise HTTPException(status_code=503, detail="No frame rendered yet")
    return Response(content=jpg, media_type="image/jpeg")


@router.get("/stream.mjpg")
def stream(request: Request, fps: Optional[int] = None, frames: Optional[int] = None):
    viewer = _viewer(request)
    if viewer.frame_seq == 0:
        raise HTTPException(status_code=503, detail="No frame rendered yet")
    fps = fps or request.app.state.stream_fps
    return StreamingResponse(
        mjpeg_chunks(viewer, fps=fps, frames=frames),
        media_type=f"multipart/x-mixed-replace; boundary={MJPEG_BOUNDARY}",
    )
