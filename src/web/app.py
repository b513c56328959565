"""
FastAPI application factory for the browser viewer.

Routes:
- /            -> viewer page (fullscreen MJPEG)
- /api/*       -> stream, snapshot, status, config
"""

from __future__ import annotations

import logging
import threading

import uvicorn
from fastapi import FastAPI

from models.config import CorridorConfig, WebConfig
from .routes import api, pages
from .state import ViewerState


def create_app(viewer: ViewerState, corridor_config: CorridorConfig, stream_fps: int = 15) -> FastAPI:
    """Create the FastAPI app bound to one viewer state."""
    app = FastAPI(
        title="Border",
        version="0.1.0",
        description="Performance corridor viewer",
    )
    app.state.viewer = viewer
    app.state.corridor_config = corridor_config
    app.state.stream_fps = stream_fps

    app.include_router(api.router, prefix="/api")
    app.include_router(pages.router)
    return app


def start_web_server(
    viewer: ViewerState,
    corridor_config: CorridorConfig,
    web_cfg: WebConfig,
) -> threading.Thread:
    """Serve the viewer from a daemon thread; returns the thread."""
    app = create_app(viewer, corridor_config, stream_fps=web_cfg.stream_fps)

    def run_web_app():
        uvicorn.run(app, host=web_cfg.host, port=web_cfg.port, log_level="warning")

    web_thread = threading.Thread(target=run_web_app, name="web", daemon=True)
    web_thread.start()
    logging.info(f"Web viewer started on http://{web_cfg.host}:{web_cfg.port}/")
    return web_thread
