"""
Viewer page: the rendered stream, fullscreen on black.

Clicking (or tapping) the page requests browser fullscreen, as the
installation page always has.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter()

VIEWER_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1, user-scalable=no">
<title>Border</title>
<style>
  html, body { margin: 0; height: 100%; background: #000; overflow: hidden; }
  img { width: 100vw; height: 100vh; object-fit: contain; display: block; }
</style>
</head>
<body>
<img src="/api/stream.mjpg" alt="">
<script>
  function requestFullscreen() {
    const elem = document.documentElement;
    const request = elem.requestFullscreen || elem.webkitRequestFullscreen;
    if (request) {
      Promise.resolve(request.call(elem)).catch(err => console.log('Fullscreen request failed:', err));
    }
  }
  document.addEventListener('click', requestFullscreen, { once: true });
  document.addEventListener('touchstart', requestFullscreen, { once: true });
</script>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
def viewer():
    return HTMLResponse(content=VIEWER_HTML)
