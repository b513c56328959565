"""
Canvas drawing for the corridor display.

A canvas is a BGR numpy array sized to the display. Sizes are (width, height)
tuples throughout, matching OpenCV's convention for cv2.resize.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from models.detection import BoundingBox
from models.frame import FrameData

Size = Tuple[int, int]
Rect = Tuple[float, float, float, float]

BACKGROUND = (0, 0, 0)
TEXT_COLOR = (255, 255, 255)


def blank_canvas(size: Size) -> np.ndarray:
    width, height = size
    return np.zeros((max(1, height), max(1, width), 3), dtype=np.uint8)


def fit_rect(src_size: Size, dst_size: Size) -> Rect:
    """
    Largest rect with the source aspect ratio that fits inside dst, centered.

    Returns (x, y, width, height) in destination coordinates.
    """
    src_w, src_h = src_size
    dst_w, dst_h = dst_size
    if src_w <= 0 or src_h <= 0 or dst_w <= 0 or dst_h <= 0:
        return (0.0, 0.0, 0.0, 0.0)

    src_aspect = src_w / src_h
    dst_aspect = dst_w / dst_h

    if src_aspect > dst_aspect:
        # Source is wider than the display
        draw_w = float(dst_w)
        draw_h = dst_w / src_aspect
        return (0.0, (dst_h - draw_h) / 2, draw_w, draw_h)

    draw_h = float(dst_h)
    draw_w = dst_h * src_aspect
    return ((dst_w - draw_w) / 2, 0.0, draw_w, draw_h)


def scaled_rect(region: BoundingBox, scale: float, dst_size: Size) -> Rect:
    """Region size multiplied by `scale`, centered on the display. No fitting."""
    dst_w, dst_h = dst_size
    scaled_w = region.width * scale
    scaled_h = region.height * scale
    return ((dst_w - scaled_w) / 2, (dst_h - scaled_h) / 2, scaled_w, scaled_h)


def draw_image(canvas: np.ndarray, image: np.ndarray, rect: Rect) -> np.ndarray:
    """
    Stretch `image` into `rect` on the canvas, clipping at the canvas edges.

    The canvas is modified in place and returned.
    """
    x, y, w, h = rect
    target_w = int(round(w))
    target_h = int(round(h))
    if target_w < 1 or target_h < 1 or image is None or image.size == 0:
        return canvas

    resized = cv2.resize(image, (target_w, target_h), interpolation=cv2.INTER_LINEAR)

    canvas_h, canvas_w = canvas.shape[:2]
    left = int(round(x))
    top = int(round(y))

    dst_x1 = max(0, left)
    dst_y1 = max(0, top)
    dst_x2 = min(canvas_w, left + target_w)
    dst_y2 = min(canvas_h, top + target_h)
    if dst_x2 <= dst_x1 or dst_y2 <= dst_y1:
        return canvas

    src_x1 = dst_x1 - left
    src_y1 = dst_y1 - top
    canvas[dst_y1:dst_y2, dst_x1:dst_x2] = resized[
        src_y1 : src_y1 + (dst_y2 - dst_y1),
        src_x1 : src_x1 + (dst_x2 - dst_x1),
    ]
    return canvas


def draw_fit(frame: np.ndarray, size: Size) -> np.ndarray:
    """Whole frame, aspect preserved, centered on black."""
    canvas = blank_canvas(size)
    frame_h, frame_w = frame.shape[:2]
    return draw_image(canvas, frame, fit_rect((frame_w, frame_h), size))


def draw_scaled_region(frame_data: FrameData, region: BoundingBox, scale: float, size: Size) -> np.ndarray:
    """
    Crop `region` out of the frame and draw it at `scale`, centered.

    The full region is positioned as if it lay inside the frame; only the part
    that does is drawn, at its own offset, so off-frame parts leave black.
    """
    canvas = blank_canvas(size)
    clipped = frame_data.clip(region)
    if clipped is None:
        return canvas
    crop: Optional[np.ndarray] = frame_data.crop(clipped)

    x0, y0, _, _ = scaled_rect(region, scale, size)
    rect = (
        x0 + (clipped.x - region.x) * scale,
        y0 + (clipped.y - region.y) * scale,
        clipped.width * scale,
        clipped.height * scale,
    )
    return draw_image(canvas, crop, rect)


def draw_message(size: Size, lines: Sequence[str], font_scale: float = 0.6) -> np.ndarray:
    """Centered white text lines on black, one line per entry."""
    canvas = blank_canvas(size)
    width, height = size
    font = cv2.FONT_HERSHEY_SIMPLEX
    thickness = 1
    line_gap = 8

    metrics = [cv2.getTextSize(line, font, font_scale, thickness) for line in lines]
    line_height = max((th + baseline for (_, th), baseline in metrics), default=0)
    block_height = len(lines) * line_height + max(0, len(lines) - 1) * line_gap
    y = (height - block_height) / 2

    for line, ((tw, th), _) in zip(lines, metrics):
        y += th
        origin = (int(round((width - tw) / 2)), int(round(y)))
        cv2.putText(canvas, line, origin, font, font_scale, TEXT_COLOR, thickness, cv2.LINE_AA)
        y += line_height - th + line_gap
    return canvas
