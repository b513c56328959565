"""
Rendering layer: canvas drawing and display surfaces.
"""

from .canvas import (
    blank_canvas,
    draw_fit,
    draw_image,
    draw_message,
    draw_scaled_region,
    fit_rect,
    scaled_rect,
)
from .display import Display, HeadlessDisplay, WindowDisplay

__all__ = [
    "blank_canvas",
    "draw_fit",
    "draw_image",
    "draw_message",
    "draw_scaled_region",
    "fit_rect",
    "scaled_rect",
    "Display",
    "HeadlessDisplay",
    "WindowDisplay",
]
