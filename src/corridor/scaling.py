"""
Distance-to-scale mapping.

The apparent height of a person in the frame stands in for their distance
from the camera: a tall box means close, a short box means far. The displayed
crop shrinks as the person approaches and grows as they walk away.
"""

from __future__ import annotations

from models.config import DEFAULT_MAX_SCALE, DEFAULT_MIN_SCALE

SCALE_EXPONENT = 0.7


def normalized_height(box_height: float, frame_height: float) -> float:
    """Box height as a fraction of the frame height, clamped to [0, 1]."""
    if frame_height <= 0:
        return 1.0
    return min(1.0, max(0.0, box_height / frame_height))


def calculate_inverse_scale(
    normalized_height: float,
    min_scale: float = DEFAULT_MIN_SCALE,
    max_scale: float = DEFAULT_MAX_SCALE,
    exponent: float = SCALE_EXPONENT,
) -> float:
    """
    Map a normalized person height to a display scale.

    scale = min_scale + (max_scale - min_scale) * (1 - h) ** exponent,
    clamped to [min_scale, max_scale]. Non-increasing in h: h=1 gives
    min_scale, h=0 gives max_scale.
    """
    # (1 - h) must stay non-negative; a negative base to a fractional power is complex.
    inverse_height = min(1.0, max(0.0, 1.0 - normalized_height))
    scale = min_scale + (max_scale - min_scale) * inverse_height ** exponent
    return max(min_scale, min(max_scale, scale))
