"""
Detector interface.

Backends return detections in the source frame's pixel coordinates, in the
order the model produced them.
"""

from __future__ import annotations

from typing import List, Protocol

import numpy as np

from models.detection import Detection


class InferenceBackend(Protocol):
    def detect(self, frame: np.ndarray) -> List[Detection]:
        ...
