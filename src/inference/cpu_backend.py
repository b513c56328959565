"""
CPU inference backend.

Wraps an Ultralytics YOLO model trained on COCO, which labels people as
"person". Weights are fetched by Ultralytics on first use if `model` names a
stock checkpoint (e.g. yolov8n.pt).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from models.detection import BoundingBox, Detection
from .backend import InferenceBackend


@dataclass(frozen=True)
class CpuYoloConfig:
    model: str
    conf_threshold: float = 0.5
    iou_threshold: float = 0.45
    person_class: Optional[str] = "person"


class UltralyticsCpuBackend(InferenceBackend):
    def __init__(self, cfg: CpuYoloConfig):
        self.cfg = cfg
        try:
            from ultralytics import YOLO  # type: ignore
        except Exception as e:  # pragma: no cover
            raise ImportError(
                "Ultralytics is not installed. Install with `pip install ultralytics`."
            ) from e

        self._model = YOLO(cfg.model)
        self._classes = self._resolve_classes(getattr(self._model, "names", None) or {})
        logging.info(f"YOLO model loaded: model={cfg.model}, classes={self._classes}")

    def _resolve_classes(self, names) -> Optional[List[int]]:
        """Class IDs to ask the model for; None means every class."""
        if not self.cfg.person_class:
            return None
        items = names.items() if isinstance(names, dict) else enumerate(names)
        ids = [int(k) for k, v in items if v == self.cfg.person_class]
        return ids or None

    def detect(self, frame: np.ndarray) -> List[Detection]:
        results = self._model.predict(
            source=frame,
            conf=self.cfg.conf_threshold,
            iou=self.cfg.iou_threshold,
            classes=self._classes,
            verbose=False,
        )
        if not results:
            return []

        r0 = results[0]
        names = getattr(r0, "names", None) or {}
        boxes = getattr(r0, "boxes", None)
        if boxes is None:
            return []

        xyxy = boxes.xyxy.cpu().numpy() if hasattr(boxes.xyxy, "cpu") else np.asarray(boxes.xyxy)
        conf = boxes.conf.cpu().numpy() if hasattr(boxes.conf, "cpu") else np.asarray(boxes.conf)
        cls = boxes.cls.cpu().numpy() if hasattr(boxes.cls, "cpu") else np.asarray(boxes.cls)

        out: List[Detection] = []
        for (x1, y1, x2, y2), c, k in zip(xyxy, conf, cls):
            class_id = int(k)
            out.append(
                Detection(
                    bbox=BoundingBox.from_xyxy(float(x1), float(y1), float(x2), float(y2)),
                    class_name=names.get(class_id) or str(class_id),
                    confidence=float(c),
                    class_id=class_id,
                )
            )

        return out
