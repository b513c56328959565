"""
Detector backends.

Every backend implements `InferenceBackend.detect(frame) -> list[Detection]`,
so the pipeline can run against a real model or a test double.
"""

from __future__ import annotations

from models.config import DetectionConfig
from .backend import InferenceBackend
from .cpu_backend import CpuYoloConfig, UltralyticsCpuBackend


def create_backend_from_config(detection_cfg: DetectionConfig) -> InferenceBackend:
    """Build the configured detector. Loads model weights; may be slow."""
    if detection_cfg.backend == "yolo":
        ycfg = detection_cfg.yolo
        return UltralyticsCpuBackend(
            CpuYoloConfig(
                model=ycfg.model,
                conf_threshold=float(ycfg.conf_threshold),
                iou_threshold=float(ycfg.iou_threshold),
                person_class=ycfg.person_class,
            )
        )
    raise ValueError(f"Unknown detection backend: {detection_cfg.backend}")


__all__ = [
    "InferenceBackend",
    "CpuYoloConfig",
    "UltralyticsCpuBackend",
    "create_backend_from_config",
]
