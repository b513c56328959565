"""
Pipeline module for the corridor renderer.

The engine paces the render loop:
- Frame acquisition through the session's camera
- Throttled person detection
- Shoe-region crop and scale, or the full frame when nobody is in view
- Display and viewer callbacks
"""

from .engine import PipelineEngine, PipelineConfig, PipelineStats, create_engine

__all__ = [
    "PipelineEngine",
    "PipelineConfig",
    "PipelineStats",
    "create_engine",
]
