"""
Detection models for object detection results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence


PERSON_CLASS = "person"


@dataclass(frozen=True)
class BoundingBox:
    """
    An axis-aligned bounding box in frame pixel coordinates.

    Attributes:
        x: Left edge x coordinate.
        y: Top edge y coordinate.
        width: Box width in pixels.
        height: Box height in pixels.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    def contains(self, other: "BoundingBox") -> bool:
        """True if `other` lies entirely inside this box."""
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.x2 <= self.x2
            and other.y2 <= self.y2
        )

    @classmethod
    def from_xywh(cls, x: float, y: float, w: float, h: float) -> "BoundingBox":
        return cls(x=x, y=y, width=w, height=h)

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "BoundingBox":
        """Create from corner coordinates, as returned by most YOLO heads."""
        return cls(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


@dataclass(frozen=True)
class Detection:
    """
    A single detection returned by the detector for one frame.

    Attributes:
        bbox: Bounding box in frame pixel coordinates.
        class_name: Class label (e.g. "person").
        confidence: Detection confidence score (0-1).
        class_id: Optional numeric class ID from the model.
    """
    bbox: BoundingBox
    class_name: Optional[str] = None
    confidence: float = 1.0
    class_id: Optional[int] = None

    @classmethod
    def from_xywh(
        cls,
        x: float,
        y: float,
        w: float,
        h: float,
        class_name: Optional[str] = None,
        confidence: float = 1.0,
        class_id: Optional[int] = None,
    ) -> "Detection":
        """Create Detection from x, y, width, height values."""
        return cls(
            bbox=BoundingBox.from_xywh(x, y, w, h),
            class_name=class_name,
            confidence=confidence,
            class_id=class_id,
        )


def filter_people(detections: Sequence[Detection], person_class: str = PERSON_CLASS) -> List[Detection]:
    """Keep person detections, preserving the detector's return order."""
    return [d for d in detections if d.class_name == person_class]

