"""
Person selection and shoe-region extraction.
"""

from __future__ import annotations

from typing import Optional, Sequence

from models.detection import PERSON_CLASS, BoundingBox, Detection, filter_people

SHOE_REGION_FRACTION = 0.3


def select_person(
    detections: Sequence[Detection],
    person_class: str = PERSON_CLASS,
) -> Optional[Detection]:
    """
    Return the first person in detector order, or None.

    No ranking by size or position: when several people are in view the
    detector's ordering decides.
    """
    people = filter_people(detections, person_class)
    return people[0] if people else None


def shoe_region(bbox: BoundingBox, fraction: float = SHOE_REGION_FRACTION) -> BoundingBox:
    """Bottom `fraction` of the box height, full box width."""
    region_height = bbox.height * fraction
    return BoundingBox(
        x=bbox.x,
        y=bbox.y + bbox.height - region_height,
        width=bbox.width,
        height=region_height,
    )
