"""
Start-up failures shown to the viewer.
"""

from __future__ import annotations

from typing import Tuple


class CorridorError(Exception):
    """Base class for failures that end a session before it runs."""

    message_lines: Tuple[str, ...] = ("Something went wrong.", "Please reload.")


class CameraAccessError(CorridorError):
    """The camera could not be opened (denied, missing or busy)."""

    message_lines = ("Unable to access webcam.", "Please grant camera permissions and reload.")


class ModelLoadError(CorridorError):
    """The person detector could not be loaded."""

    message_lines = ("Unable to load detection model.", "Please check the model setting and reload.")
