"""
Display surfaces the pipeline draws onto.

A display reports its current size (so the canvas follows window resizes),
shows a canvas, and provides the per-refresh wait that paces the loop.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple

import cv2
import numpy as np

QUIT_KEYS = (ord("q"), 27)  # q, Esc
FULLSCREEN_KEY = ord("f")


class Display(ABC):
    """
    Lifecycle:
        1. size() before each frame to build a canvas of the right shape
        2. show(canvas)
        3. wait(seconds) until the next refresh; False means the viewer quit
        4. close()
    """

    @abstractmethod
    def size(self) -> Tuple[int, int]:
        """Current drawable (width, height)."""

    @abstractmethod
    def show(self, canvas: np.ndarray) -> None:
        pass

    @abstractmethod
    def wait(self, seconds: float) -> bool:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


class WindowDisplay(Display):
    """OpenCV highgui window, optionally fullscreen. `f` toggles fullscreen, `q`/Esc quits."""

    def __init__(self, window_name: str = "Border", fullscreen: bool = True, fallback_size: Tuple[int, int] = (1280, 720)):
        self.window_name = window_name
        self._fallback_size = fallback_size
        self._fullscreen = fullscreen
        self._closed = False

        cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
        if fullscreen:
            self._apply_fullscreen()
        else:
            cv2.resizeWindow(self.window_name, *fallback_size)
        logging.info(f"Display window opened: name={window_name}, fullscreen={fullscreen}")

    def _apply_fullscreen(self) -> None:
        mode = cv2.WINDOW_FULLSCREEN if self._fullscreen else cv2.WINDOW_NORMAL
        try:
            cv2.setWindowProperty(self.window_name, cv2.WND_PROP_FULLSCREEN, mode)
        except cv2.error as e:
            logging.warning(f"Fullscreen request failed: {e}")

    def size(self) -> Tuple[int, int]:
        try:
            _, _, w, h = cv2.getWindowImageRect(self.window_name)
        except cv2.error:
            return self._fallback_size
        if w <= 0 or h <= 0:
            return self._fallback_size
        return (w, h)

    def show(self, canvas: np.ndarray) -> None:
        if not self._closed:
            cv2.imshow(self.window_name, canvas)

    def wait(self, seconds: float) -> bool:
        key = cv2.waitKey(max(1, int(seconds * 1000))) & 0xFF
        if key in QUIT_KEYS:
            return False
        if key == FULLSCREEN_KEY:
            self._fullscreen = not self._fullscreen
            self._apply_fullscreen()
        # Closing the window with the title-bar button counts as quitting.
        try:
            if cv2.getWindowProperty(self.window_name, cv2.WND_PROP_VISIBLE) < 1:
                return False
        except cv2.error:
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            cv2.destroyWindow(self.window_name)
        except cv2.error as e:
            logging.debug(f"Error closing window: {e}")


class HeadlessDisplay(Display):
    """
    Fixed-size offscreen surface. Keeps the last canvas shown.

    Used when output goes only to the browser viewer, and in tests.
    """

    def __init__(self, size: Tuple[int, int] = (1280, 720), sleep: Callable[[float], None] = time.sleep):
        self._size = (int(size[0]), int(size[1]))
        self._sleep = sleep
        self.last_canvas: Optional[np.ndarray] = None
        self.frames_shown = 0
        self.closed = False

    def size(self) -> Tuple[int, int]:
        return self._size

    def resize(self, size: Tuple[int, int]) -> None:
        self._size = (int(size[0]), int(size[1]))

    def show(self, canvas: np.ndarray) -> None:
        self.last_canvas = canvas
        self.frames_shown += 1

    def wait(self, seconds: float) -> bool:
        if seconds > 0:
            self._sleep(seconds)
        return not self.closed

    def close(self) -> None:
        self.closed = True
