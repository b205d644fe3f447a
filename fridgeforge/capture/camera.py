"""
OpenCV webcam capture adapter.
FRIDGEFORGE_CAMERA_INDEX selects the webcam device.
"""

from __future__ import annotations

import logging

import cv2
from PIL import Image

from fridgeforge.capture.base import CameraAdapter, CameraUnavailable

logger = logging.getLogger(__name__)


class CV2Camera(CameraAdapter):
    def __init__(self, index: int = 0) -> None:
        self._index = index
        self._cap: cv2.VideoCapture | None = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def open(self) -> None:
        if self.is_open:
            return
        cap = cv2.VideoCapture(self._index)
        if not cap.isOpened():
            cap.release()
            logger.error("Failed to open camera device %s", self._index)
            raise CameraUnavailable()
        self._cap = cap
        logger.info("Camera device %s opened", self._index)

    def capture_frame(self) -> Image.Image:
        if not self.is_open:
            raise CameraUnavailable()
        ret, frame = self._cap.read()
        if not ret or frame is None:
            logger.error("Frame capture failed on device %s", self._index)
            raise CameraUnavailable()
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        return Image.fromarray(rgb)

    def release(self) -> None:
        if self._cap is None:
            return
        self._cap.release()
        self._cap = None
        logger.info("Camera device %s released", self._index)
