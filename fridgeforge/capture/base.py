"""Camera adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from PIL import Image


class CameraUnavailable(RuntimeError):
    """Raised when the camera cannot be opened or read."""

    def __init__(self, message: str = "Unable to access camera. Please use upload.") -> None:
        super().__init__(message)


class CameraAdapter(ABC):
    """Owns the camera device between ``open`` and ``release``."""

    @abstractmethod
    def open(self) -> None:
        """Acquire the device. Raises :class:`CameraUnavailable` on failure."""

    @abstractmethod
    def capture_frame(self) -> Image.Image:
        """Return the current frame as an RGB image."""

    @abstractmethod
    def release(self) -> None:
        """Stop all capture tracks. Safe to call more than once."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...

    def __enter__(self) -> CameraAdapter:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
