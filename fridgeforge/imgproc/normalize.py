"""Image normalisation helpers.

Every image handed to the recognition service goes through
:class:`ImageNormalizer`: the longer edge is capped at ``MAX_DIMENSION``,
the aspect ratio is kept, and the result is re-encoded as JPEG at a fixed
quality before being split into mime type and base64 data.
"""

from __future__ import annotations

import base64
import logging
import math
from dataclasses import dataclass
from io import BytesIO

from PIL import Image

logger = logging.getLogger(__name__)

MAX_DIMENSION = 800
CAPTURE_QUALITY = 0.80
UPLOAD_QUALITY = 0.80
OUTPUT_MIME_TYPE = "image/jpeg"


class InvalidImage(ValueError):
    """Raised when an image source cannot be normalised."""


@dataclass(frozen=True, slots=True)
class NormalizedImagePayload:
    """Resized, compressed image ready for the recognition call."""

    mime_type: str
    data: str
    width: int
    height: int

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    @classmethod
    def from_data_url(cls, data_url: str, width: int, height: int) -> NormalizedImagePayload:
        """Split ``data:<mime>;base64,<data>`` into its prefix and payload."""

        prefix, sep, data = data_url.partition(",")
        if not sep or not prefix.startswith("data:") or not data:
            raise InvalidImage("Encoded image is not a base64 data URL.")
        mime_type = prefix[len("data:"):].split(";", 1)[0]
        return cls(mime_type=mime_type, data=data, width=width, height=height)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_target_size(width: int, height: int, max_dimension: int = MAX_DIMENSION) -> tuple[int, int]:
    """Return output dimensions with the longer edge capped at ``max_dimension``.

    Smaller images are never upscaled.
    """

    if width <= 0 or height <= 0:
        raise InvalidImage(f"Image dimensions must be positive, got {width}x{height}.")

    if width >= height:
        if width > max_dimension:
            return max_dimension, max(1, _round_half_up(height * (max_dimension / width)))
    elif height > max_dimension:
        return max(1, _round_half_up(width * (max_dimension / height))), max_dimension
    return width, height


class ImageNormalizer:
    """Ensures consistent size and encoding for downstream services."""

    def __init__(self, max_dimension: int = MAX_DIMENSION) -> None:
        self._max_dimension = max_dimension

    def normalize(self, source: Image.Image, quality: float = UPLOAD_QUALITY) -> NormalizedImagePayload:
        """Return the image as a bounded JPEG payload."""

        width, height = source.size
        target = compute_target_size(width, height, self._max_dimension)

        image = source if source.mode == "RGB" else source.convert("RGB")
        if target != (width, height):
            image = image.resize(target, Image.Resampling.BILINEAR)

        buffer = BytesIO()
        image.save(buffer, format="JPEG", quality=int(round(quality * 100)))
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        data_url = f"data:{OUTPUT_MIME_TYPE};base64,{encoded}"

        logger.debug("Normalised image %sx%s -> %sx%s (%d bytes)", width, height, *target, len(encoded))
        return NormalizedImagePayload.from_data_url(data_url, width=target[0], height=target[1])

    def normalize_capture(self, frame: Image.Image) -> NormalizedImagePayload:
        """Normalise a committed camera frame."""

        return self.normalize(frame, quality=CAPTURE_QUALITY)

    def normalize_upload(self, image: Image.Image) -> NormalizedImagePayload:
        """Normalise a decoded uploaded file."""

        return self.normalize(image, quality=UPLOAD_QUALITY)
