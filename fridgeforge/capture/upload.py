"""Decoding of user-uploaded image files."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from fridgeforge.imgproc.normalize import InvalidImage


def load_upload(data: bytes) -> Image.Image:
    """Decode uploaded bytes into an upright Pillow image."""

    if not data:
        raise InvalidImage("Uploaded file is empty.")
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidImage("Uploaded file is not a supported image.") from exc


def load_upload_path(path: Path) -> Image.Image:
    """Read an image file from disk and decode it."""

    return load_upload(path.read_bytes())
