"""Image preprocessing before recognition."""

from .normalize import (
    MAX_DIMENSION,
    ImageNormalizer,
    InvalidImage,
    NormalizedImagePayload,
    compute_target_size,
)

__all__ = [
    "MAX_DIMENSION",
    "ImageNormalizer",
    "InvalidImage",
    "NormalizedImagePayload",
    "compute_target_size",
]
