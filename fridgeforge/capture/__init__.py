"""Raw image acquisition from the camera or an uploaded file."""

from .base import CameraAdapter, CameraUnavailable
from .upload import load_upload, load_upload_path

__all__ = ["CameraAdapter", "CameraUnavailable", "load_upload", "load_upload_path"]
