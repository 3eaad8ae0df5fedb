"""External collaborators: camera device and image-generation service."""

from .camera import Camera, CameraLease, CameraStream, FileCamera
from .gemini_client import GeminiImageClient

__all__ = [
    "Camera",
    "CameraLease",
    "CameraStream",
    "FileCamera",
    "GeminiImageClient",
]
