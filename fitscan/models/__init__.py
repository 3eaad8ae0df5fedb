"""Data models for FitScan."""

from .image import ImageFile
from .profile import (
    CURRENT_SCHEMA_VERSION,
    SCAN_STEPS,
    BodyScan,
    BodyType,
    Profile,
    SavedOutfit,
    ScanStep,
)
from .generation import (
    DEFAULT_POSE,
    FailureKind,
    GenerationRequest,
    GenerationResult,
    Pose,
)

__all__ = [
    "ImageFile",
    "CURRENT_SCHEMA_VERSION",
    "SCAN_STEPS",
    "BodyScan",
    "BodyType",
    "Profile",
    "SavedOutfit",
    "ScanStep",
    "DEFAULT_POSE",
    "FailureKind",
    "GenerationRequest",
    "GenerationResult",
    "Pose",
]
