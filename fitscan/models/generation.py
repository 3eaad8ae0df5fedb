"""Ephemeral request/result types for one try-on generation."""

from dataclasses import dataclass
from enum import Enum

from .image import ImageFile
from .profile import Profile


class Pose(str, Enum):
    STANDING_STRAIGHT = "Standing Straight"
    THREE_QUARTER_TURN = "Slight 3/4 Turn"
    HANDS_ON_HIPS = "Hands on Hips"
    WALKING_MOTION = "Walking Motion"


DEFAULT_POSE = Pose.STANDING_STRAIGHT


class FailureKind(str, Enum):
    MODEL_REFUSAL = "model_refusal"  # service answered without an image
    SERVICE_ERROR = "service_error"  # transport or service-side failure


@dataclass(frozen=True)
class GenerationRequest:
    """A snapshot of everything sent for one generation."""
    clothing_image: ImageFile
    profile: Profile
    pose: Pose = DEFAULT_POSE


@dataclass(frozen=True)
class GenerationResult:
    """Either a generated image (data URL) or a typed failure."""
    image: str | None = None
    failure_kind: FailureKind | None = None
    message: str | None = None

    @classmethod
    def success(cls, image: str) -> "GenerationResult":
        return cls(image=image)

    @classmethod
    def failed(cls, kind: FailureKind, message: str) -> "GenerationResult":
        return cls(failure_kind=kind, message=message)

    @property
    def ok(self) -> bool:
        return self.image is not None
