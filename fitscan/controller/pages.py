"""Tagged page states for the session controller."""

from dataclasses import dataclass, field
from typing import Union

from ..models import DEFAULT_POSE, ImageFile, Pose, Profile


LOADING_TIPS: tuple[str, ...] = (
    "Analyzing fabric textures...",
    "Simulating realistic drape & flow...",
    "Matching lighting conditions...",
    "Constructing a 3D model from your scan...",
    "Applying clothing to your digital twin...",
    "Rendering the final, photorealistic image...",
)


@dataclass(frozen=True)
class HomePage:
    pass


@dataclass(frozen=True)
class ProfileSetupPage:
    draft: Profile = field(default_factory=Profile)
    error: str | None = None


@dataclass(frozen=True)
class CreatorPage:
    clothing: ImageFile | None = None
    pose: Pose = DEFAULT_POSE
    error: str | None = None


@dataclass(frozen=True)
class LoadingPage:
    request_id: int
    clothing: ImageFile
    pose: Pose = DEFAULT_POSE
    tip: str = LOADING_TIPS[0]


@dataclass(frozen=True)
class ResultPage:
    image: str  # data URL
    saved: bool = False
    error: str | None = None


Page = Union[HomePage, ProfileSetupPage, CreatorPage, LoadingPage, ResultPage]
