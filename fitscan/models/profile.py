"""Profile, body scan and saved outfit models."""

from enum import Enum
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .image import ImageFile


CURRENT_SCHEMA_VERSION = 3


class ScanStep(str, Enum):
    """One angle of the guided body scan."""
    FRONT = "front"
    SIDE = "side"
    BACK = "back"


# Fixed order: drives capture sequencing and request part ordering
SCAN_STEPS: tuple[ScanStep, ...] = (ScanStep.FRONT, ScanStep.SIDE, ScanStep.BACK)


class BodyType(str, Enum):
    RECTANGLE = "Rectangle"
    TRIANGLE = "Triangle"
    INVERTED_TRIANGLE = "Inverted Triangle"
    HOURGLASS = "Hourglass"
    ROUND = "Round"


class BodyScan(BaseModel):
    """Front, side and back reference captures."""

    model_config = ConfigDict(frozen=True)

    front: ImageFile | None = None
    side: ImageFile | None = None
    back: ImageFile | None = None

    @property
    def is_complete(self) -> bool:
        return self.front is not None and self.side is not None and self.back is not None

    def get(self, step: ScanStep) -> ImageFile | None:
        return getattr(self, ScanStep(step).value)

    def with_slot(self, step: ScanStep, image: ImageFile | None) -> "BodyScan":
        """Return a copy with one slot replaced."""
        return self.model_copy(update={ScanStep(step).value: image})

    def images(self) -> Iterator[ImageFile]:
        """Yield the captured images in front, side, back order."""
        for step in SCAN_STEPS:
            image = self.get(step)
            if image is not None:
                yield image


class SavedOutfit(BaseModel):
    """A generation result the user chose to keep."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    image: str  # data URL


class Profile(BaseModel):
    """The user's durable record: identity, measurements and saved looks."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
    )

    schema_version: int = CURRENT_SCHEMA_VERSION
    name: str = ""
    face_image: ImageFile | None = None
    body_scan: BodyScan = Field(default_factory=BodyScan)
    height: str = ""
    weight: str = ""
    body_type: BodyType | None = None
    chest: str | None = None
    waist: str | None = None
    hips: str | None = None
    saved_outfits: list[SavedOutfit] = Field(default_factory=list)

    def missing_fields(self) -> list[str]:
        """Names of the inputs still needed before generation."""
        missing = []
        if not self.name.strip():
            missing.append("name")
        if not self.height.strip():
            missing.append("height")
        if not self.weight.strip():
            missing.append("weight")
        for step in SCAN_STEPS:
            if self.body_scan.get(step) is None:
                missing.append(f"body_scan.{step.value}")
        return missing

    @property
    def is_generation_ready(self) -> bool:
        return not self.missing_fields()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
