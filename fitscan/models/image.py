"""Encoded image payloads."""

import base64

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class ImageFile(BaseModel):
    """An encoded image plus its media type.

    ``data`` holds the raw encoded bytes (JPEG, PNG, ...). In JSON it is
    written as base64 text, and base64 text is accepted when loading.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    data: bytes
    media_type: str = "image/jpeg"

    @field_validator("data", mode="before")
    @classmethod
    def _decode_base64(cls, value):
        if isinstance(value, str):
            return base64.b64decode(value)
        return value

    @field_serializer("data", when_used="json")
    def _encode_base64(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")

    def to_base64(self) -> str:
        """Raw base64 string (no data URL prefix)."""
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.to_base64()}"
