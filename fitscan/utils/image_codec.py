"""Conversions between captured frames, uploads, data URLs and ImageFile."""

import base64
import binascii
import io

from PIL import Image

from ..errors import ValidationError
from ..models import ImageFile


def detect_media_type(data: bytes, fallback: str = "image/png") -> str:
    """Detect the image format from magic bytes."""
    if data[:3] == b'\xff\xd8\xff':
        return "image/jpeg"
    if data[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    if data[:4] == b'RIFF' and data[8:12] == b'WEBP':
        return "image/webp"
    if data[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    return fallback


class ImageCodec:
    """Normalizes raw frames and uploaded files into ``ImageFile`` values."""

    @staticmethod
    def from_upload(data: bytes, declared_type: str | None, field: str) -> ImageFile:
        """Accept one uploaded file if its declared type is an image.

        Raises:
            ValidationError: naming ``field`` when the file is not an image
                or is empty.
        """
        if not declared_type or not declared_type.startswith("image/"):
            raise ValidationError(
                f"Invalid file type for {field}. Please upload an image.",
                field=field,
            )
        if not data:
            raise ValidationError(f"The file for {field} is empty.", field=field)
        return ImageFile(data=data, media_type=declared_type)

    @staticmethod
    def from_frame(frame: Image.Image, quality: int = 90) -> ImageFile:
        """Draw one video frame into an RGB bitmap and encode it as JPEG."""
        bitmap = frame if frame.mode == "RGB" else frame.convert("RGB")
        output = io.BytesIO()
        bitmap.save(output, format="JPEG", quality=quality)
        return ImageFile(data=output.getvalue(), media_type="image/jpeg")

    @staticmethod
    def from_data_url(value: str, field: str) -> ImageFile:
        """Decode a ``data:<type>;base64,`` URL or a bare base64 string."""
        if value.startswith("data:"):
            header, _, encoded = value.partition(",")
            media_type = header[len("data:"):].split(";", 1)[0]
        else:
            encoded = value
            media_type = None

        try:
            raw_bytes = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(f"Could not decode the image for {field}.", field=field) from e

        if media_type is None:
            media_type = detect_media_type(raw_bytes)
        return ImageCodec.from_upload(raw_bytes, media_type, field)

    @staticmethod
    def to_data_url(image: ImageFile) -> str:
        return image.to_data_url()
