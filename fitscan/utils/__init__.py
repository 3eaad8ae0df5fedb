"""Utility helpers: image codec, prompt builder, logging."""

from .image_codec import ImageCodec
from .prompt_builder import build_tryon_prompt

__all__ = [
    "ImageCodec",
    "build_tryon_prompt",
]
