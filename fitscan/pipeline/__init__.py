"""Try-on generation pipeline."""

from .generation_pipeline import DEFAULT_REFUSAL_MESSAGE, GenerationPipeline

__all__ = [
    "DEFAULT_REFUSAL_MESSAGE",
    "GenerationPipeline",
]
