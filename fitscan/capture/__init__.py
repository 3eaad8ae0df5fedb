"""Guided body scan capture."""

from .session import STEP_INSTRUCTIONS, CaptureSession, CaptureState, StepInstruction

__all__ = [
    "STEP_INSTRUCTIONS",
    "CaptureSession",
    "CaptureState",
    "StepInstruction",
]
