"""Guided three-angle body scan capture."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..config import CaptureConfig
from ..errors import CameraPermissionError
from ..models import SCAN_STEPS, BodyScan, ImageFile, ScanStep
from ..services.camera import Camera, CameraLease
from ..utils.image_codec import ImageCodec

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    AWAITING_PERMISSION = "awaiting_permission"
    LIVE = "live"
    COUNTDOWN = "countdown"
    PREVIEW = "preview"
    COMPLETE = "complete"
    ABORTED = "aborted"


TERMINAL_STATES = (CaptureState.COMPLETE, CaptureState.ABORTED)


@dataclass(frozen=True)
class StepInstruction:
    title: str
    guide: str


STEP_INSTRUCTIONS: dict[ScanStep, StepInstruction] = {
    ScanStep.FRONT: StepInstruction("Step 1/3: Front View", "Stand straight, facing the camera."),
    ScanStep.SIDE: StepInstruction("Step 2/3: Side View", "Turn 90 degrees to your side."),
    ScanStep.BACK: StepInstruction("Step 3/3: Back View", "Turn around, facing away from the camera."),
}


class CaptureSession:
    """Walks the user through one capture per scan angle.

    Flow per step: ``LIVE`` -> ``capture()`` -> ``COUNTDOWN`` (3, 2, 1) ->
    ``PREVIEW`` -> ``retake()`` back to ``LIVE`` or ``confirm()`` on to the
    next step. Confirming the back view completes the session.

    The session owns the camera stream. Reaching ``COMPLETE`` or ``ABORTED``
    releases it and cancels any running countdown, exactly once, whichever
    path got there. Use ``async with`` for scoped acquisition.
    """

    def __init__(
        self,
        camera: Camera,
        *,
        countdown_from: int = 3,
        tick_interval: float = 1.0,
        jpeg_quality: int = 90,
        on_countdown: Callable[[int | None], None] | None = None,
        on_complete: Callable[[BodyScan], None] | None = None,
    ):
        self.camera = camera
        self.countdown_from = countdown_from
        self.tick_interval = tick_interval
        self.jpeg_quality = jpeg_quality
        self.on_countdown = on_countdown
        self.on_complete = on_complete

        self.state = CaptureState.AWAITING_PERMISSION
        self.step = SCAN_STEPS[0]
        self.countdown: int | None = None
        self.preview: ImageFile | None = None
        self.scan = BodyScan()

        self._lease: CameraLease | None = None
        self._timer: asyncio.Task | None = None
        self._completion: asyncio.Future | None = None

    @classmethod
    def from_config(cls, camera: Camera, config: CaptureConfig, **kwargs) -> "CaptureSession":
        return cls(
            camera,
            countdown_from=config.countdown_from,
            tick_interval=config.tick_interval,
            jpeg_quality=config.jpeg_quality,
            **kwargs,
        )

    @property
    def instructions(self) -> StepInstruction:
        return STEP_INSTRUCTIONS[self.step]

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    async def start(self) -> None:
        """Acquire the camera and go live on the front view.

        Raises:
            CameraPermissionError: access was denied; the session is aborted.
        """
        if self.state is not CaptureState.AWAITING_PERMISSION:
            raise RuntimeError(f"Cannot start a capture session in state {self.state.value}")

        try:
            stream = await self.camera.open()
        except CameraPermissionError:
            logger.warning("Camera permission denied")
            self._finish(CaptureState.ABORTED)
            raise

        self._lease = CameraLease(stream)
        if self.state is CaptureState.ABORTED:
            # Torn down while waiting for permission
            self._lease.release()
            return

        self.state = CaptureState.LIVE
        logger.debug("Camera live, step %s", self.step.value)

    def capture(self) -> asyncio.Task | None:
        """Start the countdown for the current step.

        Returns:
            The countdown task, or None when the action is ignored (not live,
            e.g. a countdown is already running).
        """
        if self.state is not CaptureState.LIVE:
            logger.debug("Ignoring capture in state %s", self.state.value)
            return None

        self.state = CaptureState.COUNTDOWN
        self._timer = asyncio.create_task(self._run_countdown())
        return self._timer

    async def _run_countdown(self) -> None:
        for remaining in range(self.countdown_from, 0, -1):
            self._set_countdown(remaining)
            await asyncio.sleep(self.tick_interval)
        self._set_countdown(None)

        try:
            frame = await self._lease.read_frame()
        except Exception:
            logger.exception("Failed to read a frame for %s view", self.step.value)
            self._timer = None
            self._finish(CaptureState.ABORTED)
            return

        if self.state is not CaptureState.COUNTDOWN:
            return
        self.preview = ImageCodec.from_frame(frame, quality=self.jpeg_quality)
        self.state = CaptureState.PREVIEW
        self._timer = None
        logger.debug("Captured still for %s view", self.step.value)

    def _set_countdown(self, value: int | None) -> None:
        self.countdown = value
        if self.on_countdown is not None:
            self.on_countdown(value)

    def retake(self) -> bool:
        """Discard the still and go live again on the same step."""
        if self.state is not CaptureState.PREVIEW:
            return False
        self.preview = None
        self.state = CaptureState.LIVE
        return True

    def confirm(self) -> BodyScan | None:
        """Keep the still for the current step and move on.

        Returns:
            The completed scan when this confirms the last step, else None.
            Confirming without a pending still does nothing.
        """
        if self.state is not CaptureState.PREVIEW or self.preview is None:
            return None

        still, self.preview = self.preview, None
        self.scan = self.scan.with_slot(self.step, still)

        index = SCAN_STEPS.index(self.step)
        if index == len(SCAN_STEPS) - 1:
            self._finish(CaptureState.COMPLETE)
            return self.scan

        self.step = SCAN_STEPS[index + 1]
        self.state = CaptureState.LIVE
        logger.debug("Advanced to %s view", self.step.value)
        return None

    def abort(self) -> None:
        """User cancel or forced teardown."""
        self._finish(CaptureState.ABORTED)

    close = abort

    async def wait_complete(self) -> BodyScan | None:
        """Wait until the session ends; the scan, or None if aborted."""
        if self.is_finished:
            return self.scan if self.state is CaptureState.COMPLETE else None
        if self._completion is None:
            self._completion = asyncio.get_running_loop().create_future()
        return await asyncio.shield(self._completion)

    def _finish(self, state: CaptureState) -> None:
        if self.is_finished:
            return
        self.state = state
        self.countdown = None
        self.preview = None

        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

        if self._lease is not None:
            self._lease.release()

        logger.info("Capture session %s", state.value)
        result = self.scan if state is CaptureState.COMPLETE else None
        if self._completion is not None and not self._completion.done():
            self._completion.set_result(result)
        if state is CaptureState.COMPLETE and self.on_complete is not None:
            self.on_complete(self.scan)

    async def __aenter__(self) -> "CaptureSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()
