"""Camera device contract and a file-backed camera."""

import logging
from pathlib import Path
from typing import Protocol, Sequence

from PIL import Image

from ..errors import CameraPermissionError

logger = logging.getLogger(__name__)


class CameraStream(Protocol):
    """A live video stream."""

    async def read_frame(self) -> Image.Image: ...

    def stop(self) -> None: ...


class Camera(Protocol):
    """Something that can open a stream on the user's request.

    ``open`` raises ``CameraPermissionError`` when access is denied.
    """

    async def open(self) -> CameraStream: ...


class CameraLease:
    """Exclusive handle on an open stream that stops it exactly once."""

    def __init__(self, stream: CameraStream):
        self._stream = stream
        self.released = False

    async def read_frame(self) -> Image.Image:
        if self.released:
            raise RuntimeError("Camera stream has already been released")
        return await self._stream.read_frame()

    def release(self) -> bool:
        """Stop the stream. Returns False if it was already released."""
        if self.released:
            return False
        self.released = True
        self._stream.stop()
        logger.debug("Camera stream released")
        return True


class _FileCameraStream:
    def __init__(self, frames: Sequence[Path | Image.Image]):
        self._frames = list(frames)
        self._index = 0
        self.stopped = False

    async def read_frame(self) -> Image.Image:
        frame = self._frames[min(self._index, len(self._frames) - 1)]
        self._index += 1
        if isinstance(frame, Image.Image):
            return frame.copy()
        with Image.open(frame) as img:
            img.load()
            return img.copy()

    def stop(self) -> None:
        self.stopped = True


class FileCamera:
    """Serves frames from image files (or PIL images), one per read.

    The last frame repeats once the list is exhausted. Useful for headless
    runs where the "camera" is a folder of front/side/back photos.
    """

    def __init__(self, frames: Sequence[Path | Image.Image], permission_granted: bool = True):
        if not frames:
            raise ValueError("FileCamera needs at least one frame")
        self.frames = list(frames)
        self.permission_granted = permission_granted

    async def open(self) -> CameraStream:
        if not self.permission_granted:
            raise CameraPermissionError(
                "Camera access was denied. Please enable camera permissions."
            )
        return _FileCameraStream(self.frames)
