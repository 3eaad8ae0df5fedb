# Test fixtures and configuration
import io
import pytest
import sys
from pathlib import Path

from PIL import Image

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fitscan.config import AppConfig, CaptureConfig, LoadingConfig
from fitscan.errors import CameraPermissionError
from fitscan.models import BodyScan, BodyType, ImageFile, Profile, SavedOutfit
from fitscan.storage import MemoryKeyValueStore, ProfileStore


@pytest.fixture
def minimal_png_bytes():
    """Minimal valid PNG image bytes."""
    return bytes([
        0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,  # PNG signature
        0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,  # IHDR chunk
        0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,  # 1x1 dimensions
        0x08, 0x02, 0x00, 0x00, 0x00, 0x90, 0x77, 0x53,
        0xDE, 0x00, 0x00, 0x00, 0x0C, 0x49, 0x44, 0x41,  # IDAT chunk
        0x54, 0x08, 0xD7, 0x63, 0xF8, 0xCF, 0xC0, 0x00,
        0x00, 0x00, 0x03, 0x00, 0x01, 0x00, 0x05, 0xFE,
        0xD4, 0xAA, 0x00, 0x00, 0x00, 0x00, 0x49, 0x45,  # IEND chunk
        0x4E, 0x44, 0xAE, 0x42, 0x60, 0x82
    ])


@pytest.fixture
def jpeg_bytes():
    """A small real JPEG."""
    output = io.BytesIO()
    Image.new("RGB", (4, 4), "blue").save(output, format="JPEG")
    return output.getvalue()


def _image(label: str) -> ImageFile:
    return ImageFile(data=f"{label}-bytes".encode(), media_type="image/jpeg")


@pytest.fixture
def scan_images():
    """Distinct front/side/back images."""
    return {
        "front": _image("front"),
        "side": _image("side"),
        "back": _image("back"),
    }


@pytest.fixture
def clothing_image(minimal_png_bytes):
    return ImageFile(data=minimal_png_bytes, media_type="image/png")


@pytest.fixture
def ready_profile(scan_images):
    """A generation-ready profile."""
    return Profile(
        name="Alex",
        body_scan=BodyScan(**scan_images),
        height="5.9",
        weight="70",
        body_type=BodyType.HOURGLASS,
        waist="30",
    )


@pytest.fixture
def saved_outfit():
    return SavedOutfit(id="outfit_1700000000000", name="Summer look", image="data:image/png;base64,AAAA")


@pytest.fixture
def memory_store():
    return ProfileStore(MemoryKeyValueStore())


@pytest.fixture
def fast_config():
    """Config with no real waiting in countdowns or loading tips."""
    return AppConfig(
        capture=CaptureConfig(tick_interval=0),
        loading=LoadingConfig(tip_interval=0.01),
    )


class FakeStream:
    """Camera stream that records reads and stops."""

    def __init__(self):
        self.frame = Image.new("RGB", (8, 8), "red")
        self.reads = 0
        self.stop_calls = 0

    async def read_frame(self):
        self.reads += 1
        return self.frame

    def stop(self):
        self.stop_calls += 1


class FakeCamera:
    def __init__(self, granted: bool = True):
        self.granted = granted
        self.stream = FakeStream()
        self.open_calls = 0

    async def open(self):
        self.open_calls += 1
        if not self.granted:
            raise CameraPermissionError("Camera access was denied.")
        return self.stream


@pytest.fixture
def fake_camera():
    return FakeCamera()


@pytest.fixture
def denied_camera():
    return FakeCamera(granted=False)
