"""Versioned migrations for persisted profile records.

Schema history:

    1  {"photos": [img, ...]}                    images are {"b64", "mimeType"}
    2  {"bodyScans": {"front", "side", "back"}}  "savedOutfits" may be absent
    3  {"schemaVersion": 3, "bodyScan": {...}, "savedOutfits": [...]}
                                                 images are {"data", "mediaType"}

Each migration takes a record of exactly one version and returns a new record
of the next version. ``migrate`` composes them in sequence.
"""

import logging
from typing import Any, Callable

from ..errors import StorageError
from ..models import CURRENT_SCHEMA_VERSION

logger = logging.getLogger(__name__)

Record = dict[str, Any]

SCAN_SLOTS = ("front", "side", "back")


def detect_version(record: Record) -> int:
    """Infer the schema version of a raw record."""
    version = record.get("schemaVersion")
    if version is not None:
        if not isinstance(version, int):
            raise StorageError(f"Invalid schemaVersion: {version!r}")
        return version
    if "photos" in record:
        return 1
    return 2


def _convert_image(image: Any) -> Any:
    """Legacy {"b64", "mimeType"} image -> {"data", "mediaType"}."""
    if not isinstance(image, dict) or "b64" not in image:
        return image
    return {
        "data": image["b64"],
        "mediaType": image.get("mimeType", "image/jpeg"),
    }


def migrate_v1_to_v2(record: Record) -> Record:
    """Reinterpret the generic photo list positionally as a body scan."""
    migrated = dict(record)
    photos = migrated.pop("photos", None) or []
    migrated["bodyScans"] = {
        slot: photos[i] if i < len(photos) else None
        for i, slot in enumerate(SCAN_SLOTS)
    }
    return migrated


def migrate_v2_to_v3(record: Record) -> Record:
    """Rename to the current layout and stamp the schema version."""
    migrated = dict(record)
    scans = migrated.pop("bodyScans", None) or {}
    migrated["bodyScan"] = {slot: _convert_image(scans.get(slot)) for slot in SCAN_SLOTS}
    if "faceImage" in migrated:
        migrated["faceImage"] = _convert_image(migrated["faceImage"])
    if not migrated.get("savedOutfits"):
        migrated["savedOutfits"] = []
    migrated["schemaVersion"] = 3
    return migrated


MIGRATIONS: dict[int, Callable[[Record], Record]] = {
    1: migrate_v1_to_v2,
    2: migrate_v2_to_v3,
}


def migrate(record: Record) -> Record:
    """Bring a raw record up to ``CURRENT_SCHEMA_VERSION``.

    Migrating a current record returns it unchanged.

    Raises:
        StorageError: if the record is newer than this code understands.
    """
    version = detect_version(record)
    if version < 1:
        raise StorageError(f"Unknown profile schema version {version}")
    if version > CURRENT_SCHEMA_VERSION:
        raise StorageError(
            f"Profile schema version {version} is newer than supported "
            f"version {CURRENT_SCHEMA_VERSION}"
        )

    while version < CURRENT_SCHEMA_VERSION:
        logger.info("Migrating profile record from schema v%d", version)
        record = MIGRATIONS[version](record)
        version += 1

    return record
