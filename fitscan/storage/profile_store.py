"""Loads, migrates and persists the user's profile record."""

import json
import logging
import time

import pydantic

from ..config import StorageConfig
from ..errors import StorageError
from ..models import CURRENT_SCHEMA_VERSION, Profile, SavedOutfit
from .backends import FileKeyValueStore, KeyValueStore
from .migrations import migrate

logger = logging.getLogger(__name__)


class ProfileStore:
    """Profile persistence over a single string-keyed record."""

    def __init__(self, backend: KeyValueStore, key: str = "userProfile"):
        self.backend = backend
        self.key = key

    @classmethod
    def from_config(cls, config: StorageConfig) -> "ProfileStore":
        return cls(FileKeyValueStore(config.data_dir), key=config.profile_key)

    def load(self) -> Profile | None:
        """Read, migrate and validate the stored profile.

        Returns:
            The profile, or None if nothing has been saved yet.

        Raises:
            StorageError: if the record cannot be read or is not a profile.
        """
        raw = self.backend.get(self.key)
        if raw is None:
            return None

        try:
            record = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Stored profile is not valid JSON: {e}") from e
        if not isinstance(record, dict):
            raise StorageError("Stored profile is not a JSON object")

        record = migrate(record)

        try:
            return Profile.model_validate(record)
        except pydantic.ValidationError as e:
            raise StorageError(f"Stored profile is invalid: {e}") from e

    def save(self, profile: Profile) -> None:
        """Write the whole profile in one operation.

        The record is always stamped with the current schema version. The
        caller's profile object is never modified. On failure the previously
        stored record is left as it was.

        Raises:
            StorageError: if the write fails (e.g. quota exceeded).
        """
        payload = profile.model_copy(update={"schema_version": CURRENT_SCHEMA_VERSION}).to_json()
        self.backend.set(self.key, payload)
        logger.info("Saved profile (%d bytes, %d outfits)", len(payload), len(profile.saved_outfits))

    def clear(self) -> None:
        self.backend.delete(self.key)

    @staticmethod
    def add_outfit(profile: Profile, outfit: SavedOutfit) -> Profile:
        """Return a new profile with ``outfit`` appended."""
        return profile.model_copy(update={"saved_outfits": [*profile.saved_outfits, outfit]})

    @staticmethod
    def remove_outfit(profile: Profile, outfit_id: str) -> Profile:
        """Return a new profile without the outfit ``outfit_id``."""
        remaining = [o for o in profile.saved_outfits if o.id != outfit_id]
        return profile.model_copy(update={"saved_outfits": remaining})

    @staticmethod
    def new_outfit(profile: Profile, name: str, image: str) -> SavedOutfit:
        """Build an outfit with a time-derived id unique within ``profile``."""
        taken = {o.id for o in profile.saved_outfits}
        stamp = int(time.time() * 1000)
        while f"outfit_{stamp}" in taken:
            stamp += 1
        return SavedOutfit(id=f"outfit_{stamp}", name=name.strip(), image=image)
