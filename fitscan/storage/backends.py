"""Durable string-keyed record storage."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from ..errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string-keyed storage contract.

    ``set`` must be atomic: either the new value is durably stored or the
    call raises ``StorageError`` and the previous value is still readable.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class FileKeyValueStore:
    """One JSON file per key inside a data directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        """Write to a temp file in the same directory, then swap it in."""
        path = self._path(key)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.data_dir,
                prefix=f".{key}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Failed to write %s: %s", path, e)
            raise StorageError(f"Could not write {path}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not delete {key}: {e}") from e


class MemoryKeyValueStore:
    """In-process store with an optional quota, like browser storage."""

    def __init__(self, quota_bytes: int | None = None):
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            others = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
            if others + len(value.encode("utf-8")) > self.quota_bytes:
                raise StorageError(
                    f"Storage quota exceeded ({self.quota_bytes} bytes) writing {key!r}"
                )
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
