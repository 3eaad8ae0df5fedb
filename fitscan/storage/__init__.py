"""Profile persistence and schema migration."""

from .backends import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .migrations import migrate
from .profile_store import ProfileStore

__all__ = [
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "migrate",
    "ProfileStore",
]
