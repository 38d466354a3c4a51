"""Member records and their persistent store."""

from .types import MemberRecord, iso_timestamp
from .storage import KeyValueStorage, MemoryStorage, JsonFileStorage
from .store import MemberStore, SCHEMA_VERSION, serialize, deserialize

__all__ = [
    "MemberRecord",
    "iso_timestamp",
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "MemberStore",
    "SCHEMA_VERSION",
    "serialize",
    "deserialize",
]
