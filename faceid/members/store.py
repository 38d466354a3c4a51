"""Member store: insertion-ordered registered identities with persistence."""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional

from ..constants import MEMBERS_KEY
from .storage import KeyValueStorage, MemoryStorage
from .types import MemberRecord, iso_timestamp

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


def serialize(members: List[MemberRecord]) -> str:
    """Serialize members into the versioned blob format."""
    return json.dumps(
        {
            "version": SCHEMA_VERSION,
            "members": [m.to_dict() for m in members],
        },
        ensure_ascii=False,
    )


def deserialize(blob: Optional[str]) -> List[MemberRecord]:
    """Parse a serialized blob into member records.

    Accepts the versioned object form and the legacy bare array form.
    Returns an empty list for missing or unreadable blobs.
    """
    if not blob:
        return []

    try:
        data = json.loads(blob)
    except ValueError as e:
        logger.warning(f"Discarding unreadable member blob: {e}")
        return []

    if isinstance(data, list):
        entries = data
    elif isinstance(data, dict):
        version = data.get("version")
        if version != SCHEMA_VERSION:
            logger.warning(f"Unsupported member schema version: {version!r}")
            return []
        entries = data.get("members")
        if not isinstance(entries, list):
            logger.warning("Member blob has no member list")
            return []
    else:
        logger.warning(f"Unexpected member blob type: {type(data).__name__}")
        return []

    try:
        return [MemberRecord.from_dict(entry) for entry in entries]
    except ValueError as e:
        logger.warning(f"Discarding member blob with invalid entry: {e}")
        return []


class MemberStore:
    """Append-only list of registered members backed by a key-value namespace."""

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        key: str = MEMBERS_KEY,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the store and load any persisted members.

        Args:
            storage: Namespace holding the blob. In-memory if None.
            key: Key of the member blob inside the namespace
            clock: Returns the current time in seconds since the epoch
        """
        self._storage = storage if storage is not None else MemoryStorage()
        self._key = key
        self._clock = clock
        self._members: List[MemberRecord] = []
        self.load()

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> List[MemberRecord]:
        """Reload members from storage, replacing the in-memory list."""
        self._members = deserialize(self._storage.get(self._key))
        logger.info(f"Loaded {len(self._members)} member(s)")
        return list(self._members)

    def save(self, members: Optional[List[MemberRecord]] = None) -> None:
        """Persist the full member list, overwriting the stored blob.

        Args:
            members: Replacement list. Saves the current list if None.
        """
        members = list(self._members if members is None else members)
        # In-memory list only changes once the write succeeded
        self._storage.set(self._key, serialize(members))
        self._members = members
        logger.debug(f"Saved {len(self._members)} member(s)")

    def append(self, record: MemberRecord) -> MemberRecord:
        """Append an existing record and persist.

        Raises:
            OSError: If the storage write fails; the store is left unchanged
        """
        self.save(self._members + [record])
        return record

    def register(self, name: str) -> Optional[MemberRecord]:
        """Register a new member.

        Args:
            name: Display name; surrounding whitespace is stripped

        Returns:
            The new record, or None if the name is empty

        Raises:
            OSError: If the storage write fails; the store is left unchanged
        """
        name = (name or "").strip()
        if not name:
            logger.warning("Refusing to register member with empty name")
            return None

        now = self._clock()
        record = MemberRecord(
            id=self._next_id(now),
            name=name,
            registered_at=iso_timestamp(datetime.fromtimestamp(now, tz=timezone.utc)),
        )
        self.append(record)
        logger.info(f"Registered member {record.name} (id={record.id})")
        return record

    def _next_id(self, now: float) -> int:
        candidate = int(now * 1000)
        if self._members:
            last_id = max(m.id for m in self._members)
            if candidate <= last_id:
                candidate = last_id + 1
        return candidate

    def list(self) -> List[MemberRecord]:
        """Members in insertion order."""
        return list(self._members)

    @property
    def members(self) -> List[MemberRecord]:
        return self.list()

    def latest(self) -> Optional[MemberRecord]:
        """Most recently registered member, or None."""
        return self._members[-1] if self._members else None

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[MemberRecord]:
        return iter(list(self._members))
