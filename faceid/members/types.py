"""Member record type."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a UTC moment as ISO-8601 with millisecond precision."""
    moment = moment or datetime.now(timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class MemberRecord:
    """A registered identity."""

    id: int
    name: str
    registered_at: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "registeredAt": self.registered_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MemberRecord":
        """Build a record from its serialized form.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Member entry must be an object, got {type(data).__name__}")

        member_id = data.get("id")
        name = data.get("name")
        registered_at = data.get("registeredAt")

        if isinstance(member_id, bool) or not isinstance(member_id, (int, float)):
            raise ValueError(f"Invalid member id: {member_id!r}")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Invalid member name: {name!r}")
        if not isinstance(registered_at, str):
            raise ValueError(f"Invalid registeredAt: {registered_at!r}")

        return cls(id=int(member_id), name=name, registered_at=registered_at)
