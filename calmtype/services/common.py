"""Helpers shared by the data services: owners, clocks, JSON blobs."""
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

USER = "user"
GUEST = "guest"

ADMIN_TIMEZONE = "America/Chicago"
ADMIN_TIMEZONE_LABEL = "America/Chicago (St. Louis)"


@dataclass(frozen=True)
class Owner:
    """The user or guest a history / settings / passage row belongs to."""

    kind: str  # "user" | "guest"
    id: str

    @property
    def column(self) -> str:
        return "user_id" if self.kind == USER else "guest_id"

    def values(self) -> dict[str, Any]:
        """Column values for an insert: exactly one owner column is set."""
        return {
            "user_id": self.id if self.kind == USER else None,
            "guest_id": self.id if self.kind == GUEST else None,
        }


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Any) -> datetime | None:
    """Normalise a stored timestamp to an aware UTC datetime.

    SQLite hands back naive datetimes (or strings for raw queries) that were
    written in UTC; PostgreSQL returns aware ones.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_admin_time(value: Any) -> str | None:
    """Render a timestamp as MM/DD/YYYY, HH:MM:SS in Chicago local time."""
    moment = ensure_utc(value)
    if moment is None:
        return None
    return moment.astimezone(ZoneInfo(ADMIN_TIMEZONE)).strftime("%m/%d/%Y, %H:%M:%S")


def word_count(text: str) -> int:
    return len(text.split())


def dump_blob(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def load_blob(raw: str | None) -> Any:
    if raw is None or raw == "":
        return None
    return json.loads(raw)
