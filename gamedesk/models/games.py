"""Game resource data structures and the wire date conversion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from gamedesk.errors import ValidationError

FIELDS: tuple[str, ...] = ("name", "platform", "released", "genre", "developer")
REQUIRED_FIELDS: tuple[str, ...] = ("name", "platform", "released")
OPTIONAL_FIELDS: tuple[str, ...] = ("genre", "developer")

INVALID_DATE_MESSAGE = "Release date is not a valid date"


class Platform(StrEnum):
    """Platforms offered as choices by a host UI."""

    PC = "PC"
    PLAYSTATION = "PlayStation"
    XBOX = "Xbox"
    NINTENDO_SWITCH = "Nintendo Switch"
    MOBILE = "Mobile"


class FieldOutcome(StrEnum):
    """Outcome of a single-field autosave."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class Game:
    """A game record as stored by the remote collection."""

    id: str
    name: str
    platform: str
    released: date | None = None
    genre: str = ""
    developer: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Game:
        """Build a Game from the remote JSON object shape."""
        return cls(
            id=str(payload.get("id", "")),
            name=str(payload.get("name") or ""),
            platform=str(payload.get("platform") or ""),
            released=from_wire_released(payload.get("released")),
            genre=str(payload.get("genre") or ""),
            developer=str(payload.get("developer") or ""),
        )

    def form_values(self) -> dict[str, str]:
        """Return the editable fields as form strings."""
        return {
            "name": self.name,
            "platform": self.platform,
            "released": self.released.isoformat() if self.released else "",
            "genre": self.genre,
            "developer": self.developer,
        }


@dataclass(frozen=True)
class FieldChange:
    """One acknowledged single-field autosave."""

    field: str
    value: str
    at: datetime
    outcome: FieldOutcome = FieldOutcome.SUCCESS


def to_wire_released(value: str) -> str:
    """Convert a ``YYYY-MM-DD`` form value to the remote ISO-8601 date-time.

    The remote expects UTC midnight with millisecond precision, e.g.
    ``2023-02-10T00:00:00.000Z``.

    Raises:
        ValidationError: if *value* is not a calendar date.
    """
    try:
        parsed = date.fromisoformat(value.strip()[:10])
    except ValueError as exc:
        raise ValidationError({"released": INVALID_DATE_MESSAGE}) from exc
    return datetime(parsed.year, parsed.month, parsed.day, tzinfo=UTC).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def from_wire_released(value: object) -> date | None:
    """Reduce a remote ``released`` value to its date part.

    Accepts ISO-8601 date-time strings (``Z`` suffix included) and plain dates.
    Missing or unparseable values yield None.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    if parsed.tzinfo is None:
        return parsed.date()
    return parsed.astimezone(UTC).date()


def to_wire_fields(fields: dict[str, str]) -> dict[str, object]:
    """Apply the format conversions the remote expects to a field map."""
    wire: dict[str, object] = dict(fields)
    if "released" in wire:
        wire["released"] = to_wire_released(fields["released"])
    return wire
