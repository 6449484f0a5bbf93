"""Request and response schemas for the GameDesk REST API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from gamedesk.models.games import FieldChange, Game
from gamedesk.sync.events import SyncEvent


class ErrorResponse(BaseModel):
    """Uniform error envelope."""

    error: str
    detail: str


class ValidationErrorResponse(ErrorResponse):
    fields: dict[str, str] = Field(default_factory=dict)


class LoadFailureResponse(ErrorResponse):
    """Returned instead of a session when the record cannot be loaded.

    Carries no form fields, only the way back to the list.
    """

    game_id: str
    back: str = "/games"


class GameIn(BaseModel):
    """Form values for a new game.  Checked by the validation engine, not here."""

    name: str = ""
    platform: str = ""
    released: str = ""
    genre: str = ""
    developer: str = ""


class GameOut(BaseModel):
    id: str
    name: str
    platform: str
    released: str | None = None  # YYYY-MM-DD
    genre: str = ""
    developer: str = ""

    @classmethod
    def from_game(cls, game: Game) -> GameOut:
        return cls(
            id=game.id,
            name=game.name,
            platform=game.platform,
            released=game.released.isoformat() if game.released else None,
            genre=game.genre,
            developer=game.developer,
        )


class SessionCreate(BaseModel):
    game_id: str = Field(min_length=1, max_length=128)


class FieldEdit(BaseModel):
    value: str = Field(max_length=1024)


class ChangeOut(BaseModel):
    field: str
    value: str
    at: datetime
    outcome: str

    @classmethod
    def from_change(cls, change: FieldChange) -> ChangeOut:
        return cls(field=change.field, value=change.value, at=change.at, outcome=change.outcome.value)


class EventOut(BaseModel):
    kind: str
    message: str
    field: str | None = None
    errors: dict[str, str] = Field(default_factory=dict)
    at: datetime

    @classmethod
    def from_event(cls, event: SyncEvent) -> EventOut:
        return cls(
            kind=event.kind.value,
            message=event.message,
            field=event.field,
            errors=dict(event.errors),
            at=event.at,
        )


class SessionView(BaseModel):
    """Everything an edit form needs to render itself."""

    session_id: str
    game_id: str
    values: dict[str, str]
    errors: dict[str, str]
    states: dict[str, str]
    saving: bool
    change_count: int
    last_saved: str
    changes: list[ChangeOut] = Field(default_factory=list)
    events: list[EventOut] = Field(default_factory=list)


class SaveAllResponse(BaseModel):
    message: str
    game: GameOut
