"""Route handlers for the GameDesk REST API.

Games:     list, show, create, delete against the remote collection.
Sessions:  open an edit session, autosave single fields, save all, close.

Errors propagate as GameDesk exceptions and are mapped to the JSON error
envelope by the handlers registered in ``gamedesk.api.app``.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from gamedesk.api.schemas import (
    ChangeOut,
    EventOut,
    FieldEdit,
    GameIn,
    GameOut,
    SaveAllResponse,
    SessionCreate,
    SessionView,
)
from gamedesk.api.sessions import SessionEntry, SessionRegistry
from gamedesk.client.base import ResourceClient
from gamedesk.errors import ValidationError
from gamedesk.models.games import to_wire_fields
from gamedesk.observability.metrics import render_latest
from gamedesk.validation.engine import validate_record

router = APIRouter()


def _client(request: Request) -> ResourceClient:
    return request.app.state.client  # type: ignore[no-any-return]


def _sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions  # type: ignore[no-any-return]


def _view(entry: SessionEntry) -> SessionView:
    controller = entry.controller
    session = controller.session
    return SessionView(
        session_id=entry.session_id,
        game_id=session.game_id,
        values=dict(session.values),
        errors=dict(session.validation.errors),
        states={name: state.value for name, state in session.states.items()},
        saving=session.saving,
        change_count=controller.ledger.count,
        last_saved=controller.ledger.last_saved,
        changes=[ChangeOut.from_change(change) for change in controller.ledger.entries],
        events=[EventOut.from_event(event) for event in entry.events],
    )


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/metrics")
async def metrics() -> Response:
    payload, content_type = render_latest()
    return Response(content=payload, media_type=content_type)


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------


@router.get("/games")
async def list_games(request: Request) -> list[GameOut]:
    games = await _client(request).fetch_all()
    return [GameOut.from_game(game) for game in games]


@router.get("/games/{game_id}")
async def get_game(game_id: str, request: Request) -> GameOut:
    game = await _client(request).fetch_one(game_id)
    return GameOut.from_game(game)


@router.post("/games", status_code=201)
async def create_game(body: GameIn, request: Request) -> GameOut:
    values = body.model_dump()
    result = validate_record(values)
    if not result.is_valid:
        raise ValidationError(dict(result.errors))
    game = await _client(request).create(to_wire_fields(values))
    return GameOut.from_game(game)


@router.delete("/games/{game_id}", status_code=204)
async def delete_game(game_id: str, request: Request) -> Response:
    await _client(request).delete(game_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Edit sessions
# ---------------------------------------------------------------------------


@router.post("/sessions", status_code=201)
async def open_session(body: SessionCreate, request: Request) -> SessionView:
    entry = await _sessions(request).open(body.game_id)
    return _view(entry)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, request: Request) -> SessionView:
    return _view(_sessions(request).get(session_id))


@router.put("/sessions/{session_id}/fields/{field}")
async def edit_field(session_id: str, field: str, body: FieldEdit, request: Request) -> SessionView:
    entry = _sessions(request).get(session_id)
    await entry.controller.edit(field, body.value)
    return _view(entry)


@router.post("/sessions/{session_id}/save")
async def save_session(session_id: str, request: Request) -> SaveAllResponse:
    sessions = _sessions(request)
    entry = sessions.get(session_id)
    game = await entry.controller.save_all()
    sessions.close(session_id)
    return SaveAllResponse(message="All changes saved successfully!", game=GameOut.from_game(game))


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str, request: Request) -> Response:
    _sessions(request).close(session_id)
    return Response(status_code=204)
