"""Shared fixtures for GameDesk tests.

Provides an in-memory ResourceClient that behaves like the remote
collection (server-side merge of partial updates, 404 for unknown ids) and
lets tests hold update calls open to control completion order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field

import pytest

from gamedesk.client.base import ResourceClient
from gamedesk.errors import ClientError, NotFound, RemoteError
from gamedesk.ledger.change_ledger import ChangeLedger
from gamedesk.models.games import Game
from gamedesk.models.session import EditSession
from gamedesk.sync.controller import FieldSyncController
from gamedesk.sync.events import SyncEvent

# ---------------------------------------------------------------------------
# Record helpers
# ---------------------------------------------------------------------------


def make_record(
    game_id: str = "1",
    name: str = "Foo",
    platform: str = "PC",
    released: str = "2023-02-10T00:00:00.000Z",
    genre: str = "",
    developer: str = "",
) -> dict[str, object]:
    """Create a remote game record with sensible defaults for testing."""
    return {
        "id": game_id,
        "name": name,
        "platform": platform,
        "released": released,
        "genre": genre,
        "developer": developer,
    }


# ---------------------------------------------------------------------------
# In-memory resource client
# ---------------------------------------------------------------------------


@dataclass
class HeldCall:
    """An update call parked until the test releases it."""

    game_id: str
    fields: dict[str, object]
    gate: asyncio.Event = field(default_factory=asyncio.Event)
    error: ClientError | None = None

    def release(self, error: ClientError | None = None) -> None:
        self.error = error
        self.gate.set()


class InMemoryGameClient(ResourceClient):
    """ResourceClient over a dict of records, merging updates like the remote."""

    def __init__(self, records: list[dict[str, object]] | None = None) -> None:
        self.records: dict[str, dict[str, object]] = {str(r["id"]): dict(r) for r in records or []}
        self.calls: list[tuple[str, str | None, dict[str, object] | None]] = []
        self.update_errors: list[ClientError] = []
        self.hold_updates = False
        self.held: list[HeldCall] = []
        self.closed = False
        self._next_id = 100

    def update_calls(self) -> list[tuple[str, dict[str, object]]]:
        return [(game_id or "", body or {}) for op, game_id, body in self.calls if op == "update"]

    async def create(self, record: Mapping[str, object]) -> Game:
        self.calls.append(("create", None, dict(record)))
        self._next_id += 1
        stored = {**record, "id": str(self._next_id)}
        self.records[str(self._next_id)] = stored
        return Game.from_payload(stored)

    async def fetch_all(self) -> list[Game]:
        self.calls.append(("fetch_all", None, None))
        return [Game.from_payload(record) for record in self.records.values()]

    async def fetch_one(self, game_id: str) -> Game:
        self.calls.append(("fetch_one", game_id, None))
        record = self.records.get(game_id)
        if record is None:
            raise NotFound(game_id)
        return Game.from_payload(record)

    async def update(self, game_id: str, fields: Mapping[str, object]) -> Game:
        self.calls.append(("update", game_id, dict(fields)))
        if self.hold_updates:
            held = HeldCall(game_id=game_id, fields=dict(fields))
            self.held.append(held)
            await held.gate.wait()
            if held.error is not None:
                raise held.error
        if self.update_errors:
            raise self.update_errors.pop(0)
        record = self.records.get(game_id)
        if record is None:
            raise RemoteError(404, "Not found")
        record.update(fields)
        return Game.from_payload(record)

    async def delete(self, game_id: str) -> None:
        self.calls.append(("delete", game_id, None))
        if self.records.pop(game_id, None) is None:
            raise RemoteError(404, "Not found")

    async def close(self) -> None:
        self.closed = True


async def wait_for_held(client: InMemoryGameClient, count: int) -> None:
    """Yield to the loop until *count* update calls are parked."""
    for _ in range(200):
        if len(client.held) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"expected {count} held update calls, got {len(client.held)}")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def game_client() -> InMemoryGameClient:
    return InMemoryGameClient(
        [
            make_record("1", name="Foo", platform="PC"),
            make_record("2", name="Hollow Knight", platform="Nintendo Switch", genre="Metroidvania"),
        ]
    )


@pytest.fixture
def events() -> list[SyncEvent]:
    return []


@pytest.fixture
def controller(game_client: InMemoryGameClient, events: list[SyncEvent]) -> FieldSyncController:
    """Controller for game "1" seeded the way the RecordLoader would."""
    record = game_client.records["1"]
    session = EditSession(game_id="1", values=Game.from_payload(record).form_values())
    return FieldSyncController(game_client, session, ledger=ChangeLedger(), listeners=[events.append])
