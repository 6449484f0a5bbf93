"""In-process registry of open edit sessions served by the REST API."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from uuid import uuid4

import structlog

from gamedesk.client.base import ResourceClient
from gamedesk.sync.controller import FieldSyncController
from gamedesk.sync.events import SyncEvent
from gamedesk.sync.loader import open_edit_session

_log = structlog.get_logger(component="api.sessions")

_MAX_EVENTS = 50
DEFAULT_MAX_SESSIONS = 256


class SessionNotFoundError(KeyError):
    """No open session has the requested id."""


@dataclass
class SessionEntry:
    """One open edit view: its controller and the events it has emitted."""

    session_id: str
    controller: FieldSyncController
    events: list[SyncEvent] = field(default_factory=list)

    def record_event(self, event: SyncEvent) -> None:
        self.events.append(event)
        del self.events[:-_MAX_EVENTS]


class SessionRegistry:
    """Maps session ids to controllers.  Closing a session removes it.

    At most *max_sessions* stay open; opening one more closes the least
    recently used session.
    """

    def __init__(self, client: ResourceClient, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._client = client
        self._max_sessions = max_sessions
        self._entries: OrderedDict[str, SessionEntry] = OrderedDict()

    async def open(self, game_id: str) -> SessionEntry:
        """Load *game_id* and register a new session.  Raises LoadFailure."""
        controller = await open_edit_session(self._client, game_id)
        entry = SessionEntry(session_id=str(uuid4()), controller=controller)
        controller.add_listener(entry.record_event)
        self._entries[entry.session_id] = entry
        _log.info("session_opened", session_id=entry.session_id, game_id=game_id)
        while len(self._entries) > self._max_sessions:
            evicted = next(iter(self._entries))
            _log.warning("session_evicted", session_id=evicted, open_sessions=len(self._entries))
            self.close(evicted)
        return entry

    def get(self, session_id: str) -> SessionEntry:
        entry = self._entries.get(session_id)
        if entry is None:
            raise SessionNotFoundError(session_id)
        self._entries.move_to_end(session_id)
        return entry

    def close(self, session_id: str) -> None:
        entry = self._entries.pop(session_id, None)
        if entry is None:
            raise SessionNotFoundError(session_id)
        entry.controller.close()
        _log.info("session_closed", session_id=session_id)

    def close_all(self) -> None:
        for session_id in list(self._entries):
            self.close(session_id)

    def __len__(self) -> int:
        return len(self._entries)
