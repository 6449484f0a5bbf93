"""Record loader: fetches one game to seed an edit session."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from gamedesk.client.base import ResourceClient
from gamedesk.errors import ClientError, LoadFailure
from gamedesk.ledger.change_ledger import ChangeLedger
from gamedesk.models.session import EditSession
from gamedesk.sync.controller import FieldSyncController
from gamedesk.sync.events import SyncListener

_log = structlog.get_logger(component="sync.loader")


class RecordLoader:
    """Builds EditSession seeds from the remote record."""

    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def load(self, game_id: str) -> EditSession:
        """Fetch *game_id* and return a fresh EditSession for it.

        Raises:
            LoadFailure: the record is missing (``cause`` is NotFound) or the
                         remote/network failed.  No partial session is built.
        """
        try:
            game = await self._client.fetch_one(game_id)
        except ClientError as exc:
            _log.warning("record_load_failed", game_id=game_id, error=str(exc))
            raise LoadFailure(game_id, exc) from exc
        _log.debug("record_loaded", game_id=game_id)
        return EditSession(game_id=game.id or game_id, values=game.form_values())


async def open_edit_session(
    client: ResourceClient,
    game_id: str,
    listeners: Iterable[SyncListener] | None = None,
) -> FieldSyncController:
    """Load *game_id* and return a controller owning its new session."""
    session = await RecordLoader(client).load(game_id)
    return FieldSyncController(client, session, ledger=ChangeLedger(), listeners=listeners)
