"""Autosave synchronization engine for the game edit workflow.

Exports:
    FieldSyncController -- Per-field validate -> partial update -> ledger loop,
                           plus the whole-record "save all" path.
    RecordLoader        -- Fetches one game to seed an EditSession.
    open_edit_session   -- Load a game and wrap it in a new controller.
    SyncEvent           -- Outcome notification delivered to listeners.
    SyncEventKind       -- Kinds of SyncEvent.
"""

from gamedesk.sync.controller import FieldSyncController
from gamedesk.sync.events import SyncEvent, SyncEventKind, SyncListener
from gamedesk.sync.loader import RecordLoader, open_edit_session

__all__ = [
    "FieldSyncController",
    "RecordLoader",
    "SyncEvent",
    "SyncEventKind",
    "SyncListener",
    "open_edit_session",
]
