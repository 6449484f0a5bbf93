"""Events emitted by the FieldSyncController.

The hosting UI registers listeners and decides how to present saves,
rejections and failures; the controller itself never prompts or alerts.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum


class SyncEventKind(StrEnum):
    """What happened in the edit session."""

    FIELD_SAVED = "field_saved"
    FIELD_REJECTED = "field_rejected"
    FIELD_SAVE_FAILED = "field_save_failed"
    RECORD_SAVED = "record_saved"
    RECORD_REJECTED = "record_rejected"
    RECORD_SAVE_FAILED = "record_save_failed"


@dataclass(frozen=True)
class SyncEvent:
    """A single user-facing outcome of an edit or a save-all."""

    kind: SyncEventKind
    game_id: str
    message: str
    field: str | None = None
    value: str | None = None
    errors: dict[str, str] = dataclasses.field(default_factory=dict)
    at: datetime = dataclasses.field(default_factory=lambda: datetime.now(tz=UTC))


SyncListener = Callable[[SyncEvent], None]
