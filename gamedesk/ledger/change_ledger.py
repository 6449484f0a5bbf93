"""In-memory change ledger.

Written only by the FieldSyncController after the remote acknowledges a
single-field commit; read by the hosting UI.  Failed commits, validation
rejections and the "save all" path never touch it.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog

from gamedesk.models.games import FieldChange, FieldOutcome

_log = structlog.get_logger(component="ledger")


class ChangeLedger:
    """Append-only record of successful autosaves for one edit session."""

    def __init__(self) -> None:
        self._entries: list[FieldChange] = []
        self._last_saved = ""

    def record(self, field: str, value: str, at: datetime | None = None) -> FieldChange:
        """Append a successful FieldChange and bump the count."""
        change = FieldChange(
            field=field,
            value=value,
            at=at or datetime.now(tz=UTC),
            outcome=FieldOutcome.SUCCESS,
        )
        self._entries.append(change)
        self._last_saved = f'Field "{field}" saved at {change.at.strftime("%H:%M:%S")}'
        _log.debug("change_recorded", field=field, count=len(self._entries))
        return change

    @property
    def count(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[FieldChange]:
        return list(self._entries)

    @property
    def last_saved(self) -> str:
        """Human-readable note about the latest save, empty if none yet."""
        return self._last_saved

    def changes_for(self, field: str) -> list[FieldChange]:
        return [change for change in self._entries if change.field == field]
