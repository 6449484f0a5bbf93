"""Per-field autosave synchronization for one edit session.

Every field edit runs its own state machine::

    IDLE -> VALIDATING -> INVALID
                       -> COMMITTING -> COMMITTED | COMMIT_FAILED

A valid edit sends exactly the changed field to ``ResourceClient.update``.
Commits for one field are issued in edit order; commits for different fields
run independently and may complete in any order.  Each commit is tagged with
the value it carries, and its result is applied only while that value is still
the field's local value, so an older acknowledgement never clobbers a newer
edit.  Failed autosaves are reported once and not retried; the typed value is
kept.

``save_all`` is the separate whole-record path: validate everything, then one
``update`` with the full record.  It never touches the ChangeLedger.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping

import structlog

from gamedesk.client.base import ResourceClient
from gamedesk.errors import ClientError, SessionClosedError, UnknownFieldError, ValidationError
from gamedesk.ledger.change_ledger import ChangeLedger
from gamedesk.models.games import Game, to_wire_fields
from gamedesk.models.session import EditSession, FieldState, ValidationResult
from gamedesk.observability.metrics import autosave_commits_total
from gamedesk.sync.events import SyncEvent, SyncEventKind, SyncListener
from gamedesk.validation.engine import validate_field, validate_record

_log = structlog.get_logger(component="sync.controller")


class FieldSyncController:
    """Owns one EditSession and keeps it in step with the remote record.

    Args:
        client:    ResourceClient used for every remote write.
        session:   EditSession seeded by the RecordLoader.
        ledger:    ChangeLedger receiving successful autosaves.  A fresh
                   ledger is created when omitted.
        listeners: Callables notified of every SyncEvent.
    """

    def __init__(
        self,
        client: ResourceClient,
        session: EditSession,
        ledger: ChangeLedger | None = None,
        listeners: Iterable[SyncListener] | None = None,
    ) -> None:
        self._client = client
        self._session = session
        self._ledger = ledger or ChangeLedger()
        self._listeners: list[SyncListener] = list(listeners or [])
        self._locks: dict[str, asyncio.Lock] = {}
        self._tasks: set[asyncio.Task[FieldState]] = set()
        self._log = _log.bind(game_id=session.game_id)

    @property
    def session(self) -> EditSession:
        return self._session

    @property
    def ledger(self) -> ChangeLedger:
        return self._ledger

    @property
    def validation(self) -> ValidationResult:
        return self._session.validation

    def add_listener(self, listener: SyncListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Single-field autosave
    # ------------------------------------------------------------------

    async def edit(self, field: str, value: str) -> FieldState:
        """Apply a field edit and, if valid, autosave it.

        Returns the field's state once this edit's run has finished.

        Raises:
            SessionClosedError: the session was closed.
            UnknownFieldError:  *field* is not part of the record.
        """
        wire = self._apply_local(field, value)
        if wire is None:
            return self._session.states[field]
        return await self._commit(field, value, wire)

    def schedule_edit(self, field: str, value: str) -> asyncio.Task[FieldState] | None:
        """Apply a field edit now and run its commit as a background task.

        The local value and validation result are updated before this returns.
        Returns the commit task, or None when validation rejected the value.
        """
        wire = self._apply_local(field, value)
        if wire is None:
            return None
        task = asyncio.create_task(self._commit(field, value, wire), name=f"autosave-{field}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for every scheduled commit task to finish."""
        while self._tasks:
            tasks = list(self._tasks)
            results = await asyncio.gather(*tasks, return_exceptions=True)
            self._tasks.difference_update(tasks)
            for result in results:
                if isinstance(result, Exception):
                    self._log.error("autosave_task_error", error=str(result))

    def _apply_local(self, field: str, value: str) -> dict[str, object] | None:
        """Record *value* locally and validate it.

        Returns the wire payload for the commit, or None when the value is
        invalid (no remote call may be made).
        """
        self._ensure_open()
        session = self._session
        if field not in session.values:
            raise UnknownFieldError(field)

        session.values[field] = value
        session.states[field] = FieldState.VALIDATING

        message = validate_field(field, value)
        wire: dict[str, object] | None = None
        if message is None:
            try:
                wire = to_wire_fields({field: value})
            except ValidationError as exc:
                message = exc.errors.get(field, str(exc))
        session.validation = session.validation.with_field(field, message)

        if message is not None:
            session.states[field] = FieldState.INVALID
            autosave_commits_total.labels(field=field, outcome="rejected").inc()
            self._log.debug("field_rejected", field=field, error=message)
            self._emit(
                SyncEvent(
                    kind=SyncEventKind.FIELD_REJECTED,
                    game_id=session.game_id,
                    message=message,
                    field=field,
                    value=value,
                    errors={field: message},
                )
            )
            return None

        session.states[field] = FieldState.COMMITTING
        session.pending[field] = session.pending.get(field, 0) + 1
        return wire

    async def _commit(self, field: str, value: str, wire: Mapping[str, object]) -> FieldState:
        session = self._session
        try:
            async with self._lock_for(field):
                if session.values[field] != value:
                    # A newer edit replaced this value before it was sent.
                    autosave_commits_total.labels(field=field, outcome="stale").inc()
                    self._log.debug("superseded_commit_skipped", field=field)
                    return session.states[field]
                try:
                    await self._client.update(session.game_id, wire)
                except ClientError as exc:
                    return self._resolve(field, value, exc)
                return self._resolve(field, value, None)
        finally:
            session.pending[field] -= 1

    def _resolve(self, field: str, value: str, error: ClientError | None) -> FieldState:
        """Apply a commit's outcome unless it is stale or the session is gone."""
        session = self._session
        if session.closed:
            autosave_commits_total.labels(field=field, outcome="stale").inc()
            self._log.debug("commit_result_after_close_ignored", field=field, ok=error is None)
            return session.states[field]
        if session.values[field] != value:
            autosave_commits_total.labels(field=field, outcome="stale").inc()
            self._log.info("stale_ack_discarded", field=field, ok=error is None)
            return session.states[field]

        # Another commit for this field is still queued behind this one.
        more_pending = session.pending[field] > 1

        if error is None:
            self._ledger.record(field, value)
            session.validation = session.validation.with_field(field, None)
            session.states[field] = FieldState.COMMITTING if more_pending else FieldState.COMMITTED
            autosave_commits_total.labels(field=field, outcome="success").inc()
            self._log.info("field_committed", field=field, change_count=self._ledger.count)
            self._emit(
                SyncEvent(
                    kind=SyncEventKind.FIELD_SAVED,
                    game_id=session.game_id,
                    message=self._ledger.last_saved,
                    field=field,
                    value=value,
                )
            )
        else:
            session.states[field] = FieldState.COMMITTING if more_pending else FieldState.COMMIT_FAILED
            autosave_commits_total.labels(field=field, outcome="failed").inc()
            self._log.warning("field_commit_failed", field=field, error=str(error))
            self._emit(
                SyncEvent(
                    kind=SyncEventKind.FIELD_SAVE_FAILED,
                    game_id=session.game_id,
                    message=f"Error saving {field}: {error}",
                    field=field,
                    value=value,
                )
            )
        return session.states[field]

    # ------------------------------------------------------------------
    # Save all
    # ------------------------------------------------------------------

    async def save_all(self) -> Game:
        """Validate the whole record and persist it with a single update.

        Raises:
            ValidationError: at least one field is invalid; carries every
                             field error and no remote call was made.
            ClientError:     the remote write failed; the session stays open.
        """
        self._ensure_open()
        session = self._session
        result = validate_record(session.values)
        wire: dict[str, object] | None = None
        if result.is_valid:
            try:
                wire = to_wire_fields(dict(session.values))
            except ValidationError as exc:
                result = ValidationResult(exc.errors)

        if wire is None:
            session.validation = result
            self._log.info("record_rejected", fields=sorted(result.errors))
            self._emit(
                SyncEvent(
                    kind=SyncEventKind.RECORD_REJECTED,
                    game_id=session.game_id,
                    message="Please fix validation errors before saving all changes",
                    errors=dict(result.errors),
                )
            )
            raise ValidationError(dict(result.errors))

        session.validation = result
        try:
            game = await self._client.update(session.game_id, wire)
        except ClientError as exc:
            self._log.warning("record_save_failed", error=str(exc))
            self._emit(
                SyncEvent(
                    kind=SyncEventKind.RECORD_SAVE_FAILED,
                    game_id=session.game_id,
                    message=f"Error updating game: {exc}",
                )
            )
            raise

        self._log.info("record_saved")
        self._emit(
            SyncEvent(
                kind=SyncEventKind.RECORD_SAVED,
                game_id=session.game_id,
                message="All changes saved successfully!",
            )
        )
        return game

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """End the session.

        Outstanding remote writes keep running, but their results are no
        longer applied to the session, the ledger or the listeners.
        """
        if self._session.closed:
            return
        self._session.closed = True
        self._log.info("session_closed", in_flight=sum(self._session.pending.values()))

    def _ensure_open(self) -> None:
        if self._session.closed:
            raise SessionClosedError(f"edit session for game {self._session.game_id!r} is closed")

    def _lock_for(self, field: str) -> asyncio.Lock:
        lock = self._locks.get(field)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[field] = lock
        return lock

    def _emit(self, event: SyncEvent) -> None:
        if self._session.closed:
            return
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as exc:  # noqa: BLE001
                self._log.error("sync_listener_error", kind=event.kind.value, error=str(exc))
