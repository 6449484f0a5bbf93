"""Unit tests for the ChangeLedger."""

from __future__ import annotations

from datetime import UTC, datetime

from gamedesk.ledger import ChangeLedger
from gamedesk.models.games import FieldOutcome


class TestChangeLedger:
    def test_empty_ledger(self) -> None:
        ledger = ChangeLedger()
        assert ledger.count == 0
        assert ledger.entries == []
        assert ledger.last_saved == ""

    def test_record_appends_success_and_counts(self) -> None:
        ledger = ChangeLedger()
        at = datetime(2024, 5, 1, 14, 3, 9, tzinfo=UTC)
        change = ledger.record("genre", "RPG", at=at)

        assert ledger.count == 1
        assert change.outcome is FieldOutcome.SUCCESS
        assert change.field == "genre"
        assert change.value == "RPG"
        assert ledger.last_saved == 'Field "genre" saved at 14:03:09'

    def test_entries_keep_order_and_are_a_copy(self) -> None:
        ledger = ChangeLedger()
        ledger.record("name", "A")
        ledger.record("genre", "RPG")
        ledger.record("name", "B")

        entries = ledger.entries
        entries.clear()
        assert [c.value for c in ledger.entries] == ["A", "RPG", "B"]
        assert [c.value for c in ledger.changes_for("name")] == ["A", "B"]
        assert ledger.count == 3
