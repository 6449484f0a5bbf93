"""Unit tests for game models, the date conversion and ValidationResult."""

from __future__ import annotations

from datetime import date

import pytest

from gamedesk.errors import ValidationError
from gamedesk.models import EditSession, FieldState, Game, Platform, ValidationResult
from gamedesk.models.games import from_wire_released, to_wire_fields, to_wire_released


class TestReleasedConversion:
    def test_date_to_wire(self) -> None:
        assert to_wire_released("2023-02-10") == "2023-02-10T00:00:00.000Z"

    def test_invalid_date_is_a_released_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            to_wire_released("2023-13-45")
        assert exc_info.value.errors == {"released": "Release date is not a valid date"}

    @pytest.mark.parametrize(
        ("wire", "expected"),
        [
            ("2023-02-10T00:00:00.000Z", date(2023, 2, 10)),
            ("2023-02-10T23:30:00+00:00", date(2023, 2, 10)),
            ("2023-02-10", date(2023, 2, 10)),
            ("2023-02-10T08:00:00", date(2023, 2, 10)),
        ],
    )
    def test_wire_to_date(self, wire: str, expected: date) -> None:
        assert from_wire_released(wire) == expected

    @pytest.mark.parametrize("wire", [None, "", "yesterday", 1676000000])
    def test_unusable_wire_values_yield_none(self, wire: object) -> None:
        assert from_wire_released(wire) is None

    def test_to_wire_fields_converts_only_released(self) -> None:
        wire = to_wire_fields({"genre": "RPG", "released": "2020-05-01"})
        assert wire == {"genre": "RPG", "released": "2020-05-01T00:00:00.000Z"}

    def test_to_wire_fields_without_released(self) -> None:
        assert to_wire_fields({"name": "Foo"}) == {"name": "Foo"}


class TestGame:
    def test_from_payload_fills_missing_optionals(self) -> None:
        game = Game.from_payload(
            {"id": "7", "name": "Halo", "platform": "Xbox", "released": "2001-11-15T00:00:00.000Z"}
        )
        assert game.genre == ""
        assert game.developer == ""
        assert game.form_values() == {
            "name": "Halo",
            "platform": "Xbox",
            "released": "2001-11-15",
            "genre": "",
            "developer": "",
        }

    def test_from_payload_tolerates_nulls(self) -> None:
        game = Game.from_payload({"id": 3, "name": None, "platform": None, "released": None})
        assert game.id == "3"
        assert game.form_values()["released"] == ""

    def test_platform_choices(self) -> None:
        assert [p.value for p in Platform] == ["PC", "PlayStation", "Xbox", "Nintendo Switch", "Mobile"]


class TestValidationResult:
    def test_with_field_sets_and_clears(self) -> None:
        result = ValidationResult().with_field("name", "Game name is required")
        assert not result.is_valid
        assert result.error_for("name") == "Game name is required"
        cleared = result.with_field("name", None)
        assert cleared.is_valid
        # Original is unchanged.
        assert result.error_for("name") == "Game name is required"

    def test_errors_are_read_only(self) -> None:
        result = ValidationResult({"genre": "Genre must be at least 2 characters"})
        with pytest.raises(TypeError):
            result.errors["genre"] = "x"  # type: ignore[index]


class TestEditSession:
    def test_fields_start_idle_with_nothing_pending(self) -> None:
        session = EditSession(game_id="1", values={"name": "Foo", "genre": ""})
        assert session.states == {"name": FieldState.IDLE, "genre": FieldState.IDLE}
        assert not session.saving
        assert not session.is_pending("name")
