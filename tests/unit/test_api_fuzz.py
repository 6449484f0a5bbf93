"""Property-based fuzz tests for the GameDesk REST API.

Uses hypothesis to generate randomised inputs for the game and edit-session
endpoints and validates that:
 1. No 500s from malformed input (validation catches everything)
 2. Response body is always valid JSON
 3. Error responses always have ``error`` + ``detail``
 4. Nothing invalid ever reaches the remote collection
"""

from __future__ import annotations

from fastapi.testclient import TestClient
from hypothesis import given, settings
from hypothesis import strategies as st

from gamedesk.api.app import create_app
from gamedesk.models.games import FIELDS

from ..conftest import InMemoryGameClient, make_record

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _make_app() -> tuple[TestClient, InMemoryGameClient]:
    client = InMemoryGameClient([make_record("1")])
    return TestClient(create_app(client=client), raise_server_exceptions=False), client


def _assert_valid_json_response(resp, allowed_status_codes: set[int] | None = None):
    """Assert universal invariants on every API response."""
    assert resp.headers.get("content-type", "").startswith("application/json"), (
        f"Expected application/json, got {resp.headers.get('content-type')}"
    )
    body = resp.json()
    if allowed_status_codes is not None:
        assert resp.status_code in allowed_status_codes, f"Unexpected status {resp.status_code}, body={body}"
    if resp.status_code >= 400:
        assert "error" in body, f"Error response missing 'error': {body}"
        assert "detail" in body, f"Error response missing 'detail': {body}"
    return body


# ---------------------------------------------------------------------------
# Hypothesis strategies
# ---------------------------------------------------------------------------

_json_safe_text = st.text(
    alphabet=st.characters(codec="utf-8", exclude_categories=("Cs",)),
    min_size=0,
    max_size=300,
)

_field_name = st.sampled_from(FIELDS)

_game_body = st.fixed_dictionaries(
    {},
    optional={name: _json_safe_text for name in FIELDS},
)

_session_id = st.from_regex(r"[A-Za-z0-9\-]{1,40}", fullmatch=True)


# ===========================================================================
# A. PUT /sessions/{id}/fields/{field}
# ===========================================================================


class TestFieldEditFuzz:
    @given(field=_field_name, value=_json_safe_text)
    @settings(max_examples=80, deadline=None)
    def test_any_value_is_answered_with_a_view(self, field: str, value: str) -> None:
        api, client = _make_app()
        sid = api.post("/api/v1/sessions", json={"game_id": "1"}).json()["session_id"]

        resp = api.put(f"/api/v1/sessions/{sid}/fields/{field}", json={"value": value})

        view = _assert_valid_json_response(resp, allowed_status_codes={200})
        assert view["values"][field] == value
        if field in view["errors"]:
            assert view["states"][field] == "invalid"
            assert client.update_calls() == []
        else:
            assert view["states"][field] == "committed"
            assert len(client.update_calls()) == 1

    @given(value=st.one_of(st.integers(), st.none(), st.lists(st.text(max_size=5), max_size=3)))
    @settings(max_examples=20, deadline=None)
    def test_non_string_values_are_rejected(self, value: object) -> None:
        api, client = _make_app()
        sid = api.post("/api/v1/sessions", json={"game_id": "1"}).json()["session_id"]
        resp = api.put(f"/api/v1/sessions/{sid}/fields/name", json={"value": value})
        _assert_valid_json_response(resp, allowed_status_codes={400})
        assert client.update_calls() == []

    def test_overlong_value_is_rejected(self) -> None:
        api, client = _make_app()
        sid = api.post("/api/v1/sessions", json={"game_id": "1"}).json()["session_id"]
        resp = api.put(f"/api/v1/sessions/{sid}/fields/name", json={"value": "x" * 2000})
        _assert_valid_json_response(resp, allowed_status_codes={400})
        assert client.update_calls() == []


# ===========================================================================
# B. POST /games
# ===========================================================================


class TestCreateGameFuzz:
    @given(body=_game_body)
    @settings(max_examples=80, deadline=None)
    def test_random_bodies_never_500(self, body: dict[str, str]) -> None:
        api, client = _make_app()
        resp = api.post("/api/v1/games", json=body)
        result = _assert_valid_json_response(resp, allowed_status_codes={201, 400})
        creates = [c for c in client.calls if c[0] == "create"]
        if resp.status_code == 400:
            assert result["error"] == "VALIDATION_FAILED"
            assert result["fields"]
            assert creates == []
        else:
            assert len(creates) == 1

    @given(body=st.sampled_from(["", "null", "[]", "42", '"string"', "true", "{"]))
    @settings(max_examples=10, deadline=None)
    def test_non_object_json_returns_error(self, body: str) -> None:
        api, _ = _make_app()
        resp = api.post("/api/v1/games", content=body.encode(), headers={"content-type": "application/json"})
        _assert_valid_json_response(resp, allowed_status_codes={400})


# ===========================================================================
# C. Session lookup
# ===========================================================================


class TestSessionLookupFuzz:
    @given(session_id=_session_id)
    @settings(max_examples=30, deadline=None)
    def test_unknown_session_ids_are_404(self, session_id: str) -> None:
        api, _ = _make_app()
        resp = api.get(f"/api/v1/sessions/{session_id}")
        body = _assert_valid_json_response(resp, allowed_status_codes={404})
        assert body["error"] == "SESSION_NOT_FOUND"

    @given(game_id=_session_id)
    @settings(max_examples=30, deadline=None)
    def test_opening_unknown_games_never_500(self, game_id: str) -> None:
        api, _ = _make_app()
        resp = api.post("/api/v1/sessions", json={"game_id": game_id})
        _assert_valid_json_response(resp, allowed_status_codes={201, 404})
