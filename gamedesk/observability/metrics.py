"""Prometheus metrics for GameDesk.

remote_requests_total   -- one increment per ResourceClient call, by operation
                           and outcome (success | failed).
autosave_commits_total  -- one increment per single-field autosave, by field
                           and outcome (success | failed | stale | rejected).
"""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

remote_requests_total = Counter(
    "gamedesk_remote_requests_total",
    "Requests issued to the remote game collection.",
    ["operation", "outcome"],
)

autosave_commits_total = Counter(
    "gamedesk_autosave_commits_total",
    "Single-field autosave outcomes.",
    ["field", "outcome"],
)


def render_latest() -> tuple[bytes, str]:
    """Return the exposition payload and its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST
