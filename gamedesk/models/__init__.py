"""Core data structures for GameDesk."""

from gamedesk.models.config import GameDeskConfig
from gamedesk.models.games import (
    FIELDS,
    OPTIONAL_FIELDS,
    REQUIRED_FIELDS,
    FieldChange,
    FieldOutcome,
    Game,
    Platform,
)
from gamedesk.models.session import EditSession, FieldState, ValidationResult

__all__ = [
    "EditSession",
    "FIELDS",
    "FieldChange",
    "FieldOutcome",
    "FieldState",
    "Game",
    "GameDeskConfig",
    "OPTIONAL_FIELDS",
    "Platform",
    "REQUIRED_FIELDS",
    "ValidationResult",
]
