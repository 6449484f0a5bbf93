"""Validation engine for game form values.

Rules, first failing rule for a field wins:

    name       required, non-empty after trimming
    platform   required, non-empty after trimming
    released   required, must be present (parsed later by the date conversion)
    genre      optional; at least 2 characters when present
    developer  optional; at least 2 characters when present

Both functions are pure: they return data and never touch presentation state.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from gamedesk.errors import UnknownFieldError
from gamedesk.models.games import FIELDS
from gamedesk.models.session import ValidationResult

_OPTIONAL_MIN_LENGTH = 2


def _required_trimmed(message: str) -> Callable[[str], str | None]:
    def rule(value: str) -> str | None:
        return message if not value.strip() else None

    return rule


def _required_present(message: str) -> Callable[[str], str | None]:
    def rule(value: str) -> str | None:
        return message if not value else None

    return rule


def _optional_min_length(message: str) -> Callable[[str], str | None]:
    def rule(value: str) -> str | None:
        if value and len(value) < _OPTIONAL_MIN_LENGTH:
            return message
        return None

    return rule


_RULES: dict[str, Callable[[str], str | None]] = {
    "name": _required_trimmed("Game name is required"),
    "platform": _required_trimmed("Platform is required"),
    "released": _required_present("Release date is required"),
    "genre": _optional_min_length("Genre must be at least 2 characters"),
    "developer": _optional_min_length("Developer must be at least 2 characters"),
}


def validate_field(name: str, value: str | None) -> str | None:
    """Return the error message for *name* = *value*, or None if valid.

    Raises:
        UnknownFieldError: if *name* is not a game field.
    """
    rule = _RULES.get(name)
    if rule is None:
        raise UnknownFieldError(name)
    return rule(value or "")


def validate_record(record: Mapping[str, str | None]) -> ValidationResult:
    """Apply every field rule to *record*.

    Fields missing from *record* are validated as empty, so untouched required
    fields are still reported.
    """
    errors: dict[str, str] = {}
    for name in FIELDS:
        message = validate_field(name, record.get(name))
        if message is not None:
            errors[name] = message
    return ValidationResult(errors)
