"""Edit session and validation result data structures."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


class FieldState(StrEnum):
    """Autosave state of a single field.

    COMMITTED and COMMIT_FAILED are resting states: a new edit may start from
    them exactly as from IDLE.
    """

    IDLE = "idle"
    VALIDATING = "validating"
    INVALID = "invalid"
    COMMITTING = "committing"
    COMMITTED = "committed"
    COMMIT_FAILED = "commit_failed"


@dataclass(frozen=True)
class ValidationResult:
    """Per-field error messages.  A field without an entry is currently valid."""

    errors: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "errors", MappingProxyType(dict(self.errors)))

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error_for(self, name: str) -> str | None:
        return self.errors.get(name)

    def with_field(self, name: str, message: str | None) -> ValidationResult:
        """Return a copy with *name*'s entry set to *message* (or cleared)."""
        errors = dict(self.errors)
        if message is None:
            errors.pop(name, None)
        else:
            errors[name] = message
        return ValidationResult(errors)


@dataclass
class EditSession:
    """Local state of one edit view.

    Owned exclusively by the FieldSyncController backing the view; no other
    component writes to it.
    """

    game_id: str
    values: dict[str, str]
    states: dict[str, FieldState] = field(default_factory=dict)
    pending: dict[str, int] = field(default_factory=dict)
    validation: ValidationResult = field(default_factory=ValidationResult)
    closed: bool = False

    def __post_init__(self) -> None:
        for name in self.values:
            self.states.setdefault(name, FieldState.IDLE)
            self.pending.setdefault(name, 0)

    def is_pending(self, name: str) -> bool:
        return self.pending.get(name, 0) > 0

    @property
    def saving(self) -> bool:
        """True while any field has a commit in flight or queued."""
        return any(count > 0 for count in self.pending.values())
