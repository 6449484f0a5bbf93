"""Pure per-field and whole-record validation rules."""

from gamedesk.validation.engine import validate_field, validate_record

__all__ = ["validate_field", "validate_record"]
