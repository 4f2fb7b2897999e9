"""Validation package."""

from pennylog.validation.validator import (
    EntryValidationError,
    EntryValidator,
    parse_amount,
)

__all__ = ["EntryValidationError", "EntryValidator", "parse_amount"]
