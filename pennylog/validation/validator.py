"""
Entry Validation

DESIGN DECISION: Only NEW entries are validated, and only for the fields
the dashboard cannot work without:

ERRORS (block the entry):
- Amount empty
- Amount not a finite number
- Category empty (income and expense only)
- Date not an ISO date

WARNINGS (shown, never block):
- Negative amount
- Category not in the configured lists

Stored entries are never re-validated and amounts are never corrected;
the aggregation engine sums whatever is stored.
"""

import math
from typing import Optional, Union

from pennylog.aggregation.engine import parse_entry_date
from pennylog.models.finance import (
    EntryDraft,
    EntryKind,
    Settings,
    ValidationIssue,
    ValidationResult,
)


class EntryValidationError(Exception):
    """A new entry failed validation; nothing was added."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(issue.message for issue in result.errors)
        super().__init__(f"Invalid {result.kind.value} entry: {messages}")


def parse_amount(raw: Union[float, int, str, None]) -> Optional[float]:
    """
    Parse the amount field.

    Returns None when the input is empty or not a finite number.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def _is_blank(value: Union[float, int, str, None]) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class EntryValidator:
    """
    Validates entry drafts before they become entries.

    When built with Settings, also warns about categories that are not
    configured.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings

    def validate(self, kind: Union[EntryKind, str], draft: EntryDraft) -> ValidationResult:
        kind = EntryKind.resolve(kind)
        issues: list[ValidationIssue] = []

        amount = parse_amount(draft.amount)
        if _is_blank(draft.amount):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
        elif amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount '{draft.amount}' is not a number",
                severity="error",
            ))
        elif amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="negative_amount",
                message="Amount is negative",
                severity="warning",
            ))

        if kind != EntryKind.SAVING:
            issues.extend(self._check_category(kind, draft.category))

        if parse_entry_date(draft.date) is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date '{draft.date}' is not an ISO date (YYYY-MM-DD)",
                severity="error",
            ))

        return ValidationResult(kind=kind, issues=issues, amount=amount)

    def _check_category(self, kind: EntryKind, category: str) -> list[ValidationIssue]:
        if not category:
            return [ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            )]
        if self._settings is not None and category not in self._settings.entry_categories(kind):
            return [ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"Category '{category}' is not in your {kind.value} categories",
                severity="warning",
            )]
        return []
