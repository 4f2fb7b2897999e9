"""
Settings Editor

Edits happen on a DRAFT copy of Settings. The committed Settings only
change on `commit()`, in a single assignment, and are then handed to the
commit handler (the controller persists them). `discard()` throws the
draft away and starts again from the committed value.
"""

import re
from typing import Any, Callable, Optional, Union

import structlog

from pennylog.models.finance import (
    CURRENCY_SYMBOLS,
    CategoryGroup,
    Frequency,
    ResetCycle,
    Settings,
)

logger = structlog.get_logger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_reset_date(raw: Union[int, str, None]) -> int:
    """
    Day-of-month from user input.

    Leading digits are read ("15th" -> 15); anything without them, or 0,
    becomes 1. The value is not clamped to 1..31.
    """
    if isinstance(raw, int):
        return raw or 1
    match = _LEADING_INT.match(str(raw or ""))
    if not match:
        return 1
    return int(match.group(1)) or 1


class SettingsEditor:
    """Draft-and-commit editor over one Settings document."""

    def __init__(
        self,
        committed: Settings,
        on_commit: Optional[Callable[[Settings], Any]] = None,
    ):
        self._committed = committed
        self._on_commit = on_commit
        self._draft = committed.model_copy(deep=True)

    @property
    def draft(self) -> Settings:
        return self._draft

    @property
    def committed(self) -> Settings:
        return self._committed

    @property
    def is_dirty(self) -> bool:
        return self._draft != self._committed

    def changed_fields(self) -> list[str]:
        """Top-level fields where the draft differs from the committed value."""
        return [
            name for name in Settings.model_fields
            if getattr(self._draft, name) != getattr(self._committed, name)
        ]

    # -- categories ---------------------------------------------------------

    def add_category(self, group: Union[CategoryGroup, str], name: str) -> bool:
        """
        Append a category to a group. Blank names are ignored.

        Duplicates are allowed. Returns True if the draft changed.
        """
        name = (name or "").strip()
        if not name:
            return False
        group = CategoryGroup(group)
        categories = self._draft.categories
        updated = categories.model_copy(
            update={group.attribute: [*categories.group(group), name]}
        )
        self._draft = self._draft.model_copy(update={"categories": updated})
        return True

    def remove_category(self, group: Union[CategoryGroup, str], index: int) -> bool:
        """
        Remove the category at `index` from a group.

        Out-of-range indexes are ignored. Returns True if the draft changed.
        """
        group = CategoryGroup(group)
        names = self._draft.categories.group(group)
        if not 0 <= index < len(names):
            return False
        updated = self._draft.categories.model_copy(
            update={group.attribute: names[:index] + names[index + 1:]}
        )
        self._draft = self._draft.model_copy(update={"categories": updated})
        return True

    # -- preferences --------------------------------------------------------

    def set_app_name(self, name: str) -> None:
        self._draft = self._draft.model_copy(update={"app_name": name})

    def set_currency(self, currency: str) -> None:
        """Set the currency code; known codes also set their symbol."""
        currency = currency.strip().upper()
        update = {"currency": currency}
        if currency in CURRENCY_SYMBOLS:
            update["currency_symbol"] = CURRENCY_SYMBOLS[currency]
        self._draft = self._draft.model_copy(update=update)

    def set_expense_frequency(self, frequency: Union[Frequency, str]) -> None:
        self._draft = self._draft.model_copy(
            update={"expense_frequency": Frequency(frequency)}
        )

    def set_reset_cycle(self, cycle: Union[ResetCycle, str]) -> None:
        self._draft = self._draft.model_copy(update={"reset_cycle": ResetCycle(cycle)})

    def set_reset_date(self, raw: Union[int, str, None]) -> None:
        self._draft = self._draft.model_copy(update={"reset_date": parse_reset_date(raw)})

    def set_budget(self, frequency: Union[Frequency, str], amount: Optional[float]) -> None:
        """Set (or with None, unset) the daily or monthly budget."""
        field = (
            "daily_budget" if Frequency(frequency) == Frequency.DAILY else "monthly_budget"
        )
        self._draft = self._draft.model_copy(
            update={field: None if amount is None else float(amount)}
        )

    # -- commit / discard ---------------------------------------------------

    def commit(self) -> Settings:
        """Make the draft the committed Settings and hand it to the handler."""
        changed = self.changed_fields()
        self._committed = self._draft
        self._draft = self._committed.model_copy(deep=True)
        logger.debug("settings_committed", changed_fields=changed)
        if self._on_commit is not None:
            self._on_commit(self._committed)
        return self._committed

    def discard(self, committed: Optional[Settings] = None) -> Settings:
        """
        Drop the draft and restart from the committed Settings.

        Pass `committed` when the committed value changed elsewhere.
        """
        if committed is not None:
            self._committed = committed
        self._draft = self._committed.model_copy(deep=True)
        return self._draft
