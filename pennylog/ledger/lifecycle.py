"""
Entry Lifecycle

Add and delete over the three entry lists.

Every function returns a NEW FinanceData; the value passed in is never
modified, so anything holding the previous document can treat it as
immutable.

Ids keep the "{kind}-{unix-millis}" form. If that id is already taken in
the target list (two entries within one millisecond), a numeric suffix
is appended so ids stay unique within a list.
"""

import time
from typing import Iterable, Optional, Union

from pennylog.models.finance import (
    Entry,
    EntryDraft,
    EntryKind,
    ExpenseEntry,
    FinanceData,
    IncomeEntry,
    SavingEntry,
    Settings,
)
from pennylog.validation.validator import EntryValidationError, EntryValidator


def generate_entry_id(
    kind: Union[EntryKind, str],
    existing_ids: Iterable[str] = (),
    now_ms: Optional[int] = None,
) -> str:
    kind = EntryKind.resolve(kind)
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    base = f"{kind.value}-{now_ms}"
    taken = set(existing_ids)
    candidate, suffix = base, 0
    while candidate in taken:
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate


def build_entry(kind: EntryKind, draft: EntryDraft, entry_id: str, amount: float) -> Entry:
    """Turn a validated draft into the entry variant for its kind."""
    if kind == EntryKind.INCOME:
        return IncomeEntry(
            id=entry_id,
            amount=amount,
            category=draft.category,
            date=draft.date,
            description=draft.description,
        )
    if kind == EntryKind.EXPENSE:
        return ExpenseEntry(
            id=entry_id,
            amount=amount,
            category=draft.category,
            type=draft.expense_type,
            date=draft.date,
            description=draft.description,
            frequency=draft.frequency,
        )
    return SavingEntry(
        id=entry_id,
        amount=amount,
        date=draft.date,
        description=draft.description,
    )


def add_entry(
    data: FinanceData,
    kind: Union[EntryKind, str],
    draft: EntryDraft,
    settings: Optional[Settings] = None,
    now_ms: Optional[int] = None,
) -> FinanceData:
    """
    Append a new entry to the list for `kind`.

    Raises:
        EntryValidationError: If the draft has errors; `data` is unchanged.
    """
    kind = EntryKind.resolve(kind)
    result = EntryValidator(settings).validate(kind, draft)
    if result.has_errors:
        raise EntryValidationError(result)

    entries = data.collection(kind)
    entry_id = generate_entry_id(kind, (e.id for e in entries), now_ms)
    entry = build_entry(kind, draft, entry_id, result.amount)
    return data.with_collection(kind, [*entries, entry])


def delete_entry(
    data: FinanceData,
    kind: Union[EntryKind, str],
    entry_id: str,
) -> FinanceData:
    """
    Remove the first entry with this id from the list for `kind`.

    No match is not an error: the returned document equals the input.
    """
    entries = data.collection(kind)
    for index, entry in enumerate(entries):
        if entry.id == entry_id:
            return data.with_collection(kind, entries[:index] + entries[index + 1:])
    return data.with_collection(kind, entries)


def find_entry(data: FinanceData, kind: Union[EntryKind, str], entry_id: str) -> Optional[Entry]:
    for entry in data.collection(kind):
        if entry.id == entry_id:
            return entry
    return None


def clear_all() -> FinanceData:
    """Three empty lists."""
    return FinanceData()
