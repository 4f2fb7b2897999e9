"""Ledger package: entry add/delete over FinanceData."""

from pennylog.ledger.lifecycle import (
    add_entry,
    build_entry,
    clear_all,
    delete_entry,
    find_entry,
    generate_entry_id,
)

__all__ = [
    "add_entry",
    "build_entry",
    "clear_all",
    "delete_entry",
    "find_entry",
    "generate_entry_id",
]
