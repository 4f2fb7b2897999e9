"""Aggregation package: pure statistics over FinanceData."""

from pennylog.aggregation.engine import (
    available_years,
    budget_percentage,
    compute_statistics,
    daily_expenses,
    expenses_of_type,
    is_in_period,
    is_today,
    monthly_expenses,
    monthly_income,
    monthly_savings,
    parse_entry_date,
    period_entries,
)

__all__ = [
    "available_years",
    "budget_percentage",
    "compute_statistics",
    "daily_expenses",
    "expenses_of_type",
    "is_in_period",
    "is_today",
    "monthly_expenses",
    "monthly_income",
    "monthly_savings",
    "parse_entry_date",
    "period_entries",
]
