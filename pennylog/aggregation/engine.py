"""
Aggregation Engine

DESIGN DECISION: Statistics are PURE functions of
(FinanceData, Settings, Period, today). Nothing is cached; the caller
recomputes after every mutation or whenever the selected period or the
calendar day changes. Same inputs, same numbers.

Date membership compares calendar components (day, month, year) in
local time, never elapsed time. Sums are plain float addition with no
rounding, so whatever was stored (including negatives) flows through
unchanged.
"""

from datetime import date, datetime
from typing import Iterable, Optional

from pennylog.models.finance import (
    ExpenseEntry,
    ExpenseType,
    FinanceData,
    FinanceStatistics,
    Frequency,
    Period,
    PeriodEntries,
    Settings,
)


def parse_entry_date(date_str: Optional[str]) -> Optional[date]:
    """
    Calendar date of an entry.

    Accepts `YYYY-MM-DD` or a full ISO date-time. Aware date-times are
    converted to local time first. Returns None for anything unparseable.
    """
    if not date_str:
        return None
    text = date_str.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def is_in_period(date_str: Optional[str], month: int, year: int) -> bool:
    """
    True iff the entry falls in the given month (0-based) and year.

    >>> is_in_period("2024-03-15", 2, 2024)
    True
    """
    day = parse_entry_date(date_str)
    return day is not None and day.month == month + 1 and day.year == year


def is_today(date_str: Optional[str], today: date) -> bool:
    """True iff the entry's day, month and year all equal today's."""
    day = parse_entry_date(date_str)
    return day is not None and day == today


def _total(entries: Iterable) -> float:
    total = 0.0
    for entry in entries:
        if entry.amount is not None:
            total += entry.amount
    return total


def _in(period: Period, entries: Iterable) -> list:
    return [e for e in entries if is_in_period(e.date, period.month, period.year)]


def monthly_income(data: FinanceData, period: Period) -> float:
    return _total(_in(period, data.income))


def monthly_expenses(data: FinanceData, period: Period) -> float:
    """All expenses of the period, fixed and variable."""
    return _total(_in(period, data.expenses))


def daily_expenses(data: FinanceData, today: date) -> float:
    """
    Variable expenses dated today.

    Fixed expenses never count here: they recur monthly regardless of
    the frequency setting.
    """
    return _total(
        e for e in data.expenses
        if e.type == ExpenseType.VARIABLE and is_today(e.date, today)
    )


def monthly_savings(data: FinanceData, period: Period) -> float:
    return _total(_in(period, data.savings))


def expenses_of_type(
    data: FinanceData,
    period: Period,
    expense_type: ExpenseType,
) -> list[ExpenseEntry]:
    """Expenses of one type in the period, in insertion order."""
    return [e for e in _in(period, data.expenses) if e.type == expense_type]


def budget_percentage(current: float, budget: Optional[float]) -> float:
    """Share of the budget used, in percent. Unclamped; 0 without a budget."""
    if budget is None or not budget > 0:
        return 0.0
    return (current / budget) * 100


def compute_statistics(
    data: FinanceData,
    settings: Settings,
    period: Period,
    today: Optional[date] = None,
) -> FinanceStatistics:
    """
    Compute every dashboard figure.

    Args:
        data: Entry lists
        settings: Supplies the expense frequency and budgets
        period: Selected month (0-based) and year for "monthly" figures
        today: Day used for the daily figure; defaults to date.today()
    """
    today = today or date.today()

    income = monthly_income(data, period)
    expenses = monthly_expenses(data, period)
    daily = daily_expenses(data, today)
    savings = monthly_savings(data, period)

    active_budget = settings.active_budget
    current = daily if settings.expense_frequency == Frequency.DAILY else expenses

    return FinanceStatistics(
        period=period,
        today=today,
        expense_frequency=settings.expense_frequency,
        monthly_income=income,
        monthly_expenses=expenses,
        daily_expenses=daily,
        monthly_savings=savings,
        fixed_expenses_total=_total(expenses_of_type(data, period, ExpenseType.FIXED)),
        variable_expenses_total=_total(expenses_of_type(data, period, ExpenseType.VARIABLE)),
        active_budget=active_budget,
        current_expenses=current,
        remaining_budget=income - current,
        frequency_remaining_budget=(active_budget or 0.0) - current,
        budget_percentage=budget_percentage(current, active_budget),
    )


def _newest_first(entries: list) -> list:
    # Undated entries sink to the bottom; ties keep insertion order.
    return sorted(
        entries,
        key=lambda e: parse_entry_date(e.date) or date.min,
        reverse=True,
    )


def period_entries(data: FinanceData, period: Period) -> PeriodEntries:
    """The period's entries for the tables, newest first."""
    expenses = _in(period, data.expenses)
    return PeriodEntries(
        period=period,
        income=_newest_first(_in(period, data.income)),
        expenses=_newest_first(expenses),
        fixed_expenses=_newest_first([e for e in expenses if e.type == ExpenseType.FIXED]),
        variable_expenses=_newest_first([e for e in expenses if e.type == ExpenseType.VARIABLE]),
        savings=_newest_first(_in(period, data.savings)),
    )


def available_years(today: Optional[date] = None, count: int = 3) -> list[int]:
    """Years offered by the period picker, current year first."""
    year = (today or date.today()).year
    return [year - offset for offset in range(max(count, 1))]
