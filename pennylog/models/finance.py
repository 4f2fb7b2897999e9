"""
Core Data Models for Pennylog

These models define the schemas for everything the tracker stores:
1. The three entry variants (income, expense, saving)
2. FinanceData, the document holding the three entry lists
3. Settings, the user's preferences, budgets and category lists
4. Period, the (month, year) pair that scopes "monthly" figures

DESIGN DECISION: Python attributes are snake_case while the persisted
JSON keeps the camelCase keys the browser store has always used
(appName, currencySymbol, fixedExpense, ...). The alias generator maps
between them so old documents load unchanged.

There is deliberately NO range validation on amounts here. Sums must
reflect exactly what was entered; input checks live in the validation
package and run only when a new entry is created.

Stored entries may carry `"amount": null` (an unparseable amount
serialised by older versions) or no date. They load as None and "";
a None amount counts as 0 in sums.
"""

import calendar
from datetime import date
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryKind(str, Enum):
    """
    The three kinds of entry.

    The value doubles as the prefix of generated entry ids.
    """
    INCOME = "income"
    EXPENSE = "expense"
    SAVING = "saving"

    @property
    def collection(self) -> str:
        """Name of the FinanceData list holding this kind."""
        return _COLLECTION_BY_KIND[self]

    @classmethod
    def resolve(cls, value: Union["EntryKind", str]) -> "EntryKind":
        """
        Accept a kind or a collection name ("expenses", "savings").

        Raises:
            ValueError: If the value names neither.
        """
        if isinstance(value, EntryKind):
            return value
        for kind, collection in _COLLECTION_BY_KIND.items():
            if value in (kind.value, collection):
                return kind
        raise ValueError(f"Unknown entry kind or collection: {value!r}")


_COLLECTION_BY_KIND = {
    EntryKind.INCOME: "income",
    EntryKind.EXPENSE: "expenses",
    EntryKind.SAVING: "savings",
}


class ExpenseType(str, Enum):
    """
    Fixed expenses recur every month; variable ones are day-to-day spending.

    Only variable expenses count towards the daily figure.
    """
    FIXED = "fixed"
    VARIABLE = "variable"


class Frequency(str, Enum):
    """Cadence an expense (or the whole budget) is tracked at."""
    DAILY = "daily"
    MONTHLY = "monthly"


class ResetCycle(str, Enum):
    """How often budgets are expected to reset. Informational only."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class CategoryGroup(str, Enum):
    """The four editable category lists in Settings."""
    INCOME = "income"
    EXPENSE = "expense"
    FIXED_EXPENSE = "fixedExpense"
    VARIABLE_EXPENSE = "variableExpense"

    @property
    def attribute(self) -> str:
        """Python attribute name on Categories."""
        return {
            CategoryGroup.INCOME: "income",
            CategoryGroup.EXPENSE: "expense",
            CategoryGroup.FIXED_EXPENSE: "fixed_expense",
            CategoryGroup.VARIABLE_EXPENSE: "variable_expense",
        }[self]


CURRENCY_SYMBOLS: dict[str, str] = {
    "IDR": "Rp",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


class _CamelModel(BaseModel):
    """Base for every persisted model: camelCase on disk, snake_case in code."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict:
        """Dump to the JSON-compatible shape written to storage."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# ENTRIES - tagged union over the three variants
# =============================================================================

class IncomeEntry(_CamelModel):
    """Money received."""

    kind: Literal["income"] = Field(default="income", exclude=True)

    id: str
    amount: Optional[float] = None
    category: str = ""
    date: str = ""
    description: str = ""


class ExpenseEntry(_CamelModel):
    """
    Money spent.

    `type` decides whether the expense joins the daily figure;
    `frequency` is recorded for display but does not affect any sum.
    """

    kind: Literal["expense"] = Field(default="expense", exclude=True)

    id: str
    amount: Optional[float] = None
    category: str = ""
    type: ExpenseType = ExpenseType.VARIABLE
    date: str = ""
    description: str = ""
    frequency: Frequency = Frequency.DAILY


class SavingEntry(_CamelModel):
    """Money put aside. Savings carry no category."""

    kind: Literal["saving"] = Field(default="saving", exclude=True)

    id: str
    amount: Optional[float] = None
    date: str = ""
    description: str = ""


# The tag is excluded from storage; each FinanceData list fixes it on load.
Entry = Annotated[
    Union[IncomeEntry, ExpenseEntry, SavingEntry],
    Field(discriminator="kind"),
]


class FinanceData(_CamelModel):
    """
    The three entry lists, each kept in insertion order.

    Instances are treated as immutable: operations return new values
    through `with_collection` rather than editing the lists in place.
    """

    income: list[IncomeEntry] = Field(default_factory=list)
    expenses: list[ExpenseEntry] = Field(default_factory=list)
    savings: list[SavingEntry] = Field(default_factory=list)

    def collection(self, kind: Union[EntryKind, str]) -> list:
        """Return the list holding entries of the given kind."""
        return getattr(self, EntryKind.resolve(kind).collection)

    def with_collection(self, kind: Union[EntryKind, str], entries: list) -> "FinanceData":
        """Return a copy with one list replaced; the other two are shared."""
        return self.model_copy(update={EntryKind.resolve(kind).collection: list(entries)})

    @property
    def is_empty(self) -> bool:
        return not (self.income or self.expenses or self.savings)


# =============================================================================
# SETTINGS
# =============================================================================

DEFAULT_INCOME_CATEGORIES = ["Salary", "Freelance", "Investment", "Gift"]
DEFAULT_EXPENSE_CATEGORIES = ["Food", "Transport", "Entertainment", "Utilities"]
DEFAULT_FIXED_EXPENSE_CATEGORIES = ["Rent", "Insurance", "Subscription"]
DEFAULT_VARIABLE_EXPENSE_CATEGORIES = ["Groceries", "Shopping", "Dining"]


class Categories(_CamelModel):
    """
    Category names per group.

    Lists keep insertion order for display and are never deduplicated.
    """

    income: list[str] = Field(default_factory=lambda: list(DEFAULT_INCOME_CATEGORIES))
    expense: list[str] = Field(default_factory=lambda: list(DEFAULT_EXPENSE_CATEGORIES))
    fixed_expense: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FIXED_EXPENSE_CATEGORIES)
    )
    variable_expense: list[str] = Field(
        default_factory=lambda: list(DEFAULT_VARIABLE_EXPENSE_CATEGORIES)
    )

    def group(self, group: Union[CategoryGroup, str]) -> list[str]:
        return getattr(self, CategoryGroup(group).attribute)


class Settings(_CamelModel):
    """
    User preferences.

    Budgets are optional; an unset budget means "no budget configured".
    `reset_cycle` and `reset_date` are stored and shown but no scheduler
    acts on them.
    """

    app_name: str = "Pennylog"
    currency: str = "IDR"
    currency_symbol: str = "Rp"
    expense_frequency: Frequency = Frequency.DAILY
    reset_cycle: ResetCycle = ResetCycle.MONTHLY
    reset_date: int = 1
    daily_budget: Optional[float] = None
    monthly_budget: Optional[float] = None
    categories: Categories = Field(default_factory=Categories)

    @property
    def active_budget(self) -> Optional[float]:
        """Budget matching the configured expense frequency."""
        if self.expense_frequency == Frequency.DAILY:
            return self.daily_budget
        return self.monthly_budget

    def entry_categories(self, kind: Union[EntryKind, str]) -> list[str]:
        """
        Categories offered when creating an entry of this kind.

        Expenses pick from the fixed and variable lists combined;
        savings have no category.
        """
        kind = EntryKind.resolve(kind)
        if kind == EntryKind.INCOME:
            return list(self.categories.income)
        if kind == EntryKind.EXPENSE:
            return [*self.categories.fixed_expense, *self.categories.variable_expense]
        return []


def default_settings() -> Settings:
    return Settings()


def default_finance_data() -> FinanceData:
    return FinanceData()


# =============================================================================
# PERIOD
# =============================================================================

class Period(BaseModel):
    """
    The selected (month, year) used for every "monthly" figure.

    NOTE: `month` is zero-based (0 = January ... 11 = December), matching
    the month picker. Use `month_number` for the calendar month.
    """

    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=0, le=11)
    year: int = Field(..., ge=1, le=9999)

    @classmethod
    def current(cls, today: Optional[date] = None) -> "Period":
        today = today or date.today()
        return cls(month=today.month - 1, year=today.year)

    @property
    def month_number(self) -> int:
        return self.month + 1

    @property
    def label(self) -> str:
        """e.g. 'March 2024'."""
        return f"{calendar.month_name[self.month_number]} {self.year}"

    def contains(self, day: date) -> bool:
        return day.month == self.month_number and day.year == self.year


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in an entry draft."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'negative_amount')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Outcome of checking an entry draft.

    Errors block the entry; warnings are shown but never block.
    """

    kind: EntryKind
    issues: list[ValidationIssue] = Field(default_factory=list)
    amount: Optional[float] = Field(
        default=None,
        description="Parsed amount when the amount field was valid"
    )

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]


class EntryDraft(BaseModel):
    """
    Raw input for a new entry, before validation.

    Amount is kept as typed (text or number) so the validator can report
    empty and non-numeric input separately.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Optional[Union[float, str]] = None
    category: str = ""
    date: str = Field(default_factory=lambda: date.today().isoformat())
    description: str = ""
    expense_type: ExpenseType = ExpenseType.VARIABLE
    frequency: Frequency = Frequency.DAILY


# =============================================================================
# STATISTICS
# =============================================================================

class PeriodEntries(BaseModel):
    """Entries of one period, newest first."""

    period: Period
    income: list[IncomeEntry] = Field(default_factory=list)
    expenses: list[ExpenseEntry] = Field(default_factory=list)
    fixed_expenses: list[ExpenseEntry] = Field(default_factory=list)
    variable_expenses: list[ExpenseEntry] = Field(default_factory=list)
    savings: list[SavingEntry] = Field(default_factory=list)


class FinanceStatistics(BaseModel):
    """
    Every figure the dashboard shows for one period and one day.

    Two "remaining" figures coexist on purpose:
    - remaining_budget: income of the period minus current expenses
    - frequency_remaining_budget: active budget minus current expenses
    """

    period: Period
    today: date
    expense_frequency: Frequency

    monthly_income: float = 0.0
    monthly_expenses: float = 0.0
    daily_expenses: float = 0.0
    monthly_savings: float = 0.0

    fixed_expenses_total: float = 0.0
    variable_expenses_total: float = 0.0

    active_budget: Optional[float] = None
    current_expenses: float = 0.0
    remaining_budget: float = 0.0
    frequency_remaining_budget: float = 0.0
    budget_percentage: float = 0.0

    @property
    def has_budget(self) -> bool:
        return bool(self.active_budget and self.active_budget > 0)

    @property
    def budget_progress(self) -> float:
        """Budget percentage clamped to [0, 100] for progress bars."""
        return min(max(self.budget_percentage, 0.0), 100.0)

    @property
    def is_over_budget(self) -> bool:
        return self.frequency_remaining_budget < 0

    @property
    def over_budget_amount(self) -> float:
        """How far spending exceeds the active budget (0 when within it)."""
        if not self.is_over_budget:
            return 0.0
        return abs(self.frequency_remaining_budget)
