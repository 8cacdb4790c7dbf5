"""Domain type definitions for gastos.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in cents (minor units)
- Month: Month in YYYY-MM format
- CategoryName: Name of an expense category
- Description: Expense description text

The frozen dataclasses below are the canonical in-memory shapes. Anything read
from storage goes through gastos.domain.legacy before it becomes one of these.
"""

from dataclasses import dataclass, field
from typing import Literal, NewType

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

# Category name for expense categories
CategoryName = NewType("CategoryName", str)

# Expense description text
Description = NewType("Description", str)

DEFAULT_CATEGORIES: tuple[CategoryName, ...] = (
    CategoryName("fixos"),
    CategoryName("mercado"),
    CategoryName("aleatorios"),
    CategoryName("emprestado"),
)

DEFAULT_CATEGORY = DEFAULT_CATEGORIES[0]

OriginType = Literal["single", "range"]


@dataclass(frozen=True)
class RecordOrigin:
    """How an expense was created: one-off, or as part of a recurring series."""

    type: OriginType = "single"
    series_id: str | None = None
    from_month: Month | None = None
    to_month: Month | None = None


SINGLE = RecordOrigin()


@dataclass(frozen=True)
class ExpenseRecord:
    """Immutable expense record."""

    id: str
    month: Month
    category: CategoryName
    description: Description
    amount_cents: Money
    created_at: str  # ISO-8601 UTC instant, e.g. 2025-01-15T10:00:00.000Z
    origin: RecordOrigin = field(default=SINGLE)

    @property
    def is_recurring(self) -> bool:
        return self.origin.type == "range"


# Income field names, in display order
INCOME_FIELDS: tuple[str, ...] = (
    "salary_net_cents",
    "multibenefits_cents",
    "food_cents",
    "spouse_salary_cents",
)

INCOME_LABELS: dict[str, str] = {
    "salary_net_cents": "Salary (net)",
    "multibenefits_cents": "Multibenefits",
    "food_cents": "Food allowance",
    "spouse_salary_cents": "Spouse salary",
}


@dataclass(frozen=True)
class IncomeProfile:
    """Immutable set of monthly income sources, all in cents.

    `id` is the remote row id in multi-user mode and None locally.
    """

    salary_net_cents: Money
    multibenefits_cents: Money
    food_cents: Money
    spouse_salary_cents: Money
    id: str | None = None

    @property
    def total(self) -> Money:
        return Money(sum(getattr(self, name) for name in INCOME_FIELDS))


SEED_INCOME = IncomeProfile(
    salary_net_cents=Money(476538),
    multibenefits_cents=Money(109297),
    food_cents=Money(3805),
    spouse_salary_cents=Money(120000),
)


@dataclass(frozen=True)
class ExpenseGroup:
    """Derived aggregate of records sharing category and normalized description."""

    key: str
    category: CategoryName
    description: Description
    total_cents: Money
    count: int
    ids: tuple[str, ...]
    latest_created_at: str


@dataclass(frozen=True)
class Ledger:
    """Whole local state: month -> records (newest first) plus the income profile."""

    months: dict[Month, tuple[ExpenseRecord, ...]]
    income: IncomeProfile = SEED_INCOME

    def records_for(self, month: Month) -> tuple[ExpenseRecord, ...]:
        return self.months.get(month, ())
