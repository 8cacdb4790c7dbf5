"""Pure functions for expense totals, filtering and grouping.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in cents (Money type).
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from gastos.domain.models import (
    CategoryName,
    Description,
    ExpenseGroup,
    ExpenseRecord,
    IncomeProfile,
    Money,
)

ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class MonthSummary:
    """Immutable summary for one month."""

    income_total: Money
    expenses_total: Money
    balance: Money
    by_category: dict[CategoryName, Money]


def normalize_description(description: str) -> str:
    """Normalize expense description for grouping.

    Besides trimming and case-folding, runs of inner whitespace collapse to
    one space, so "Internet  Fibra" and "internet fibra" share a group.

    Args:
        description: Raw expense description.

    Returns:
        Normalized description (case-folded, trimmed, inner whitespace collapsed).
    """
    return " ".join(description.casefold().split())


def group_key(category: CategoryName, description: str) -> str:
    """Composite key identifying a group within one month."""
    return f"{category}|{normalize_description(description)}"


def sum_by_category(
    records: Iterable[ExpenseRecord],
    categories: Iterable[CategoryName],
) -> dict[CategoryName, Money]:
    """Total spending per category.

    Args:
        records: Expense records for one period.
        categories: Known categories; each one is reported even when empty.

    Returns:
        Dictionary mapping category names to totals in cents. Records in a
        category outside the known set get their own entry.
    """
    totals: dict[CategoryName, Money] = {category: Money(0) for category in categories}

    for record in records:
        totals[record.category] = Money(totals.get(record.category, 0) + record.amount_cents)

    return totals


def total_of(records: Iterable[ExpenseRecord]) -> Money:
    """Sum of all record amounts in cents."""
    return Money(sum(record.amount_cents for record in records))


def balance(income_total: Money, expense_total: Money) -> Money:
    """Income minus expenses (negative when overspent)."""
    return Money(income_total - expense_total)


def filter_by_category(records: Sequence[ExpenseRecord], category: str) -> list[ExpenseRecord]:
    """Keep records of one category, preserving order.

    Args:
        records: Expense records.
        category: Category name, or "all" to keep everything.

    Returns:
        Filtered list of records.
    """
    if category == ALL_CATEGORIES:
        return list(records)
    return [record for record in records if record.category == category]


def group_by_description_and_category(records: Iterable[ExpenseRecord]) -> list[ExpenseGroup]:
    """Group records by category and normalized description.

    The displayed description of each group is the text of the first record
    encountered. Timestamps compare as strings, which holds because every
    created_at uses the same full-precision ISO-8601 UTC format.

    Args:
        records: Expense records for one month.

    Returns:
        Groups sorted by most recent member first. Groups touched at the same
        instant keep their encounter order.
    """
    order: list[str] = []
    totals: dict[str, int] = {}
    counts: dict[str, int] = {}
    ids: dict[str, list[str]] = {}
    latest: dict[str, str] = {}
    firsts: dict[str, ExpenseRecord] = {}

    for record in records:
        key = group_key(record.category, record.description)
        if key not in firsts:
            order.append(key)
            firsts[key] = record
            totals[key] = 0
            counts[key] = 0
            ids[key] = []
            latest[key] = ""

        totals[key] += record.amount_cents or 0
        counts[key] += 1
        ids[key].append(record.id)
        if record.created_at > latest[key]:
            latest[key] = record.created_at

    groups = [
        ExpenseGroup(
            key=key,
            category=firsts[key].category,
            description=Description(firsts[key].description.strip()),
            total_cents=Money(totals[key]),
            count=counts[key],
            ids=tuple(ids[key]),
            latest_created_at=latest[key],
        )
        for key in order
    ]

    return sorted(groups, key=lambda g: g.latest_created_at, reverse=True)


def find_group(
    records: Iterable[ExpenseRecord],
    category: CategoryName,
    description: str,
) -> ExpenseGroup | None:
    """Find the group matching a category and description.

    Args:
        records: Expense records for one month.
        category: Group category.
        description: Description in any case or spacing.

    Returns:
        Matching group, or None if no record belongs to it.
    """
    wanted = group_key(category, description)
    for group in group_by_description_and_category(records):
        if group.key == wanted:
            return group
    return None


def summarize_month(
    records: Sequence[ExpenseRecord],
    income: IncomeProfile,
    categories: Iterable[CategoryName],
) -> MonthSummary:
    """Create the month summary shown at the top of the dashboard.

    Args:
        records: Expense records for the month.
        income: Income profile in effect for the month.
        categories: Known categories.

    Returns:
        MonthSummary with income, expense and balance totals.
    """
    expenses_total = total_of(records)
    income_total = income.total

    return MonthSummary(
        income_total=income_total,
        expenses_total=expenses_total,
        balance=balance(income_total, expenses_total),
        by_category=sum_by_category(records, categories),
    )
