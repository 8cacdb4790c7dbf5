"""Pure functions for changing the expense ledger.

This module contains the functional core for expense operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Every operation takes the current state and returns a new one
- Validation problems come back as error messages, never as exceptions

All monetary amounts are in cents (Money type).
"""

import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime, timezone

from gastos.dates import enumerate_range
from gastos.domain.models import (
    INCOME_FIELDS,
    SINGLE,
    CategoryName,
    Description,
    ExpenseRecord,
    IncomeProfile,
    Ledger,
    Money,
    Month,
    RecordOrigin,
)
from gastos.domain.money import DEFAULT_LOCALE, MoneyLocale, parse_decimal_to_cents

IdFactory = Callable[[], str]


def new_id() -> str:
    """Generate a new opaque record id."""
    return str(uuid.uuid4())


def format_timestamp(moment: datetime | None = None) -> str:
    """Format an instant as ISO-8601 UTC with milliseconds (e.g., 2025-01-15T10:00:00.000Z).

    Naive datetimes are taken to be UTC.
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def validate_expense_input(
    description: str,
    amount_input: str,
    locale: MoneyLocale = DEFAULT_LOCALE,
) -> tuple[Money | None, str | None]:
    """Validate the description and amount typed for a new expense.

    Args:
        description: Expense description.
        amount_input: Amount text (e.g., "120,50").
        locale: Locale used to read the amount.

    Returns:
        Tuple of (amount_cents, error_message). Exactly one is None.
    """
    if not description.strip():
        return None, "Describe the expense"

    cents = parse_decimal_to_cents(amount_input, locale)
    if cents is None or cents <= 0:
        return None, "Invalid amount"

    return cents, None


def build_single_expense(
    month: Month,
    category: CategoryName,
    description: str,
    amount_cents: Money,
    now: datetime | None = None,
    id_factory: IdFactory = new_id,
) -> ExpenseRecord:
    """Create a one-off expense record.

    Args:
        month: Month the expense belongs to.
        category: Expense category.
        description: Expense description (trimmed here).
        amount_cents: Validated positive amount in cents.
        now: Creation instant. None means the current time.
        id_factory: Generator for the record id.

    Returns:
        New ExpenseRecord.
    """
    return ExpenseRecord(
        id=id_factory(),
        month=month,
        category=category,
        description=Description(description.strip()),
        amount_cents=amount_cents,
        created_at=format_timestamp(now),
        origin=SINGLE,
    )


def build_range_expenses(
    from_month: Month,
    to_month: Month,
    category: CategoryName,
    description: str,
    amount_cents: Money,
    now: datetime | None = None,
    id_factory: IdFactory = new_id,
) -> tuple[list[ExpenseRecord], str | None]:
    """Create one record per month of an inclusive range, linked by a series id.

    Args:
        from_month: First month of the range.
        to_month: Last month of the range.
        category: Expense category.
        description: Expense description (trimmed here).
        amount_cents: Validated positive amount in cents.
        now: Creation instant shared by every record. None means now.
        id_factory: Generator for record and series ids.

    Returns:
        Tuple of (records, error_message). An inverted range yields no records
        and an error.
    """
    months = enumerate_range(from_month, to_month)
    if not months:
        return [], "Invalid range (from is after to)"

    series_id = id_factory()
    origin = RecordOrigin(type="range", series_id=series_id, from_month=from_month, to_month=to_month)
    created_at = format_timestamp(now)

    records = [
        ExpenseRecord(
            id=id_factory(),
            month=month,
            category=category,
            description=Description(description.strip()),
            amount_cents=amount_cents,
            created_at=created_at,
            origin=origin,
        )
        for month in months
    ]
    return records, None


def add_records(ledger: Ledger, records: Iterable[ExpenseRecord]) -> Ledger:
    """Insert records at the front of their months' lists."""
    months = dict(ledger.months)
    for record in records:
        months[record.month] = (record, *months.get(record.month, ()))
    return replace(ledger, months=months)


def remove_group(ledger: Ledger, month: Month, ids: Iterable[str]) -> Ledger:
    """Remove every record of a month whose id is in ids."""
    doomed = set(ids)
    months = dict(ledger.months)
    months[month] = tuple(r for r in ledger.records_for(month) if r.id not in doomed)
    return replace(ledger, months=months)


def remove_expense(ledger: Ledger, month: Month, expense_id: str) -> Ledger:
    """Remove one record by id."""
    return remove_group(ledger, month, [expense_id])


def clear_month(ledger: Ledger, month: Month) -> Ledger:
    """Drop a month and all of its records."""
    months = {key: records for key, records in ledger.months.items() if key != month}
    return replace(ledger, months=months)


def reassign_category(
    ledger: Ledger,
    month: Month,
    ids: Iterable[str],
    category: CategoryName,
) -> Ledger:
    """Move the given records of a month to another category."""
    moving = set(ids)
    months = dict(ledger.months)
    months[month] = tuple(
        replace(r, category=category) if r.id in moving else r for r in ledger.records_for(month)
    )
    return replace(ledger, months=months)


def update_income_field(
    income: IncomeProfile,
    field_name: str,
    raw_input: str,
    locale: MoneyLocale = DEFAULT_LOCALE,
) -> tuple[IncomeProfile, str | None]:
    """Set one income field from user text.

    Args:
        income: Current income profile.
        field_name: One of INCOME_FIELDS.
        raw_input: Amount text (e.g., "4765,38").
        locale: Locale used to read the amount.

    Returns:
        Tuple of (new_income, error_message). On error the profile is unchanged.
    """
    if field_name not in INCOME_FIELDS:
        return income, f"Unknown income field: {field_name}"

    cents = parse_decimal_to_cents(raw_input, locale)
    if cents is None or cents < 0:
        return income, "Invalid amount"

    return replace(income, **{field_name: cents}), None
