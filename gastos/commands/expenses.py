"""Expense commands (add, add-range, delete, delete-group, recategorize, clear)."""

import typer
from rich.console import Console

from gastos.commands.common import COLLABORATOR_ERRORS, fail, open_context, resolve_month
from gastos.config import get_categories, get_money_locale
from gastos.domain.aggregate import find_group
from gastos.domain.ledger import build_range_expenses, build_single_expense, validate_expense_input
from gastos.domain.models import DEFAULT_CATEGORY, CategoryName
from gastos.domain.money import cents_to_currency_string

console = Console()


def _check_category(category: str, categories: list[CategoryName]) -> CategoryName:
    if category not in categories:
        fail(f"Unknown category: {category} (choose from {', '.join(categories)})")
    return CategoryName(category)


def add_command(
    description: str,
    amount: str,
    category: str = DEFAULT_CATEGORY,
    month: str | None = None,
) -> None:
    """Add a one-off expense to a month.

    Args:
        description: Expense description.
        amount: Amount as typed (e.g., "120,50").
        category: Expense category.
        month: Target month. None means the current month.
    """
    config, backend = open_context()
    locale = get_money_locale(config)
    target = resolve_month(month)
    category_name = _check_category(category, get_categories(config))

    cents, error = validate_expense_input(description, amount, locale)
    if error or cents is None:
        fail(error or "Invalid amount")

    record = build_single_expense(target, category_name, description, cents)

    try:
        backend.add([record])
    except COLLABORATOR_ERRORS as e:
        fail(f"Error saving expense: {e}")

    console.print("[green]✓[/green] Expense added:")
    console.print(f"  Month: {target}")
    console.print(f"  Description: {record.description}")
    console.print(f"  Category: {category_name}")
    console.print(f"  Amount: {cents_to_currency_string(cents, locale)}")


def add_range_command(
    description: str,
    amount: str,
    from_month: str,
    to_month: str,
    category: str = DEFAULT_CATEGORY,
) -> None:
    """Add the same expense to every month of an inclusive range.

    Args:
        description: Expense description.
        amount: Amount as typed (e.g., "120,50").
        from_month: First month of the range.
        to_month: Last month of the range.
        category: Expense category.
    """
    config, backend = open_context()
    locale = get_money_locale(config)
    start = resolve_month(from_month)
    end = resolve_month(to_month)
    category_name = _check_category(category, get_categories(config))

    cents, error = validate_expense_input(description, amount, locale)
    if error or cents is None:
        fail(error or "Invalid amount")

    records, error = build_range_expenses(start, end, category_name, description, cents)
    if error:
        fail(error)

    try:
        backend.add(records)
    except COLLABORATOR_ERRORS as e:
        fail(f"Error saving expenses: {e}")

    months = [record.month for record in records]
    console.print(f"[green]✓[/green] Added to {len(months)} month(s): {', '.join(months)}")
    console.print(f"  Description: {records[0].description}")
    console.print(f"  Amount per month: {cents_to_currency_string(cents, locale)}")


def delete_command(expense_id: str, month: str | None = None) -> None:
    """Delete one expense by id (or a unique id prefix)."""
    _, backend = open_context()
    target = resolve_month(month)

    try:
        records, _ = backend.load_month(target)
        matches = [record for record in records if record.id.startswith(expense_id)]

        if not matches:
            fail(f"Expense {expense_id} not found in {target}")
        if len(matches) > 1:
            fail(f"Expense id {expense_id} is ambiguous ({len(matches)} matches)")

        backend.delete(target, [matches[0].id])
    except COLLABORATOR_ERRORS as e:
        fail(f"Error deleting expense: {e}")

    console.print(f"[green]✓[/green] Deleted: {matches[0].description}")


def delete_group_command(
    description: str,
    category: str = DEFAULT_CATEGORY,
    month: str | None = None,
) -> None:
    """Delete every expense of a month sharing a category and description."""
    config, backend = open_context()
    locale = get_money_locale(config)
    target = resolve_month(month)
    category_name = _check_category(category, get_categories(config))

    try:
        records, _ = backend.load_month(target)
        group = find_group(records, category_name, description)
        if group is None:
            fail(f"No '{description}' expenses in {category_name} for {target}")

        backend.delete(target, list(group.ids))
    except COLLABORATOR_ERRORS as e:
        fail(f"Error deleting expenses: {e}")

    console.print(
        f"[green]✓[/green] Deleted {group.count} expense(s) totalling "
        f"{cents_to_currency_string(group.total_cents, locale)}"
    )


def recategorize_command(
    description: str,
    new_category: str,
    category: str = DEFAULT_CATEGORY,
    month: str | None = None,
) -> None:
    """Move a group of expenses to another category."""
    config, backend = open_context()
    target = resolve_month(month)
    categories = get_categories(config)
    current = _check_category(category, categories)
    destination = _check_category(new_category, categories)

    try:
        records, _ = backend.load_month(target)
        group = find_group(records, current, description)
        if group is None:
            fail(f"No '{description}' expenses in {current} for {target}")

        backend.recategorize(target, list(group.ids), destination)
    except COLLABORATOR_ERRORS as e:
        fail(f"Error updating expenses: {e}")

    console.print(f"[green]✓[/green] Moved {group.count} expense(s) from {current} to {destination}")


def clear_command(month: str | None = None, yes: bool = False) -> None:
    """Delete every expense of a month."""
    _, backend = open_context()
    target = resolve_month(month)

    if not yes and not typer.confirm(f"Delete all expenses of {target}?", default=False):
        console.print("[dim]Nothing deleted[/dim]")
        return

    try:
        backend.clear(target)
    except COLLABORATOR_ERRORS as e:
        fail(f"Error clearing {target}: {e}")

    console.print(f"[green]✓[/green] Cleared {target}")
