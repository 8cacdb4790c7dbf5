"""Report commands: month summary and the month selection window."""

from rich.console import Console
from rich.table import Table

from gastos.commands.common import COLLABORATOR_ERRORS, fail, open_context, resolve_month
from gastos.config import get_categories, get_money_locale, get_window, load_config
from gastos.dates import build_window, current_month_key, month_label
from gastos.domain.aggregate import (
    ALL_CATEGORIES,
    filter_by_category,
    group_by_description_and_category,
    summarize_month,
)
from gastos.domain.models import ExpenseGroup, ExpenseRecord, Money
from gastos.domain.money import MoneyLocale, cents_to_currency_string

console = Console()

ID_WIDTH = 8


def format_balance(cents: Money, locale: MoneyLocale) -> str:
    """Balance in green when non-negative, red when overspent."""
    text = cents_to_currency_string(cents, locale)
    return f"[red]{text}[/red]" if cents < 0 else f"[green]{text}[/green]"


def render_records(records: list[ExpenseRecord], locale: MoneyLocale) -> None:
    """Print one row per record."""
    table = Table(title=f"Expenses ({len(records)})")
    table.add_column("ID", style="dim")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")

    for record in records:
        category = record.category + (" • recurring" if record.is_recurring else "")
        table.add_row(
            record.id[:ID_WIDTH],
            record.description,
            category,
            cents_to_currency_string(record.amount_cents, locale),
        )

    console.print(table)


def render_groups(groups: list[ExpenseGroup], locale: MoneyLocale) -> None:
    """Print one row per group of same-description expenses."""
    table = Table(title=f"Grouped expenses ({len(groups)})")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Count", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Last added", style="dim")

    for group in groups:
        table.add_row(
            group.description,
            group.category,
            str(group.count),
            cents_to_currency_string(group.total_cents, locale),
            group.latest_created_at[:10],
        )

    console.print(table)


def show_command(
    month: str | None = None,
    category: str = ALL_CATEGORIES,
    grouped: bool = False,
) -> None:
    """Show income, spending and balance for a month."""
    config, backend = open_context()
    target = resolve_month(month)
    categories = get_categories(config)
    locale = get_money_locale(config)

    if category != ALL_CATEGORIES and category not in categories:
        fail(f"Unknown category: {category}")

    try:
        records, income = backend.load_month(target)
    except COLLABORATOR_ERRORS as e:
        fail(f"Error loading {target}: {e}")

    summary = summarize_month(records, income, categories)

    console.print(f"\n[bold cyan]{month_label(target, locale)}[/bold cyan] [dim]({target}, {backend.name})[/dim]\n")
    console.print(f"  Income:   {cents_to_currency_string(summary.income_total, locale)}")
    console.print(f"  Expenses: {cents_to_currency_string(summary.expenses_total, locale)}")
    console.print(f"  Balance:  {format_balance(summary.balance, locale)}\n")

    totals = Table(title="By category")
    totals.add_column("Category", style="magenta")
    totals.add_column("Total", justify="right")
    for name, cents in summary.by_category.items():
        totals.add_row(name, cents_to_currency_string(cents, locale))
    console.print(totals)

    visible = filter_by_category(records, category)
    if not visible:
        console.print("[yellow]No expenses recorded this month[/yellow]")
        return

    if grouped:
        render_groups(group_by_description_and_category(visible), locale)
    else:
        render_records(visible, locale)


def months_command(center: str | None = None) -> None:
    """List the months offered for selection."""
    try:
        config = load_config()
    except (OSError, ValueError) as e:
        fail(f"Configuration error: {e}")

    locale = get_money_locale(config)
    past, future = get_window(config)
    center_key = resolve_month(center)
    today = current_month_key()

    table = Table(title=f"Months around {center_key}")
    table.add_column("Month", style="cyan")
    table.add_column("Label", style="white")
    table.add_column("", justify="center")

    for key in build_window(center_key, past, future):
        table.add_row(key, month_label(key, locale), "◀" if key == today else "")

    console.print(table)
