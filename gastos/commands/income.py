"""Income command: show or edit the monthly income sources."""

import typer
from rich.console import Console
from rich.table import Table

from gastos.commands.common import COLLABORATOR_ERRORS, fail, open_context, resolve_month
from gastos.config import get_money_locale
from gastos.domain.ledger import update_income_field
from gastos.domain.legacy import V1_INCOME_FIELDS
from gastos.domain.models import INCOME_FIELDS, INCOME_LABELS
from gastos.domain.money import cents_to_currency_string, cents_to_input_string

console = Console()

# Short names accepted on the command line ("salary" -> "salary_net_cents")
FIELD_ALIASES = {short: name for name, short in V1_INCOME_FIELDS.items()}


def resolve_field(field_name: str) -> str:
    """Map a short or full income field name to the full name."""
    name = FIELD_ALIASES.get(field_name, field_name)
    if name not in INCOME_FIELDS:
        fail(f"Unknown income field: {field_name} (choose from {', '.join(FIELD_ALIASES)})")
    return name


def income_command(
    field_name: str | None = None,
    value: str | None = None,
    month: str | None = None,
) -> None:
    """Show income sources, or set one of them.

    Args:
        field_name: Field to change (e.g., "salary"). None shows all fields.
        value: New amount as typed. None prompts with the current value.
        month: Month whose income to use (remote storage keeps one per month).
    """
    config, backend = open_context()
    locale = get_money_locale(config)
    target = resolve_month(month)

    try:
        _, income = backend.load_month(target)
    except COLLABORATOR_ERRORS as e:
        fail(f"Error loading income: {e}")

    if field_name is None:
        table = Table(title=f"Income ({target})")
        table.add_column("Field", style="dim")
        table.add_column("Source", style="white")
        table.add_column("Amount", justify="right")
        for name in INCOME_FIELDS:
            table.add_row(
                V1_INCOME_FIELDS[name],
                INCOME_LABELS[name],
                cents_to_currency_string(getattr(income, name), locale),
            )
        table.add_row("", "[bold]Total[/bold]", f"[bold]{cents_to_currency_string(income.total, locale)}[/bold]")
        console.print(table)
        return

    name = resolve_field(field_name)
    if value is None:
        value = typer.prompt(INCOME_LABELS[name], default=cents_to_input_string(getattr(income, name), locale))

    updated, error = update_income_field(income, name, value, locale)
    if error:
        fail(error)

    try:
        backend.set_income(target, updated, name)
    except COLLABORATOR_ERRORS as e:
        fail(f"Error saving income: {e}")

    amount = cents_to_currency_string(getattr(updated, name), locale)
    console.print(f"[green]✓[/green] {INCOME_LABELS[name]}: {amount}")
    console.print(f"[dim]Total income: {cents_to_currency_string(updated.total, locale)}[/dim]")
