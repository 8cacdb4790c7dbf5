"""CLI entry point for gastos."""

import typer

from gastos.commands.admin import init_command
from gastos.commands.expenses import (
    add_command,
    add_range_command,
    clear_command,
    delete_command,
    delete_group_command,
    recategorize_command,
)
from gastos.commands.income import income_command
from gastos.commands.report import months_command, show_command
from gastos.commands.session import login_command, logout_command, signup_command

app = typer.Typer(
    name="gastos",
    help="Gastos - track monthly income and expenses",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Gastos - track monthly income and expenses."""
    pass


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize the local store and configuration."""
    init_command(force)


@app.command()
def show(
    month: str = typer.Option(None, "--month", "-m", help="Month to show (YYYY-MM, default: current)"),
    category: str = typer.Option("all", "--category", "-c", help="Only list this category"),
    grouped: bool = typer.Option(False, "--grouped", "-g", help="Group expenses with the same description"),
) -> None:
    """Show your income, expenses and balance for a month."""
    show_command(month, category, grouped)


@app.command()
def months(
    center: str = typer.Option(None, "--center", help="Center month (YYYY-MM, default: current)"),
) -> None:
    """List the months you can pick from."""
    months_command(center)


@app.command()
def add(
    description: str,
    amount: str,
    category: str = typer.Option("fixos", "--category", "-c", help="Expense category"),
    month: str = typer.Option(None, "--month", "-m", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Add a one-off expense (amount like 120,50)."""
    add_command(description, amount, category, month)


@app.command(name="add-range")
def add_range(
    description: str,
    amount: str,
    from_month: str = typer.Option(..., "--from", help="First month (YYYY-MM)"),
    to_month: str = typer.Option(..., "--to", help="Last month (YYYY-MM)"),
    category: str = typer.Option("fixos", "--category", "-c", help="Expense category"),
) -> None:
    """Add a recurring expense to every month of a range (rent, internet, gym...)."""
    add_range_command(description, amount, from_month, to_month, category)


@app.command()
def delete(
    expense_id: str,
    month: str = typer.Option(None, "--month", "-m", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Delete one expense by id (the first characters are enough)."""
    delete_command(expense_id, month)


@app.command(name="delete-group")
def delete_group(
    description: str,
    category: str = typer.Option("fixos", "--category", "-c", help="Category of the group"),
    month: str = typer.Option(None, "--month", "-m", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Delete every expense in a month with this description and category."""
    delete_group_command(description, category, month)


@app.command()
def recategorize(
    description: str,
    new_category: str,
    category: str = typer.Option("fixos", "--category", "-c", help="Current category of the group"),
    month: str = typer.Option(None, "--month", "-m", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Move every expense with this description to another category."""
    recategorize_command(description, new_category, category, month)


@app.command()
def clear(
    month: str = typer.Option(None, "--month", "-m", help="Month (YYYY-MM, default: current)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Delete all expenses of a month."""
    clear_command(month, yes)


@app.command()
def income(
    field_name: str = typer.Argument(None, help="salary, multibenefits, food or spouse"),
    value: str = typer.Argument(None, help="New amount (e.g. 4765,38)"),
    month: str = typer.Option(None, "--month", "-m", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Show your income sources, or set one of them."""
    income_command(field_name, value, month)


@app.command()
def login(
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Sign in to remote storage."""
    login_command(email, password)


@app.command()
def signup(
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create a remote storage account."""
    signup_command(email, password)


@app.command()
def logout() -> None:
    """Sign out of remote storage."""
    logout_command()


if __name__ == "__main__":
    app()
