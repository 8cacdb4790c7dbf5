"""Admin commands: initialization."""

import sqlite3
import sys
from pathlib import Path

from rich.console import Console

from gastos.config import create_default_config, get_config_path
from gastos.store.schema import get_db_path, init_database

console = Console()


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    console.print(f"[cyan]Initializing local store at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Local store initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Store: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False) -> None:
    """Initialize gastos store and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    try:
        # Creating the schema is idempotent; only the config would be overwritten
        if not force and config_path.exists():
            console.print("[red]Initialization failed:[/red]", style="bold")
            console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'gastos init --force' to overwrite[/yellow]")
            sys.exit(1)

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)
