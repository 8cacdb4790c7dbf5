"""Helpers shared by the command modules."""

import sqlite3
import sys
from typing import Any, NoReturn

import requests
from rich.console import Console

from gastos.auth import AuthError
from gastos.config import load_config
from gastos.dates import current_month_key, parse_month_input
from gastos.domain.models import Month
from gastos.store.backends import Backend, open_backend

console = Console()

# Errors coming from storage, auth or configuration collaborators
COLLABORATOR_ERRORS = (sqlite3.Error, requests.RequestException, AuthError, OSError)


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def resolve_month(month: str | None) -> Month:
    """Month given on the command line, or the current month."""
    if not month:
        return current_month_key()
    try:
        return parse_month_input(month)
    except ValueError as e:
        fail(str(e))


def open_context() -> tuple[dict[str, Any], Backend]:
    """Load the config and open the configured backend, exiting on failure."""
    try:
        config = load_config()
        return config, open_backend(config)
    except AuthError as e:
        fail(str(e))
    except ValueError as e:
        fail(f"Configuration error: {e}")
    except COLLABORATOR_ERRORS as e:
        fail(f"Error: {e}")
