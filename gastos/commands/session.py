"""Session commands for remote storage (login, signup, logout)."""

import requests
from rich.console import Console

from gastos.auth import AuthError, clear_session, load_session, save_session, sign_in, sign_out, sign_up
from gastos.commands.common import fail
from gastos.config import get_remote_settings, load_config

console = Console()


def _remote_settings() -> dict:
    try:
        settings = get_remote_settings(load_config())
    except (OSError, ValueError) as e:
        fail(f"Configuration error: {e}")

    if not settings["url"] or not settings["anon_key"]:
        fail("Set remote.url and remote.anon_key in the config (or GASTOS_SUPABASE_URL / GASTOS_SUPABASE_KEY)")
    return settings


def login_command(email: str, password: str) -> None:
    """Sign in and remember the session."""
    settings = _remote_settings()

    try:
        session = sign_in(settings["url"].rstrip("/"), settings["anon_key"], email, password, settings["timeout"])
        save_session(session)
    except requests.RequestException as e:
        fail(f"Sign-in failed: {e}")
    except (AuthError, OSError) as e:
        fail(str(e))

    console.print(f"[green]✓[/green] Signed in as {session.email}")


def signup_command(email: str, password: str) -> None:
    """Create an account, signing in if the backend allows it."""
    settings = _remote_settings()

    try:
        session = sign_up(settings["url"].rstrip("/"), settings["anon_key"], email, password, settings["timeout"])
        if session is not None:
            save_session(session)
    except requests.RequestException as e:
        fail(f"Sign-up failed: {e}")
    except OSError as e:
        fail(str(e))

    if session is None:
        console.print("[yellow]Account created. Confirm your email, then run 'gastos login'.[/yellow]")
    else:
        console.print(f"[green]✓[/green] Account created, signed in as {session.email}")


def logout_command() -> None:
    """Sign out and forget the session."""
    session = load_session()
    if session is None:
        console.print("[dim]Not signed in[/dim]")
        return

    settings = _remote_settings()
    try:
        sign_out(settings["url"].rstrip("/"), settings["anon_key"], session, settings["timeout"])
    except requests.RequestException as e:
        console.print(f"[yellow]Could not revoke session on the server: {e}[/yellow]")
    finally:
        clear_session()

    console.print("[green]✓[/green] Signed out")
