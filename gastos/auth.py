"""Authentication against the remote backend's auth API.

The session's user id is only used as an opaque key to scope remote rows.
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import requests

from gastos.store.schema import get_data_dir


class AuthError(Exception):
    """Raised when there is no usable session or the auth API refuses."""


@dataclass(frozen=True)
class Session:
    """Signed-in user session."""

    access_token: str
    user_id: str
    email: str
    refresh_token: str | None = None


def _headers(anon_key: str, access_token: str | None = None) -> dict[str, str]:
    return {
        "apikey": anon_key,
        "Authorization": f"Bearer {access_token or anon_key}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


def _session_from_payload(payload: dict[str, Any]) -> Session | None:
    token = payload.get("access_token")
    user = payload.get("user") or {}
    if not token or not user.get("id"):
        return None
    return Session(
        access_token=token,
        user_id=user["id"],
        email=user.get("email", ""),
        refresh_token=payload.get("refresh_token"),
    )


def sign_in(url: str, anon_key: str, email: str, password: str, timeout: float = 10) -> Session:
    """Sign in with email and password.

    Args:
        url: Backend base URL.
        anon_key: Public API key.
        email: Account email.
        password: Account password.
        timeout: Request timeout in seconds.

    Returns:
        New Session.

    Raises:
        requests.RequestException: If API request fails.
        AuthError: If the response carries no session.
    """
    response = requests.post(
        f"{url}/auth/v1/token",
        params={"grant_type": "password"},
        headers=_headers(anon_key),
        json={"email": email, "password": password},
        timeout=timeout,
    )
    response.raise_for_status()
    session = _session_from_payload(response.json())
    if session is None:
        raise AuthError("Sign-in response did not include a session")
    return session


def sign_up(url: str, anon_key: str, email: str, password: str, timeout: float = 10) -> Session | None:
    """Create an account.

    Returns:
        Session if the backend signs the user in straight away, or None when
        the email has to be confirmed first.

    Raises:
        requests.RequestException: If API request fails.
    """
    response = requests.post(
        f"{url}/auth/v1/signup",
        headers=_headers(anon_key),
        json={"email": email, "password": password},
        timeout=timeout,
    )
    response.raise_for_status()
    return _session_from_payload(response.json())


def sign_out(url: str, anon_key: str, session: Session, timeout: float = 10) -> None:
    """Revoke a session on the backend.

    Raises:
        requests.RequestException: If API request fails.
    """
    response = requests.post(
        f"{url}/auth/v1/logout",
        headers=_headers(anon_key, session.access_token),
        timeout=timeout,
    )
    response.raise_for_status()


def get_session_path() -> Path:
    """Where the current session is saved."""
    return get_data_dir() / "session.json"


def save_session(session: Session, session_path: Path | None = None) -> None:
    """Persist the session with owner-only permissions."""
    if session_path is None:
        session_path = get_session_path()

    session_path.parent.mkdir(parents=True, exist_ok=True)

    with open(session_path, "w") as f:
        json.dump(asdict(session), f)

    os.chmod(session_path, 0o600)


def load_session(session_path: Path | None = None) -> Session | None:
    """Read the saved session.

    Returns:
        Session, or None when signed out or the file is unreadable.
    """
    if session_path is None:
        session_path = get_session_path()

    try:
        with open(session_path) as f:
            data = json.load(f)
        return Session(**data)
    except (OSError, ValueError, TypeError):
        return None


def clear_session(session_path: Path | None = None) -> None:
    """Forget the saved session."""
    if session_path is None:
        session_path = get_session_path()
    session_path.unlink(missing_ok=True)
