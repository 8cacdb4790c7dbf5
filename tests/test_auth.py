"""Tests for gastos.auth."""

import stat
from pathlib import Path
from typing import Any

import pytest
import requests

from gastos import auth
from gastos.auth import AuthError, Session

TOKEN_PAYLOAD = {
    "access_token": "access-1",
    "refresh_token": "refresh-1",
    "user": {"id": "user-1", "email": "ana@example.com"},
}


class FakeResponse:
    def __init__(self, payload: Any, status: int = 200) -> None:
        self.payload = payload
        self.status_code = status

    def json(self) -> Any:
        return self.payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class TestSignIn:
    """Tests for sign_in and sign_up."""

    def test_sign_in(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should post the password grant and build a session."""
        calls = []

        def fake_post(url: str, **kwargs: Any) -> FakeResponse:
            calls.append((url, kwargs))
            return FakeResponse(TOKEN_PAYLOAD)

        monkeypatch.setattr(auth.requests, "post", fake_post)

        session = auth.sign_in("https://db.example.com", "anon", "ana@example.com", "secret")

        assert session == Session("access-1", "user-1", "ana@example.com", "refresh-1")
        url, kwargs = calls[0]
        assert url == "https://db.example.com/auth/v1/token"
        assert kwargs["params"] == {"grant_type": "password"}
        assert kwargs["json"] == {"email": "ana@example.com", "password": "secret"}
        assert kwargs["headers"]["apikey"] == "anon"

    def test_sign_in_without_session(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should raise AuthError when no token comes back."""
        monkeypatch.setattr(auth.requests, "post", lambda url, **kwargs: FakeResponse({}))

        with pytest.raises(AuthError):
            auth.sign_in("https://db.example.com", "anon", "ana@example.com", "secret")

    def test_sign_in_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should raise the HTTP error for bad credentials."""
        monkeypatch.setattr(auth.requests, "post", lambda url, **kwargs: FakeResponse({}, status=400))

        with pytest.raises(requests.HTTPError):
            auth.sign_in("https://db.example.com", "anon", "ana@example.com", "wrong")

    def test_sign_up_pending_confirmation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should return None when the account still needs confirming."""
        monkeypatch.setattr(
            auth.requests, "post", lambda url, **kwargs: FakeResponse({"id": "user-1", "email": "ana@example.com"})
        )

        assert auth.sign_up("https://db.example.com", "anon", "ana@example.com", "secret") is None

    def test_sign_up_signed_in(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should return the session when the backend signs in straight away."""
        monkeypatch.setattr(auth.requests, "post", lambda url, **kwargs: FakeResponse(TOKEN_PAYLOAD))

        session = auth.sign_up("https://db.example.com", "anon", "ana@example.com", "secret")

        assert session is not None
        assert session.user_id == "user-1"


class TestSessionFile:
    """Tests for saving and loading the session."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """Should save privately and load back."""
        path = tmp_path / "gastos" / "session.json"
        session = Session("access-1", "user-1", "ana@example.com")

        auth.save_session(session, path)

        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert auth.load_session(path) == session

    def test_missing(self, tmp_path: Path) -> None:
        """Should read None when signed out."""
        assert auth.load_session(tmp_path / "session.json") is None

    def test_unreadable(self, tmp_path: Path) -> None:
        """Should read None for broken or foreign files."""
        path = tmp_path / "session.json"
        path.write_text("{not json")
        assert auth.load_session(path) is None

        path.write_text('{"token": "x"}')
        assert auth.load_session(path) is None

    def test_clear(self, tmp_path: Path) -> None:
        """Should remove the file, and tolerate it already being gone."""
        path = tmp_path / "session.json"
        auth.save_session(Session("a", "u", "e"), path)

        auth.clear_session(path)
        auth.clear_session(path)

        assert not path.exists()

    def test_default_path(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Should live in the data directory."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert auth.get_session_path() == tmp_path / "gastos" / "session.json"
