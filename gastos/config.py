"""Configuration file management for gastos."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from gastos.dates import DEFAULT_FUTURE_MONTHS, DEFAULT_PAST_MONTHS
from gastos.domain.models import DEFAULT_CATEGORIES, CategoryName
from gastos.domain.money import MoneyLocale, get_locale

STORAGE_LOCAL = "local"
STORAGE_REMOTE = "remote"

DEFAULT_TIMEOUT = 10


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "gastos" / "config.toml"


def default_config() -> dict[str, Any]:
    """Build the configuration used when no file exists."""
    return {
        "storage": STORAGE_LOCAL,
        "locale": "pt-BR",
        "categories": list(DEFAULT_CATEGORIES),
        "window": {"past": DEFAULT_PAST_MONTHS, "future": DEFAULT_FUTURE_MONTHS},
        "remote": {"url": "", "anon_key": "", "timeout": DEFAULT_TIMEOUT},
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file, filling in defaults.

    A missing file yields the defaults.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        tomllib.TOMLDecodeError: If the file exists but isn't valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    config = default_config()
    if not config_path.exists():
        return config

    with open(config_path, "rb") as f:
        loaded = tomllib.load(f)

    for key, value in loaded.items():
        if isinstance(value, dict) and isinstance(config.get(key), dict):
            config[key] = {**config[key], **value}
        else:
            config[key] = value

    return config


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_categories(config: dict[str, Any]) -> list[CategoryName]:
    """Known expense categories, in display order."""
    categories = config.get("categories") or list(DEFAULT_CATEGORIES)
    return [CategoryName(str(c)) for c in categories]


def get_money_locale(config: dict[str, Any]) -> MoneyLocale:
    """Locale used for parsing and formatting money and months."""
    return get_locale(config.get("locale"))


def get_window(config: dict[str, Any]) -> tuple[int, int]:
    """Months before and after the current one offered for selection."""
    window = config.get("window", {})
    return int(window.get("past", DEFAULT_PAST_MONTHS)), int(window.get("future", DEFAULT_FUTURE_MONTHS))


def get_remote_settings(config: dict[str, Any]) -> dict[str, Any]:
    """Remote backend settings, with environment overrides applied.

    GASTOS_SUPABASE_URL and GASTOS_SUPABASE_KEY win over the file.
    """
    remote = dict(config.get("remote", {}))
    remote["url"] = os.environ.get("GASTOS_SUPABASE_URL") or remote.get("url", "")
    remote["anon_key"] = os.environ.get("GASTOS_SUPABASE_KEY") or remote.get("anon_key", "")
    remote["timeout"] = remote.get("timeout", DEFAULT_TIMEOUT)
    return remote
