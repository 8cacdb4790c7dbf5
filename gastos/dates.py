"""Date utilities for gastos.

Pure functions for month keys, month stepping, ranges and labels. A month key
is always the canonical YYYY-MM string, so chronological order is plain string
order.
"""

import re
from datetime import date, datetime, timedelta

import pandas as pd

from gastos.domain.models import Month
from gastos.domain.money import DEFAULT_LOCALE, MoneyLocale

_MONTH_KEY = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")
_MONTH_SLASH_YEAR = re.compile(r"^(0?[1-9]|1[0-2])/(\d{4})$")

DEFAULT_PAST_MONTHS = 24
DEFAULT_FUTURE_MONTHS = 12


def is_month_key(value: str) -> bool:
    """Check that a value is a canonical YYYY-MM month key."""
    return isinstance(value, str) and _MONTH_KEY.match(value) is not None


def from_date(value: date) -> Month:
    """Month key for the month containing a date."""
    return Month(f"{value.year:04d}-{value.month:02d}")


def to_date(key: Month) -> date:
    """First day of the month identified by a key.

    Raises:
        ValueError: If key is not a canonical YYYY-MM string.
    """
    match = _MONTH_KEY.match(key) if isinstance(key, str) else None
    if match is None:
        raise ValueError(f"Invalid month: {key!r} (expected YYYY-MM)")
    return date(int(match.group(1)), int(match.group(2)), 1)


def current_month_key(today: date | None = None) -> Month:
    """Month key for today (or for the given date)."""
    return from_date(today or date.today())


def step_month(key: Month, delta: int) -> Month:
    """Move a month key forward (or backward, for negative delta) by whole months."""
    start = to_date(key)
    year, month_index = divmod(start.year * 12 + (start.month - 1) + delta, 12)
    return Month(f"{year:04d}-{month_index + 1:02d}")


def enumerate_range(from_key: Month, to_key: Month) -> list[Month]:
    """List every month from from_key to to_key inclusive, ascending.

    Args:
        from_key: First month.
        to_key: Last month.

    Returns:
        Contiguous list of month keys. Empty when from_key is after to_key,
        which callers report as an invalid range.
    """
    if to_date(from_key) > to_date(to_key):
        return []

    months = [from_key]
    while months[-1] != to_key:
        months.append(step_month(months[-1], 1))
    return months


def build_window(
    center_key: Month,
    past_count: int = DEFAULT_PAST_MONTHS,
    future_count: int = DEFAULT_FUTURE_MONTHS,
) -> list[Month]:
    """Build the month selection list around a center month.

    Args:
        center_key: Month the window is centred on.
        past_count: Months to include before center_key.
        future_count: Months to include after center_key.

    Returns:
        Ascending list of past_count + future_count + 1 month keys.
    """
    return [step_month(center_key, delta) for delta in range(-past_count, future_count + 1)]


def month_label(key: Month, locale: MoneyLocale = DEFAULT_LOCALE) -> str:
    """Human-readable month (e.g., "março de 2024" or "March 2024")."""
    first = to_date(key)
    name = locale.month_names[first.month - 1]
    return locale.label_format.format(month=name, year=first.year)


def month_range(month: Month, locale: MoneyLocale = DEFAULT_LOCALE) -> tuple[str, str, str]:
    """Calculate date range and label for a month.

    Args:
        month: Month in YYYY-MM format.
        locale: Locale used for the label.

    Returns:
        Tuple of (since_date, until_date, label) where:
        - since_date: First day of month (YYYY-MM-DD)
        - until_date: First day of next month (YYYY-MM-DD)
        - label: Human-readable month, as given by month_label
    """
    dt = datetime.strptime(month, "%Y-%m")
    since = dt.strftime("%Y-%m-01")
    next_month = (dt.replace(day=28) + timedelta(days=4)).replace(day=1)
    until = next_month.strftime("%Y-%m-%d")
    label = month_label(month, locale)
    return since, until, label


def parse_month_input(value: str) -> Month:
    """Parse a month typed by the user.

    Accepts canonical keys ("2024-03"), "03/2024", and any date pandas can
    read (day first), such as "15/03/2024" or "2024-03-15".

    Raises:
        ValueError: If the value can't be read as a month.
    """
    text = value.strip()
    if is_month_key(text):
        return Month(text)

    slash = _MONTH_SLASH_YEAR.match(text)
    if slash:
        return Month(f"{int(slash.group(2)):04d}-{int(slash.group(1)):02d}")

    try:
        parsed = pd.to_datetime(text, dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Invalid month: {value!r}") from e

    if pd.isna(parsed):
        raise ValueError(f"Invalid month: {value!r}")

    return from_date(parsed.date())
