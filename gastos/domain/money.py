"""Pure functions for converting between user-facing money text and cents.

This module contains the functional core for money handling:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in cents (Money type). Nothing here goes through a
binary float.
"""

import re
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal, InvalidOperation, localcontext

from gastos.domain.models import Money


@dataclass(frozen=True)
class MoneyLocale:
    """Formatting conventions for one locale."""

    code: str
    symbol: str
    symbol_gap: str
    group: str
    decimal: str
    month_names: tuple[str, ...]
    label_format: str  # uses {month} and {year}


PT_BR = MoneyLocale(
    code="pt-BR",
    symbol="R$",
    symbol_gap=" ",
    group=".",
    decimal=",",
    month_names=(
        "janeiro",
        "fevereiro",
        "março",
        "abril",
        "maio",
        "junho",
        "julho",
        "agosto",
        "setembro",
        "outubro",
        "novembro",
        "dezembro",
    ),
    label_format="{month} de {year}",
)

EN_GB = MoneyLocale(
    code="en-GB",
    symbol="£",
    symbol_gap="",
    group=",",
    decimal=".",
    month_names=(
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
    label_format="{month} {year}",
)

LOCALES: dict[str, MoneyLocale] = {loc.code: loc for loc in (PT_BR, EN_GB)}

DEFAULT_LOCALE = PT_BR

_NON_DIGITS = re.compile(r"\D")


def get_locale(code: str | None) -> MoneyLocale:
    """Look up a locale by code, falling back to the default.

    Args:
        code: Locale code such as "pt-BR". None selects the default.

    Returns:
        Matching MoneyLocale, or DEFAULT_LOCALE if unknown.
    """
    if code is None:
        return DEFAULT_LOCALE
    return LOCALES.get(code, DEFAULT_LOCALE)


def digits_to_cents(raw_input: str) -> Money:
    """Interpret every digit typed so far as a count of cents.

    This is the "keystroke" mode: the last two digits are always the
    fractional part and any separators the user typed are ignored.

    Args:
        raw_input: Raw text from an input field.

    Returns:
        Amount in cents, 0 when there are no digits at all.
    """
    digits = _NON_DIGITS.sub("", str(raw_input))
    if not digits:
        return Money(0)
    return Money(int(digits))


def parse_decimal_to_cents(raw_input: str, locale: MoneyLocale = DEFAULT_LOCALE) -> Money | None:
    """Parse free-form decimal money text into cents.

    Accepts things like "120,50", "R$ 1.234,56" or "-3,5" for pt-BR. Every
    character other than digits, the locale separators and "-" is dropped,
    grouping separators are removed and the decimal separator becomes the
    decimal point. Half cents round up.

    Args:
        raw_input: Raw text typed by the user.
        locale: Locale whose separators apply.

    Returns:
        Amount in cents, or None if the text is not a finite number. Empty
        text parses as 0; callers decide whether 0 is acceptable.
    """
    allowed = set("0123456789-") | {locale.group, locale.decimal}
    clean = "".join(ch for ch in str(raw_input) if ch in allowed)
    clean = clean.replace(locale.group, "")

    if clean.count(locale.decimal) > 1:
        return None
    clean = clean.replace(locale.decimal, ".")

    if not clean:
        return Money(0)

    try:
        value = Decimal(clean)
    except InvalidOperation:
        return None

    if not value.is_finite():
        return None

    # Enough precision that scaling and rounding stay exact for any input length
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits) + 4)
        cents = (value * 100 + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
    return Money(int(cents))


def _group_digits(units: int, separator: str) -> str:
    return f"{units:,}".replace(",", separator)


def cents_to_display_string(cents: Money, locale: MoneyLocale = DEFAULT_LOCALE) -> str:
    """Format cents with grouping and exactly two decimals, no symbol.

    Args:
        cents: Amount in cents.
        locale: Locale whose separators apply.

    Returns:
        Formatted string (e.g., "1.234,56" or "-0,05").
    """
    units, fraction = divmod(abs(cents), 100)
    sign = "-" if cents < 0 else ""
    return f"{sign}{_group_digits(units, locale.group)}{locale.decimal}{fraction:02d}"


def cents_to_currency_string(cents: Money, locale: MoneyLocale = DEFAULT_LOCALE) -> str:
    """Format cents as a currency string.

    Args:
        cents: Amount in cents.
        locale: Locale whose symbol and separators apply.

    Returns:
        Formatted string (e.g., "R$ 1.234,56" or "-R$ 10,00").
    """
    body = cents_to_display_string(Money(abs(cents)), locale)
    sign = "-" if cents < 0 else ""
    return f"{sign}{locale.symbol}{locale.symbol_gap}{body}"


def cents_to_input_string(cents: Money | None, locale: MoneyLocale = DEFAULT_LOCALE) -> str:
    """Format cents as editable text without grouping (e.g., "4765,38").

    Args:
        cents: Amount in cents. None is treated as 0.
        locale: Locale whose decimal separator applies.

    Returns:
        Text that parse_decimal_to_cents reads back to the same amount.
    """
    value = cents or 0
    units, fraction = divmod(abs(value), 100)
    sign = "-" if value < 0 else ""
    return f"{sign}{units}{locale.decimal}{fraction:02d}"
