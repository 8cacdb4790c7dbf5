"""Pure functions for reading stored data into the canonical shapes.

Stored data comes in several generations:

- current: records carry ``amount_cents`` (integer cents) and snake_case
  fields; income blobs carry ``salary_net_cents`` and friends.
- v1: records carry ``amount`` in decimal reais, ``createdAt`` and a ``meta``
  object with camelCase series fields; income blobs carry ``salary``,
  ``multibenefits``, ``food`` and ``spouse`` in decimal reais.
- remote rows: current records plus ``user_id``, ``month_key`` and ``date``.

Each generation has its own mapper. A field counts as present when it exists
and is not None, so a stored zero stays zero. Malformed input never raises;
it turns into defaults.
"""

import json
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, Overflow, localcontext
from typing import Any

from gastos.dates import current_month_key, is_month_key
from gastos.domain.ledger import IdFactory, format_timestamp, new_id
from gastos.domain.models import (
    DEFAULT_CATEGORY,
    INCOME_FIELDS,
    SEED_INCOME,
    SINGLE,
    CategoryName,
    Description,
    ExpenseRecord,
    IncomeProfile,
    Money,
    Month,
    RecordOrigin,
)

# Stored amounts with more significant digits than this are treated as unreadable
MAX_AMOUNT_DIGITS = 64

# Prior income field names, keyed by the current name they map to
V1_INCOME_FIELDS: dict[str, str] = {
    "salary_net_cents": "salary",
    "multibenefits_cents": "multibenefits",
    "food_cents": "food",
    "spouse_salary_cents": "spouse",
}


def _present(raw: Mapping[str, Any], name: str) -> bool:
    return raw.get(name) is not None


def _to_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite() or len(number.as_tuple().digits) > MAX_AMOUNT_DIGITS:
        return None
    return number


def _whole_cents(number: Decimal, scale: int = 0) -> Money | None:
    """Shift by scale powers of ten and round to whole cents, or None if the result is too large."""
    with localcontext() as ctx:
        ctx.prec = MAX_AMOUNT_DIGITS + 4
        try:
            return Money(int(number.scaleb(scale).quantize(Decimal("1"), rounding=ROUND_HALF_UP)))
        except (InvalidOperation, Overflow):
            return None


def cents_value(value: Any) -> Money | None:
    """Read a stored cents amount. Returns None if it is not a usable number."""
    number = _to_decimal(value)
    if number is None:
        return None
    return _whole_cents(number)


def decimal_to_cents(value: Any) -> Money | None:
    """Read a stored decimal amount (e.g., 12.3 reais) as cents."""
    number = _to_decimal(value)
    if number is None:
        return None
    return _whole_cents(number, 2)


def canonical_timestamp(value: Any) -> str | None:
    """Rewrite an ISO-8601 instant in the canonical millisecond UTC format.

    Unparseable text is kept as is so nothing is silently lost.
    """
    if value is None:
        return None
    text = str(value)
    try:
        moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return text
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_timestamp(moment)


def detect_record_version(raw: Mapping[str, Any]) -> str:
    """Tell which stored generation a raw record belongs to.

    Returns:
        "current", "v1" or "unknown".
    """
    if "amount_cents" in raw:
        return "current"
    if "amount" in raw or "createdAt" in raw or "meta" in raw:
        return "v1"
    return "unknown"


def _origin_from_current(raw: Any) -> RecordOrigin:
    if not isinstance(raw, Mapping) or raw.get("type") != "range":
        return SINGLE
    return RecordOrigin(
        type="range",
        series_id=raw.get("series_id"),
        from_month=raw.get("from_month"),
        to_month=raw.get("to_month"),
    )


def _origin_from_v1(raw: Any) -> RecordOrigin:
    if not isinstance(raw, Mapping) or raw.get("type") != "range":
        return SINGLE
    return RecordOrigin(
        type="range",
        series_id=raw.get("seriesId"),
        from_month=raw.get("fromMonth"),
        to_month=raw.get("toMonth"),
    )


def _resolve_month(month: Month | None, raw: Mapping[str, Any], created_at: str) -> Month:
    if month is not None:
        return month
    for name in ("month", "month_key"):
        value = raw.get(name)
        if isinstance(value, str) and is_month_key(value):
            return Month(value)
    if is_month_key(created_at[:7]):
        return Month(created_at[:7])
    return current_month_key()


def _build_record(
    raw: Mapping[str, Any],
    month: Month | None,
    amount: Money | None,
    created_at: Any,
    origin: RecordOrigin,
    now: datetime | None,
    id_factory: IdFactory,
) -> ExpenseRecord:
    timestamp = canonical_timestamp(created_at) or format_timestamp(now)
    record_id = raw.get("id")
    category = raw.get("category")
    description = raw.get("description")

    return ExpenseRecord(
        id=str(record_id) if record_id is not None else id_factory(),
        month=_resolve_month(month, raw, timestamp),
        category=CategoryName(str(category)) if category is not None else DEFAULT_CATEGORY,
        description=Description(str(description)) if description is not None else Description(""),
        amount_cents=amount if amount is not None else Money(0),
        created_at=timestamp,
        origin=origin,
    )


def _record_from_current(
    raw: Mapping[str, Any], month: Month | None, now: datetime | None, id_factory: IdFactory
) -> ExpenseRecord:
    return _build_record(
        raw,
        month,
        cents_value(raw.get("amount_cents")),
        raw.get("created_at"),
        _origin_from_current(raw.get("origin")),
        now,
        id_factory,
    )


def _record_from_v1(
    raw: Mapping[str, Any], month: Month | None, now: datetime | None, id_factory: IdFactory
) -> ExpenseRecord:
    return _build_record(
        raw,
        month,
        decimal_to_cents(raw.get("amount")),
        raw.get("createdAt"),
        _origin_from_v1(raw.get("meta")),
        now,
        id_factory,
    )


def normalize_record(
    raw: Any,
    month: Month | None = None,
    now: datetime | None = None,
    id_factory: IdFactory = new_id,
) -> ExpenseRecord:
    """Turn any stored record shape into an ExpenseRecord.

    Args:
        raw: Stored record (dict in any generation, or an ExpenseRecord).
        month: Month the record is stored under, if known. Wins over any month
            field inside the record.
        now: Instant used when the record has no timestamp.
        id_factory: Generator used when the record has no id.

    Returns:
        Canonical ExpenseRecord. Missing fields get defaults: new id, default
        category, empty description, 0 cents, now, single origin.
    """
    if isinstance(raw, ExpenseRecord):
        return raw if month is None or raw.month == month else replace(raw, month=month)

    if not isinstance(raw, Mapping):
        raw = {}

    if detect_record_version(raw) == "v1":
        return _record_from_v1(raw, month, now, id_factory)
    return _record_from_current(raw, month, now, id_factory)


def _income_from_current(raw: Mapping[str, Any]) -> dict[str, Money]:
    found: dict[str, Money] = {}
    for name in INCOME_FIELDS:
        if _present(raw, name):
            cents = cents_value(raw[name])
            if cents is not None:
                found[name] = cents
    return found


def _income_from_v1(raw: Mapping[str, Any]) -> dict[str, Money]:
    found: dict[str, Money] = {}
    for name, old_name in V1_INCOME_FIELDS.items():
        if _present(raw, old_name):
            cents = decimal_to_cents(raw[old_name])
            if cents is not None:
                found[name] = cents
    return found


def normalize_income_profile(raw: Any) -> IncomeProfile:
    """Turn any stored income shape into an IncomeProfile.

    Each field is taken from the current name, else the v1 name, else the
    seed default.

    Args:
        raw: Stored income (dict in either generation, IncomeProfile, or None).

    Returns:
        Canonical IncomeProfile.
    """
    if isinstance(raw, IncomeProfile):
        return raw

    if not isinstance(raw, Mapping):
        return SEED_INCOME

    values = {name: getattr(SEED_INCOME, name) for name in INCOME_FIELDS}
    values.update(_income_from_v1(raw))
    values.update(_income_from_current(raw))

    income_id = raw.get("id")
    return IncomeProfile(**values, id=str(income_id) if income_id is not None else None)


def normalize_collection(
    raw: Any,
    now: datetime | None = None,
    id_factory: IdFactory = new_id,
) -> dict[Month, tuple[ExpenseRecord, ...]]:
    """Turn a stored month -> records mapping into canonical form.

    Entries whose key is not a month, whose value is not a list, or whose
    items are not objects are dropped.
    """
    if not isinstance(raw, Mapping):
        return {}

    months: dict[Month, tuple[ExpenseRecord, ...]] = {}
    for key, items in raw.items():
        if not is_month_key(key) or not isinstance(items, list):
            continue
        months[Month(key)] = tuple(
            normalize_record(item, Month(key), now, id_factory) for item in items if isinstance(item, Mapping)
        )
    return months


def record_to_dict(record: ExpenseRecord) -> dict[str, Any]:
    """Canonical stored form of a record."""
    origin: dict[str, Any] = {"type": record.origin.type}
    if record.origin.type == "range":
        origin.update(
            series_id=record.origin.series_id,
            from_month=record.origin.from_month,
            to_month=record.origin.to_month,
        )

    return {
        "id": record.id,
        "month": record.month,
        "category": record.category,
        "description": record.description,
        "amount_cents": record.amount_cents,
        "created_at": record.created_at,
        "origin": origin,
    }


def income_to_dict(income: IncomeProfile) -> dict[str, Any]:
    """Canonical stored form of an income profile."""
    data: dict[str, Any] = {name: getattr(income, name) for name in INCOME_FIELDS}
    if income.id is not None:
        data["id"] = income.id
    return data


def encode_collection(months: Mapping[Month, tuple[ExpenseRecord, ...]]) -> str:
    """Serialize a month -> records mapping to JSON."""
    return json.dumps({month: [record_to_dict(r) for r in records] for month, records in months.items()})


def decode_collection(text: str | None) -> dict[Month, tuple[ExpenseRecord, ...]]:
    """Parse a stored JSON collection. Malformed text yields an empty mapping."""
    if not text:
        return {}
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return {}
    return normalize_collection(raw)


def decode_income(text: str | None) -> IncomeProfile | None:
    """Parse a stored JSON income blob.

    Returns:
        IncomeProfile, or None when there is no blob or it can't be parsed, so
        the caller can try an older key.
    """
    if not text:
        return None
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(raw, Mapping):
        return None
    return normalize_income_profile(raw)
