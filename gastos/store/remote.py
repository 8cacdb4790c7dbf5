"""Remote store: one row per expense and one income row per (user, month).

Talks to a PostgREST endpoint over HTTP. Rows are scoped by the signed-in
user's id; the API's row level security is expected to enforce the same.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

import requests

from gastos.auth import Session
from gastos.dates import month_range
from gastos.domain.legacy import income_to_dict, normalize_income_profile, normalize_record
from gastos.domain.models import (
    INCOME_FIELDS,
    SEED_INCOME,
    CategoryName,
    ExpenseRecord,
    IncomeProfile,
    Money,
    Month,
)


@dataclass(frozen=True)
class RemoteClient:
    """Connection settings plus the session the rows belong to."""

    url: str
    anon_key: str
    session: Session
    timeout: float = 10

    @property
    def user_id(self) -> str:
        return self.session.user_id

    def endpoint(self, table: str) -> str:
        return f"{self.url}/rest/v1/{table}"

    def headers(self, return_rows: bool = False) -> dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.session.access_token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if return_rows:
            headers["Prefer"] = "return=representation"
        return headers


def _in_filter(ids: list[str]) -> str:
    return "in.(" + ",".join(ids) + ")"


def entry_date(month: Month, today: date | None = None) -> str:
    """Date stamped on a new row: today if it falls in the month, else the month's first day."""
    since, until, _ = month_range(month)
    current = (today or date.today()).isoformat()
    return current if since <= current < until else since


def record_to_row(client: RemoteClient, record: ExpenseRecord, today: date | None = None) -> dict[str, Any]:
    """Row payload for inserting a record. The backend assigns id and created_at."""
    return {
        "user_id": client.user_id,
        "month_key": record.month,
        "category": record.category,
        "description": record.description,
        "amount_cents": record.amount_cents,
        "date": entry_date(record.month, today),
    }


def fetch_income(client: RemoteClient, month: Month) -> IncomeProfile:
    """Get the income row for a month, seeding it with the defaults on first access.

    Raises:
        requests.RequestException: If API request fails.
    """
    response = requests.get(
        client.endpoint("incomes"),
        headers=client.headers(),
        params={"user_id": f"eq.{client.user_id}", "month_key": f"eq.{month}", "select": "*"},
        timeout=client.timeout,
    )
    response.raise_for_status()
    rows = response.json()
    if rows:
        return normalize_income_profile(rows[0])

    payload = {"user_id": client.user_id, "month_key": month, **income_to_dict(SEED_INCOME)}
    response = requests.post(
        client.endpoint("incomes"),
        headers=client.headers(return_rows=True),
        json=payload,
        timeout=client.timeout,
    )
    response.raise_for_status()
    return normalize_income_profile(response.json()[0])


def list_expenses(client: RemoteClient, month: Month) -> list[ExpenseRecord]:
    """List a month's expenses, newest first.

    Raises:
        requests.RequestException: If API request fails.
    """
    response = requests.get(
        client.endpoint("expenses"),
        headers=client.headers(),
        params={
            "user_id": f"eq.{client.user_id}",
            "month_key": f"eq.{month}",
            "select": "*",
            "order": "created_at.desc",
        },
        timeout=client.timeout,
    )
    response.raise_for_status()
    return [normalize_record(row, month) for row in response.json()]


def insert_expenses(client: RemoteClient, records: list[ExpenseRecord]) -> list[ExpenseRecord]:
    """Insert records in one request.

    Returns:
        The stored records, with backend-assigned ids and timestamps.

    Raises:
        requests.RequestException: If API request fails.
    """
    if not records:
        return []

    response = requests.post(
        client.endpoint("expenses"),
        headers=client.headers(return_rows=True),
        json=[record_to_row(client, record) for record in records],
        timeout=client.timeout,
    )
    response.raise_for_status()
    return [normalize_record(row) for row in response.json()]


def delete_expenses(client: RemoteClient, ids: list[str]) -> None:
    """Delete expenses by id.

    Raises:
        requests.RequestException: If API request fails.
    """
    if not ids:
        return

    response = requests.delete(
        client.endpoint("expenses"),
        headers=client.headers(),
        params={"id": _in_filter(ids), "user_id": f"eq.{client.user_id}"},
        timeout=client.timeout,
    )
    response.raise_for_status()


def delete_month(client: RemoteClient, month: Month) -> None:
    """Delete every expense of a month.

    Raises:
        requests.RequestException: If API request fails.
    """
    response = requests.delete(
        client.endpoint("expenses"),
        headers=client.headers(),
        params={"user_id": f"eq.{client.user_id}", "month_key": f"eq.{month}"},
        timeout=client.timeout,
    )
    response.raise_for_status()


def update_expense_category(client: RemoteClient, ids: list[str], category: CategoryName) -> None:
    """Move expenses to another category.

    Raises:
        requests.RequestException: If API request fails.
    """
    if not ids:
        return

    response = requests.patch(
        client.endpoint("expenses"),
        headers=client.headers(),
        params={"id": _in_filter(ids), "user_id": f"eq.{client.user_id}"},
        json={"category": category},
        timeout=client.timeout,
    )
    response.raise_for_status()


def update_income_field(client: RemoteClient, income_id: str, field_name: str, cents: Money) -> None:
    """Update one income column. Last write wins.

    Raises:
        ValueError: If field_name is not an income column.
        requests.RequestException: If API request fails.
    """
    if field_name not in INCOME_FIELDS:
        raise ValueError(f"Unknown income field: {field_name}")

    response = requests.patch(
        client.endpoint("incomes"),
        headers=client.headers(),
        params={"id": f"eq.{income_id}"},
        json={field_name: cents},
        timeout=client.timeout,
    )
    response.raise_for_status()
