"""Storage backends used by the commands.

LocalBackend keeps the whole ledger in one sqlite file and applies the pure
ledger operations before writing it back. RemoteBackend maps the same calls
onto row operations against the remote API.
"""

from dataclasses import replace
from pathlib import Path
from typing import Any

from gastos.auth import AuthError, Session, load_session
from gastos.config import STORAGE_REMOTE, get_remote_settings
from gastos.domain.ledger import add_records, clear_month, reassign_category, remove_group
from gastos.domain.models import CategoryName, ExpenseRecord, IncomeProfile, Month
from gastos.store import local, remote


class LocalBackend:
    """Single-user store; one income profile for every month."""

    name = "local"

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path

    def load_month(self, month: Month) -> tuple[list[ExpenseRecord], IncomeProfile]:
        ledger = local.load_ledger(self.db_path)
        return list(ledger.records_for(month)), ledger.income

    def add(self, records: list[ExpenseRecord]) -> list[ExpenseRecord]:
        ledger = local.load_ledger(self.db_path)
        local.save_ledger(add_records(ledger, records), self.db_path)
        return records

    def delete(self, month: Month, ids: list[str]) -> None:
        ledger = local.load_ledger(self.db_path)
        local.save_ledger(remove_group(ledger, month, ids), self.db_path)

    def clear(self, month: Month) -> None:
        ledger = local.load_ledger(self.db_path)
        local.save_ledger(clear_month(ledger, month), self.db_path)

    def recategorize(self, month: Month, ids: list[str], category: CategoryName) -> None:
        ledger = local.load_ledger(self.db_path)
        local.save_ledger(reassign_category(ledger, month, ids, category), self.db_path)

    def set_income(self, month: Month, income: IncomeProfile, field_name: str) -> None:
        ledger = local.load_ledger(self.db_path)
        local.save_ledger(replace(ledger, income=income), self.db_path)


class RemoteBackend:
    """Multi-user store; one income row per (user, month)."""

    name = "remote"

    def __init__(self, client: remote.RemoteClient) -> None:
        self.client = client

    def load_month(self, month: Month) -> tuple[list[ExpenseRecord], IncomeProfile]:
        income = remote.fetch_income(self.client, month)
        return remote.list_expenses(self.client, month), income

    def add(self, records: list[ExpenseRecord]) -> list[ExpenseRecord]:
        return remote.insert_expenses(self.client, records)

    def delete(self, month: Month, ids: list[str]) -> None:
        remote.delete_expenses(self.client, ids)

    def clear(self, month: Month) -> None:
        remote.delete_month(self.client, month)

    def recategorize(self, month: Month, ids: list[str], category: CategoryName) -> None:
        remote.update_expense_category(self.client, ids, category)

    def set_income(self, month: Month, income: IncomeProfile, field_name: str) -> None:
        income_id = income.id
        if income_id is None:
            income_id = remote.fetch_income(self.client, month).id
        remote.update_income_field(self.client, str(income_id), field_name, getattr(income, field_name))


Backend = LocalBackend | RemoteBackend


def open_backend(
    config: dict[str, Any],
    db_path: Path | None = None,
    session: Session | None = None,
) -> Backend:
    """Pick the backend named by the config's storage setting.

    Raises:
        ValueError: If remote storage is selected but not configured.
        AuthError: If remote storage is selected and nobody is signed in.
    """
    if config.get("storage") != STORAGE_REMOTE:
        return LocalBackend(db_path)

    settings = get_remote_settings(config)
    if not settings["url"] or not settings["anon_key"]:
        raise ValueError("Remote storage needs remote.url and remote.anon_key in the config")

    session = session or load_session()
    if session is None:
        raise AuthError("Not signed in. Run 'gastos login' first.")

    return RemoteBackend(
        remote.RemoteClient(
            url=settings["url"].rstrip("/"),
            anon_key=settings["anon_key"],
            session=session,
            timeout=float(settings["timeout"]),
        )
    )
