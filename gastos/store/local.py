"""Local store: the whole ledger kept as JSON blobs in sqlite.

Expenses live under one key as a month -> records mapping; the income profile
lives under another. Every save replaces both blobs.
"""

import json
import sqlite3
from pathlib import Path

from gastos.domain.legacy import decode_collection, decode_income, encode_collection, income_to_dict
from gastos.domain.models import SEED_INCOME, Ledger
from gastos.store.schema import get_db_path, init_database

EXPENSES_KEY = "expensesByMonth_v1"
INCOME_KEY = "income_v2"
LEGACY_INCOME_KEY = "income_v1"


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection, creating the schema if needed.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    init_database(db_path)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def get_blob(key: str, db_path: Path | None = None) -> str | None:
    """Read the blob stored under a key.

    Args:
        key: Storage key.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Stored text, or None if the key is unset.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM storage WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row["value"] if row else None


def set_blobs(blobs: dict[str, str], db_path: Path | None = None) -> None:
    """Replace the blobs stored under several keys in one transaction.

    Args:
        blobs: Mapping of storage key to text.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.executemany(
                """
                INSERT INTO storage (key, value, updated_at) VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                list(blobs.items()),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise


def load_ledger(db_path: Path | None = None) -> Ledger:
    """Read the whole ledger.

    Corrupt blobs read as empty (expenses) or fall back to the previous income
    key, then to the seed income.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    months = decode_collection(get_blob(EXPENSES_KEY, db_path))

    income = decode_income(get_blob(INCOME_KEY, db_path))
    if income is None:
        income = decode_income(get_blob(LEGACY_INCOME_KEY, db_path))

    return Ledger(months=months, income=income or SEED_INCOME)


def save_ledger(ledger: Ledger, db_path: Path | None = None) -> None:
    """Write the whole ledger, replacing whatever was stored.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    set_blobs(
        {
            EXPENSES_KEY: encode_collection(ledger.months),
            INCOME_KEY: json.dumps(income_to_dict(ledger.income)),
        },
        db_path,
    )
