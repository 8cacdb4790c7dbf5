"""Storage layer - provides persistence for the application.

This module re-exports the local store functions for easy importing. Backend
selection lives in gastos.store.backends.
"""

from gastos.store.local import load_ledger, save_ledger
from gastos.store.schema import database_exists, get_data_dir, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_data_dir",
    "get_db_path",
    "init_database",
    # Local blobs
    "load_ledger",
    "save_ledger",
]
