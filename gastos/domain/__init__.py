"""Domain models and types for gastos.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from gastos.domain.models import (
    CategoryName,
    Description,
    ExpenseGroup,
    ExpenseRecord,
    IncomeProfile,
    Ledger,
    Money,
    Month,
    RecordOrigin,
)

__all__ = [
    "Money",
    "Month",
    "CategoryName",
    "Description",
    "ExpenseRecord",
    "ExpenseGroup",
    "IncomeProfile",
    "Ledger",
    "RecordOrigin",
]
