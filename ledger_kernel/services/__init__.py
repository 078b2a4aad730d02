"""Kernel services - persistence of entries and balance computation."""

from ledger_kernel.services.ledger_engine import LedgerEngine
from ledger_kernel.services.ledger_store import (
    LedgerStore,
    SqlLedgerStore,
    validate_account_fields,
)

__all__ = [
    "LedgerEngine",
    "LedgerStore",
    "SqlLedgerStore",
    "validate_account_fields",
]
