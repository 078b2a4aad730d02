"""SQLAlchemy ORM models for the ledger."""

from ledger_kernel.models.account import Account
from ledger_kernel.models.entry import Amount, Entry

__all__ = [
    "Account",
    "Entry",
    "Amount",
]
