"""
Domain layer - pure functional core.

Value objects, polarity rules and entry validation. Nothing here performs
I/O or imports the ORM.
"""

from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from ledger_kernel.domain.entry import (
    AmountSpec,
    EntryDraft,
    EntryStatus,
    EntryValidation,
    ValidationIssue,
    require_valid,
    validate_entry,
)
from ledger_kernel.domain.money_format import DEFAULT_FORMAT, MoneyFormat
from ledger_kernel.domain.polarity import (
    AccountType,
    LineSide,
    NormalBalance,
    polarity,
    polarity_sign,
)
from ledger_kernel.domain.values import Currency, Money, MoneyConfig, MoneyParseResult

__all__ = [
    # Values
    "Currency",
    "Money",
    "MoneyConfig",
    "MoneyParseResult",
    "MoneyFormat",
    "DEFAULT_FORMAT",
    "CurrencyInfo",
    "CurrencyRegistry",
    # Polarity
    "AccountType",
    "NormalBalance",
    "LineSide",
    "polarity",
    "polarity_sign",
    # Entries
    "AmountSpec",
    "EntryDraft",
    "EntryStatus",
    "EntryValidation",
    "ValidationIssue",
    "validate_entry",
    "require_valid",
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
]
