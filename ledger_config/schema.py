"""
Settings schema (``ledger_config.schema``).

Frozen dataclasses describing the YAML configuration.  Pure data: parsing
lives in ``loader``, validation in ``ledger_config.validate_settings``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MoneySettings:
    """Ledger currency and money display/parse options."""

    default_currency: str = "USD"
    separator: str = ","
    delimiter: str = "."
    symbol: bool = True
    symbol_on_right: bool = False
    symbol_space: bool = False
    fractional_unit: bool = True


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection options handed to ``init_engine_from_url``."""

    url: str = "sqlite:///:memory:"
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 10


@dataclass(frozen=True)
class LedgerSettings:
    """Root of the configuration tree."""

    money: MoneySettings = field(default_factory=MoneySettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    checksum: str = ""
