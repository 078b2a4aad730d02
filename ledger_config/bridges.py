"""
Config -> Kernel Bridges.

Functions that convert LedgerSettings into kernel inputs. These live in
ledger_config (the producer) because the kernel must NEVER import
ledger_config.

Usage:
    from ledger_config import get_active_settings
    from ledger_config.bridges import engine_kwargs_from_settings, money_config_from_settings

    settings = get_active_settings()
    init_engine_from_url(**engine_kwargs_from_settings(settings))
    money_config = money_config_from_settings(settings)
"""

from __future__ import annotations

from typing import Any

from ledger_config.schema import LedgerSettings
from ledger_kernel.domain.money_format import MoneyFormat
from ledger_kernel.domain.values import Currency, MoneyConfig


def money_format_from_settings(settings: LedgerSettings) -> MoneyFormat:
    money = settings.money
    return MoneyFormat(
        separator=money.separator,
        delimiter=money.delimiter,
        symbol=money.symbol,
        symbol_on_right=money.symbol_on_right,
        symbol_space=money.symbol_space,
        fractional_unit=money.fractional_unit,
    )


def money_config_from_settings(settings: LedgerSettings) -> MoneyConfig:
    """Ledger currency plus display/parse options as a kernel MoneyConfig."""
    return MoneyConfig(
        default_currency=Currency(settings.money.default_currency),
        format=money_format_from_settings(settings),
    )


def engine_kwargs_from_settings(settings: LedgerSettings) -> dict[str, Any]:
    """Keyword arguments for ``ledger_kernel.db.init_engine_from_url``."""
    database = settings.database
    return {
        "database_url": database.url,
        "echo": database.echo,
        "pool_size": database.pool_size,
        "max_overflow": database.max_overflow,
    }
