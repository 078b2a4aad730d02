"""
ledger_config -- single public entrypoint for ledger configuration.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_settings()``.  No other component reads configuration
    files or environment variables.  Returns a frozen ``LedgerSettings``.

Architecture position:
    Configuration -- sits above ``ledger_kernel``.  The kernel MUST NEVER
    import from ``ledger_config``; ``ledger_config.bridges`` translates
    settings into kernel inputs (MoneyConfig, engine keyword arguments).

Invariants enforced:
    - Single entrypoint: all runtime settings flow through
      ``get_active_settings()``.
    - Validation before use: the default currency resolves, separator and
      delimiter differ, pool sizes are non-negative.
    - ``DATABASE_URL`` in the environment wins over ``database.url``.

Failure modes:
    - ``FileNotFoundError`` -- the settings file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ValueError`` -- unknown keys, wrong types, or failed validation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path

from ledger_config.loader import load_settings
from ledger_config.schema import DatabaseSettings, LedgerSettings, MoneySettings
from ledger_kernel.domain.currency import CurrencyRegistry

_logger = logging.getLogger("ledger_kernel.config")

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "defaults" / "ledger.yaml"

__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "DatabaseSettings",
    "LedgerSettings",
    "MoneySettings",
    "get_active_settings",
    "validate_settings",
]


def validate_settings(settings: LedgerSettings) -> list[str]:
    """Return every problem found; an empty list means valid."""
    errors: list[str] = []
    money = settings.money
    if not CurrencyRegistry.is_valid(money.default_currency):
        errors.append(f"money.default_currency: unknown currency {money.default_currency!r}")
    if not money.delimiter:
        errors.append("money.delimiter: must not be empty")
    if money.separator == money.delimiter:
        errors.append(
            f"money.separator and money.delimiter must differ (both {money.delimiter!r})"
        )
    database = settings.database
    if not database.url:
        errors.append("database.url: must not be empty")
    if database.pool_size < 0:
        errors.append(f"database.pool_size: must be >= 0, got {database.pool_size}")
    if database.max_overflow < 0:
        errors.append(f"database.max_overflow: must be >= 0, got {database.max_overflow}")
    return errors


def get_active_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> LedgerSettings:
    """The ONLY public configuration entrypoint.

    Args:
        path: Settings file.  Defaults to ledger_config/defaults/ledger.yaml.
        environ: Environment to read overrides from.  Defaults to os.environ.

    Returns:
        Validated, frozen LedgerSettings.

    Raises:
        FileNotFoundError: If the settings file does not exist.
        ValueError: If parsing or validation fails.
    """
    source = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    env = os.environ if environ is None else environ

    settings = load_settings(source)

    database_url = env.get("DATABASE_URL")
    if database_url:
        settings = replace(settings, database=replace(settings.database, url=database_url))

    errors = validate_settings(settings)
    if errors:
        raise ValueError(
            "Settings validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    _logger.info(
        "ledger_config_loaded",
        extra={
            "source": str(source),
            "checksum": settings.checksum,
            "default_currency": settings.money.default_currency,
            "database_url_from_env": bool(database_url),
        },
    )
    return settings
