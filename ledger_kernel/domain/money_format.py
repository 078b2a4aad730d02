"""
MoneyFormat -- display and parsing options for Money.

Responsibility:
    Holds the separator/delimiter and symbol placement options used by
    ``Money.to_display`` and ``Money.parse``.  Options are passed explicitly
    to every call; there is no process-wide mutable default.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Built from YAML settings by
    ``ledger_config.bridges``; the kernel never reads configuration itself.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class MoneyFormat:
    """
    Formatting options for money values.

    Contract:
        separator -- joins 3-digit groups of the major unit ("1,000").
        delimiter -- decimal point between major and minor units ("1.23");
            also the decimal point recognised when parsing text.
        symbol -- show the currency symbol.
        symbol_on_right -- "123.45€" instead of "€123.45".
        symbol_space -- "€ 123.45" / "123.45 €".
        fractional_unit -- show the delimiter and minor units.

    Guarantees:
        - delimiter is never empty.  separator may equal delimiter; parsing
          only reads the delimiter, so such text reads back differently.
    """

    separator: str = ","
    delimiter: str = "."
    symbol: bool = True
    symbol_on_right: bool = False
    symbol_space: bool = False
    fractional_unit: bool = True

    def __post_init__(self) -> None:
        if not self.delimiter:
            raise ValueError("MoneyFormat delimiter must not be empty")

    def with_overrides(self, **overrides: str | bool | None) -> MoneyFormat:
        """
        Return a copy with the given options replaced.

        ``None`` values mean "not set" and keep the current option, so callers
        can forward optional keyword arguments unchanged.

        Raises:
            TypeError: If an option name is unknown.
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown money format option(s): {', '.join(sorted(unknown))}")
        values = {k: v for k, v in overrides.items() if v is not None}
        if not values:
            return self
        return replace(self, **values)


DEFAULT_FORMAT = MoneyFormat()
