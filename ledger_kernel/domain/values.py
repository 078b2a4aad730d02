"""
Values -- Immutable, self-validating monetary value objects.

Responsibility:
    Provides Currency and Money, the value types used for every amount in the
    ledger, plus MoneyParseResult (the non-raising parse outcome) and
    MoneyConfig (default currency and formatting threaded through calls).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    No outward dependencies except the currency table and format options.

Invariants enforced:
    - Money amounts are integers in minor units (cents); never float.
    - Currency codes resolve against CurrencyRegistry at construction.
    - Arithmetic and comparison between two Money values require the same
      currency; a mismatch raises CurrencyMismatchError, never converts.
    - divide() conserves the total exactly.

Failure modes:
    - UnknownCurrencyError on an unresolvable currency code.
    - CurrencyMismatchError when two currencies meet in one operation.
    - MoneyParseError (inside MoneyParseResult, or raised by parse_strict).
    - TypeError on non-integer amounts or unsupported operand types.
    - ValueError on a non-positive divisor or non-finite scalar.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from ledger_kernel.domain.currency import MINOR_UNITS_PER_MAJOR, CurrencyRegistry
from ledger_kernel.domain.money_format import DEFAULT_FORMAT, MoneyFormat
from ledger_kernel.exceptions import (
    CurrencyMismatchError,
    MoneyParseError,
    UnknownCurrencyError,
)

Scalar = int | Decimal | float

_NUMBER_PREFIX = re.compile(r"-?\d+(?:\.\d+)?")


def _scaled_half_up(value: Decimal, factor: int) -> int:
    """``value * factor`` rounded half-up to an int, at whatever precision it takes."""
    _, digits, exponent = value.as_tuple()
    needed = len(digits) + len(str(abs(factor))) + max(exponent, 0) + 2
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, needed)
        return int((value * factor).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _as_decimal(value: Decimal | float) -> Decimal:
    # floats go through str() so 5.55 means 5.55, not its binary expansion
    dec = value if isinstance(value, Decimal) else Decimal(str(value))
    if not dec.is_finite():
        raise ValueError(f"Money scalar must be finite, got {value!r}")
    return dec


def _major_to_minor(value: Decimal | float) -> int:
    """Convert major units (12.345) to minor units (1235), rounding half-up."""
    return _scaled_half_up(_as_decimal(value), MINOR_UNITS_PER_MAJOR)


def _scalar_to_minor(value: Scalar) -> int:
    """Integers are minor units; decimals and floats are major units."""
    if isinstance(value, bool):
        raise TypeError("bool is not a money scalar")
    if isinstance(value, int):
        return value
    if isinstance(value, (Decimal, float)):
        return _major_to_minor(value)
    raise TypeError(f"Unsupported money scalar: {type(value).__name__}")


def _clean_text(text: str, delimiter: str) -> str:
    """Keep digits, a leading sign and the delimiter (rewritten to '.')."""
    out: list[str] = []
    i = 0
    while i < len(text):
        if text.startswith(delimiter, i):
            out.append(".")
            i += len(delimiter)
            continue
        ch = text[i]
        if "0" <= ch <= "9":
            out.append(ch)
        elif ch == "-" and not out:
            out.append("-")
        i += 1
    cleaned = "".join(out)
    if cleaned.startswith("-."):
        return "-0" + cleaned[1:]
    if cleaned.startswith("."):
        return "0" + cleaned
    return cleaned


def _parse_minor_units(value: object, delimiter: str) -> int:
    if isinstance(value, bool):
        raise MoneyParseError(value, "bool is not a money value")
    if isinstance(value, int):
        return value * MINOR_UNITS_PER_MAJOR
    if isinstance(value, (Decimal, float)):
        try:
            return _major_to_minor(value)
        except (ValueError, InvalidOperation) as exc:
            raise MoneyParseError(value, "not a finite number") from exc
    if isinstance(value, str):
        match = _NUMBER_PREFIX.match(_clean_text(value, delimiter))
        if match is None:
            raise MoneyParseError(value)
        try:
            return _major_to_minor(Decimal(match.group()))
        except InvalidOperation as exc:
            raise MoneyParseError(value, "number out of range") from exc
    raise MoneyParseError(value, f"unsupported type {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class Currency:
    """
    Currency code value object.

    Contract:
        Wraps a code from CurrencyRegistry.  Normalized (uppercased, stripped)
        on construction.  Unknown codes are rejected immediately.

    Guarantees:
        - Immutable and hashable
        - code always resolves to symbol and precision metadata
    """

    code: str

    def __post_init__(self) -> None:
        normalized = CurrencyRegistry.normalize(self.code)
        if not CurrencyRegistry.is_valid(normalized):
            raise UnknownCurrencyError(self.code)
        object.__setattr__(self, "code", normalized)

    @classmethod
    def resolve(cls, currency: Currency | str) -> Currency:
        return currency if isinstance(currency, Currency) else cls(currency)

    @property
    def symbol(self) -> str:
        return CurrencyRegistry.get_info(self.code).symbol

    @property
    def name(self) -> str:
        return CurrencyRegistry.get_info(self.code).name

    @property
    def minor_units(self) -> int:
        return MINOR_UNITS_PER_MAJOR

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs an integer number of minor units with its Currency.  Every
        operation returns a new Money; nothing is ever mutated.

    Guarantees:
        - Immutable and hashable
        - amount is always an int (minor units)
        - Money/Money arithmetic and comparison enforce the same currency
        - ``==`` is structural (amount and currency); ``equals()`` and
          ``compare()`` raise on a currency mismatch instead

    Non-goals:
        - Does NOT perform currency conversion
    """

    amount: int
    currency: Currency

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(
                f"Money amount must be an int of minor units, "
                f"got {type(self.amount).__name__}"
            )
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, minor_units: int, currency: Currency | str) -> Money:
        """
        Create Money from minor units (cents).

        Raises:
            UnknownCurrencyError: If the currency code cannot be resolved.
        """
        return cls(amount=minor_units, currency=Currency.resolve(currency))

    @classmethod
    def zero(cls, currency: Currency | str) -> Money:
        """Create a zero amount in the given currency."""
        return cls.of(0, currency)

    @classmethod
    def parse(
        cls,
        value: str | Decimal | float | int,
        currency: Currency | str,
        fmt: MoneyFormat | None = None,
        **overrides: str | None,
    ) -> MoneyParseResult:
        """
        Parse text or a decimal number into Money without raising.

        Text is reduced to its digits, a leading ``-`` and the delimiter
        (which becomes the decimal point); everything else, including the
        thousands separator and currency symbols, is dropped.  A missing
        leading digit (".99", "-.99") is filled with zero.  Numbers
        (Decimal, float, int) are read as major units.  The result is rounded
        half-up to whole minor units.

        Examples:
            Money.parse("$1,234.56", "USD")                       -> 123456 USD
            Money.parse("1.234,56", "EUR", separator=".", delimiter=",")
                                                                  -> 123456 EUR
            Money.parse("wrong", "USD")                           -> failure

        Raises:
            UnknownCurrencyError: If the currency code cannot be resolved.
        """
        resolved = Currency.resolve(currency)
        options = (fmt or DEFAULT_FORMAT).with_overrides(**overrides)
        try:
            minor_units = _parse_minor_units(value, options.delimiter)
        except MoneyParseError as exc:
            return MoneyParseResult.failure(exc)
        return MoneyParseResult.success(cls(amount=minor_units, currency=resolved))

    @classmethod
    def parse_strict(
        cls,
        value: str | Decimal | float | int,
        currency: Currency | str,
        fmt: MoneyFormat | None = None,
        **overrides: str | None,
    ) -> Money:
        """
        Like ``parse`` but returns Money directly.

        Raises:
            MoneyParseError: If the value cannot be parsed.
        """
        return cls.parse(value, currency, fmt, **overrides).unwrap()

    # ------------------------------------------------------------------
    # Predicates (never raise on currency grounds)
    # ------------------------------------------------------------------

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _require_same_currency(self, other: Money, operation: str) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                self.currency.code, other.currency.code, operation
            )

    def _with_amount(self, amount: int) -> Money:
        return Money(amount=amount, currency=self.currency)

    def add(self, other: Money | Scalar) -> Money:
        """
        Add Money of the same currency, integer minor units, or a decimal
        number of major units (rounded half-up to the nearest minor unit).
        """
        if isinstance(other, Money):
            self._require_same_currency(other, "add")
            return self._with_amount(self.amount + other.amount)
        return self._with_amount(self.amount + _scalar_to_minor(other))

    def subtract(self, other: Money | Scalar) -> Money:
        """Subtract Money of the same currency or a scalar (see ``add``)."""
        if isinstance(other, Money):
            self._require_same_currency(other, "subtract")
            return self._with_amount(self.amount - other.amount)
        return self._with_amount(self.amount - _scalar_to_minor(other))

    def multiply(self, factor: Scalar) -> Money:
        """Multiply by an int (exact) or a decimal (rounded half-up)."""
        if isinstance(factor, bool):
            raise TypeError("bool is not a money scalar")
        if isinstance(factor, int):
            return self._with_amount(self.amount * factor)
        if isinstance(factor, (Decimal, float)):
            return self._with_amount(_scaled_half_up(_as_decimal(factor), self.amount))
        raise TypeError(f"Cannot multiply Money by {type(factor).__name__}")

    def divide(self, parts: int) -> list[Money]:
        """
        Split into ``parts`` shares that differ by at most one minor unit.

        The remainder of the integer division is handed out one minor unit
        at a time to the leading shares, moving them away from zero, so the
        shares always sum to exactly this amount.

        Examples:
            Money.of(101, "USD").divide(2)  -> [51 USD, 50 USD]
            Money.of(-101, "USD").divide(2) -> [-51 USD, -50 USD]

        Raises:
            ValueError: If ``parts`` is not a positive int.
        """
        if isinstance(parts, bool) or not isinstance(parts, int) or parts <= 0:
            raise ValueError(f"Money can only be divided into a positive int of parts, got {parts!r}")
        quotient, remainder = divmod(abs(self.amount), parts)
        sign = -1 if self.amount < 0 else 1
        return [
            self._with_amount(sign * (quotient + 1 if i < remainder else quotient))
            for i in range(parts)
        ]

    def negate(self) -> Money:
        return self._with_amount(-self.amount)

    def absolute(self) -> Money:
        return self._with_amount(abs(self.amount))

    def __add__(self, other: Money | Scalar) -> Money:
        if not isinstance(other, (Money, int, Decimal, float)) or isinstance(other, bool):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Money | Scalar) -> Money:
        if not isinstance(other, (Money, int, Decimal, float)) or isinstance(other, bool):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: Scalar) -> Money:
        if not isinstance(factor, (int, Decimal, float)) or isinstance(factor, bool):
            return NotImplemented
        return self.multiply(factor)

    def __rmul__(self, factor: Scalar) -> Money:
        return self.__mul__(factor)

    def __neg__(self) -> Money:
        return self.negate()

    def __abs__(self) -> Money:
        return self.absolute()

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def compare(self, other: Money) -> int:
        """
        Return -1, 0 or 1.

        Raises:
            CurrencyMismatchError: If the currencies differ.
        """
        self._require_same_currency(other, "compare")
        return (self.amount > other.amount) - (self.amount < other.amount)

    def equals(self, other: Money) -> bool:
        """
        True if both amounts are equal.

        Raises:
            CurrencyMismatchError: If the currencies differ.
        """
        return self.compare(other) == 0

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) >= 0

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def to_display(self, fmt: MoneyFormat | None = None, **overrides: str | bool | None) -> str:
        """
        Render for display.

        Options not given as overrides come from ``fmt`` (or the built-in
        defaults).  Negative amounts get a ``-`` in front of the number; the
        symbol goes before the sign unless ``symbol_on_right``.

        Examples:
            Money.of(123456, "GBP").to_display()                       -> "£1,234.56"
            Money.of(123456, "EUR").to_display(separator=".", delimiter=",")
                                                                       -> "€1.234,56"
            Money.of(123456, "EUR").to_display(fractional_unit=False)  -> "€1,234"
        """
        options = (fmt or DEFAULT_FORMAT).with_overrides(**overrides)
        number = self._format_number(options)
        sign = "-" if self.is_negative else ""
        symbol = self.currency.symbol if options.symbol else ""
        space = " " if options.symbol_space and symbol else ""
        if options.symbol_on_right:
            return f"{sign}{number}{space}{symbol}"
        return f"{symbol}{space}{sign}{number}"

    def _format_number(self, options: MoneyFormat) -> str:
        major, minor = divmod(abs(self.amount), MINOR_UNITS_PER_MAJOR)
        digits = str(major)
        groups: list[str] = []
        while digits:
            groups.insert(0, digits[-3:])
            digits = digits[:-3]
        major_text = options.separator.join(groups)
        if not options.fractional_unit:
            return major_text
        return f"{major_text}{options.delimiter}{minor:02d}"

    def __str__(self) -> str:
        return self.to_display()

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency.code!r})"


@dataclass(frozen=True)
class MoneyParseResult:
    """
    Outcome of ``Money.parse``.

    Guarantees:
        - Exactly one of ``money`` / ``error`` is set.
        - bool(result) == result.is_success
    """

    money: Money | None = None
    error: MoneyParseError | None = None

    @classmethod
    def success(cls, money: Money) -> MoneyParseResult:
        return cls(money=money)

    @classmethod
    def failure(cls, error: MoneyParseError) -> MoneyParseResult:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    def unwrap(self) -> Money:
        """Return the parsed Money or raise the parse error."""
        if self.error is not None:
            raise self.error
        return self.money

    def __bool__(self) -> bool:
        return self.is_success


@dataclass(frozen=True)
class MoneyConfig:
    """
    Default currency and formatting options, passed explicitly to callers.

    Contract:
        Replaces process-wide defaults: code that needs "the ledger currency"
        or "the configured display format" receives a MoneyConfig.

    Example:
        config = MoneyConfig(default_currency="EUR",
                             format=MoneyFormat(separator=".", delimiter=","))
        config.new(123456)          -> Money(123456, 'EUR')
        config.display(config.new(123456), symbol=False)  -> "1.234,56"
    """

    default_currency: Currency = field(default_factory=lambda: Currency("USD"))
    format: MoneyFormat = DEFAULT_FORMAT

    def __post_init__(self) -> None:
        if not isinstance(self.default_currency, Currency):
            object.__setattr__(self, "default_currency", Currency(self.default_currency))

    def new(self, minor_units: int, currency: Currency | str | None = None) -> Money:
        return Money.of(minor_units, currency or self.default_currency)

    def zero(self) -> Money:
        return Money.zero(self.default_currency)

    def parse(
        self,
        value: str | Decimal | float | int,
        currency: Currency | str | None = None,
        **overrides: str | None,
    ) -> MoneyParseResult:
        return Money.parse(value, currency or self.default_currency, self.format, **overrides)

    def parse_strict(
        self,
        value: str | Decimal | float | int,
        currency: Currency | str | None = None,
        **overrides: str | None,
    ) -> Money:
        return self.parse(value, currency, **overrides).unwrap()

    def display(self, money: Money, **overrides: str | bool | None) -> str:
        return money.to_display(self.format, **overrides)
