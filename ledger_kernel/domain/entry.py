"""
Entry -- draft entries and the double-entry validation rules.

Responsibility:
    Describes an entry before it is persisted (EntryDraft of AmountSpecs) and
    decides whether it may be posted.  Validation is pure: it returns an
    EntryValidation listing every problem found, and ``require_valid`` turns
    a failed validation into the matching typed exception.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Called by
    SqlLedgerStore.insert_entry before anything touches the session.

Invariants enforced:
    - An entry has at least two amounts.
    - No amount is negative (the side carries the direction).
    - All amounts of an entry share one currency.
    - Total debits equal total credits, compared in integer minor units.

Failure modes:
    - InvalidEntryError for structural problems (too few amounts,
      negative amount, mixed currencies).
    - UnbalancedEntryError when debits != credits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any
from uuid import UUID

from ledger_kernel.domain.polarity import LineSide
from ledger_kernel.domain.values import Money
from ledger_kernel.exceptions import InvalidEntryError, UnbalancedEntryError

TOO_FEW_AMOUNTS = "TOO_FEW_AMOUNTS"
NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
MIXED_CURRENCIES = "MIXED_CURRENCIES"
UNBALANCED = "UNBALANCED"


class EntryStatus(str, Enum):
    """Where an EntryDraft lands once validated (the draft itself is the unvalidated state)."""

    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class AmountSpec:
    """
    One debit or credit line of a draft entry.

    Contract:
        References the account by id.  ``money`` is expected to be zero or
        more; that is checked by ``validate_entry``, not here, so an
        invalid draft can still be built and reported on.
    """

    account_id: UUID
    side: LineSide
    money: Money

    def __post_init__(self) -> None:
        if not isinstance(self.money, Money):
            raise TypeError(f"AmountSpec.money must be Money, got {type(self.money).__name__}")
        if not isinstance(self.side, LineSide):
            object.__setattr__(self, "side", LineSide(self.side))

    @classmethod
    def debit(cls, account_id: UUID, money: Money) -> AmountSpec:
        return cls(account_id=account_id, side=LineSide.DEBIT, money=money)

    @classmethod
    def credit(cls, account_id: UUID, money: Money) -> AmountSpec:
        return cls(account_id=account_id, side=LineSide.CREDIT, money=money)

    @property
    def is_debit(self) -> bool:
        return self.side is LineSide.DEBIT


@dataclass(frozen=True)
class EntryDraft:
    """
    An entry that has not been persisted yet.

    ``date`` may be a ``datetime`` or a bare ``date`` (midnight UTC); when
    omitted the store stamps the entry with its clock's current time.
    """

    amounts: tuple[AmountSpec, ...]
    date: datetime | date | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amounts", tuple(self.amounts))

    @property
    def currencies(self) -> frozenset[str]:
        return frozenset(a.money.currency.code for a in self.amounts)

    def total(self, side: LineSide) -> int:
        """Sum of the amounts on one side, in minor units."""
        return sum(a.money.amount for a in self.amounts if a.side is side)


@dataclass(frozen=True)
class ValidationIssue:
    """A single reason a draft cannot be posted."""

    code: str
    message: str
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class EntryValidation:
    """
    Result of ``validate_entry``.

    Guarantees:
        - status is VALID exactly when issues is empty
        - debits/credits are totals in minor units (0 when the draft has
          mixed currencies and the totals are meaningless)
        - bool(result) == result.is_valid
    """

    status: EntryStatus
    issues: tuple[ValidationIssue, ...] = field(default_factory=tuple)
    debits: int = 0
    credits: int = 0
    currency: str | None = None

    @classmethod
    def success(cls, debits: int, credits: int, currency: str) -> EntryValidation:
        return cls(EntryStatus.VALID, (), debits, credits, currency)

    @classmethod
    def failure(
        cls,
        issues: list[ValidationIssue],
        debits: int = 0,
        credits: int = 0,
        currency: str | None = None,
    ) -> EntryValidation:
        return cls(EntryStatus.INVALID, tuple(issues), debits, credits, currency)

    @property
    def is_valid(self) -> bool:
        return self.status is EntryStatus.VALID

    def has_issue(self, code: str) -> bool:
        return any(issue.code == code for issue in self.issues)

    def __bool__(self) -> bool:
        return self.is_valid


def validate_entry(draft: EntryDraft) -> EntryValidation:
    """
    Check a draft against the double-entry rules.

    Every rule is evaluated so the result lists all problems at once.
    Balance is only checked when the draft has exactly one currency.
    """
    issues: list[ValidationIssue] = []

    if len(draft.amounts) < 2:
        issues.append(
            ValidationIssue(
                TOO_FEW_AMOUNTS,
                f"An entry needs at least two amounts, got {len(draft.amounts)}",
                {"count": len(draft.amounts)},
            )
        )

    for index, spec in enumerate(draft.amounts):
        if spec.money.is_negative:
            issues.append(
                ValidationIssue(
                    NEGATIVE_AMOUNT,
                    f"Amount {index} must not be negative, got {spec.money.amount}",
                    {"index": index, "amount": spec.money.amount},
                )
            )

    currencies = draft.currencies
    if len(currencies) > 1:
        issues.append(
            ValidationIssue(
                MIXED_CURRENCIES,
                f"An entry must use one currency, got {', '.join(sorted(currencies))}",
                {"currencies": sorted(currencies)},
            )
        )
        return EntryValidation.failure(issues)

    currency = next(iter(currencies), None)
    debits = draft.total(LineSide.DEBIT)
    credits = draft.total(LineSide.CREDIT)
    if debits != credits:
        issues.append(
            ValidationIssue(
                UNBALANCED,
                f"Debits ({debits}) do not equal credits ({credits})",
                {"debits": debits, "credits": credits},
            )
        )

    if issues:
        return EntryValidation.failure(issues, debits, credits, currency)
    return EntryValidation.success(debits, credits, currency)


def require_valid(draft: EntryDraft) -> EntryValidation:
    """
    Validate and raise on failure.

    Structural problems take precedence over imbalance: a draft that is both
    malformed and unbalanced raises InvalidEntryError.

    Raises:
        InvalidEntryError: Too few amounts, negative amount or mixed
            currencies.
        UnbalancedEntryError: Debits != credits.
    """
    result = validate_entry(draft)
    if result.is_valid:
        return result
    structural = tuple(i for i in result.issues if i.code != UNBALANCED)
    if structural:
        raise InvalidEntryError("; ".join(i.message for i in structural), structural)
    raise UnbalancedEntryError(result.debits, result.credits, result.currency or "")


def entry_timestamp(value: datetime | date) -> datetime:
    """
    Normalize an entry date to an aware UTC datetime.

    A bare ``date`` becomes midnight UTC; a naive ``datetime`` is taken to
    be UTC already.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def cutoff_timestamp(value: datetime | date) -> datetime:
    """
    Normalize an "up to" bound to an aware UTC datetime.

    A bare ``date`` covers the whole day: the cutoff is its last instant.
    """
    if isinstance(value, datetime):
        return entry_timestamp(value)
    return datetime.combine(value, time.max, tzinfo=timezone.utc)
