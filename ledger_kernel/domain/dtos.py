"""
Read-side DTOs for accounts and posted entries.

Immutable snapshots returned to callers that should not hold ORM
instances (and their session) after the transaction ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING
from uuid import UUID

from ledger_kernel.domain.polarity import AccountType, LineSide, NormalBalance
from ledger_kernel.domain.values import Money

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account as AccountModel
    from ledger_kernel.models.entry import Entry as EntryModel


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class AccountInfo:
    """
    Pure domain representation of an account.

    Guarantees:
        - Immutable (frozen dataclass)
        - normal_balance is derived from (account_type, contra)
    """

    id: UUID
    name: str
    account_type: AccountType
    contra: bool
    currency: str
    normal_balance: NormalBalance

    @classmethod
    def from_model(cls, model: AccountModel) -> AccountInfo:
        return cls(
            id=model.id,
            name=model.name,
            account_type=AccountType(model.account_type),
            contra=model.contra,
            currency=model.currency,
            normal_balance=model.normal_balance,
        )


@dataclass(frozen=True)
class AmountRecord:
    """One posted debit or credit."""

    id: UUID
    account_id: UUID
    side: LineSide
    money: Money


@dataclass(frozen=True)
class EntryRecord:
    """
    A posted entry and its amounts.

    Guarantees:
        - Immutable (frozen dataclass)
        - date is timezone-aware UTC
    """

    id: UUID
    date: datetime
    description: str | None
    amounts: tuple[AmountRecord, ...]

    @classmethod
    def from_model(cls, model: EntryModel) -> EntryRecord:
        amounts = tuple(
            AmountRecord(
                id=line.id,
                account_id=line.account_id,
                side=LineSide(line.side),
                money=line.money,
            )
            for line in model.amounts
        )
        return cls(
            id=model.id,
            date=_aware(model.date),
            description=model.description,
            amounts=amounts,
        )

    def total(self, side: LineSide) -> int:
        return sum(a.money.amount for a in self.amounts if a.side is side)
