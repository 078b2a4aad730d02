"""
Module: ledger_kernel.models.entry
Responsibility: ORM persistence for posted entries and their amounts.
Architecture position: Kernel > Models.  May import from db/base.py and the
    pure domain value types only.

Invariants enforced:
    - An Amount belongs to exactly one Entry; deleting the entry deletes its
      amounts (ORM cascade plus ON DELETE CASCADE).
    - amount is a positive integer of minor units; side carries the sign.
    - Entries are written once and never updated: corrections are new entries.
    - date is stored as UTC.

Failure modes:
    - IntegrityError if an amount references a missing entry or account.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase, UUIDString
from ledger_kernel.domain.polarity import LineSide
from ledger_kernel.domain.values import Money

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account


class Entry(TrackedBase):
    """
    A posted double-entry transaction.

    Contract:
        Persisted only by SqlLedgerStore.insert_entry after validation, in the
        same flush as all of its amounts.
    """

    __tablename__ = "entries"

    __table_args__ = (Index("idx_entry_date", "date"),)

    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    amounts: Mapped[list["Amount"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        lazy="selectin",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Entry {self.id} {self.date:%Y-%m-%d}>"


class Amount(TrackedBase):
    """
    One debit or credit of an entry.

    Contract:
        amount is zero or more, in minor units of ``currency``.
    """

    __tablename__ = "amounts"

    __table_args__ = (
        Index("idx_amount_entry", "entry_id"),
        Index("idx_amount_account_side", "account_id", "side"),
    )

    entry_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("entries.id", ondelete="CASCADE"),
        nullable=False,
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=False,
    )

    side: Mapped[LineSide] = mapped_column(
        String(10),
        nullable=False,
    )

    # Minor units (cents); side determines debit/credit
    amount: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
    )

    entry: Mapped["Entry"] = relationship(
        back_populates="amounts",
    )

    account: Mapped["Account"] = relationship(
        back_populates="amounts",
    )

    def __repr__(self) -> str:
        return f"<Amount {self.side} {self.amount} {self.currency}>"

    @property
    def money(self) -> Money:
        return Money.of(self.amount, self.currency)

    @property
    def is_debit(self) -> bool:
        return LineSide(self.side) is LineSide.DEBIT
