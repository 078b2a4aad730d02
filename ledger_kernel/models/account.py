"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for the chart of accounts -- the target of
    every posted amount.
Architecture position: Kernel > Models.  May import from db/base.py and the
    pure domain enums only.

Invariants enforced:
    - Account.name is globally unique (uq_account_name).
    - account_type is one of asset, liability, equity, revenue, expense.
    - The normal balance is never stored; it is derived from
      (account_type, contra) through the polarity table.
    - Accounts are never deleted in normal operation (truncate is test-only).

Failure modes:
    - IntegrityError on a duplicate name if the store's pre-check is bypassed.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase
from ledger_kernel.domain.polarity import AccountType, NormalBalance, polarity

if TYPE_CHECKING:
    from ledger_kernel.models.entry import Amount


class Account(TrackedBase):
    """
    Chart of accounts entry.

    Contract:
        name is unique.  account_type and contra decide the side on which the
        account normally carries its balance.  currency is the currency every
        amount posted to this account must use.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("name", name="uq_account_name"),
        Index("idx_account_type", "account_type"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    account_type: Mapped[AccountType] = mapped_column(
        String(20),
        nullable=False,
    )

    # Contra accounts carry their balance on the opposite side of their type
    contra: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    currency: Mapped[str] = mapped_column(
        String(3),
        nullable=False,
    )

    amounts: Mapped[list["Amount"]] = relationship(
        back_populates="account",
        lazy="dynamic",
    )

    def __repr__(self) -> str:
        return f"<Account {self.name} ({self.account_type}{', contra' if self.contra else ''})>"

    @property
    def normal_balance(self) -> NormalBalance:
        return polarity(self.account_type, self.contra)

    @property
    def is_debit_normal(self) -> bool:
        return self.normal_balance is NormalBalance.DEBIT

    @property
    def is_credit_normal(self) -> bool:
        return self.normal_balance is NormalBalance.CREDIT
