"""
Polarity -- account types and their normal balance side.

Responsibility:
    Maps (account type, contra flag) to the side on which the account
    normally carries its balance, and to the sign used when folding balances
    into the trial balance.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Imported by models and services.

Invariants enforced:
    - Assets and expenses are debit-normal; liabilities, equity and revenue
      are credit-normal.
    - A contra account takes the opposite side of its type.
    - sign(DEBIT) = +1, sign(CREDIT) = -1, so the signed sum of every
      account balance equals total debits minus total credits.
"""

from __future__ import annotations

from enum import Enum


class AccountType(str, Enum):
    """Types of accounts in the chart of accounts."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class NormalBalance(str, Enum):
    """Normal balance side for an account."""

    DEBIT = "debit"
    CREDIT = "credit"

    def opposite(self) -> NormalBalance:
        return NormalBalance.CREDIT if self is NormalBalance.DEBIT else NormalBalance.DEBIT


class LineSide(str, Enum):
    """Side of a single amount within an entry."""

    DEBIT = "debit"
    CREDIT = "credit"


POLARITY: dict[tuple[AccountType, bool], NormalBalance] = {
    (AccountType.ASSET, False): NormalBalance.DEBIT,
    (AccountType.ASSET, True): NormalBalance.CREDIT,
    (AccountType.EXPENSE, False): NormalBalance.DEBIT,
    (AccountType.EXPENSE, True): NormalBalance.CREDIT,
    (AccountType.LIABILITY, False): NormalBalance.CREDIT,
    (AccountType.LIABILITY, True): NormalBalance.DEBIT,
    (AccountType.EQUITY, False): NormalBalance.CREDIT,
    (AccountType.EQUITY, True): NormalBalance.DEBIT,
    (AccountType.REVENUE, False): NormalBalance.CREDIT,
    (AccountType.REVENUE, True): NormalBalance.DEBIT,
}


def polarity(account_type: AccountType | str, contra: bool = False) -> NormalBalance:
    """
    Normal balance side of an account.

    Raises:
        ValueError: If ``account_type`` is not a known AccountType.
    """
    return POLARITY[(AccountType(account_type), bool(contra))]


def polarity_sign(normal_balance: NormalBalance) -> int:
    """+1 for debit-normal accounts, -1 for credit-normal accounts."""
    return 1 if normal_balance is NormalBalance.DEBIT else -1
