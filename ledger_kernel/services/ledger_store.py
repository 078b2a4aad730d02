"""
LedgerStore -- persistence of accounts, entries and amounts.

Responsibility:
    Defines the storage interface the ledger engine reads through
    (``LedgerStore``) and implements it on a SQLAlchemy session
    (``SqlLedgerStore``).  Every write passes validation before anything is
    added to the session; an entry and all of its amounts go out in a single
    flush.

Architecture position:
    Kernel > Services -- imperative shell.  Calls the pure validation in
    ``ledger_kernel.domain.entry``; owns no transaction (callers commit).

Invariants enforced:
    - Only entries that pass ``require_valid`` are persisted.
    - Every amount references an existing account and uses that account's
      currency.
    - Account names are unique.
    - No update or delete path exists for entries; ``truncate`` is a
      test-only reset hook.

Failure modes:
    - AccountValidationError: missing/invalid account fields, duplicate name.
    - InvalidEntryError / UnbalancedEntryError: the draft breaks a
      double-entry rule (nothing is written).
    - AccountNotFoundError: an amount references an unknown account.
    - CurrencyMismatchError: an amount's currency differs from its account's.
    - StoreError: the flush failed; the caller rolls back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from ledger_kernel.db.base import Base
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.entry import (
    EntryDraft,
    cutoff_timestamp,
    entry_timestamp,
    require_valid,
)
from ledger_kernel.domain.polarity import AccountType, LineSide
from ledger_kernel.domain.values import Currency, MoneyConfig
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    AccountValidationError,
    CurrencyMismatchError,
    UnbalancedEntryError,
    UnknownCurrencyError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.entry import Amount, Entry
from ledger_kernel.services.base import BaseService

logger = get_logger("services.ledger_store")

_ACCOUNT_FIELDS = frozenset({"name", "type", "account_type", "contra", "currency"})


def validate_account_fields(
    fields: Mapping[str, Any],
    default_currency: Currency | str = "USD",
) -> dict[str, Any]:
    """
    Check and normalize the fields of a new account.

    ``type`` and ``account_type`` are accepted as the same field.  ``contra``
    defaults to False and ``currency`` to ``default_currency``.

    Returns:
        Column values for Account: name, account_type, contra, currency.

    Raises:
        AccountValidationError: With every problem found, keyed by field.
    """
    errors: dict[str, str] = {}

    for key in sorted(set(fields) - _ACCOUNT_FIELDS):
        errors[key] = "unknown field"

    name = fields.get("name")
    if not isinstance(name, str) or not name.strip():
        errors["name"] = "can't be blank"

    raw_type = fields.get("account_type", fields.get("type"))
    account_type: AccountType | None = None
    if raw_type is None:
        errors["type"] = "can't be blank"
    else:
        try:
            account_type = AccountType(raw_type)
        except ValueError:
            errors["type"] = f"is invalid: {raw_type!r}"

    contra = fields.get("contra", False)
    if not isinstance(contra, bool):
        errors["contra"] = "must be a boolean"

    currency: Currency | None = None
    try:
        currency = Currency.resolve(fields.get("currency") or default_currency)
    except UnknownCurrencyError as exc:
        errors["currency"] = f"is invalid: {exc.currency!r}"

    if errors:
        raise AccountValidationError(errors)

    return {
        "name": name.strip(),
        "account_type": account_type.value,
        "contra": contra,
        "currency": currency.code,
    }


class LedgerStore(ABC):
    """
    Storage interface used by the ledger engine.

    Implementations must make ``insert_entry`` all-or-nothing and must sum
    only amounts whose entry date is at or before ``up_to``.
    """

    @abstractmethod
    def insert_account(self, fields: Mapping[str, Any]) -> Account:
        ...

    @abstractmethod
    def insert_entry(self, draft: EntryDraft) -> Entry:
        ...

    @abstractmethod
    def sum_amounts(
        self,
        account_id: UUID,
        side: LineSide,
        up_to: datetime | date | None = None,
    ) -> int:
        """Total of one side of an account in minor units (0 if none)."""
        ...

    @abstractmethod
    def list_entries(
        self,
        account_id: UUID | None = None,
        up_to: datetime | date | None = None,
    ) -> list[Entry]:
        """Posted entries in date order, optionally only those touching one account."""
        ...

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        ...

    @abstractmethod
    def get_account(self, account_id: UUID) -> Account:
        ...

    @abstractmethod
    def truncate(self, model: type[Base]) -> int:
        ...


class SqlLedgerStore(BaseService, LedgerStore):
    """
    LedgerStore on a caller-owned SQLAlchemy session.

    Contract:
        Flushes, never commits.  Wrap calls in ``session_scope()`` (or commit
        the session yourself) to make writes durable.

    Guarantees:
        - insert_entry writes the entry and all of its amounts in one flush.
        - Entries without an explicit date are stamped with ``clock.now()``.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        money_config: MoneyConfig | None = None,
    ):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._money_config = money_config or MoneyConfig()

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def insert_account(self, fields: Mapping[str, Any]) -> Account:
        """
        Create an account.

        Raises:
            AccountValidationError: Invalid fields or duplicate name.
            StoreError: The flush failed.
        """
        values = validate_account_fields(fields, self._money_config.default_currency)

        existing = self.session.execute(
            select(Account.id).where(Account.name == values["name"])
        ).first()
        if existing is not None:
            raise AccountValidationError({"name": "has already been taken"})

        account = Account(**values)
        self.session.add(account)
        self._flush("insert_account")

        with LogContext.bind(account_id=str(account.id)):
            logger.info(
                "account_created",
                extra={
                    "account_name": account.name,
                    "account_type": account.account_type,
                    "contra": account.contra,
                    "currency": account.currency,
                },
            )
        return account

    def get_account(self, account_id: UUID | str) -> Account:
        """
        Raises:
            AccountNotFoundError: If no account has this id.
        """
        if isinstance(account_id, str):
            try:
                account_id = UUID(account_id)
            except ValueError:
                raise AccountNotFoundError(account_id) from None
        account = self.session.get(Account, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def list_accounts(self) -> list[Account]:
        return list(self.session.scalars(select(Account).order_by(Account.name)))

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def insert_entry(self, draft: EntryDraft) -> Entry:
        """
        Validate and persist an entry with all of its amounts.

        Raises:
            InvalidEntryError: Too few amounts, negative amount, mixed
                currencies.
            UnbalancedEntryError: Debits != credits.
            AccountNotFoundError: An amount references an unknown account.
            CurrencyMismatchError: An amount is not in its account's currency.
            StoreError: The flush failed.
        """
        try:
            validation = require_valid(draft)
        except UnbalancedEntryError as exc:
            logger.warning(
                "unbalanced_entry",
                extra={
                    "debits": exc.debits,
                    "credits": exc.credits,
                    "currency": exc.currency,
                },
            )
            raise

        logger.debug(
            "entry_validated",
            extra={
                "amount_count": len(draft.amounts),
                "total": validation.debits,
                "currency": validation.currency,
            },
        )

        for spec in draft.amounts:
            account = self.get_account(spec.account_id)
            if account.currency != spec.money.currency.code:
                raise CurrencyMismatchError(
                    account.currency, spec.money.currency.code, "post"
                )

        when = entry_timestamp(draft.date) if draft.date is not None else self._clock.now()
        entry = Entry(
            date=when,
            description=draft.description,
            amounts=[
                Amount(
                    account_id=spec.account_id,
                    side=spec.side.value,
                    amount=spec.money.amount,
                    currency=spec.money.currency.code,
                )
                for spec in draft.amounts
            ],
        )
        self.session.add(entry)
        self._flush("insert_entry")

        with LogContext.bind(entry_id=str(entry.id)):
            logger.info(
                "entry_posted",
                extra={
                    "date": when,
                    "amount_count": len(entry.amounts),
                    "total": validation.debits,
                    "currency": validation.currency,
                },
            )
        return entry

    def sum_amounts(
        self,
        account_id: UUID,
        side: LineSide,
        up_to: datetime | date | None = None,
    ) -> int:
        stmt = (
            select(func.coalesce(func.sum(Amount.amount), 0))
            .join(Entry, Amount.entry_id == Entry.id)
            .where(Amount.account_id == account_id)
            .where(Amount.side == LineSide(side).value)
        )
        if up_to is not None:
            stmt = stmt.where(Entry.date <= cutoff_timestamp(up_to))
        return int(self.session.execute(stmt).scalar_one())

    def list_entries(
        self,
        account_id: UUID | None = None,
        up_to: datetime | date | None = None,
    ) -> list[Entry]:
        stmt = select(Entry).order_by(Entry.date, Entry.created_at)
        if account_id is not None:
            stmt = stmt.where(Entry.amounts.any(Amount.account_id == account_id))
        if up_to is not None:
            stmt = stmt.where(Entry.date <= cutoff_timestamp(up_to))
        return list(self.session.scalars(stmt))

    # ------------------------------------------------------------------
    # Test support
    # ------------------------------------------------------------------

    def truncate(self, model: type[Base]) -> int:
        """
        Delete every row of ``model`` and of the tables that reference it.

        Test-only reset hook.  Returns the number of ``model`` rows deleted.
        """
        tables = Base.metadata.sorted_tables
        doomed = {model.__table__}
        for table in tables:
            if any(fk.column.table in doomed for fk in table.foreign_keys):
                doomed.add(table)

        deleted = 0
        for table in reversed(tables):
            if table in doomed:
                result = self.session.execute(delete(table))
                if table is model.__table__:
                    deleted = result.rowcount
        # drop identity-map copies of rows that no longer exist
        self.session.expunge_all()
        logger.info(
            "table_truncated",
            extra={"table": model.__tablename__, "rows": deleted},
        )
        return deleted
