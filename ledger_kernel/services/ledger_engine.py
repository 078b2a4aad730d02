"""
LedgerEngine -- account balances, the trial balance and the entry history.

Responsibility:
    Folds posted amounts into Money.  ``balance`` nets one account on its
    normal side; ``trial_balance`` signs every account balance by polarity
    and sums them, which equals total debits minus total credits and must be
    zero for a consistent ledger.  ``entries`` reads posted entries back as
    frozen EntryRecords.

Architecture position:
    Kernel > Services -- read-only.  Reads through a LedgerStore and never
    writes; holds no state between calls, so one engine may be shared by
    threads that each bring their own store (session).

Invariants enforced:
    - Balances are derived from amounts on every call; nothing is cached.
    - Only amounts whose entry date is at or before the cutoff count.
    - trial_balance is single-currency: an account in another currency than
      the ledger default raises CurrencyMismatchError.

Failure modes:
    - AccountNotFoundError: ``balance`` was given an unknown account id.
    - CurrencyMismatchError: see above.
"""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.dtos import AccountInfo, EntryRecord
from ledger_kernel.domain.entry import cutoff_timestamp
from ledger_kernel.domain.polarity import LineSide, NormalBalance, polarity_sign
from ledger_kernel.domain.values import Money, MoneyConfig
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.services.ledger_store import LedgerStore

logger = get_logger("services.ledger_engine")


class LedgerEngine:
    """
    Computes balances from a LedgerStore.

    Contract:
        ``to_date`` may be a datetime (inclusive) or a bare date (the whole
        day is included).  When omitted the clock's current time is used.
    """

    def __init__(
        self,
        store: LedgerStore,
        clock: Clock | None = None,
        money_config: MoneyConfig | None = None,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._money_config = money_config or MoneyConfig()

    def _cutoff(self, to_date: datetime | date | None) -> datetime:
        return cutoff_timestamp(to_date) if to_date is not None else self._clock.now()

    def _resolve(self, account: Account | AccountInfo | UUID | str) -> Account | AccountInfo:
        if isinstance(account, (Account, AccountInfo)):
            return account
        return self._store.get_account(account)

    def balance(
        self,
        account: Account | AccountInfo | UUID | str,
        to_date: datetime | date | None = None,
    ) -> Money:
        """
        Net balance of one account on its normal side.

        Debit-normal accounts report debits minus credits; credit-normal
        accounts report credits minus debits.  The result is in the
        account's currency.
        """
        resolved = self._resolve(account)
        return self._balance_at(resolved, self._cutoff(to_date))

    def _balance_at(self, account: Account | AccountInfo, cutoff: datetime) -> Money:
        debits = self._store.sum_amounts(account.id, LineSide.DEBIT, cutoff)
        credits = self._store.sum_amounts(account.id, LineSide.CREDIT, cutoff)
        if account.normal_balance is NormalBalance.DEBIT:
            net = debits - credits
        else:
            net = credits - debits
        result = Money.of(net, account.currency)

        with LogContext.bind(account_id=str(account.id)):
            logger.debug(
                "balance_computed",
                extra={
                    "normal_balance": account.normal_balance.value,
                    "debits": debits,
                    "credits": credits,
                    "balance": net,
                    "cutoff": cutoff,
                },
            )
        return result

    def entries(
        self,
        account: Account | AccountInfo | UUID | str | None = None,
        to_date: datetime | date | None = None,
    ) -> list[EntryRecord]:
        """
        Posted entries up to the cutoff, oldest first, as frozen records.

        With ``account`` only entries having an amount on that account are
        returned; each record still carries all of its amounts.
        """
        account_id = self._resolve(account).id if account is not None else None
        models = self._store.list_entries(account_id, self._cutoff(to_date))
        return [EntryRecord.from_model(model) for model in models]

    def trial_balance(self, to_date: datetime | date | None = None) -> Money:
        """
        Sum of every account balance signed by polarity.

        Debit-normal balances count positive and credit-normal balances
        negative, so the total is debits minus credits across the ledger:
        zero when every posted entry balanced.

        Raises:
            CurrencyMismatchError: An account is not in the ledger currency.
        """
        cutoff = self._cutoff(to_date)
        total = self._money_config.zero()
        accounts = self._store.list_accounts()
        for account in accounts:
            signed = self._balance_at(account, cutoff).multiply(
                polarity_sign(account.normal_balance)
            )
            total = total.add(signed)

        logger.info(
            "trial_balance_computed",
            extra={
                "account_count": len(accounts),
                "total": total.amount,
                "currency": total.currency.code,
                "cutoff": cutoff,
            },
        )
        if not total.is_zero:
            logger.warning(
                "trial_balance_nonzero",
                extra={"total": total.amount, "currency": total.currency.code},
            )
        return total
