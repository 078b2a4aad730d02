"""
Tests for SqlLedgerStore.

- Account creation and field validation
- Entry posting: validation before write, one flush, account currency
- sum_amounts and list_entries date filtering
- truncate test hook
- StoreError wrapping of database failures
"""

from datetime import date, datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from ledger_kernel.domain.dtos import AccountInfo, EntryRecord
from ledger_kernel.domain.entry import AmountSpec, EntryDraft
from ledger_kernel.domain.polarity import AccountType, LineSide, NormalBalance
from ledger_kernel.domain.values import Money, MoneyConfig
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    AccountValidationError,
    CurrencyMismatchError,
    InvalidEntryError,
    StoreError,
    UnbalancedEntryError,
)
from ledger_kernel.logging_config import LogContext
from ledger_kernel.models import Account, Amount, Entry
from ledger_kernel.services.ledger_store import SqlLedgerStore, validate_account_fields


def count(session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


class TestValidateAccountFields:
    def test_minimal_fields(self):
        values = validate_account_fields({"name": "Cash", "type": "asset"})
        assert values == {
            "name": "Cash",
            "account_type": "asset",
            "contra": False,
            "currency": "USD",
        }

    def test_account_type_alias(self):
        values = validate_account_fields({"name": "Sales", "account_type": AccountType.REVENUE})
        assert values["account_type"] == "revenue"

    def test_default_currency_applied(self):
        values = validate_account_fields({"name": "Kasse", "type": "asset"}, "EUR")
        assert values["currency"] == "EUR"

    def test_name_trimmed(self):
        assert validate_account_fields({"name": "  Cash ", "type": "asset"})["name"] == "Cash"

    def test_collects_every_error(self):
        with pytest.raises(AccountValidationError) as exc_info:
            validate_account_fields(
                {"name": " ", "type": "goodwill", "contra": "yes", "currency": "ZZZ", "colour": 1}
            )
        assert set(exc_info.value.field_errors) == {"name", "type", "contra", "currency", "colour"}
        assert exc_info.value.code == "INVALID_ACCOUNT"

    def test_missing_fields(self):
        with pytest.raises(AccountValidationError) as exc_info:
            validate_account_fields({})
        assert exc_info.value.field_errors == {
            "name": "can't be blank",
            "type": "can't be blank",
        }


class TestInsertAccount:
    def test_creates_account(self, store, session):
        account = store.insert_account({"name": "Cash", "type": "asset"})
        assert account.id is not None
        assert account.normal_balance is NormalBalance.DEBIT
        assert session.get(Account, account.id) is account

    def test_contra_account(self, store):
        drawing = store.insert_account({"name": "Drawing", "type": "equity", "contra": True})
        assert drawing.contra
        assert drawing.is_debit_normal

    def test_currency_defaults_to_ledger_currency(self, session):
        store = SqlLedgerStore(session, money_config=MoneyConfig(default_currency="GBP"))
        assert store.insert_account({"name": "Till", "type": "asset"}).currency == "GBP"

    def test_duplicate_name_rejected(self, store):
        store.insert_account({"name": "Cash", "type": "asset"})
        with pytest.raises(AccountValidationError) as exc_info:
            store.insert_account({"name": "Cash", "type": "liability"})
        assert "name" in exc_info.value.field_errors

    def test_invalid_fields_write_nothing(self, store, session):
        with pytest.raises(AccountValidationError):
            store.insert_account({"name": "Cash", "type": "nope"})
        assert count(session, Account) == 0

    def test_logs_account_created(self, store, captured_logs):
        account = store.insert_account({"name": "Cash", "type": "asset"})
        records = [r for r in captured_logs() if r["message"] == "account_created"]
        assert len(records) == 1
        assert records[0]["account_id"] == str(account.id)
        assert records[0]["account_type"] == "asset"


class TestGetAndListAccounts:
    def test_get_account(self, store, create_account):
        cash = create_account("Cash", "asset")
        assert store.get_account(cash.id) is cash
        assert store.get_account(str(cash.id)) is cash

    def test_get_unknown_account(self, store):
        missing = uuid4()
        with pytest.raises(AccountNotFoundError) as exc_info:
            store.get_account(missing)
        assert exc_info.value.account_id == str(missing)

    def test_get_malformed_id(self, store):
        with pytest.raises(AccountNotFoundError):
            store.get_account("not-a-uuid")

    def test_list_accounts_sorted_by_name(self, store, create_account):
        create_account("Revenue", "revenue")
        create_account("Cash", "asset")
        assert [a.name for a in store.list_accounts()] == ["Cash", "Revenue"]


class TestInsertEntry:
    def test_persists_entry_and_amounts(self, store, session, create_account):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        entry = store.insert_entry(
            EntryDraft(
                amounts=[
                    AmountSpec.debit(cash.id, Money.of(10000, "USD")),
                    AmountSpec.credit(equity.id, Money.of(10000, "USD")),
                ],
                date=date(2024, 1, 5),
                description="Owner investment",
            )
        )
        assert count(session, Entry) == 1
        assert count(session, Amount) == 2
        assert entry.description == "Owner investment"
        assert {a.account_id for a in entry.amounts} == {cash.id, equity.id}
        assert all(a.money == Money.of(10000, "USD") for a in entry.amounts)

    def test_date_defaults_to_clock(self, post_entry, create_account, deterministic_clock):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        entry = post_entry([(cash, "debit", 100), (equity, "credit", 100)])
        assert entry.date == deterministic_clock.now()

    def test_unbalanced_writes_nothing(self, store, session, create_account):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        with pytest.raises(UnbalancedEntryError):
            store.insert_entry(
                EntryDraft(
                    amounts=[
                        AmountSpec.debit(cash.id, Money.of(300, "USD")),
                        AmountSpec.credit(equity.id, Money.of(200, "USD")),
                    ]
                )
            )
        assert count(session, Entry) == 0
        assert count(session, Amount) == 0

    def test_single_amount_rejected(self, store, session, create_account):
        cash = create_account("Cash", "asset")
        with pytest.raises(InvalidEntryError):
            store.insert_entry(
                EntryDraft(amounts=[AmountSpec.debit(cash.id, Money.of(100, "USD"))])
            )
        assert count(session, Entry) == 0

    def test_unknown_account_rejected(self, store, session, create_account):
        cash = create_account("Cash", "asset")
        with pytest.raises(AccountNotFoundError):
            store.insert_entry(
                EntryDraft(
                    amounts=[
                        AmountSpec.debit(cash.id, Money.of(100, "USD")),
                        AmountSpec.credit(uuid4(), Money.of(100, "USD")),
                    ]
                )
            )
        assert count(session, Entry) == 0

    def test_amount_must_match_account_currency(self, store, session, create_account):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        with pytest.raises(CurrencyMismatchError) as exc_info:
            store.insert_entry(
                EntryDraft(
                    amounts=[
                        AmountSpec.debit(cash.id, Money.of(100, "EUR")),
                        AmountSpec.credit(equity.id, Money.of(100, "EUR")),
                    ]
                )
            )
        assert exc_info.value.expected == "USD"
        assert exc_info.value.actual == "EUR"
        assert count(session, Entry) == 0

    def test_logs_posting(self, post_entry, create_account, captured_logs):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        entry = post_entry([(cash, "debit", 100), (equity, "credit", 100)])
        messages = [r["message"] for r in captured_logs()]
        assert "entry_validated" in messages
        posted = [r for r in captured_logs() if r["message"] == "entry_posted"]
        assert posted[0]["entry_id"] == str(entry.id)
        assert posted[0]["total"] == 100

    def test_posting_log_runs_inside_entry_context(
        self, post_entry, create_account, captured_logs
    ):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        with LogContext.bind(correlation_id="req-7"):
            entry = post_entry([(cash, "debit", 100), (equity, "credit", 100)])

        posted = [r for r in captured_logs() if r["message"] == "entry_posted"]
        assert posted[0]["entry_id"] == str(entry.id)
        assert posted[0]["correlation_id"] == "req-7"
        validated = [r for r in captured_logs() if r["message"] == "entry_validated"]
        assert "entry_id" not in validated[0]
        assert LogContext.get_all() == {}

    def test_logs_unbalanced(self, store, create_account, captured_logs):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        with pytest.raises(UnbalancedEntryError):
            store.insert_entry(
                EntryDraft(
                    amounts=[
                        AmountSpec.debit(cash.id, Money.of(300, "USD")),
                        AmountSpec.credit(equity.id, Money.of(200, "USD")),
                    ]
                )
            )
        records = [r for r in captured_logs() if r["message"] == "unbalanced_entry"]
        assert records[0]["level"] == "WARNING"
        assert records[0]["debits"] == 300


class TestSumAmounts:
    def test_sums_one_side(self, store, post_entry, create_account):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        post_entry([(cash, "debit", 100), (equity, "credit", 100)])
        post_entry([(cash, "debit", 250), (equity, "credit", 250)])
        post_entry([(equity, "debit", 50), (cash, "credit", 50)])
        assert store.sum_amounts(cash.id, LineSide.DEBIT) == 350
        assert store.sum_amounts(cash.id, LineSide.CREDIT) == 50

    def test_empty_is_zero(self, store, create_account):
        cash = create_account("Cash", "asset")
        assert store.sum_amounts(cash.id, LineSide.DEBIT) == 0

    def test_filters_by_entry_date(self, store, post_entry, create_account):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        post_entry([(cash, "debit", 100), (equity, "credit", 100)], date=date(2024, 1, 1))
        post_entry([(cash, "debit", 200), (equity, "credit", 200)], date=date(2024, 1, 2))
        assert store.sum_amounts(cash.id, LineSide.DEBIT, date(2023, 12, 31)) == 0
        assert store.sum_amounts(cash.id, LineSide.DEBIT, date(2024, 1, 1)) == 100
        assert store.sum_amounts(cash.id, LineSide.DEBIT, date(2024, 1, 2)) == 300

    def test_date_bound_includes_whole_day(self, store, post_entry, create_account):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        late = datetime(2024, 1, 1, 23, 30, tzinfo=timezone.utc)
        post_entry([(cash, "debit", 100), (equity, "credit", 100)], date=late)
        assert store.sum_amounts(cash.id, LineSide.DEBIT, date(2024, 1, 1)) == 100
        assert store.sum_amounts(
            cash.id, LineSide.DEBIT, datetime(2024, 1, 1, 23, 0, tzinfo=timezone.utc)
        ) == 0

    def test_side_as_string(self, store, post_entry, create_account):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        post_entry([(cash, "debit", 100), (equity, "credit", 100)])
        assert store.sum_amounts(equity.id, "credit") == 100


class TestListEntries:
    def test_date_order_account_and_cutoff(self, store, post_entry, create_account):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        rent = create_account("Rent", "expense")
        late = post_entry([(cash, "debit", 100), (equity, "credit", 100)], date=date(2020, 3, 1))
        early = post_entry([(rent, "debit", 40), (cash, "credit", 40)], date=date(2020, 1, 1))

        assert [e.id for e in store.list_entries()] == [early.id, late.id]
        assert [e.id for e in store.list_entries(rent.id)] == [early.id]
        assert [e.id for e in store.list_entries(up_to=date(2020, 2, 1))] == [early.id]
        assert store.list_entries(equity.id, up_to=date(2020, 2, 1)) == []


class TestReadModels:
    def test_account_info_snapshot(self, create_account):
        drawing = create_account("Drawing", "equity", contra=True)
        info = AccountInfo.from_model(drawing)
        assert info.id == drawing.id
        assert info.account_type is AccountType.EQUITY
        assert info.contra is True
        assert info.currency == "USD"
        assert info.normal_balance is NormalBalance.DEBIT

    def test_entry_record_snapshot(self, post_entry, create_account):
        cash = create_account("Cash", "asset")
        sales = create_account("Sales", "revenue")
        rent = create_account("Rent", "expense")
        entry = post_entry(
            [(cash, "debit", 700), (sales, "credit", 500), (rent, "credit", 200)],
            date=date(2024, 3, 1),
            description="Mixed receipt",
        )

        record = EntryRecord.from_model(entry)
        assert record.id == entry.id
        assert record.date == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert record.description == "Mixed receipt"
        assert len(record.amounts) == 3
        assert record.total(LineSide.DEBIT) == record.total(LineSide.CREDIT) == 700
        assert {a.money for a in record.amounts if a.side is LineSide.CREDIT} == {
            Money.of(500, "USD"),
            Money.of(200, "USD"),
        }


class TestTruncate:
    def test_truncate_entries_removes_amounts(self, store, session, post_entry, create_account):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        post_entry([(cash, "debit", 100), (equity, "credit", 100)])
        post_entry([(cash, "debit", 100), (equity, "credit", 100)])

        assert store.truncate(Entry) == 2
        assert count(session, Entry) == 0
        assert count(session, Amount) == 0
        assert count(session, Account) == 2

    def test_truncate_accounts_removes_dependent_amounts(
        self, store, session, post_entry, create_account
    ):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        post_entry([(cash, "debit", 100), (equity, "credit", 100)])

        assert store.truncate(Account) == 2
        assert count(session, Account) == 0
        assert count(session, Amount) == 0


class TestStoreFailure:
    def test_flush_failure_raises_store_error(
        self, store, session, create_account, monkeypatch, captured_logs
    ):
        cash = create_account("Cash", "asset")
        equity = create_account("Equity", "equity")
        session.commit()

        def failing_flush(*args, **kwargs):
            raise OperationalError("INSERT INTO entries", {}, Exception("connection lost"))

        monkeypatch.setattr(session, "flush", failing_flush)
        with pytest.raises(StoreError) as exc_info:
            store.insert_entry(
                EntryDraft(
                    amounts=[
                        AmountSpec.debit(cash.id, Money.of(100, "USD")),
                        AmountSpec.credit(equity.id, Money.of(100, "USD")),
                    ]
                )
            )
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert exc_info.value.operation == "insert_entry"
        assert exc_info.value.code == "STORE_ERROR"
        assert any(r["message"] == "store_write_failed" for r in captured_logs())

        monkeypatch.undo()
        session.rollback()
        assert count(session, Entry) == 0
        assert count(session, Amount) == 0
        assert count(session, Account) == 2
