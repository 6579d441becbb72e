"""Tests for first-run sample data."""

from datetime import datetime
from decimal import Decimal

from cofinance.models import Account, Transaction
from cofinance.seed import SAMPLE_ACCOUNTS, SAMPLE_TRANSACTIONS, seed_sample_data
from cofinance.store import RecordStore

from conftest import NotificationRecorder


class TestSeedSampleData:
    """Tests for seed_sample_data function."""

    def test_seeds_empty_store(self, store: RecordStore) -> None:
        assert seed_sample_data(store) is True

        assert store.count(Account) == len(SAMPLE_ACCOUNTS)
        assert store.count(Transaction) == len(SAMPLE_TRANSACTIONS)

    def test_main_account_balance(self, store: RecordStore) -> None:
        seed_sample_data(store)

        main = [a for a in store.fetch_accounts() if a.name == "Main Account"]

        assert len(main) == 1
        assert main[0].balance == Decimal("25430.50")

    def test_second_seed_does_not_duplicate(self, store: RecordStore) -> None:
        seed_sample_data(store)

        assert seed_sample_data(store) is False
        assert store.count(Account) == len(SAMPLE_ACCOUNTS)
        assert store.count(Transaction) == len(SAMPLE_TRANSACTIONS)

    def test_skips_when_only_accounts_exist(self, store: RecordStore) -> None:
        store.add_account("Mine")

        assert seed_sample_data(store) is False
        assert store.count(Transaction) == 0

    def test_skips_when_only_transactions_exist(self, store: RecordStore) -> None:
        store.add_transaction("Mine", 1)

        assert seed_sample_data(store) is False
        assert store.count(Account) == 0

    def test_one_notification(self, store: RecordStore) -> None:
        rec = NotificationRecorder(store)

        seed_sample_data(store)

        assert rec.count == 1

    def test_dates_relative_to_now(self, store: RecordStore) -> None:
        now = datetime(2026, 10, 18, 10, 0)

        seed_sample_data(store, now=now)

        newest = store.fetch_transactions()[0]
        assert newest.name == "Salary"
        assert newest.date == now

    def test_linked_store_keeps_literal_balances(self, linked_store: RecordStore) -> None:
        seed_sample_data(linked_store)

        balances = {a.name: a.balance for a in linked_store.fetch_accounts()}

        assert balances["Main Account"] == Decimal("25430.50")
        assert balances["Credit Card"] == Decimal("-2150.00")
