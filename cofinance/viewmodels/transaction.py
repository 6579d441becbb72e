# viewmodels/transaction.py
from collections import defaultdict
from decimal import Decimal

import structlog

from cofinance.errors import StoreError
from cofinance.models import Transaction
from cofinance.utils.dates import month_key, month_label, week_label
from cofinance.viewmodels.base import ViewModel

logger = structlog.get_logger(__name__)

ALL_ACCOUNTS = "All"
UNCATEGORIZED = "Uncategorized"


def total_income(transactions) -> Decimal:
    return sum((Decimal(t.amount) for t in transactions if t.is_income), Decimal("0"))


def total_expenses(transactions) -> Decimal:
    return sum((Decimal(t.amount) for t in transactions if not t.is_income), Decimal("0"))


def net_balance(transactions) -> Decimal:
    return total_income(transactions) - total_expenses(transactions)


def belongs_to(record, account_name: str) -> bool:
    return account_name == ALL_ACCOUNTS or record.account_name == account_name


def matches(record, text: str) -> bool:
    """Búsqueda sin distinguir mayúsculas en nombre, categoría, cuenta y notas."""
    if not text:
        return True
    needle = text.lower()
    fields = (record.name, record.category, record.account_name, record.notes)
    return any(needle in (value or "").lower() for value in fields)


def grouped_by_month(transactions):
    """[(etiqueta, [transacciones])] del mes más reciente al más antiguo."""
    groups = defaultdict(list)
    for t in transactions:
        groups[month_key(t.date)].append(t)
    return [(month_label(items[0].date), items) for _, items in sorted(groups.items(), reverse=True)]


def expenses_by_category(transactions, limit: int | None = None):
    """
    Gastos sumados por categoría: [(categoría, importe, porcentaje)] de mayor
    a menor importe. El porcentaje es sobre el total de gastos (0 si no hay).
    """
    totals = defaultdict(Decimal)
    for t in transactions:
        if not t.is_income:
            totals[t.category or UNCATEGORIZED] += Decimal(t.amount)
    total = sum(totals.values(), Decimal("0"))
    rows = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        rows = rows[:limit]
    return [(category, amount, amount / total * 100 if total else Decimal("0")) for category, amount in rows]


def grouped_by_week(transactions):
    groups = defaultdict(list)
    for t in transactions:
        year, week, _ = t.date.isocalendar()
        groups[(year, week)].append(t)
    return [(week_label(items[0].date), items) for _, items in sorted(groups.items(), reverse=True)]


class TransactionViewModel(ViewModel):
    what = "transactions"

    def __init__(self, store):
        self.transactions = ()
        self.total_income = Decimal("0")
        self.total_expenses = Decimal("0")
        self.net_balance = Decimal("0")
        super().__init__(store)

    def _load(self):
        self.transactions = tuple(self.store.fetch_transactions())

    def _recompute(self):
        self.total_income = total_income(self.transactions)
        self.total_expenses = total_expenses(self.transactions)
        self.net_balance = self.total_income - self.total_expenses

    def for_account(self, account_name: str):
        return [t for t in self.transactions if belongs_to(t, account_name)]

    def search(self, text: str, account_name: str = ALL_ACCOUNTS):
        return [t for t in self.for_account(account_name) if matches(t, text)]

    def grouped_by_month(self, account_name: str = ALL_ACCOUNTS):
        return grouped_by_month(self.for_account(account_name))

    def grouped_by_week(self, account_name: str = ALL_ACCOUNTS):
        return grouped_by_week(self.for_account(account_name))

    def expenses_by_category(self, account_name: str = ALL_ACCOUNTS, limit: int | None = None):
        return expenses_by_category(self.for_account(account_name), limit)

    def count_by_account(self) -> dict[str, int]:
        counts = defaultdict(int)
        for t in self.transactions:
            counts[t.account_name] += 1
        return dict(counts)

    def add_transaction(self, name: str, amount, is_income: bool = False, account_name: str = "",
                        category: str = "", date=None, notes: str | None = None):
        try:
            return self.store.add_transaction(name, amount, is_income=is_income, account_name=account_name,
                                              category=category, date=date, notes=notes)
        except (StoreError, ValueError) as exc:
            self.error_message = f"Error saving transaction: {exc}"
            logger.error("transaction_save_failed", name=name, error=str(exc))
            return None

    def delete_transaction(self, transaction_id: str) -> bool:
        try:
            return self.store.delete(Transaction, transaction_id)
        except StoreError as exc:
            self.error_message = f"Error deleting transaction: {exc}"
            logger.error("transaction_delete_failed", id=transaction_id, error=str(exc))
            return False
