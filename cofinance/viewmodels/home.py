# viewmodels/home.py
from datetime import date
from decimal import Decimal
from typing import Callable

from cofinance.utils.dates import same_month
from cofinance.viewmodels.account import total_balance
from cofinance.viewmodels.base import ViewModel
from cofinance.viewmodels.transaction import total_expenses, total_income

RECENT_LIMIT = 5


class HomeViewModel(ViewModel):
    """Resumen de la pantalla de inicio: saldo total y actividad del mes."""

    what = "summary"

    def __init__(self, store, today: Callable[[], date] = date.today):
        self._today = today
        self.accounts = ()
        self.transactions = ()
        self.total_balance = Decimal("0")
        self.transactions_this_month = 0
        self.income_this_month = Decimal("0")
        self.expenses_this_month = Decimal("0")
        self.recent_transactions = ()
        super().__init__(store)

    def _load(self):
        # las dos lecturas antes de asignar: si una falla se conserva todo lo anterior
        accounts = tuple(self.store.fetch_accounts())
        transactions = tuple(self.store.fetch_transactions())
        self.accounts, self.transactions = accounts, transactions

    def _recompute(self):
        today = self._today()
        this_month = [t for t in self.transactions if same_month(t.date, today)]
        self.total_balance = total_balance(self.accounts)
        self.transactions_this_month = len(this_month)
        self.income_this_month = total_income(this_month)
        self.expenses_this_month = total_expenses(this_month)
        self.recent_transactions = self.transactions[:RECENT_LIMIT]
