# viewmodels/account.py
from collections import defaultdict
from decimal import Decimal

import structlog

from cofinance.errors import StoreError
from cofinance.models import Account
from cofinance.viewmodels.base import ViewModel

logger = structlog.get_logger(__name__)


def total_balance(accounts) -> Decimal:
    return sum((Decimal(a.balance or 0) for a in accounts), Decimal("0"))


def balance_by_type(accounts) -> dict[str, Decimal]:
    """Suma de saldos por tipo; sin tipo se agrupa en 'Other'."""
    totals = defaultdict(lambda: Decimal("0"))
    for account in accounts:
        totals[account.type_key] += Decimal(account.balance or 0)
    return dict(totals)


class AccountViewModel(ViewModel):
    what = "accounts"

    def __init__(self, store, order: str = "balance"):
        self.order = order
        self.accounts = ()
        self.total_balance = Decimal("0")
        self.balance_by_type = {}
        super().__init__(store)

    def _load(self):
        self.accounts = tuple(self.store.fetch_accounts(self.order))

    def _recompute(self):
        self.total_balance = total_balance(self.accounts)
        self.balance_by_type = balance_by_type(self.accounts)

    def update_account_balance(self, account_id: str, new_balance) -> bool:
        try:
            self.store.update(Account, account_id, {"balance": new_balance})
        except (StoreError, ValueError) as exc:
            self.error_message = f"Error updating account balance: {exc}"
            logger.error("account_balance_update_failed", id=account_id, error=str(exc))
            return False
        return True
