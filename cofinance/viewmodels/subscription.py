# viewmodels/subscription.py
from collections import defaultdict
from datetime import date
from decimal import Decimal

from cofinance.utils.billing import is_due_soon, is_overdue
from cofinance.utils.dates import month_key, month_label
from cofinance.viewmodels.base import ViewModel
from cofinance.viewmodels.transaction import ALL_ACCOUNTS, belongs_to, matches


def monthly_total(subscriptions) -> Decimal:
    return sum((s.monthly_amount for s in subscriptions), Decimal("0"))


class SubscriptionViewModel(ViewModel):
    """Solo suscripciones activas, por próxima fecha de pago."""

    what = "subscriptions"

    def __init__(self, store):
        self.subscriptions = ()
        self.monthly_total = Decimal("0")
        self.yearly_total = Decimal("0")
        super().__init__(store)

    def _load(self):
        self.subscriptions = tuple(self.store.fetch_subscriptions())

    def _recompute(self):
        self.monthly_total = monthly_total(self.subscriptions)
        self.yearly_total = self.monthly_total * 12

    def for_account(self, account_name: str):
        return [s for s in self.subscriptions if belongs_to(s, account_name)]

    def search(self, text: str, account_name: str = ALL_ACCOUNTS):
        return [s for s in self.for_account(account_name) if matches(s, text)]

    def due_soon(self, today: date | None = None):
        return [s for s in self.subscriptions if is_due_soon(s.next_payment_date, today)]

    def overdue(self, today: date | None = None):
        return [s for s in self.subscriptions if is_overdue(s.next_payment_date, today)]

    def grouped_by_next_payment_month(self):
        groups = defaultdict(list)
        for s in self.subscriptions:
            groups[month_key(s.next_payment_date)].append(s)
        return [(month_label(items[0].next_payment_date), items) for _, items in sorted(groups.items())]
