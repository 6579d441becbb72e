"""CoFinance - registro local de cuentas, transacciones y suscripciones."""

from cofinance.database import Database
from cofinance.errors import NotFoundError, PersistenceError, StoreError, StoreInitializationError
from cofinance.models import Account, Subscription, Transaction
from cofinance.notifier import ChangeNotifier, QueuedDispatcher
from cofinance.store import RecordStore

__version__ = "0.1.0"
__all__ = [
    "Account",
    "ChangeNotifier",
    "Database",
    "NotFoundError",
    "PersistenceError",
    "QueuedDispatcher",
    "RecordStore",
    "StoreError",
    "StoreInitializationError",
    "Subscription",
    "Transaction",
]
