from cofinance.models.account import Account
from cofinance.models.subscription import Subscription
from cofinance.models.transaction import Transaction

# tipos de registro que maneja el RecordStore
RECORD_KINDS = (Account, Transaction, Subscription)

__all__ = ["Account", "RECORD_KINDS", "Subscription", "Transaction"]
