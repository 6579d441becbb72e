from cofinance.viewmodels.account import AccountViewModel
from cofinance.viewmodels.home import HomeViewModel
from cofinance.viewmodels.subscription import SubscriptionViewModel
from cofinance.viewmodels.transaction import TransactionViewModel

__all__ = ["AccountViewModel", "HomeViewModel", "SubscriptionViewModel", "TransactionViewModel"]
