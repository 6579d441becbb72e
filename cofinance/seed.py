# cofinance/seed.py
"""Datos de ejemplo para el primer arranque."""
from datetime import datetime, timedelta
from decimal import Decimal

import structlog

from cofinance.models import Account, Transaction

logger = structlog.get_logger(__name__)

SAMPLE_ACCOUNTS = [
    {"name": "Main Account", "type": "Bank", "balance": Decimal("25430.50"), "color": "blue"},
    {"name": "Credit Card", "type": "Credit", "balance": Decimal("-2150.00"), "color": "purple"},
    {"name": "Cash", "type": "Cash", "balance": Decimal("850.00"), "color": "green"},
    {"name": "Savings", "type": "Bank", "balance": Decimal("15000.00"), "color": "orange"},
]

# (nombre, importe, ingreso, cuenta, categoría, días atrás)
SAMPLE_TRANSACTIONS = [
    ("Salary", Decimal("5000.00"), True, "Main Account", "Salary", 0),
    ("Groceries", Decimal("120.50"), False, "Main Account", "Food", 1),
    ("Gas", Decimal("45.00"), False, "Main Account", "Transport", 2),
    ("Freelance Web", Decimal("800.00"), True, "Main Account", "Freelance", 7),
    ("Netflix", Decimal("15.99"), False, "Credit Card", "Entertainment", 7),
]


def sample_items(now: datetime | None = None):
    if now is None:
        now = datetime.now()
    items = [(Account, dict(fields)) for fields in SAMPLE_ACCOUNTS]
    for name, amount, is_income, account_name, category, days_ago in SAMPLE_TRANSACTIONS:
        items.append((Transaction, {
            "name": name,
            "amount": amount,
            "is_income": is_income,
            "account_name": account_name,
            "category": category,
            "date": now - timedelta(days=days_ago),
        }))
    return items


def seed_sample_data(store, now: datetime | None = None) -> bool:
    """
    Inserta los datos de ejemplo solo si no hay ni cuentas ni transacciones.
    Devuelve True si insertó algo.
    """
    if store.count(Account) or store.count(Transaction):
        logger.debug("seed_skipped")
        return False
    # los saldos de ejemplo ya son los finales: no se enlazan con las transacciones
    records = store.create_many(sample_items(now), link_balances=False)
    logger.info("seed_inserted", records=len(records))
    return True
