# models/subscription.py
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from cofinance.database import Base
from cofinance.models.account import new_id
from cofinance.utils.billing import MONTHLY, monthly_equivalent


class Subscription(Base):
    __tablename__ = "subscription"

    pk = Column(Integer, primary_key=True)
    id = Column(String(36), unique=True, nullable=False, default=new_id)
    name = Column(String(100), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # cargo por ciclo
    billing_cycle = Column(String(20), nullable=False, default=MONTHLY)  # Weekly, Monthly, Annual, Custom
    interval_days = Column(Integer, nullable=False, default=30)  # solo para Custom
    next_payment_date = Column(DateTime, nullable=False, default=datetime.now)
    account_name = Column(String(100), nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    EDITABLE = (
        "name", "amount", "billing_cycle", "interval_days", "next_payment_date",
        "account_name", "category", "notes", "is_active",
    )

    def __repr__(self):
        return f"<Subscription id={self.id} name={self.name} amount={self.amount} cycle={self.billing_cycle}>"

    @property
    def monthly_amount(self) -> Decimal:
        return monthly_equivalent(self.amount, self.billing_cycle, self.interval_days)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "amount": float(self.amount),
            "billing_cycle": self.billing_cycle,
            "interval_days": self.interval_days,
            "next_payment_date": self.next_payment_date.isoformat(),
            "account_name": self.account_name,
            "category": self.category,
            "notes": self.notes,
            "is_active": bool(self.is_active),
        }
