# models/transaction.py
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from cofinance.database import Base
from cofinance.models.account import new_id


class Transaction(Base):
    __tablename__ = "transaction"

    pk = Column(Integer, primary_key=True)
    id = Column(String(36), unique=True, nullable=False, default=new_id)
    name = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # siempre >= 0, el signo lo da is_income
    is_income = Column(Boolean, nullable=False, default=False)
    # referencia por nombre, no por id: renombrar la cuenta deja huérfanas sus transacciones
    account_name = Column(String(100), nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    date = Column(DateTime, nullable=False, default=datetime.now)
    notes = Column(Text, nullable=True)

    EDITABLE = ("name", "amount", "is_income", "account_name", "category", "date", "notes")

    def __repr__(self):
        return f"<Transaction id={self.id} account={self.account_name} date={self.date} amount={self.signed_amount}>"

    @property
    def signed_amount(self) -> Decimal:
        amount = Decimal(self.amount or 0)
        return amount if self.is_income else -amount

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "amount": float(self.amount),
            "is_income": bool(self.is_income),
            "account_name": self.account_name,
            "category": self.category,
            "date": self.date.isoformat(),
            "notes": self.notes,
        }
