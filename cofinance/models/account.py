# models/account.py
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, Numeric, String

from cofinance.database import Base

DEFAULT_ACCOUNT_TYPE = "Other"


def new_id() -> str:
    return str(uuid.uuid4())


class Account(Base):
    __tablename__ = "account"

    pk = Column(Integer, primary_key=True)  # orden de inserción
    id = Column(String(36), unique=True, nullable=False, default=new_id)
    name = Column(String(100), nullable=False)
    type = Column(String(50), nullable=True)  # Bank, Credit, Cash... texto libre
    balance = Column(Numeric(12, 2), nullable=False, default=0)  # puede ser negativo
    color = Column(String(30), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    # campos que se pueden editar con RecordStore.update
    EDITABLE = ("name", "type", "balance", "color")

    def __repr__(self):
        return f"<Account id={self.id} name={self.name} balance={self.balance}>"

    @property
    def type_key(self) -> str:
        return self.type or DEFAULT_ACCOUNT_TYPE

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "balance": float(self.balance or 0),
            "color": self.color,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
