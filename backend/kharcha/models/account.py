from sqlalchemy import Column, String, Boolean, DateTime, Float, ForeignKey, Enum as SQLEnum
import enum

from kharcha.core.database import Base
from kharcha.core.types import GUID, generate_uuid
from kharcha.utils.dates import utcnow


class AccountType(str, enum.Enum):
    """Where money is spent from"""
    CASH = "Cash"
    BANK = "Bank"
    CREDIT_CARD = "Credit Card"
    UPI = "UPI"
    LOAN = "Loan"
    WALLET = "Wallet"
    OTHER = "Other"


class Account(Base):
    __tablename__ = "accounts"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String(100), nullable=False)
    type = Column(SQLEnum(AccountType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    color_hex = Column(String(9), default="#6366f1", nullable=False)
    budget = Column(Float, nullable=True)  # Monthly limit
    is_archived = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Account {self.name} ({self.type})>"
