from sqlalchemy import Column, String, DateTime, Float, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship

from kharcha.core.database import Base
from kharcha.core.types import GUID, generate_uuid
from kharcha.utils.dates import utcnow


class Transaction(Base):
    """A single outflow. `meta` holds the type-specific fields (provider, due date...)"""
    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_user_date", "user_id", "date"),)

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    account_id = Column(GUID, ForeignKey("accounts.id"), index=True, nullable=False)
    outflow_type_id = Column(GUID, ForeignKey("outflow_types.id"), index=True, nullable=False)

    amount = Column(Float, nullable=False)
    date = Column(DateTime, nullable=False)
    note = Column(String(500), default="", nullable=False)
    meta = Column("metadata", JSON, default=dict, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    account = relationship("Account", lazy="joined")
    outflow_type = relationship("OutflowType", lazy="joined")

    def __repr__(self):
        return f"<Transaction {self.amount} on {self.date:%Y-%m-%d}>"
