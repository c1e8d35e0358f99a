from sqlalchemy import Column, String, DateTime, Float, ForeignKey, UniqueConstraint

from kharcha.core.database import Base
from kharcha.core.types import GUID, generate_uuid
from kharcha.utils.dates import utcnow


class Budget(Base):
    """Monthly spending target for one outflow type"""
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "outflow_type_id", "month", name="uq_budgets_user_type_month"),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    outflow_type_id = Column(GUID, ForeignKey("outflow_types.id", ondelete="CASCADE"), nullable=False)

    amount = Column(Float, nullable=False)
    month = Column(String(7), index=True, nullable=False)  # YYYY-MM

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Budget {self.month} {self.amount}>"
