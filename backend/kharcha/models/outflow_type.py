from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint

from kharcha.core.database import Base
from kharcha.core.types import GUID, generate_uuid
from kharcha.utils.dates import utcnow

SUBSCRIPTION = "Subscription"
LOAN = "EMI/Loan"
MONEY_LENT = "Money Lent"
CREDIT_CARD = "Credit Card Bill"

# Built-in types created for every new user: (name, emoji, color, extra fields)
DEFAULT_OUTFLOW_TYPES = [
    ("Food", "🍔", "#f97316", []),
    ("Transport", "🚕", "#0ea5e9", []),
    ("Shopping", "🛍️", "#ec4899", []),
    ("Bills", "🧾", "#64748b", []),
    (SUBSCRIPTION, "🔁", "#8b5cf6", [
        {"key": "provider", "label": "Provider", "type": "text"},
        {"key": "renewal_date", "label": "Renewal date", "type": "date"},
        {"key": "remind", "label": "Remind me", "type": "toggle"},
    ]),
    (LOAN, "🏦", "#ef4444", [
        {"key": "loan_name", "label": "Loan name", "type": "text"},
        {"key": "emi_amount", "label": "EMI amount", "type": "number"},
        {"key": "interest_rate", "label": "Interest rate", "type": "number"},
    ]),
    (MONEY_LENT, "🤝", "#22c55e", [
        {"key": "borrower_name", "label": "Borrower", "type": "text"},
        {"key": "due_date", "label": "Due date", "type": "date"},
        {"key": "interest_rate", "label": "Interest rate", "type": "number"},
    ]),
    (CREDIT_CARD, "💳", "#eab308", [
        {"key": "statement_date", "label": "Statement date", "type": "date"},
        {"key": "min_due", "label": "Minimum due", "type": "number"},
    ]),
    ("Other", "📦", "#94a3b8", []),
]


class OutflowType(Base):
    """Spending category; custom ones can declare extra metadata fields"""
    __tablename__ = "outflow_types"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_outflow_types_user_name"),)

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    name = Column(String(100), nullable=False)
    emoji = Column(String(16), default="📦", nullable=False)
    color_hex = Column(String(9), default="#94a3b8", nullable=False)
    is_custom = Column(Boolean, default=True, nullable=False)
    extra_fields = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<OutflowType {self.emoji} {self.name}>"
