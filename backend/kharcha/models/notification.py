from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Enum as SQLEnum, Index
import enum

from kharcha.core.database import Base
from kharcha.core.types import GUID, generate_uuid
from kharcha.utils.dates import utcnow


class NotificationType(str, enum.Enum):
    RENEWAL = "renewal"
    DUE = "due"


class Notification(Base):
    """In-app reminder produced by the daily reminder job"""
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_unread", "user_id", "is_read"),)

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    transaction_id = Column(GUID, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False)

    type = Column(SQLEnum(NotificationType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    message = Column(String(500), nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Notification {self.type} {self.message[:30]}>"
