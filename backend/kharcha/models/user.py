from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from kharcha.core.database import Base
from kharcha.core.types import GUID, generate_uuid
from kharcha.utils.dates import utcnow


class User(Base):
    """User signed in through an emailed link"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    image_url = Column(Text, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_login = Column(DateTime, nullable=True)

    preferences = relationship(
        "UserPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<User {self.email}>"


class UserPreferences(Base):
    """Per-user display and notification preferences"""
    __tablename__ = "user_preferences"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    currency = Column(String(8), default="INR", nullable=False)
    language = Column(String(8), default="en", nullable=False)
    dark_mode = Column(Boolean, default=False, nullable=False)
    onboarding_completed = Column(Boolean, default=False, nullable=False)

    # Notification preferences
    global_notifications = Column(Boolean, default=True, nullable=False)
    subscription_reminders = Column(Boolean, default=True, nullable=False)
    due_date_reminders = Column(Boolean, default=True, nullable=False)
    email_notifications = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="preferences")

    def allows(self, notification_type: str) -> bool:
        """Whether reminders of this type ('renewal' or 'due') may be created"""
        if not self.global_notifications:
            return False
        if notification_type == "renewal":
            return bool(self.subscription_reminders)
        if notification_type == "due":
            return bool(self.due_date_reminders)
        return True
