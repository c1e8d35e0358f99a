from sqlalchemy import Column, String, DateTime

from kharcha.core.database import Base
from kharcha.core.types import GUID, generate_uuid
from kharcha.utils.dates import utcnow


class VerificationToken(Base):
    """One-time sign-in link issued to an email address (only the hash is stored)"""
    __tablename__ = "verification_tokens"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    email = Column(String(255), index=True, nullable=False)
    token_hash = Column(String(128), unique=True, index=True, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    consumed_at = Column(DateTime, nullable=True)

    def is_pending(self, now) -> bool:
        return self.consumed_at is None and self.expires_at > now

    def __repr__(self):
        return f"<VerificationToken {self.email}>"
