from pydantic import BaseModel, ConfigDict
from datetime import datetime

from kharcha.models.notification import NotificationType


class NotificationResponse(BaseModel):
    id: str
    type: NotificationType
    transaction_id: str
    message: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    count: int


class ReminderRunResponse(BaseModel):
    created: int
