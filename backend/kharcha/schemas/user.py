from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class PreferencesResponse(BaseModel):
    currency: str = "INR"
    language: str = "en"
    dark_mode: bool = False
    onboarding_completed: bool = False
    global_notifications: bool = True
    subscription_reminders: bool = True
    due_date_reminders: bool = True
    email_notifications: bool = False

    model_config = ConfigDict(from_attributes=True)


class PreferencesUpdate(BaseModel):
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    language: Optional[str] = Field(None, min_length=2, max_length=8)
    dark_mode: Optional[bool] = None
    onboarding_completed: Optional[bool] = None
    global_notifications: Optional[bool] = None
    subscription_reminders: Optional[bool] = None
    due_date_reminders: Optional[bool] = None
    email_notifications: Optional[bool] = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    image_url: Optional[str] = None
    is_admin: bool = False
    created_at: datetime
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MeResponse(BaseModel):
    user: UserResponse
    preferences: PreferencesResponse
