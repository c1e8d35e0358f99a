from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from kharcha.models.account import AccountType


class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType
    color_hex: str = Field("#6366f1", pattern=r"^#[0-9a-fA-F]{6}$")
    budget: Optional[float] = Field(None, ge=0, description="Monthly limit")


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[AccountType] = None
    color_hex: Optional[str] = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")
    budget: Optional[float] = Field(None, ge=0)


class AccountResponse(BaseModel):
    id: str
    name: str
    type: AccountType
    color_hex: str
    budget: Optional[float] = None
    is_archived: bool
    created_at: datetime
    total_spent: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)
