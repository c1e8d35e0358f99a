from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
from datetime import datetime


class ExtraField(BaseModel):
    """Extra metadata field a custom outflow type asks for"""
    key: str = Field(..., min_length=1, max_length=50)
    label: str = Field(..., min_length=1, max_length=100)
    type: Literal["text", "number", "date", "toggle"]


class OutflowTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    emoji: str = Field("📦", max_length=16)
    color_hex: str = Field("#94a3b8", pattern=r"^#[0-9a-fA-F]{6}$")
    extra_fields: List[ExtraField] = []


class OutflowTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    emoji: Optional[str] = Field(None, max_length=16)
    color_hex: Optional[str] = Field(None, pattern=r"^#[0-9a-fA-F]{6}$")
    extra_fields: Optional[List[ExtraField]] = None


class OutflowTypeResponse(BaseModel):
    id: str
    name: str
    emoji: str
    color_hex: str
    is_custom: bool
    extra_fields: List[ExtraField] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
