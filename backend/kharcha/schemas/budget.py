from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from kharcha.utils.dates import parse_month


class BudgetCreate(BaseModel):
    outflow_type_id: str
    amount: float = Field(..., gt=0)
    month: str = Field(..., description="YYYY-MM")

    @field_validator("month")
    @classmethod
    def validate_month(cls, v):
        parse_month(v)
        return v


class BudgetUpdate(BaseModel):
    amount: float = Field(..., gt=0)


class BudgetResponse(BaseModel):
    id: str
    outflow_type_id: str
    amount: float
    month: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BudgetProgress(BaseModel):
    budget_id: str
    outflow_type_id: str
    outflow_type_name: str
    emoji: Optional[str] = None
    budgeted: float
    spent: float
    remaining: float
    progress: float = Field(..., description="spent / budgeted")
