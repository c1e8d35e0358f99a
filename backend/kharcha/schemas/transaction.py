from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

from kharcha.models.account import AccountType


class TransactionCreate(BaseModel):
    amount: float = Field(..., gt=0)
    date: datetime
    account_id: str
    outflow_type_id: str
    note: str = Field("", max_length=500)
    metadata: Dict[str, Any] = {}


class TransactionUpdate(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    date: Optional[datetime] = None
    account_id: Optional[str] = None
    outflow_type_id: Optional[str] = None
    note: Optional[str] = Field(None, max_length=500)
    metadata: Optional[Dict[str, Any]] = None


class TransactionFilters(BaseModel):
    """Query options for listing transactions"""
    account_id: Optional[str] = None
    outflow_type_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None
    sort_by: Literal["date", "amount"] = "date"
    sort_order: Literal["asc", "desc"] = "desc"
    limit: int = Field(50, ge=1, le=500)
    offset: int = Field(0, ge=0)


class AccountSummary(BaseModel):
    id: str
    name: str
    type: AccountType

    model_config = ConfigDict(from_attributes=True)


class OutflowTypeSummary(BaseModel):
    id: str
    name: str
    emoji: str
    color_hex: str

    model_config = ConfigDict(from_attributes=True)


class TransactionResponse(BaseModel):
    id: str
    amount: float
    date: datetime
    note: str
    # ORM attribute is `meta`; the column and the API field are both "metadata"
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="meta")
    account_id: str
    outflow_type_id: str
    account: Optional[AccountSummary] = None
    outflow_type: Optional[OutflowTypeSummary] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class TransactionListResponse(BaseModel):
    items: List[TransactionResponse]
    total: int
    limit: int
    offset: int


class TypeTotal(BaseModel):
    outflow_type_id: str
    name: str
    emoji: str
    total: float


class MonthlySummary(BaseModel):
    month: str
    total: float
    count: int
    top_types: List[TypeTotal]
