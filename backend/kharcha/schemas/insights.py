from pydantic import BaseModel
from typing import List, Optional
from datetime import date


class MonthlySpend(BaseModel):
    month: str
    total: float


class TypeBreakdown(BaseModel):
    outflow_type_id: str
    name: str
    total: float


class SubscriptionItem(BaseModel):
    id: str
    provider: Optional[str] = None
    amount: float
    renewal_date: Optional[date] = None
    remind: bool = False
    frequency: str = "monthly"


class LoanItem(BaseModel):
    id: str
    loan_name: Optional[str] = None
    amount: float
    emi_amount: Optional[float] = None
    interest_rate: Optional[float] = None
    months_to_payoff: Optional[int] = None


class LentItem(BaseModel):
    id: str
    borrower_name: Optional[str] = None
    amount: float
    due_date: date
    days_overdue: int


class MoneyLentAgeing(BaseModel):
    overdue_0_30: List[LentItem] = []
    overdue_31_60: List[LentItem] = []
    overdue_60_plus: List[LentItem] = []


class ProjectedMonth(BaseModel):
    month: str
    subscriptions: float
    loans: float
    total: float


class UpcomingEvent(BaseModel):
    id: str
    type: str
    date: date
    amount: float
    description: Optional[str] = None


class StreakResponse(BaseModel):
    streak: int
