from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import datetime

from kharcha.core.database import get_db
from kharcha.models.user import User
from kharcha.modules.auth.dependencies import get_current_user
from kharcha.schemas.insights import (
    LoanItem,
    MoneyLentAgeing,
    MonthlySpend,
    ProjectedMonth,
    StreakResponse,
    SubscriptionItem,
    TypeBreakdown,
    UpcomingEvent,
)
from kharcha.services import insights_service

router = APIRouter()


@router.get("/monthly-spend", response_model=List[MonthlySpend])
async def monthly_spend(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await insights_service.monthly_spend(db, current_user.id)


@router.get("/breakdown", response_model=List[TypeBreakdown])
async def outflow_type_breakdown(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await insights_service.outflow_type_breakdown(
        db,
        current_user.id,
        start_date.replace(tzinfo=None) if start_date else None,
        end_date.replace(tzinfo=None) if end_date else None,
    )


@router.get("/subscriptions", response_model=List[SubscriptionItem])
async def subscriptions(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await insights_service.subscriptions(db, current_user.id)


@router.get("/loans", response_model=List[LoanItem])
async def loans(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await insights_service.loans(db, current_user.id)


@router.get("/money-lent-ageing", response_model=MoneyLentAgeing)
async def money_lent_ageing(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await insights_service.money_lent_ageing(db, current_user.id)


@router.get("/projected", response_model=List[ProjectedMonth])
async def projected_recurring(
    months: int = Query(3, ge=1, le=24),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await insights_service.projected_recurring(db, current_user.id, months)


@router.get("/upcoming", response_model=List[UpcomingEvent])
async def upcoming_events(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Renewals and dues in the next 7 days"""
    return await insights_service.upcoming_events(db, current_user.id)


@router.get("/streak", response_model=StreakResponse)
async def tracking_streak(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return StreakResponse(streak=await insights_service.tracking_streak(db, current_user.id))
