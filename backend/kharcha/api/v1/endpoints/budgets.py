from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from kharcha.core.database import get_db
from kharcha.models.user import User
from kharcha.modules.auth.dependencies import get_current_user
from kharcha.schemas.budget import BudgetCreate, BudgetProgress, BudgetResponse, BudgetUpdate
from kharcha.services.budget_service import budget_service
from kharcha.utils.dates import month_key, utcnow

router = APIRouter()


@router.get("", response_model=List[BudgetResponse])
async def list_budgets(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await budget_service.list_for_user(db, current_user.id, month)


@router.get("/progress", response_model=List[BudgetProgress])
async def budget_progress(
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to the current month"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await budget_service.progress(db, current_user.id, month or month_key(utcnow()))


@router.post("", response_model=BudgetResponse, status_code=201)
async def create_budget(
    data: BudgetCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await budget_service.create(db, current_user.id, data)


@router.patch("/{budget_id}", response_model=BudgetResponse)
async def update_budget(
    budget_id: str,
    data: BudgetUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await budget_service.update(db, current_user.id, budget_id, data)


@router.delete("/{budget_id}", status_code=204)
async def delete_budget(
    budget_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await budget_service.delete(db, current_user.id, budget_id)
