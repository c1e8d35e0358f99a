from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Literal, Optional
from datetime import datetime

from kharcha.core.database import get_db
from kharcha.models.user import User
from kharcha.modules.auth.dependencies import get_current_user
from kharcha.schemas.transaction import (
    MonthlySummary,
    TransactionCreate,
    TransactionFilters,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from kharcha.services.transaction_service import transaction_service
from kharcha.utils.dates import month_key, utcnow

router = APIRouter()

EXPORT_LIMIT = 500


def transaction_filters(
    account_id: Optional[str] = Query(None),
    outflow_type_id: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, description="Inclusive"),
    end_date: Optional[datetime] = Query(None, description="Exclusive"),
    search: Optional[str] = Query(None, description="Search in notes"),
    sort_by: Literal["date", "amount"] = Query("date"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> TransactionFilters:
    return TransactionFilters(
        account_id=account_id,
        outflow_type_id=outflow_type_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    filters: TransactionFilters = Depends(transaction_filters),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    items, total = await transaction_service.list_for_user(db, current_user.id, filters)
    return TransactionListResponse(
        items=[TransactionResponse.model_validate(t) for t in items],
        total=total,
        limit=filters.limit,
        offset=filters.offset,
    )


@router.get("/summary", response_model=MonthlySummary)
async def monthly_summary(
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to the current month"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await transaction_service.monthly_summary(db, current_user.id, month or month_key(utcnow()))


@router.get("/export")
async def export_transactions(
    filters: TransactionFilters = Depends(transaction_filters),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Download the filtered transactions as CSV"""
    filters.limit = EXPORT_LIMIT
    items, _ = await transaction_service.list_for_user(db, current_user.id, filters)
    return Response(
        content=transaction_service.export_csv(items),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="transactions.csv"'},
    )


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    data: TransactionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    transaction = await transaction_service.create(db, current_user.id, data)
    return TransactionResponse.model_validate(transaction)


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    transaction = await transaction_service.get(db, current_user.id, transaction_id)
    return TransactionResponse.model_validate(transaction)


@router.patch("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: str,
    data: TransactionUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    transaction = await transaction_service.update(db, current_user.id, transaction_id, data)
    return TransactionResponse.model_validate(transaction)


@router.delete("/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await transaction_service.delete(db, current_user.id, transaction_id)
