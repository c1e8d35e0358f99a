from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from kharcha.core.database import get_db
from kharcha.models.user import User
from kharcha.modules.auth.dependencies import get_current_user
from kharcha.schemas.account import AccountCreate, AccountResponse, AccountUpdate
from kharcha.services.account_service import account_service

router = APIRouter()


@router.get("", response_model=List[AccountResponse])
async def list_accounts(
    include_archived: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await account_service.list_for_user(db, current_user.id, include_archived=include_archived)


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    data: AccountCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await account_service.create(db, current_user.id, data)


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Account with the total spent from it"""
    account = await account_service.get(db, current_user.id, account_id)
    response = AccountResponse.model_validate(account)
    response.total_spent = await account_service.total_spent(db, account.id)
    return response


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str,
    data: AccountUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await account_service.update(db, current_user.id, account_id, data)


@router.delete("/{account_id}", response_model=AccountResponse)
async def archive_account(
    account_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Archive (soft delete) an account"""
    return await account_service.archive(db, current_user.id, account_id)
