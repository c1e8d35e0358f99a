from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from kharcha.core.database import get_db
from kharcha.models.user import User
from kharcha.modules.auth.dependencies import get_current_user
from kharcha.schemas.outflow_type import OutflowTypeCreate, OutflowTypeResponse, OutflowTypeUpdate
from kharcha.services.outflow_type_service import outflow_type_service

router = APIRouter()


@router.get("", response_model=List[OutflowTypeResponse])
async def list_outflow_types(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await outflow_type_service.list_for_user(db, current_user.id)


@router.post("", response_model=OutflowTypeResponse, status_code=201)
async def create_outflow_type(
    data: OutflowTypeCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create a custom outflow type (name must be unique)"""
    return await outflow_type_service.create(db, current_user.id, data)


@router.get("/{outflow_type_id}", response_model=OutflowTypeResponse)
async def get_outflow_type(
    outflow_type_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await outflow_type_service.get(db, current_user.id, outflow_type_id)


@router.patch("/{outflow_type_id}", response_model=OutflowTypeResponse)
async def update_outflow_type(
    outflow_type_id: str,
    data: OutflowTypeUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await outflow_type_service.update(db, current_user.id, outflow_type_id, data)


@router.delete("/{outflow_type_id}", status_code=204)
async def delete_outflow_type(
    outflow_type_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await outflow_type_service.delete(db, current_user.id, outflow_type_id)
