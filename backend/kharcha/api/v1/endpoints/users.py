from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.database import get_db
from kharcha.models.user import User
from kharcha.modules.auth.dependencies import get_current_user
from kharcha.schemas.user import MeResponse, PreferencesResponse, PreferencesUpdate, UserResponse
from kharcha.services.user_service import user_service

router = APIRouter()


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Current user with preferences (defaults when none are saved)"""
    preferences = await user_service.get_preferences(db, current_user.id)
    return MeResponse(
        user=UserResponse.model_validate(current_user),
        preferences=PreferencesResponse.model_validate(preferences),
    )


@router.patch("/me/preferences", response_model=PreferencesResponse)
async def update_preferences(
    data: PreferencesUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await user_service.update_preferences(db, current_user.id, data)


@router.delete("/me/data")
async def delete_all_data(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Delete every account, transaction, budget, notification and custom type of the user"""
    await user_service.delete_all_data(db, current_user.id)
    return {"message": "All data deleted"}
