from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from kharcha.core.database import get_db
from kharcha.core.logging_config import logger
from kharcha.models.user import User
from kharcha.modules.auth.dependencies import get_current_admin, get_current_user
from kharcha.schemas.notification import NotificationResponse, ReminderRunResponse, UnreadCountResponse
from kharcha.services.notification_service import notification_service
from kharcha.services.reminder_service import generate_reminders

router = APIRouter()


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Latest 50 notifications, newest first"""
    return await notification_service.list_for_user(db, current_user.id)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return UnreadCountResponse(count=await notification_service.unread_count(db, current_user.id))


@router.post("/read-all")
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    updated = await notification_service.mark_all_read(db, current_user.id)
    return {"updated": updated}


@router.post("/reminders/run", response_model=ReminderRunResponse)
async def run_reminders(
    current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Manually trigger the daily reminder job (admin only)"""
    created = await generate_reminders(db)
    logger.info(f"Reminders triggered manually by {current_admin.email}: {created} created")
    return ReminderRunResponse(created=created)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await notification_service.mark_read(db, current_user.id, notification_id)


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await notification_service.delete(db, current_user.id, notification_id)
