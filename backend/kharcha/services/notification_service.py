from typing import List
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.exceptions import NotificationNotFoundError
from kharcha.models.notification import Notification

LIST_LIMIT = 50


class NotificationService:

    async def list_for_user(self, db: AsyncSession, user_id: str, limit: int = LIST_LIMIT) -> List[Notification]:
        """Newest first"""
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def unread_count(self, db: AsyncSession, user_id: str) -> int:
        count = await db.scalar(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id, Notification.is_read.is_(False)
            )
        )
        return int(count or 0)

    async def get(self, db: AsyncSession, user_id: str, notification_id: str) -> Notification:
        result = await db.execute(
            select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
        )
        notification = result.scalar_one_or_none()
        if not notification:
            raise NotificationNotFoundError(notification_id)
        return notification

    async def mark_read(self, db: AsyncSession, user_id: str, notification_id: str) -> Notification:
        notification = await self.get(db, user_id, notification_id)
        notification.is_read = True
        await db.flush()
        return notification

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        await db.flush()
        return result.rowcount or 0

    async def delete(self, db: AsyncSession, user_id: str, notification_id: str) -> None:
        notification = await self.get(db, user_id, notification_id)
        await db.delete(notification)
        await db.flush()


notification_service = NotificationService()
