from typing import Optional
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.config import settings
from kharcha.core.exceptions import UserNotFoundError
from kharcha.core.logging_config import logger
from kharcha.models.account import Account
from kharcha.models.budget import Budget
from kharcha.models.notification import Notification
from kharcha.models.outflow_type import OutflowType
from kharcha.models.transaction import Transaction
from kharcha.models.user import User, UserPreferences
from kharcha.schemas.user import PreferencesUpdate
from kharcha.services.outflow_type_service import outflow_type_service
from kharcha.utils.dates import utcnow


class UserService:

    async def get(self, db: AsyncSession, user_id: str) -> User:
        user = await db.get(User, user_id)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_or_create(self, db: AsyncSession, email: str) -> User:
        """Find the user for a verified email, creating the account on first sign-in"""
        user = await self.get_by_email(db, email)
        if user is None:
            user = User(email=email.lower())
            db.add(user)
            await db.flush()
            await outflow_type_service.seed_defaults(db, user.id)
            logger.info(f"Created user {user.id}")

        user.last_login = utcnow()
        await db.flush()
        return user

    async def get_preferences(self, db: AsyncSession, user_id: str) -> UserPreferences:
        """Stored preferences, or unsaved defaults when the user has none"""
        result = await db.execute(select(UserPreferences).where(UserPreferences.user_id == user_id))
        preferences = result.scalar_one_or_none()
        if preferences is None:
            preferences = UserPreferences(
                user_id=user_id,
                currency=settings.DEFAULT_CURRENCY,
                language=settings.DEFAULT_LANGUAGE,
                dark_mode=False,
                onboarding_completed=False,
                global_notifications=True,
                subscription_reminders=True,
                due_date_reminders=True,
                email_notifications=False,
            )
        return preferences

    async def update_preferences(
        self, db: AsyncSession, user_id: str, data: PreferencesUpdate
    ) -> UserPreferences:
        preferences = await self.get_preferences(db, user_id)
        if preferences.id is None:
            db.add(preferences)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(preferences, field, value.upper() if field == "currency" else value)

        await db.flush()
        return preferences

    async def delete_all_data(self, db: AsyncSession, user_id: str) -> None:
        """Remove everything the user created; the user row itself is kept"""
        for model in (Notification, Budget, Transaction, Account, UserPreferences):
            await db.execute(delete(model).where(model.user_id == user_id))
        await db.execute(
            delete(OutflowType).where(OutflowType.user_id == user_id, OutflowType.is_custom.is_(True))
        )
        await db.flush()
        logger.info(f"Deleted all data for user {user_id}")


user_service = UserService()
