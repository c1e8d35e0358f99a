"""
Outflow type service: built-in seeding, custom type CRUD, get-or-create.
"""
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.exceptions import (
    DuplicateResourceError,
    OutflowTypeNotFoundError,
    ReadOnlyResourceError,
    ResourceInUseError,
)
from kharcha.core.logging_config import logger
from kharcha.models.outflow_type import OutflowType, DEFAULT_OUTFLOW_TYPES
from kharcha.models.transaction import Transaction
from kharcha.schemas.outflow_type import OutflowTypeCreate, OutflowTypeUpdate


class OutflowTypeService:

    async def seed_defaults(self, db: AsyncSession, user_id: str) -> List[OutflowType]:
        """Create the built-in types the user does not have yet"""
        existing = set((await db.execute(
            select(OutflowType.name).where(OutflowType.user_id == user_id)
        )).scalars().all())

        created = []
        for name, emoji, color, fields in DEFAULT_OUTFLOW_TYPES:
            if name in existing:
                continue
            outflow_type = OutflowType(
                user_id=user_id,
                name=name,
                emoji=emoji,
                color_hex=color,
                is_custom=False,
                extra_fields=list(fields),
            )
            db.add(outflow_type)
            created.append(outflow_type)

        if created:
            await db.flush()
            logger.info(f"Seeded {len(created)} outflow types for user {user_id}")
        return created

    async def list_for_user(self, db: AsyncSession, user_id: str) -> List[OutflowType]:
        result = await db.execute(
            select(OutflowType)
            .where(OutflowType.user_id == user_id)
            .order_by(OutflowType.is_custom, OutflowType.name)
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, user_id: str, outflow_type_id: str) -> OutflowType:
        result = await db.execute(
            select(OutflowType).where(
                OutflowType.id == outflow_type_id,
                OutflowType.user_id == user_id,
            )
        )
        outflow_type = result.scalar_one_or_none()
        if not outflow_type:
            raise OutflowTypeNotFoundError(outflow_type_id)
        return outflow_type

    async def get_by_name(self, db: AsyncSession, user_id: str, name: str) -> Optional[OutflowType]:
        result = await db.execute(
            select(OutflowType).where(OutflowType.user_id == user_id, OutflowType.name == name)
        )
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, user_id: str, data: OutflowTypeCreate) -> OutflowType:
        name = data.name.strip()
        if await self.get_by_name(db, user_id, name):
            raise DuplicateResourceError(f"Outflow type '{name}' already exists")

        outflow_type = OutflowType(
            user_id=user_id,
            name=name,
            emoji=data.emoji,
            color_hex=data.color_hex,
            is_custom=True,
            extra_fields=[f.model_dump() for f in data.extra_fields],
        )
        db.add(outflow_type)
        await db.flush()
        return outflow_type

    async def get_or_create(
        self,
        db: AsyncSession,
        user_id: str,
        name: str,
        emoji: str = "📦",
        color_hex: str = "#94a3b8",
    ) -> OutflowType:
        """Return the user's type with this name, creating a custom one if missing"""
        outflow_type = await self.get_by_name(db, user_id, name)
        if outflow_type:
            return outflow_type
        outflow_type = OutflowType(
            user_id=user_id, name=name, emoji=emoji, color_hex=color_hex, is_custom=True, extra_fields=[]
        )
        db.add(outflow_type)
        await db.flush()
        return outflow_type

    async def update(
        self, db: AsyncSession, user_id: str, outflow_type_id: str, data: OutflowTypeUpdate
    ) -> OutflowType:
        outflow_type = await self.get(db, user_id, outflow_type_id)
        if not outflow_type.is_custom:
            raise ReadOnlyResourceError("Built-in outflow types cannot be edited")

        updates = data.model_dump(exclude_unset=True)
        if "name" in updates and updates["name"] is not None:
            name = updates["name"].strip()
            other = await self.get_by_name(db, user_id, name)
            if other and other.id != outflow_type.id:
                raise DuplicateResourceError(f"Outflow type '{name}' already exists")
            outflow_type.name = name
        if updates.get("emoji") is not None:
            outflow_type.emoji = updates["emoji"]
        if updates.get("color_hex") is not None:
            outflow_type.color_hex = updates["color_hex"]
        if data.extra_fields is not None:
            outflow_type.extra_fields = [f.model_dump() for f in data.extra_fields]

        await db.flush()
        return outflow_type

    async def delete(self, db: AsyncSession, user_id: str, outflow_type_id: str) -> None:
        outflow_type = await self.get(db, user_id, outflow_type_id)
        if not outflow_type.is_custom:
            raise ReadOnlyResourceError("Built-in outflow types cannot be deleted")

        in_use = await db.scalar(
            select(func.count(Transaction.id)).where(Transaction.outflow_type_id == outflow_type.id)
        )
        if in_use:
            raise ResourceInUseError(
                f"Outflow type '{outflow_type.name}' is used by {in_use} transaction(s)"
            )

        await db.delete(outflow_type)
        await db.flush()


outflow_type_service = OutflowTypeService()
