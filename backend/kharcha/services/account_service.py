from typing import List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.exceptions import AccountNotFoundError
from kharcha.models.account import Account
from kharcha.models.transaction import Transaction
from kharcha.schemas.account import AccountCreate, AccountUpdate


class AccountService:
    """Accounts are archived, never hard-deleted, so past transactions keep their account"""

    async def list_for_user(self, db: AsyncSession, user_id: str, include_archived: bool = False) -> List[Account]:
        query = select(Account).where(Account.user_id == user_id)
        if not include_archived:
            query = query.where(Account.is_archived.is_(False))
        result = await db.execute(query.order_by(Account.created_at))
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, user_id: str, account_id: str) -> Account:
        result = await db.execute(
            select(Account).where(Account.id == account_id, Account.user_id == user_id)
        )
        account = result.scalar_one_or_none()
        if not account:
            raise AccountNotFoundError(account_id)
        return account

    async def total_spent(self, db: AsyncSession, account_id: str) -> float:
        total = await db.scalar(
            select(func.coalesce(func.sum(Transaction.amount), 0.0)).where(Transaction.account_id == account_id)
        )
        return float(total or 0.0)

    async def create(self, db: AsyncSession, user_id: str, data: AccountCreate) -> Account:
        account = Account(
            user_id=user_id,
            name=data.name.strip(),
            type=data.type,
            color_hex=data.color_hex,
            budget=data.budget,
        )
        db.add(account)
        await db.flush()
        return account

    async def update(self, db: AsyncSession, user_id: str, account_id: str, data: AccountUpdate) -> Account:
        account = await self.get(db, user_id, account_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field != "budget":
                continue
            setattr(account, field, value.strip() if field == "name" else value)
        await db.flush()
        return account

    async def archive(self, db: AsyncSession, user_id: str, account_id: str) -> Account:
        account = await self.get(db, user_id, account_id)
        account.is_archived = True
        await db.flush()
        return account


account_service = AccountService()
