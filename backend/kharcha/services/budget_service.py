from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.exceptions import BudgetNotFoundError, DuplicateResourceError, ValidationError
from kharcha.models.budget import Budget
from kharcha.models.outflow_type import OutflowType
from kharcha.models.transaction import Transaction
from kharcha.schemas.budget import BudgetCreate, BudgetProgress, BudgetUpdate
from kharcha.services.outflow_type_service import outflow_type_service
from kharcha.utils.dates import month_window


class BudgetService:
    """Monthly budgets, one per (outflow type, month)"""

    async def list_for_user(self, db: AsyncSession, user_id: str, month: Optional[str] = None) -> List[Budget]:
        query = select(Budget).where(Budget.user_id == user_id)
        if month:
            query = query.where(Budget.month == month)
        result = await db.execute(query.order_by(Budget.month.desc(), Budget.created_at))
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, user_id: str, budget_id: str) -> Budget:
        result = await db.execute(select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id))
        budget = result.scalar_one_or_none()
        if not budget:
            raise BudgetNotFoundError(budget_id)
        return budget

    async def create(self, db: AsyncSession, user_id: str, data: BudgetCreate) -> Budget:
        await outflow_type_service.get(db, user_id, data.outflow_type_id)

        existing = await db.scalar(
            select(Budget.id).where(
                Budget.user_id == user_id,
                Budget.outflow_type_id == data.outflow_type_id,
                Budget.month == data.month,
            )
        )
        if existing:
            raise DuplicateResourceError(f"A budget for this outflow type already exists for {data.month}")

        budget = Budget(user_id=user_id, outflow_type_id=data.outflow_type_id, amount=data.amount, month=data.month)
        db.add(budget)
        await db.flush()
        return budget

    async def update(self, db: AsyncSession, user_id: str, budget_id: str, data: BudgetUpdate) -> Budget:
        budget = await self.get(db, user_id, budget_id)
        budget.amount = data.amount
        await db.flush()
        return budget

    async def delete(self, db: AsyncSession, user_id: str, budget_id: str) -> None:
        budget = await self.get(db, user_id, budget_id)
        await db.delete(budget)
        await db.flush()

    async def progress(self, db: AsyncSession, user_id: str, month: str) -> List[BudgetProgress]:
        """Spent vs budgeted for every budget in the month"""
        try:
            start, end = month_window(month)
        except ValueError as e:
            raise ValidationError(str(e), field="month")

        spent_rows = (await db.execute(
            select(Transaction.outflow_type_id, func.sum(Transaction.amount))
            .where(Transaction.user_id == user_id, Transaction.date >= start, Transaction.date < end)
            .group_by(Transaction.outflow_type_id)
        )).all()
        spent_by_type = {type_id: float(total) for type_id, total in spent_rows}

        rows = (await db.execute(
            select(Budget, OutflowType)
            .join(OutflowType, OutflowType.id == Budget.outflow_type_id)
            .where(Budget.user_id == user_id, Budget.month == month)
            .order_by(OutflowType.name)
        )).all()

        items = []
        for budget, outflow_type in rows:
            spent = spent_by_type.get(budget.outflow_type_id, 0.0)
            items.append(BudgetProgress(
                budget_id=budget.id,
                outflow_type_id=outflow_type.id,
                outflow_type_name=outflow_type.name,
                emoji=outflow_type.emoji,
                budgeted=budget.amount,
                spent=spent,
                remaining=budget.amount - spent,
                progress=spent / budget.amount if budget.amount else 0.0,
            ))
        return items


budget_service = BudgetService()
