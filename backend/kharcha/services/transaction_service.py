"""
Transaction service
===================
Listing with filters, monthly summary, CRUD and CSV export.
Every query is scoped to the owning user.
"""
import csv
import io
from typing import Iterable, List, Tuple
from sqlalchemy import select, func, desc, asc
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.exceptions import TransactionNotFoundError, ValidationError
from kharcha.models.outflow_type import OutflowType
from kharcha.models.transaction import Transaction
from kharcha.schemas.transaction import (
    MonthlySummary,
    TransactionCreate,
    TransactionFilters,
    TransactionUpdate,
    TypeTotal,
)
from kharcha.services.account_service import account_service
from kharcha.services.outflow_type_service import outflow_type_service
from kharcha.utils.currency import format_plain_amount
from kharcha.utils.dates import month_window

CSV_HEADERS = ["Date", "Amount", "Category", "Account", "Account Type", "Note", "Provider/Details"]


class TransactionService:

    def _conditions(self, user_id: str, filters: TransactionFilters) -> list:
        conditions = [Transaction.user_id == user_id]
        if filters.account_id:
            conditions.append(Transaction.account_id == filters.account_id)
        if filters.outflow_type_id:
            conditions.append(Transaction.outflow_type_id == filters.outflow_type_id)
        if filters.start_date:
            conditions.append(Transaction.date >= filters.start_date.replace(tzinfo=None))
        if filters.end_date:
            conditions.append(Transaction.date < filters.end_date.replace(tzinfo=None))
        if filters.search:
            conditions.append(Transaction.note.ilike(f"%{filters.search}%"))
        return conditions

    async def list_for_user(
        self, db: AsyncSession, user_id: str, filters: TransactionFilters
    ) -> Tuple[List[Transaction], int]:
        """Return (page, total matching)"""
        conditions = self._conditions(user_id, filters)
        total = await db.scalar(select(func.count(Transaction.id)).where(*conditions))

        column = Transaction.amount if filters.sort_by == "amount" else Transaction.date
        order = desc(column) if filters.sort_order == "desc" else asc(column)
        result = await db.execute(
            select(Transaction)
            .where(*conditions)
            .order_by(order, desc(Transaction.created_at)).offset(filters.offset).limit(filters.limit)
        )
        return list(result.scalars().all()), int(total or 0)

    async def get(self, db: AsyncSession, user_id: str, transaction_id: str) -> Transaction:
        result = await db.execute(
            select(Transaction)
            .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        transaction = result.scalar_one_or_none()
        if not transaction:
            raise TransactionNotFoundError(transaction_id)
        return transaction

    async def monthly_summary(self, db: AsyncSession, user_id: str, month: str) -> MonthlySummary:
        """Total spent in a YYYY-MM month plus the five largest outflow types"""
        try:
            start, end = month_window(month)
        except ValueError as e:
            raise ValidationError(str(e), field="month")

        in_month = (
            Transaction.user_id == user_id,
            Transaction.date >= start,
            Transaction.date < end,
        )
        total, count = (await db.execute(
            select(func.coalesce(func.sum(Transaction.amount), 0.0), func.count(Transaction.id)).where(*in_month)
        )).one()

        spent = func.sum(Transaction.amount).label("spent")
        rows = (await db.execute(
            select(OutflowType.id, OutflowType.name, OutflowType.emoji, spent)
            .join(Transaction, Transaction.outflow_type_id == OutflowType.id)
            .where(*in_month)
            .group_by(OutflowType.id, OutflowType.name, OutflowType.emoji)
            .order_by(desc("spent"))
            .limit(5)
        )).all()

        return MonthlySummary(
            month=month,
            total=float(total or 0.0),
            count=int(count or 0),
            top_types=[
                TypeTotal(outflow_type_id=r[0], name=r[1], emoji=r[2], total=float(r[3])) for r in rows
            ],
        )

    async def create(self, db: AsyncSession, user_id: str, data: TransactionCreate) -> Transaction:
        # Both raise NotFound when the id belongs to another user
        await account_service.get(db, user_id, data.account_id)
        await outflow_type_service.get(db, user_id, data.outflow_type_id)

        transaction = Transaction(
            user_id=user_id,
            account_id=data.account_id,
            outflow_type_id=data.outflow_type_id,
            amount=data.amount,
            date=data.date.replace(tzinfo=None),
            note=data.note.strip(),
            meta=dict(data.metadata),
        )
        db.add(transaction)
        await db.flush()
        return await self.get(db, user_id, transaction.id)

    async def update(
        self, db: AsyncSession, user_id: str, transaction_id: str, data: TransactionUpdate
    ) -> Transaction:
        transaction = await self.get(db, user_id, transaction_id)
        updates = data.model_dump(exclude_unset=True)

        if updates.get("account_id"):
            await account_service.get(db, user_id, updates["account_id"])
            transaction.account_id = updates["account_id"]
        if updates.get("outflow_type_id"):
            await outflow_type_service.get(db, user_id, updates["outflow_type_id"])
            transaction.outflow_type_id = updates["outflow_type_id"]
        if updates.get("amount") is not None:
            transaction.amount = updates["amount"]
        if updates.get("date") is not None:
            transaction.date = updates["date"].replace(tzinfo=None)
        if updates.get("note") is not None:
            transaction.note = updates["note"].strip()
        if updates.get("metadata") is not None:
            transaction.meta = dict(updates["metadata"])

        await db.flush()
        return await self.get(db, user_id, transaction.id)

    async def delete(self, db: AsyncSession, user_id: str, transaction_id: str) -> None:
        transaction = await self.get(db, user_id, transaction_id)
        await db.delete(transaction)
        await db.flush()

    def export_csv(self, transactions: Iterable[Transaction]) -> str:
        """Render transactions as CSV (one header row, every field quoted)"""
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADERS)

        for t in transactions:
            meta = t.meta or {}
            details = meta.get("provider") or meta.get("borrower_name") or meta.get("loan_name") or ""
            writer.writerow([
                t.date.strftime("%Y-%m-%d"),
                format_plain_amount(t.amount),
                t.outflow_type.name if t.outflow_type else "Uncategorized",
                t.account.name if t.account else "Unknown",
                t.account.type.value if t.account else "N/A",
                t.note or "",
                details,
            ])
        return buffer.getvalue()


transaction_service = TransactionService()
