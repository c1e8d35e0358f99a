"""
Insights: spending history, recurring obligations and habits.

All functions take an optional `now` so results are reproducible in tests.
"""
import math
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.models.outflow_type import OutflowType, SUBSCRIPTION, LOAN, MONEY_LENT
from kharcha.models.transaction import Transaction
from kharcha.schemas.insights import (
    LentItem,
    LoanItem,
    MoneyLentAgeing,
    MonthlySpend,
    ProjectedMonth,
    SubscriptionItem,
    TypeBreakdown,
    UpcomingEvent,
)
from kharcha.utils.dates import parse_iso_date, shift_month, utcnow

# Multipliers converting a subscription charge to a monthly amount
FREQUENCY_PER_MONTH = {"weekly": 52 / 12, "monthly": 1.0, "yearly": 1 / 12}


async def _transactions_of_type(db: AsyncSession, user_id: str, type_name: str) -> List[Transaction]:
    result = await db.execute(
        select(Transaction)
        .join(OutflowType, OutflowType.id == Transaction.outflow_type_id)
        .where(Transaction.user_id == user_id, OutflowType.name == type_name)
        .order_by(Transaction.date)
    )
    return list(result.scalars().all())


async def monthly_spend(db: AsyncSession, user_id: str, now: Optional[datetime] = None) -> List[MonthlySpend]:
    """Totals for the last 12 months, oldest first, current month included"""
    now = now or utcnow()
    months = [shift_month(now.year, now.month, -i) for i in range(11, -1, -1)]
    first = datetime(*months[0], 1)
    end_year, end_month = shift_month(now.year, now.month, 1)

    rows = (await db.execute(
        select(Transaction.date, Transaction.amount).where(
            Transaction.user_id == user_id,
            Transaction.date >= first,
            Transaction.date < datetime(end_year, end_month, 1),
        )
    )).all()

    totals = {m: 0.0 for m in months}
    for when, amount in rows:
        totals[(when.year, when.month)] += amount

    return [MonthlySpend(month=f"{y}-{m:02d}", total=totals[(y, m)]) for y, m in months]


async def outflow_type_breakdown(
    db: AsyncSession,
    user_id: str,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[TypeBreakdown]:
    conditions = [Transaction.user_id == user_id]
    if start:
        conditions.append(Transaction.date >= start)
    conditions.append(Transaction.date < (end or utcnow()))

    rows = (await db.execute(
        select(OutflowType.id, OutflowType.name, func.sum(Transaction.amount).label("total"))
        .join(Transaction, Transaction.outflow_type_id == OutflowType.id)
        .where(*conditions)
        .group_by(OutflowType.id, OutflowType.name)
        .order_by(func.sum(Transaction.amount).desc())
    )).all()
    return [TypeBreakdown(outflow_type_id=r[0], name=r[1], total=float(r[2])) for r in rows]


async def subscriptions(db: AsyncSession, user_id: str) -> List[SubscriptionItem]:
    items = []
    for t in await _transactions_of_type(db, user_id, SUBSCRIPTION):
        meta = t.meta or {}
        items.append(SubscriptionItem(
            id=t.id,
            provider=meta.get("provider"),
            amount=t.amount,
            renewal_date=parse_iso_date(meta.get("renewal_date")),
            remind=bool(meta.get("remind")),
            frequency=meta.get("frequency") or "monthly",
        ))
    return items


async def loans(db: AsyncSession, user_id: str) -> List[LoanItem]:
    items = []
    for t in await _transactions_of_type(db, user_id, LOAN):
        meta = t.meta or {}
        emi = meta.get("emi_amount")
        items.append(LoanItem(
            id=t.id,
            loan_name=meta.get("loan_name"),
            amount=t.amount,
            emi_amount=emi,
            interest_rate=meta.get("interest_rate"),
            months_to_payoff=math.ceil(t.amount / emi) if emi else None,
        ))
    return items


async def money_lent_ageing(db: AsyncSession, user_id: str, now: Optional[datetime] = None) -> MoneyLentAgeing:
    """Overdue money lent bucketed by days past the due date; not-yet-due items are left out"""
    today = (now or utcnow()).date()
    ageing = MoneyLentAgeing()

    for t in await _transactions_of_type(db, user_id, MONEY_LENT):
        meta = t.meta or {}
        due = parse_iso_date(meta.get("due_date"))
        if due is None:
            continue
        days_overdue = (today - due).days
        if days_overdue <= 0:
            continue

        item = LentItem(
            id=t.id,
            borrower_name=meta.get("borrower_name"),
            amount=t.amount,
            due_date=due,
            days_overdue=days_overdue,
        )
        if days_overdue <= 30:
            ageing.overdue_0_30.append(item)
        elif days_overdue <= 60:
            ageing.overdue_31_60.append(item)
        else:
            ageing.overdue_60_plus.append(item)

    return ageing


async def projected_recurring(
    db: AsyncSession, user_id: str, months: int = 3, now: Optional[datetime] = None
) -> List[ProjectedMonth]:
    """Expected subscription and EMI outflows for each of the next `months` months"""
    now = now or utcnow()

    subscription_total = 0.0
    for t in await _transactions_of_type(db, user_id, SUBSCRIPTION):
        frequency = (t.meta or {}).get("frequency") or "monthly"
        subscription_total += t.amount * FREQUENCY_PER_MONTH.get(frequency, 1.0)
    subscription_total = round(subscription_total, 2)

    loan_total = sum(
        float((t.meta or {}).get("emi_amount") or 0) for t in await _transactions_of_type(db, user_id, LOAN)
    )

    projections = []
    for i in range(1, months + 1):
        year, month = shift_month(now.year, now.month, i)
        projections.append(ProjectedMonth(
            month=f"{year}-{month:02d}",
            subscriptions=subscription_total,
            loans=loan_total,
            total=round(subscription_total + loan_total, 2),
        ))
    return projections


async def upcoming_events(
    db: AsyncSession, user_id: str, days: int = 7, now: Optional[datetime] = None
) -> List[UpcomingEvent]:
    """Renewals and dues falling between today and `days` days from now"""
    today = (now or utcnow()).date()
    horizon = today + timedelta(days=days)

    result = await db.execute(select(Transaction).where(Transaction.user_id == user_id))
    events = []
    for t in result.scalars().all():
        meta = t.meta or {}
        renewal = parse_iso_date(meta.get("renewal_date"))
        when = renewal or parse_iso_date(meta.get("due_date"))
        if when is None or not today <= when <= horizon:
            continue
        events.append(UpcomingEvent(
            id=t.id,
            type="renewal" if renewal else "due",
            date=when,
            amount=t.amount,
            description=meta.get("provider") or meta.get("borrower_name") or t.note,
        ))

    events.sort(key=lambda e: e.date)
    return events


async def tracking_streak(db: AsyncSession, user_id: str, now: Optional[datetime] = None) -> int:
    """Consecutive days, ending today, with at least one transaction"""
    result = await db.execute(
        select(Transaction.date)
        .where(Transaction.user_id == user_id)
        .order_by(Transaction.date.desc())
        .limit(100)
    )
    days = {when.date() for when in result.scalars().all()}

    streak = 0
    day = (now or utcnow()).date()
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak
