"""
Reminder generation
===================
Runs once a day (see `kharcha.modules.reminders.tasks`). For every user it
looks at transactions dated tomorrow and creates in-app notifications:

- Subscription with `remind` set -> "renewal" notification
- Money Lent                     -> "due" notification

Users' notification preferences are honoured. A transaction gets at most one
notification of each type, so re-running the job for the same day is harmless.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kharcha.core.logging_config import logger
from kharcha.models.notification import Notification, NotificationType
from kharcha.models.outflow_type import OutflowType, SUBSCRIPTION, MONEY_LENT
from kharcha.models.transaction import Transaction
from kharcha.models.user import User, UserPreferences
from kharcha.utils.currency import format_plain_amount
from kharcha.utils.dates import tomorrow_window, utcnow


def renewal_message(provider: str, amount: float) -> str:
    return f"Reminder: {provider} subscription renewal tomorrow for ₹{format_plain_amount(amount)}"


def due_message(borrower_name: str, amount: float) -> str:
    return f"Reminder: ₹{format_plain_amount(amount)} due from {borrower_name} tomorrow"


def build_reminder(transaction: Transaction, outflow_type_name: str) -> Optional[tuple]:
    """(type, message) for a transaction due tomorrow, or None"""
    meta = transaction.meta or {}
    if outflow_type_name == SUBSCRIPTION and meta.get("remind"):
        return NotificationType.RENEWAL, renewal_message(meta.get("provider") or "Your", transaction.amount)
    if outflow_type_name == MONEY_LENT:
        return NotificationType.DUE, due_message(meta.get("borrower_name") or "someone", transaction.amount)
    return None


async def generate_reminders(db: AsyncSession, now: Optional[datetime] = None) -> int:
    """Create tomorrow's reminders for all users. Returns the number created."""
    start, end = tomorrow_window(now or utcnow())

    rows = (await db.execute(
        select(Transaction, OutflowType.name, UserPreferences)
        .join(OutflowType, OutflowType.id == Transaction.outflow_type_id)
        .join(User, User.id == Transaction.user_id)
        .outerjoin(UserPreferences, UserPreferences.user_id == User.id)
        .where(
            User.is_active.is_(True),
            Transaction.date >= start,
            Transaction.date < end,
            OutflowType.name.in_([SUBSCRIPTION, MONEY_LENT]),
        )
    )).all()
    if not rows:
        return 0

    already = set((await db.execute(
        select(Notification.transaction_id, Notification.type).where(
            Notification.transaction_id.in_([t.id for t, _, _ in rows])
        )
    )).all())

    created = 0
    for transaction, type_name, preferences in rows:
        reminder = build_reminder(transaction, type_name)
        if reminder is None:
            continue
        notification_type, message = reminder

        # No stored preferences means defaults, which allow all reminders
        if preferences is not None and not preferences.allows(notification_type.value):
            continue
        if (transaction.id, notification_type) in already:
            continue

        db.add(Notification(
            user_id=transaction.user_id,
            transaction_id=transaction.id,
            type=notification_type,
            message=message,
            is_read=False,
        ))
        already.add((transaction.id, notification_type))
        created += 1

    await db.flush()
    logger.log_reminder_event("reminders_generated", created=created, window_start=start.isoformat())
    return created
