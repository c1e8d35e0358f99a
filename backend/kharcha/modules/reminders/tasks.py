"""
Celery tasks for reminders.

The beat entry in `kharcha.core.celery_app` fires `scheduled_reminders` once a
day. Failures are left to Celery; the task has no retry policy of its own.
"""
import asyncio
from celery import Task

from kharcha.core.celery_app import celery_app, REMINDER_TASK_NAME
from kharcha.core.database import AsyncSessionLocal, close_db
from kharcha.core.logging_config import logger
from kharcha.services.reminder_service import generate_reminders


class ReminderTask(Task):
    """Celery task that runs an async coroutine on a fresh event loop"""
    abstract = True

    def run_async(self, coro):
        """Run async coroutine in sync context"""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()


async def run_reminders() -> int:
    """Generate and commit tomorrow's reminders in a standalone session"""
    try:
        async with AsyncSessionLocal() as session:
            created = await generate_reminders(session)
            await session.commit()
            return created
    finally:
        # Pooled connections are bound to this task's event loop
        await close_db()


@celery_app.task(bind=True, base=ReminderTask, name=REMINDER_TASK_NAME)
def scheduled_reminders(self):
    """Daily reminder notifications (no arguments)"""
    logger.log_reminder_event("reminders_started")
    created = self.run_async(run_reminders())
    logger.log_reminder_event("reminders_finished", created=created)
    return {"created": created}
