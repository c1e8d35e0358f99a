from celery import Celery
from celery.schedules import crontab

from kharcha.core.config import settings

REMINDER_TASK_NAME = "kharcha.reminders.scheduled_reminders"

# Create Celery app
celery_app = Celery(
    "kharcha",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "kharcha.modules.reminders.tasks",
    ]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=settings.CELERY_TASK_TIME_LIMIT,
    result_expires=settings.CELERY_RESULT_EXPIRES,
    worker_prefetch_multiplier=1,
    broker_connection_retry_on_startup=True,
)

# Celery beat schedule for periodic tasks
celery_app.conf.beat_schedule = {
    "daily reminder notifications": {
        "task": REMINDER_TASK_NAME,
        "schedule": crontab(hour=settings.REMINDER_HOUR_UTC, minute=settings.REMINDER_MINUTE_UTC),
        "args": (),
    },
}
