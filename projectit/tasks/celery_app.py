"""
Celery application and beat schedule.
"""
from celery import Celery
from celery.schedules import crontab

from projectit.core.config import settings

celery_app = Celery(
    "projectit",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["projectit.tasks.reminders"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "send-due-reminders-daily": {
            "task": "projectit.tasks.reminders.send_due_reminders",
            "schedule": crontab(hour=settings.REMINDER_SWEEP_CRON_HOUR, minute=0),
        },
    },
)
