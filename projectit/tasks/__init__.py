"""
Background tasks package.
"""
from projectit.tasks.celery_app import celery_app
from projectit.tasks.reminders import send_due_reminders

__all__ = ["celery_app", "send_due_reminders"]
