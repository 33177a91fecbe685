"""
Scheduled due-date reminder sweep.
"""
import asyncio
from typing import Any, Dict

import structlog

from projectit.core.database import SessionLocal
from projectit.services.entities import Entities
from projectit.services.reminders import DueReminderSweep
from projectit.tasks.celery_app import celery_app

logger = structlog.get_logger(__name__)


@celery_app.task(bind=True, name="projectit.tasks.reminders.send_due_reminders")
def send_due_reminders(self) -> Dict[str, Any]:
    """Run one reminder sweep in its own database session."""
    db = SessionLocal()
    try:
        sweep = DueReminderSweep(Entities.from_session(db))
        result = asyncio.run(sweep.run())
        db.commit()
        return result.to_response()
    except Exception as e:
        db.rollback()
        logger.error("Due reminder sweep failed", task_id=self.request.id, error=str(e))
        raise
    finally:
        db.close()
