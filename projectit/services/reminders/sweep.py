"""
Daily due-date sweep: in-app notifications plus instant emails for tasks
that are overdue or coming due.
"""
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

import structlog

from projectit.models.notification import DIGEST_FREQUENCIES, NotificationType
from projectit.models.project import CLOSED_TASK_STATUSES, ProjectStatus
from projectit.schemas.functions import NotificationEmailRequest, SweepResult
from projectit.services.entities import Entities
from projectit.services.notifications import NotificationEmailSender

logger = structlog.get_logger(__name__)

DEFAULT_REMINDER_DAYS = 1


def parse_due_date(value: Any) -> Optional[date]:
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp; only the date part counts."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _plural_days(days: int) -> str:
    return f"{days} day{'s' if days > 1 else ''}"


def due_text(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    return f"in {days} days"


class DueReminderSweep:
    """Classify active tasks by days until due and notify their assignees.

    Running the sweep twice on the same day notifies twice; nothing records
    that a reminder already went out.
    """

    def __init__(
        self,
        entities: Entities,
        notifier: Optional[NotificationEmailSender] = None,
        today: Optional[date] = None,
    ):
        self.entities = entities
        self.notifier = notifier or NotificationEmailSender(entities)
        self.today = today

    def _active_tasks(self):
        return [
            task for task in self.entities.tasks.list()
            if task.get("due_date")
            and task.get("status") not in CLOSED_TASK_STATUSES
            and task.get("assigned_to")
        ]

    def _classify(self, days: int, prefs: Dict[str, Any]) -> Optional[Tuple[str, str, str, str]]:
        """Return (email type, title, message suffix, counter) or None when no reminder applies."""
        if days < 0:
            if prefs.get("notify_task_overdue") is False:
                return None
            return (
                NotificationType.TASK_OVERDUE.value,
                "Task is overdue",
                f"was due {_plural_days(abs(days))} ago",
                "overdues_sent",
            )

        reminder_days = prefs.get("due_reminder_days")
        if reminder_days is None:
            reminder_days = DEFAULT_REMINDER_DAYS
        if days <= reminder_days and prefs.get("notify_task_due_soon") is not False:
            text = due_text(days)
            return (
                NotificationType.TASK_DUE.value,
                f"Task due {text}",
                f"is due {text}",
                "reminders_sent",
            )
        return None

    async def run(self) -> SweepResult:
        today = self.today or date.today()
        logger.info("Starting due date reminder check", today=today.isoformat())

        tasks = self._active_tasks()
        prefs_by_user = {
            s.get("user_email"): s for s in self.entities.notification_settings.list()
        }
        projects = {p["id"]: p for p in self.entities.projects.list()}
        archived = {
            pid for pid, p in projects.items() if p.get("status") == ProjectStatus.ARCHIVED.value
        }

        result = SweepResult(tasks_checked=len(tasks))

        for task in tasks:
            project_id = task.get("project_id")
            if project_id and project_id in archived:
                continue

            due = parse_due_date(task.get("due_date"))
            if due is None:
                logger.warning("Skipping task with unparseable due date", task_id=task.get("id"))
                continue

            days = (due - today).days
            prefs = prefs_by_user.get(task["assigned_to"], {})
            classified = self._classify(days, prefs)
            if classified is None:
                continue

            email_type, title, suffix, counter = classified
            message = f'"{task.get("title")}" {suffix}'
            project_name = (projects.get(project_id) or {}).get("name")
            link = f"/ProjectDetail?id={project_id}"

            self.entities.user_notifications.create({
                "user_email": task["assigned_to"],
                "type": NotificationType.TASK_DUE.value,
                "title": title,
                "message": message,
                "project_id": project_id,
                "project_name": project_name,
                "link": link,
                "is_read": False,
            })

            if prefs.get("email_frequency") not in DIGEST_FREQUENCIES:
                request = NotificationEmailRequest(
                    to=task["assigned_to"],
                    type=email_type,
                    title=title,
                    message=message,
                    project_id=project_id,
                    project_name=project_name,
                    link=link,
                )
                try:
                    sent = await self.notifier.send(request)
                    if not sent.get("success"):
                        raise RuntimeError(sent.get("error") or "email not sent")
                except Exception as e:
                    result.email_failures += 1
                    logger.error(
                        "Reminder email failed",
                        task_id=task.get("id"),
                        to=task["assigned_to"],
                        error=str(e),
                    )

            setattr(result, counter, getattr(result, counter) + 1)

        logger.info(
            "Due date reminder check finished",
            reminders_sent=result.reminders_sent,
            overdues_sent=result.overdues_sent,
            tasks_checked=result.tasks_checked,
            email_failures=result.email_failures,
        )
        return result
