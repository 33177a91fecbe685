"""
Notification types and user delivery preferences.
"""
import enum
from typing import Dict


class EmailFrequency(str, enum.Enum):
    INSTANT = "instant"
    DAILY_DIGEST = "daily_digest"
    WEEKLY_DIGEST = "weekly_digest"


class NotificationType(str, enum.Enum):
    """Kinds of user notification."""
    MENTION = "mention"
    TASK_ASSIGNED = "task_assigned"
    TASK_DUE = "task_due"
    TASK_OVERDUE = "task_overdue"
    TASK_COMPLETED = "task_completed"
    PART_STATUS = "part_status"
    PROJECT_UPDATE = "project_update"
    COMMENT = "comment"


# NotificationSettings field that opts a user out of each type
PREFERENCE_KEYS: Dict[str, str] = {
    NotificationType.MENTION.value: "notify_mentions",
    NotificationType.TASK_ASSIGNED.value: "notify_task_assigned",
    NotificationType.TASK_DUE.value: "notify_task_due_soon",
    NotificationType.TASK_OVERDUE.value: "notify_task_overdue",
    NotificationType.TASK_COMPLETED.value: "notify_task_completed",
    NotificationType.PART_STATUS.value: "notify_part_status_change",
    NotificationType.PROJECT_UPDATE.value: "notify_project_updates",
    NotificationType.COMMENT.value: "notify_new_comments",
}

DIGEST_FREQUENCIES = frozenset([
    EmailFrequency.DAILY_DIGEST.value,
    EmailFrequency.WEEKLY_DIGEST.value,
])

TYPE_COLORS: Dict[str, str] = {
    "mention": "#6366f1",
    "task_assigned": "#3b82f6",
    "task_due": "#f59e0b",
    "task_overdue": "#ef4444",
    "task_completed": "#10b981",
    "part_status": "#f97316",
    "project_update": "#8b5cf6",
    "comment": "#14b8a6",
}

TYPE_LABELS: Dict[str, str] = {
    "mention": "Mention",
    "task_assigned": "Task Assigned",
    "task_due": "Due Soon",
    "task_overdue": "Overdue",
    "task_completed": "Completed",
    "part_status": "Part Update",
    "project_update": "Project Update",
    "comment": "New Comment",
}
