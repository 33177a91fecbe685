"""
Project and task status enums.
"""
import enum


class ProjectStatus(str, enum.Enum):
    """Local project lifecycle."""
    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Tasks in these states never receive due-date reminders
CLOSED_TASK_STATUSES = frozenset([TaskStatus.COMPLETED.value, TaskStatus.ARCHIVED.value])
