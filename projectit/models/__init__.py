"""
Database models package.
"""
from projectit.models.entity import EntityRecord, ENTITY_TYPES, CASCADE_MAP
from projectit.models.project import ProjectStatus, TaskStatus, TaskPriority
from projectit.models.proposal import ProposalStatus, IncomingQuoteStatus
from projectit.models.notification import EmailFrequency, NotificationType

__all__ = [
    "EntityRecord",
    "ENTITY_TYPES",
    "CASCADE_MAP",
    "ProjectStatus",
    "TaskStatus",
    "TaskPriority",
    "ProposalStatus",
    "IncomingQuoteStatus",
    "EmailFrequency",
    "NotificationType",
]
