"""
Generic JSON-document table backing every ProjectIT entity type.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import Column, DateTime, Index, JSON, String

from projectit.core.database import Base


# Whitelist of valid entity type names
ENTITY_TYPES = frozenset([
    "AppSettings", "AuditLog", "ChangeOrder", "CommunicationLog", "CustomRole",
    "Customer", "DashboardView", "EmailTemplate", "Feedback", "FileFolder",
    "IncomingQuote", "IntegrationSettings", "InventoryItem", "InventoryTransaction",
    "NotificationSettings", "Part", "Product", "ProgressUpdate", "Project",
    "ProjectActivity", "ProjectFile", "ProjectNote", "ProjectStack", "ProjectStatus",
    "ProjectTag", "ProjectTemplate", "Proposal", "ProposalActivity", "ProposalSettings",
    "QuoteRequest", "SavedReport", "Service", "ServiceBundle", "Site", "Task",
    "TaskComment", "Ticket", "TaskGroup", "TeamMember", "TimeEntry", "UserGroup",
    "UserNotification", "UserSecuritySettings", "Workflow", "WorkflowLog",
])

# Children removed together with their parent: parent -> [(child type, foreign key)]
CASCADE_MAP: Dict[str, List[tuple]] = {
    "Project": [
        ("Task", "project_id"),
        ("Part", "project_id"),
        ("ProjectNote", "project_id"),
        ("ProjectFile", "project_id"),
        ("FileFolder", "project_id"),
        ("TaskGroup", "project_id"),
        ("TimeEntry", "project_id"),
        ("ProgressUpdate", "project_id"),
        ("ProjectActivity", "project_id"),
        ("Proposal", "project_id"),
        ("ChangeOrder", "project_id"),
    ],
    "Task": [
        ("TaskComment", "task_id"),
    ],
    "Customer": [
        ("Site", "customer_id"),
        ("CommunicationLog", "customer_id"),
    ],
    "Workflow": [
        ("WorkflowLog", "workflow_id"),
    ],
}

META_FIELDS = ("id", "created_date", "updated_date", "created_by")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntityRecord(Base):
    """One row per entity; the business fields live in ``data``."""

    __tablename__ = "entity_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    entity_type = Column(String(64), nullable=False, index=True)
    data = Column(JSON, nullable=False, default=dict)

    created_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
    created_by = Column(String(255), nullable=True)

    __table_args__ = (
        Index("idx_entity_type_created", "entity_type", "created_date"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into the API shape: ``{id, **data, created_date, updated_date, created_by}``."""
        result = {"id": self.id}
        result.update(self.data or {})
        result["created_date"] = self.created_date.isoformat() if self.created_date else None
        result["updated_date"] = self.updated_date.isoformat() if self.updated_date else None
        result["created_by"] = self.created_by
        return result

    def __repr__(self) -> str:
        return f"<EntityRecord(id='{self.id}', type='{self.entity_type}')>"
