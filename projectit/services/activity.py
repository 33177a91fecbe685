"""
Append-only activity and audit trail writer.
"""
from typing import Any, Dict, Optional

import structlog

from projectit.services.entities import Entities

logger = structlog.get_logger(__name__)


class ActivityLogger:
    """Creates ProjectActivity, ProposalActivity and AuditLog entries."""

    def __init__(self, entities: Entities):
        self.entities = entities

    def project_activity(
        self,
        project_id: str,
        action: str,
        description: str,
        actor_email: str,
        actor_name: str,
    ) -> Dict[str, Any]:
        entry = self.entities.project_activities.create({
            "project_id": project_id,
            "action": action,
            "description": description,
            "actor_email": actor_email,
            "actor_name": actor_name,
        })
        logger.debug("Project activity recorded", project_id=project_id, action=action)
        return entry

    def proposal_activity(
        self,
        proposal_id: str,
        action: str,
        actor_name: Optional[str],
        details: str,
    ) -> Dict[str, Any]:
        return self.entities.proposal_activities.create({
            "proposal_id": proposal_id,
            "action": action,
            "actor_name": actor_name,
            "details": details,
        })

    def audit(self, action: str, **fields: Any) -> Dict[str, Any]:
        """Record an AuditLog entry; extra keyword arguments become entry fields."""
        entry = self.entities.audit_logs.create({"action": action, **fields})
        logger.debug("Audit entry recorded", action=action, entity_id=fields.get("entity_id"))
        return entry
