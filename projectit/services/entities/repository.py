"""
Typed repositories over the generic entity service.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from projectit.services.entities.service import EntityService, validate_entity_type


class EntityRepository:
    """CRUD bound to a single entity type."""

    def __init__(self, service: EntityService, entity_type: str):
        validate_entity_type(entity_type)
        self.service = service
        self.entity_type = entity_type

    def list(self, sort: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return self.service.list(self.entity_type, sort=sort, limit=limit)

    def filter(
        self,
        criteria: Optional[Dict[str, Any]] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return self.service.filter(self.entity_type, criteria, sort=sort, limit=limit)

    def first(self, criteria: Dict[str, Any], sort: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """First match or None. Callers treat the first match as authoritative."""
        matches = self.filter(criteria, sort=sort)
        return matches[0] if matches else None

    def get(self, entity_id: str) -> Dict[str, Any]:
        return self.service.get(self.entity_type, entity_id)

    def create(self, data: Dict[str, Any], created_by: Optional[str] = None) -> Dict[str, Any]:
        return self.service.create(self.entity_type, data, created_by=created_by)

    def update(self, entity_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        return self.service.update(self.entity_type, entity_id, patch)

    def delete(self, entity_id: str, deleted_by: Optional[str] = None) -> Dict[str, Any]:
        return self.service.delete(self.entity_type, entity_id, deleted_by=deleted_by)


class Entities:
    """Repository accessor for the entity types the integrations touch."""

    def __init__(self, service: EntityService):
        self.service = service
        self._repositories: Dict[str, EntityRepository] = {}

    @classmethod
    def from_session(cls, db: Session) -> "Entities":
        return cls(EntityService(db))

    def of(self, entity_type: str) -> EntityRepository:
        """Repository for any whitelisted entity type."""
        if entity_type not in self._repositories:
            self._repositories[entity_type] = EntityRepository(self.service, entity_type)
        return self._repositories[entity_type]

    @property
    def projects(self) -> EntityRepository:
        return self.of("Project")

    @property
    def tasks(self) -> EntityRepository:
        return self.of("Task")

    @property
    def project_activities(self) -> EntityRepository:
        return self.of("ProjectActivity")

    @property
    def project_notes(self) -> EntityRepository:
        return self.of("ProjectNote")

    @property
    def proposals(self) -> EntityRepository:
        return self.of("Proposal")

    @property
    def proposal_activities(self) -> EntityRepository:
        return self.of("ProposalActivity")

    @property
    def audit_logs(self) -> EntityRepository:
        return self.of("AuditLog")

    @property
    def incoming_quotes(self) -> EntityRepository:
        return self.of("IncomingQuote")

    @property
    def feedback(self) -> EntityRepository:
        return self.of("Feedback")

    @property
    def integration_settings(self) -> EntityRepository:
        return self.of("IntegrationSettings")

    @property
    def app_settings(self) -> EntityRepository:
        return self.of("AppSettings")

    @property
    def notification_settings(self) -> EntityRepository:
        return self.of("NotificationSettings")

    @property
    def user_notifications(self) -> EntityRepository:
        return self.of("UserNotification")


SETTINGS_KEY = "main"


def get_integration_settings(entities: Entities) -> Dict[str, Any]:
    """The singleton integration settings record, or an empty dict."""
    return entities.integration_settings.first({"setting_key": SETTINGS_KEY}) or {}


def get_app_settings(entities: Entities) -> Dict[str, Any]:
    return entities.app_settings.first({"setting_key": SETTINGS_KEY}) or {}
