"""
HaloPSA ticket webhook: keeps linked projects in step with their tickets.
"""
from typing import Any, Dict, Optional

import structlog
from fastapi import Request

from projectit.core.config import settings
from projectit.models.project import ProjectStatus
from projectit.schemas.webhook import HaloPSAWebhookPayload, WebhookResult
from projectit.services.integrations.authenticator import SharedSecretAuthenticator
from projectit.services.integrations.base import WebhookProcessor
from projectit.services.integrations.reconciler import FieldReconciler

logger = structlog.get_logger(__name__)

# HaloPSA status_id -> local project status
STATUS_MAPPING = {
    1: ProjectStatus.PLANNING.value,
    2: ProjectStatus.PLANNING.value,
    23: ProjectStatus.ON_HOLD.value,
    9: ProjectStatus.COMPLETED.value,
    10: ProjectStatus.COMPLETED.value,
}

# HaloPSA ticket field -> local project field
FIELD_MAPPING = {
    "summary": "name",
    "details": "description",
}

ACTOR_EMAIL = "system@halopsa"
ACTOR_NAME = "HaloPSA Sync"


class HaloPSAWebhookProcessor(WebhookProcessor):
    """Reconcile HaloPSA ticket events onto the project linked by ``halopsa_ticket_id``."""

    integration = "halopsa"
    payload_model = HaloPSAWebhookPayload

    def __init__(self, *args, webhook_secret: Optional[str] = None, **kwargs):
        self.reconciler = FieldReconciler(
            FIELD_MAPPING,
            status_field="status_id",
            status_map=STATUS_MAPPING,
        )
        self.authenticator = SharedSecretAuthenticator(
            webhook_secret if webhook_secret is not None else settings.HALOPSA_WEBHOOK_SECRET,
            integration=self.integration,
        )
        super().__init__(*args, **kwargs)

    def authenticate(self, request: Request) -> None:
        self.authenticator.authenticate(request)

    def register_handlers(self) -> None:
        self.dispatcher.register(["ticket.created", "ticket.updated"], self._handle_ticket_updated)
        self.dispatcher.register("action.created", self._handle_action_created)
        self.dispatcher.register(["ticket.closed", "ticket.resolved"], self._handle_ticket_closed)

    def find_project(self, ticket_id: str) -> Optional[Dict[str, Any]]:
        """Project linked to a ticket; the first match wins if several claim it."""
        return self.entities.projects.first({"halopsa_ticket_id": str(ticket_id)})

    def _apply(self, project: Dict[str, Any], ticket_id: str, updates: Dict[str, Any]) -> None:
        self.entities.projects.update(project["id"], updates)
        self.activity.audit(
            "halopsa_webhook_update",
            action_category="project",
            entity_type="Project",
            entity_id=project["id"],
            entity_name=project.get("name"),
            user_email=ACTOR_EMAIL,
            user_name="HaloPSA Webhook",
            details=f"Updated fields: {', '.join(updates)}",
            changes=updates,
        )
        logger.info(
            "Updated project from HaloPSA",
            project_id=project["id"],
            ticket_id=ticket_id,
            fields=list(updates),
        )

    def _handle_ticket_updated(self, payload: HaloPSAWebhookPayload) -> WebhookResult:
        ticket_id = payload.resolved_ticket_id()
        if not ticket_id:
            logger.info("No ticket ID in webhook payload")
            return WebhookResult(message="No ticket ID to process")

        project = self.find_project(ticket_id)
        if project is None:
            logger.info("No project linked to ticket", ticket_id=ticket_id)
            return WebhookResult(message="No linked project found")

        ticket = payload.ticket_data().model_dump()
        updates = self.reconciler.diff(project, ticket)

        if updates:
            self._apply(project, ticket_id, updates)
            self.activity.project_activity(
                project["id"],
                "halopsa_sync",
                f"Project updated from HaloPSA ticket #{ticket_id}",
                ACTOR_EMAIL,
                ACTOR_NAME,
            )

        return WebhookResult(
            message="Ticket update processed",
            project_id=project["id"],
            updates=updates,
        )

    def _handle_action_created(self, payload: HaloPSAWebhookPayload) -> WebhookResult:
        action = payload.action
        if action is None:
            return WebhookResult(message="No action in payload")

        if action.ticket_id in (None, ""):
            return WebhookResult(message="No ticket ID in action")
        ticket_id = str(action.ticket_id)

        project = self.find_project(ticket_id)
        if project is None:
            logger.info("No project linked to ticket", ticket_id=ticket_id)
            return WebhookResult(message="No linked project found")

        if action.note and not action.hiddenfromuser:
            author = action.who or "HaloPSA"
            self.entities.project_notes.create({
                "project_id": project["id"],
                "type": "message",
                "title": "HaloPSA Note",
                "content": action.note,
                "author_email": ACTOR_EMAIL,
                "author_name": author,
            })
            self.activity.project_activity(
                project["id"],
                "note_added",
                f"Note synced from HaloPSA ticket #{ticket_id}",
                ACTOR_EMAIL,
                author,
            )

        return WebhookResult(message="Action processed", project_id=project["id"])

    def _handle_ticket_closed(self, payload: HaloPSAWebhookPayload) -> WebhookResult:
        ticket_id = payload.resolved_ticket_id()
        if not ticket_id:
            return WebhookResult(message="Ticket closure processed")

        project = self.find_project(ticket_id)
        if project is None:
            logger.info("No project linked to ticket", ticket_id=ticket_id)
            return WebhookResult(message="Ticket closure processed")

        updates = self.reconciler.status_diff(project, ProjectStatus.COMPLETED.value)
        if updates:
            self._apply(project, ticket_id, updates)
            self.activity.project_activity(
                project["id"],
                "project_status_change",
                f"Project marked complete (HaloPSA ticket #{ticket_id} closed)",
                ACTOR_EMAIL,
                ACTOR_NAME,
            )

        return WebhookResult(
            message="Ticket closure processed",
            project_id=project["id"],
            updates=updates,
        )
