"""
Receiver for data pushed by the GammaStack / QuoteIT API.
"""
from datetime import datetime, timezone

import structlog
from fastapi import Request

from projectit.models.project import TaskPriority, TaskStatus
from projectit.models.proposal import IncomingQuoteStatus
from projectit.schemas.webhook import GammaStackEvent, WebhookResult
from projectit.services.entities import get_integration_settings
from projectit.services.integrations.authenticator import ApiKeyAuthenticator
from projectit.services.integrations.base import WebhookProcessor

logger = structlog.get_logger(__name__)


class GammaStackReceiver(WebhookProcessor):
    """Stage accepted quotes, turn ticket requests into tasks, log the rest."""

    integration = "gammastack"
    payload_model = GammaStackEvent
    event_field = "type"

    authenticator = ApiKeyAuthenticator(
        settings_field="gammastack_api_key",
        header="x-gammastack-key",
        integration="gammastack",
    )

    def register_handlers(self) -> None:
        self.dispatcher.register("accepted_quote", self._handle_accepted_quote)
        self.dispatcher.register("create_ticket", self._handle_create_ticket)
        self.dispatcher.register("sync_customer", self._handle_sync_customer)

    def authenticate(self, request: Request) -> None:
        self.authenticator.authenticate(request, get_integration_settings(self.entities))

    def after_dispatch(self, payload: GammaStackEvent, result: WebhookResult) -> WebhookResult:
        if not result.success or self.dispatcher.handler_for(payload.type) is not None:
            return result
        self.activity.audit(
            "api_received",
            entity_type="api",
            entity_id="gammastack",
            details=f"Received {payload.type} event from GammaStack API",
            user_email="system@gammastack",
            user_name="GammaStack API",
        )
        return WebhookResult(message="Event received")

    def _handle_accepted_quote(self, event: GammaStackEvent) -> WebhookResult:
        data = event.data
        quote_id = data.get("id") or data.get("quote_id")
        if not quote_id:
            return WebhookResult(message="No quote ID to stage")

        if self.entities.incoming_quotes.first({"quoteit_id": str(quote_id)}) is None:
            self.entities.incoming_quotes.create({
                "quoteit_id": str(quote_id),
                "title": data.get("title"),
                "customer_name": data.get("customer_name") or data.get("client_name"),
                "amount": data.get("total_amount") or data.get("total") or 0,
                "received_date": datetime.now(timezone.utc).isoformat(),
                "status": IncomingQuoteStatus.PENDING.value,
                "raw_data": data,
            })
            logger.info("Staged incoming quote", quote_id=quote_id)
        else:
            logger.info("Quote already staged", quote_id=quote_id)

        return WebhookResult(message="Quote received and staged")

    def _handle_create_ticket(self, event: GammaStackEvent) -> WebhookResult:
        data = event.data
        task = self.entities.tasks.create({
            "title": data.get("subject"),
            "description": data.get("description"),
            "status": TaskStatus.TODO.value,
            "priority": TaskPriority.MEDIUM.value,
            "project_id": data.get("project_id") or "unassigned",
        })
        return WebhookResult(message="Ticket created as Task", task_id=task["id"])

    def _handle_sync_customer(self, event: GammaStackEvent) -> WebhookResult:
        return WebhookResult(message="Customer synced")
