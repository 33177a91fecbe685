"""
GammaAi agent callbacks: feed AI task results back onto Feedback records.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from fastapi import Request

from projectit.core.exceptions import ProjectITError
from projectit.schemas.webhook import GammaAiEvent, WebhookResult
from projectit.services.entities import get_integration_settings
from projectit.services.integrations.authenticator import ApiKeyAuthenticator
from projectit.services.integrations.base import WebhookProcessor

logger = structlog.get_logger(__name__)

# Agent task status -> Feedback.ai_status; anything else counts as in progress
AI_STATUS_MAPPING = {
    "in_progress": "in_progress",
    "failed": "failed",
    "completed": "completed",
}


def _feedback_id(data: Dict[str, Any]) -> Optional[str]:
    return (data.get("metadata") or {}).get("feedback_id")


class GammaAiWebhookProcessor(WebhookProcessor):

    integration = "gammaai"
    payload_model = GammaAiEvent
    event_field = "event"

    authenticator = ApiKeyAuthenticator(
        settings_field="gammaai_webhook_secret",
        header="x-gammaai-webhook-secret",
        integration="gammaai",
    )

    def register_handlers(self) -> None:
        self.dispatcher.register(["task_result", "task.completed"], self._handle_result)
        self.dispatcher.register(["task_status", "task.updated"], self._handle_status)
        self.dispatcher.register("task.failed", self._handle_failed)

    def settings_record(self) -> Dict[str, Any]:
        """The ``provider: gammaai`` record if it holds a secret, else the main settings."""
        provider = self.entities.integration_settings.first({"provider": "gammaai"}) or {}
        if provider.get(self.authenticator.settings_field):
            return provider
        return get_integration_settings(self.entities)

    def authenticate(self, request: Request) -> None:
        self.authenticator.authenticate(request, self.settings_record())

    async def process(self, body: Dict[str, Any]) -> WebhookResult:
        body = body or {}
        if not body.get("event") or not body.get("data"):
            raise ProjectITError("Missing event or data in request body", status_code=400)
        return await super().process(body)

    def after_dispatch(self, payload: GammaAiEvent, result: WebhookResult) -> WebhookResult:
        if not result.success:
            return result
        data = payload.data or {}
        self.activity.audit(
            "gammaai_webhook",
            entity_type="GammaAi",
            entity_id=data.get("id") or data.get("task_id") or "unknown",
            details=f"Received {payload.event} webhook from GammaAi",
            user_email="system@gammaai",
            user_name="GammaAi Webhook",
        )
        result.message = result.message or "Webhook processed"
        return result

    def _handle_result(self, event: GammaAiEvent) -> WebhookResult:
        feedback_id = _feedback_id(event.data)
        if feedback_id:
            self.entities.feedback.update(feedback_id, {
                "ai_status": "completed",
                "ai_analysis": event.data.get("result") or event.data.get("output_data"),
                "ai_completed_at": datetime.now(timezone.utc).isoformat(),
            })
        return WebhookResult()

    def _handle_status(self, event: GammaAiEvent) -> WebhookResult:
        feedback_id = _feedback_id(event.data)
        if not feedback_id:
            return WebhookResult()

        status = AI_STATUS_MAPPING.get(event.data.get("status"), "in_progress")
        update: Dict[str, Any] = {"ai_status": status}
        output = event.data.get("result") or event.data.get("output_data")
        if status == "completed" and output:
            update["ai_analysis"] = output
            update["ai_completed_at"] = datetime.now(timezone.utc).isoformat()

        self.entities.feedback.update(feedback_id, update)
        return WebhookResult()

    def _handle_failed(self, event: GammaAiEvent) -> WebhookResult:
        feedback_id = _feedback_id(event.data)
        if feedback_id:
            self.entities.feedback.update(feedback_id, {
                "ai_status": "failed",
                "ai_analysis": event.data.get("error") or event.data.get("message") or "Agent task failed",
            })
        return WebhookResult()
