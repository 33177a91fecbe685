"""
Shared skeleton for inbound webhook processors.
"""
from typing import Any, Dict, Type

import structlog
from fastapi import Request
from pydantic import BaseModel

from projectit.schemas.webhook import WebhookResult
from projectit.services.activity import ActivityLogger
from projectit.services.entities import Entities
from projectit.services.integrations.dispatcher import EventDispatcher

logger = structlog.get_logger(__name__)


class WebhookProcessor:
    """Parse a body, dispatch on its event type and never let an error escape.

    Subclasses set ``integration``, ``payload_model`` and ``event_field`` and
    register their handlers in ``register_handlers``. Any exception raised
    while processing becomes ``WebhookResult(success=False)`` so the endpoint
    can still answer 200 and suppress sender retries.
    """

    integration: str = "webhook"
    payload_model: Type[BaseModel]
    event_field: str = "event_type"

    def __init__(self, entities: Entities, activity: ActivityLogger = None):
        self.entities = entities
        self.activity = activity or ActivityLogger(entities)
        self.dispatcher = EventDispatcher(self.integration)
        self.register_handlers()

    def register_handlers(self) -> None:
        raise NotImplementedError

    def authenticate(self, request: Request) -> None:
        """Raise ``WebhookAuthenticationError`` for callers that may not submit events."""

    def after_dispatch(self, payload: BaseModel, result: WebhookResult) -> WebhookResult:
        """Post-dispatch step run under the same guard as the handlers."""
        return result

    async def process(self, body: Dict[str, Any]) -> WebhookResult:
        try:
            payload = self.payload_model.model_validate(body or {})
            event_type = getattr(payload, self.event_field, None)
            logger.info("Webhook received", integration=self.integration, event_type=event_type)
            result = await self.dispatcher.dispatch(event_type, payload)
            return self.after_dispatch(payload, result)
        except Exception as e:
            logger.error(
                "Webhook processing failed",
                integration=self.integration,
                error=str(e),
                exc_info=True,
            )
            return WebhookResult(success=False, error=str(e))
