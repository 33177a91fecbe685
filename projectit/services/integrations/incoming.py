"""
Catch-all webhook that records whatever it receives in the audit log.
"""
import json
from typing import Any, Dict, Optional

import structlog

from projectit.schemas.webhook import WebhookResult
from projectit.services.activity import ActivityLogger
from projectit.services.entities import Entities

logger = structlog.get_logger(__name__)


class IncomingWebhookRecorder:

    def __init__(self, entities: Entities, activity: ActivityLogger = None):
        self.activity = activity or ActivityLogger(entities)

    def record(self, body: Dict[str, Any], source: Optional[str], ip_address: Optional[str]) -> WebhookResult:
        source = source or "unknown"
        self.activity.audit(
            "incoming_webhook",
            actor_name=source,
            actor_email="system",
            details=json.dumps(body or {}, default=str),
            ip_address=ip_address or "unknown",
        )
        logger.info("Incoming webhook recorded", source=source)
        return WebhookResult(message="Webhook received")
