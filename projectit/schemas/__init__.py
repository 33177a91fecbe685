"""
Pydantic schemas for request/response validation.
"""
from projectit.schemas.webhook import (
    WebhookResult,
    HaloPSAWebhookPayload,
    HaloPSATicket,
    HaloPSAAction,
    ProposalWebhookRequest,
    ProposalStoreRequest,
    GammaStackEvent,
    GammaAiEvent,
)
from projectit.schemas.functions import (
    NotificationEmailRequest,
    SendEmailRequest,
    LinkQuoteRequest,
    SweepResult,
)
from projectit.schemas.entity import EntityFilterRequest, IntegrationSettingsUpdate, EmailTestRequest
from projectit.schemas.health import HealthResponse

__all__ = [
    "WebhookResult",
    "HaloPSAWebhookPayload",
    "HaloPSATicket",
    "HaloPSAAction",
    "ProposalWebhookRequest",
    "ProposalStoreRequest",
    "GammaStackEvent",
    "GammaAiEvent",
    "NotificationEmailRequest",
    "SendEmailRequest",
    "LinkQuoteRequest",
    "SweepResult",
    "EntityFilterRequest",
    "IntegrationSettingsUpdate",
    "EmailTestRequest",
    "HealthResponse",
]
