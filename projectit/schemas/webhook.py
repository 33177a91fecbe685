"""
Inbound webhook payloads and the common webhook response.
"""
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


ExternalId = Union[int, str]


class WebhookResult(BaseModel):
    """Outcome of processing one webhook event.

    Extra keyword fields (``project_id``, ``updates``, ``status`` ...) are kept
    and returned to the caller alongside ``success`` and ``message``.
    """
    model_config = ConfigDict(extra="allow")

    success: bool = True
    message: Optional[str] = None
    error: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class HaloPSATicket(BaseModel):
    """The subset of a HaloPSA ticket the reconciler reads."""
    model_config = ConfigDict(extra="allow")

    id: Optional[ExternalId] = None
    summary: Optional[str] = None
    details: Optional[str] = None
    status_id: Optional[ExternalId] = None


class HaloPSAAction(BaseModel):
    """A note/action appended to a HaloPSA ticket."""
    model_config = ConfigDict(extra="allow")

    id: Optional[ExternalId] = None
    ticket_id: Optional[ExternalId] = None
    note: Optional[str] = None
    who: Optional[str] = None
    hiddenfromuser: Optional[bool] = None


class HaloPSAWebhookPayload(BaseModel):
    """HaloPSA webhook body.

    The ticket may arrive nested under ``ticket`` or as the body itself, so
    unknown top-level keys are kept for the flat form.
    """
    model_config = ConfigDict(extra="allow")

    event_type: Optional[str] = None
    ticket_id: Optional[ExternalId] = None
    ticket: Optional[HaloPSATicket] = None
    action_id: Optional[ExternalId] = None
    action: Optional[HaloPSAAction] = None

    def ticket_data(self) -> HaloPSATicket:
        if self.ticket is not None:
            return self.ticket
        return HaloPSATicket.model_validate(self.model_dump(exclude={"ticket", "action"}))

    def resolved_ticket_id(self) -> Optional[str]:
        """``ticket_id`` if present, else the id of the embedded ticket."""
        ticket_id = self.ticket_id if self.ticket_id not in (None, "") else self.ticket_data().id
        if ticket_id in (None, ""):
            return None
        return str(ticket_id)


class ProposalWebhookRequest(BaseModel):
    """Customer action on a proposal, keyed by its approval token."""
    model_config = ConfigDict(populate_by_name=True)

    token: Optional[str] = None
    action: Optional[str] = None
    signer_name: Optional[str] = Field(None, alias="signerName")
    signature_data: Optional[str] = Field(None, alias="signatureData")
    decline_reason: Optional[str] = Field(None, alias="declineReason")
    change_notes: Optional[str] = Field(None, alias="changeNotes")


class ProposalStoreRequest(BaseModel):
    action: Optional[str] = None
    token: Optional[str] = None
    proposal: Optional[Dict[str, Any]] = None


class GammaStackEvent(BaseModel):
    """Data pushed by the GammaStack/QuoteIT API."""
    type: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class GammaAiEvent(BaseModel):
    """Agent task callback from GammaAi."""
    event: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
