"""
Proposal e-signature webhook and proposal intake.

Customers act on a proposal through its approval token: viewing it, signing
it, declining it or asking for changes. Each action moves the proposal status
and appends a ProposalActivity entry.
"""
from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from pydantic import ValidationError

from projectit.core.exceptions import ProjectITError
from projectit.models.proposal import ProposalStatus
from projectit.schemas.webhook import ProposalStoreRequest, ProposalWebhookRequest, WebhookResult
from projectit.services.integrations.base import WebhookProcessor

logger = structlog.get_logger(__name__)

USAGE = {
    "api": "Proposal Webhook",
    "status": "ready",
    "usage": "POST with { token, action, signerName?, signatureData?, declineReason?, changeNotes? }",
    "actions": ["viewed", "approved", "rejected", "declined", "changes_requested"],
}

# Fields exposed to the customer-facing approval page
PUBLIC_FIELDS = (
    "id", "proposal_number", "title", "customer_name", "customer_company",
    "subtotal", "tax_total", "total", "terms_conditions", "valid_until",
    "status", "signer_name", "signed_date",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProposalWebhookProcessor(WebhookProcessor):
    """Apply customer actions to the proposal matching ``approval_token``."""

    integration = "proposal"
    payload_model = ProposalWebhookRequest
    event_field = "action"

    def register_handlers(self) -> None:
        self.dispatcher.register("viewed", self._handle_viewed)
        self.dispatcher.register("fetch", self._handle_fetch)
        self.dispatcher.register(["approved", "approve"], self._handle_approved)
        self.dispatcher.register(["rejected", "declined", "decline"], self._handle_rejected)
        self.dispatcher.register("changes_requested", self._handle_changes_requested)

    async def process(self, body: Dict[str, Any]) -> WebhookResult:
        """Validate token and action up front; those failures are client errors."""
        try:
            request = ProposalWebhookRequest.model_validate(body or {})
        except ValidationError as e:
            raise ProjectITError(f"Invalid request: {e}", status_code=400)

        logger.info("Proposal webhook received", action=request.action)

        if not request.token:
            raise ProjectITError("Token required", status_code=400)

        proposal = self.entities.proposals.first({"approval_token": request.token})
        if proposal is None:
            raise ProjectITError("Proposal not found", status_code=404)

        if self.dispatcher.handler_for(request.action) is None:
            raise ProjectITError(f"Invalid action: {request.action}", status_code=400)

        try:
            return await self.dispatcher.dispatch(request.action, proposal, request)
        except Exception as e:
            logger.error("Proposal webhook failed", proposal_id=proposal["id"], error=str(e), exc_info=True)
            return WebhookResult(success=False, error=str(e))

    def _mark_viewed(self, proposal: Dict[str, Any]) -> Dict[str, Any]:
        if proposal.get("status") != ProposalStatus.SENT.value:
            return proposal
        proposal = self.entities.proposals.update(proposal["id"], {
            "status": ProposalStatus.VIEWED.value,
            "viewed_date": _now(),
        })
        self.activity.proposal_activity(
            proposal["id"], "viewed", proposal.get("customer_name"), "Proposal viewed by customer",
        )
        return proposal

    def _handle_viewed(self, proposal: Dict[str, Any], request: ProposalWebhookRequest) -> WebhookResult:
        self._mark_viewed(proposal)
        return WebhookResult(status=ProposalStatus.VIEWED.value)

    def _handle_fetch(self, proposal: Dict[str, Any], request: ProposalWebhookRequest) -> WebhookResult:
        proposal = self._mark_viewed(proposal)
        view = {field: proposal.get(field) for field in PUBLIC_FIELDS}
        view["items"] = proposal.get("items") or []
        view["areas"] = proposal.get("areas") or []
        return WebhookResult(proposal=view)

    def _handle_approved(self, proposal: Dict[str, Any], request: ProposalWebhookRequest) -> WebhookResult:
        signer = request.signer_name or proposal.get("customer_name")
        self.entities.proposals.update(proposal["id"], {
            "status": ProposalStatus.APPROVED.value,
            "signature_data": request.signature_data,
            "signer_name": signer,
            "signed_date": _now(),
        })
        self.activity.proposal_activity(
            proposal["id"], "approved", signer, f"Proposal approved and signed by {signer}",
        )
        logger.info("Proposal approved", proposal_id=proposal["id"])
        return WebhookResult(status=ProposalStatus.APPROVED.value)

    def _handle_rejected(self, proposal: Dict[str, Any], request: ProposalWebhookRequest) -> WebhookResult:
        reason = request.decline_reason or "Declined by customer"
        self.entities.proposals.update(proposal["id"], {
            "status": ProposalStatus.REJECTED.value,
            "change_request_notes": reason,
        })
        self.activity.proposal_activity(proposal["id"], "rejected", proposal.get("customer_name"), reason)
        return WebhookResult(status=ProposalStatus.REJECTED.value)

    def _handle_changes_requested(self, proposal: Dict[str, Any], request: ProposalWebhookRequest) -> WebhookResult:
        notes = request.change_notes or "Customer requested changes"
        self.entities.proposals.update(proposal["id"], {
            "status": ProposalStatus.CHANGES_REQUESTED.value,
            "change_request_notes": notes,
        })
        self.activity.proposal_activity(
            proposal["id"], "changes_requested", proposal.get("customer_name"), notes,
        )
        return WebhookResult(status=ProposalStatus.CHANGES_REQUESTED.value)

    def store(self, body: Dict[str, Any]) -> WebhookResult:
        """Create or replace a proposal pushed by the quoting tool, keyed by token."""
        request = ProposalStoreRequest.model_validate(body or {})
        if request.action != "store" or not request.token or not request.proposal:
            raise ProjectITError(
                "Invalid request. Required: action=store, token, proposal",
                status_code=400,
            )

        data = {**request.proposal, "approval_token": request.token}
        existing = self.entities.proposals.first({"approval_token": request.token})
        if existing is not None:
            self.entities.proposals.update(existing["id"], data)
            return WebhookResult(action="updated")

        self.entities.proposals.create(data)
        return WebhookResult(action="created")
