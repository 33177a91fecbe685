"""
Inbound webhook endpoints.

Once a caller is authenticated every response is HTTP 200; processing
failures are reported as ``{"success": false, "error": ...}`` so senders do
not retry.
"""
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from projectit.core.database import get_db
from projectit.core.exceptions import WebhookAuthenticationError
from projectit.schemas.webhook import WebhookResult
from projectit.services.entities import Entities
from projectit.services.integrations import PROCESSORS, IncomingWebhookRecorder, WebhookProcessor
from projectit.services.integrations.proposal_webhook import USAGE

router = APIRouter()
logger = structlog.get_logger(__name__)


async def read_body(request: Request) -> Optional[Dict[str, Any]]:
    """JSON body as a dict; None when the body is not a JSON object."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded
    return request.client.host if request.client else None


async def run_webhook(processor: WebhookProcessor, request: Request) -> Dict[str, Any]:
    """Authenticate, then process; only authentication and request validation may fail the call."""
    try:
        processor.authenticate(request)
    except WebhookAuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

    body = await read_body(request)
    if body is None:
        logger.warning("Webhook body is not a JSON object", integration=processor.integration)
        return WebhookResult(success=False, error="Invalid JSON body").to_response()

    result = await processor.process(body)
    return result.to_response()


async def record_incoming(request: Request, entities: Entities) -> Dict[str, Any]:
    body = await read_body(request)
    try:
        result = IncomingWebhookRecorder(entities).record(
            body or {},
            source=request.query_params.get("source"),
            ip_address=client_ip(request),
        )
    except Exception as e:
        logger.error("Incoming webhook failed", error=str(e), exc_info=True)
        result = WebhookResult(success=False, error=str(e))
    return result.to_response()


@router.get("/proposal")
async def proposal_usage() -> Dict[str, Any]:
    """Describe how to call the proposal webhook."""
    return USAGE


@router.post("/{integration}")
async def receive_webhook(
    integration: str,
    request: Request,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Receive an event from a third-party integration."""
    entities = Entities.from_session(db)

    if integration == "incoming":
        return await record_incoming(request, entities)

    processor_class = PROCESSORS.get(integration)
    if processor_class is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown integration: {integration}",
        )

    return await run_webhook(processor_class(entities), request)
