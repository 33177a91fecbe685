"""
RPC-style function invocations: ``POST /functions/{name}``.
"""
from typing import Any, Awaitable, Callable, Dict

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from projectit.core.database import get_db
from projectit.core.exceptions import IntegrationRequestError, ProjectITError
from projectit.schemas.functions import LinkQuoteRequest, NotificationEmailRequest, SendEmailRequest
from projectit.services.entities import Entities
from projectit.services.integrations import (
    GammaStackReceiver,
    HaloPSAWebhookProcessor,
    ProposalWebhookProcessor,
    link_quote_to_project,
    pull_quoteit_quotes,
)
from projectit.services.notifications import NotificationEmailSender, send_email
from projectit.services.reminders import DueReminderSweep
from projectit.api.v1.endpoints.webhooks import read_body, record_incoming, run_webhook

router = APIRouter()
logger = structlog.get_logger(__name__)

FunctionHandler = Callable[[Request, Entities], Awaitable[Any]]


async def _json_body(request: Request) -> Dict[str, Any]:
    body = await read_body(request)
    if body is None:
        raise ProjectITError("Request body must be a JSON object", status_code=400)
    return body


async def send_due_reminders(request: Request, entities: Entities) -> Dict[str, Any]:
    result = await DueReminderSweep(entities).run()
    return result.to_response()


async def send_notification_email(request: Request, entities: Entities) -> Any:
    payload = NotificationEmailRequest.model_validate(await _json_body(request))
    try:
        return await NotificationEmailSender(entities).send(payload)
    except ValueError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})


async def send_email_function(request: Request, entities: Entities) -> Any:
    payload = SendEmailRequest.model_validate(await _json_body(request))
    try:
        return await send_email(entities, payload)
    except IntegrationRequestError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": e.message},
        )


async def link_quote(request: Request, entities: Entities) -> Any:
    payload = LinkQuoteRequest.model_validate(await _json_body(request))
    if not payload.quote_id or not payload.project_id:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Missing required fields"},
        )
    return await link_quote_to_project(
        entities, payload.quote_id, payload.project_id, payload.project_number,
    )


async def pull_quotes(request: Request, entities: Entities) -> Dict[str, Any]:
    return await pull_quoteit_quotes(entities)


async def receive_proposal(request: Request, entities: Entities) -> Dict[str, Any]:
    result = ProposalWebhookProcessor(entities).store(await _json_body(request))
    return result.to_response()


async def halopsa_webhook(request: Request, entities: Entities) -> Dict[str, Any]:
    return await run_webhook(HaloPSAWebhookProcessor(entities), request)


async def gammastack_receiver(request: Request, entities: Entities) -> Dict[str, Any]:
    return await run_webhook(GammaStackReceiver(entities), request)


async def proposal_webhook(request: Request, entities: Entities) -> Dict[str, Any]:
    return await run_webhook(ProposalWebhookProcessor(entities), request)


async def incoming_webhook(request: Request, entities: Entities) -> Dict[str, Any]:
    return await record_incoming(request, entities)


HANDLERS: Dict[str, FunctionHandler] = {
    "sendDueReminders": send_due_reminders,
    "sendNotificationEmail": send_notification_email,
    "sendEmail": send_email_function,
    "linkQuoteToProject": link_quote,
    "pullQuoteITQuotes": pull_quotes,
    "receiveProposal": receive_proposal,
    "haloPSAWebhook": halopsa_webhook,
    "gammaStackReceiver": gammastack_receiver,
    "proposalWebhook": proposal_webhook,
    "incomingWebhook": incoming_webhook,
}


@router.post("/{name}")
async def invoke_function(name: str, request: Request, db: Session = Depends(get_db)) -> Any:
    """Invoke a named server function."""
    handler = HANDLERS.get(name)
    if handler is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": f'Function "{name}" not found'},
        )

    entities = Entities.from_session(db)
    try:
        return await handler(request, entities)
    except (HTTPException, ProjectITError):
        raise
    except ValidationError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})
    except Exception as e:
        logger.error("Function failed", function=name, error=str(e), exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )
