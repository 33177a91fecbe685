"""
Admin endpoints for the singleton integration settings record.
"""
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from projectit.core.database import get_db
from projectit.core.exceptions import IntegrationRequestError
from projectit.schemas.entity import EmailTestRequest, IntegrationSettingsUpdate
from projectit.schemas.functions import SendEmailRequest
from projectit.services.entities import Entities, get_integration_settings
from projectit.services.entities.repository import SETTINGS_KEY
from projectit.services.notifications import send_email

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/integrations")
async def get_integrations(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Current integration settings, or an empty object when none are saved."""
    return get_integration_settings(Entities.from_session(db))


@router.put("/integrations")
async def update_integrations(
    update: IntegrationSettingsUpdate,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Create or update the ``main`` settings record."""
    entities = Entities.from_session(db)
    data = update.model_dump(exclude_unset=True)
    existing = get_integration_settings(entities)

    if existing:
        record = entities.integration_settings.update(existing["id"], data)
    else:
        record = entities.integration_settings.create({**data, "setting_key": SETTINGS_KEY})

    logger.info("Integration settings saved", fields=sorted(data))
    return record


@router.post("/integrations/test-email")
async def send_test_email(request: EmailTestRequest, db: Session = Depends(get_db)) -> Any:
    """Send a test message through the configured Resend account."""
    payload = SendEmailRequest(
        to=request.to,
        subject="Test email",
        html="<p>Your email integration is working.</p>",
        test_only=True,
    )
    try:
        return await send_email(Entities.from_session(db), payload)
    except IntegrationRequestError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": e.message},
        )
