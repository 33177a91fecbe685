"""
Outbound email through the Resend HTTP API.
"""
from typing import Any, Dict, List, Optional, Union

import httpx
import structlog

from projectit.core.config import settings
from projectit.core.exceptions import IntegrationRequestError

logger = structlog.get_logger(__name__)


class EmailClient:
    """Send email through Resend. Single attempt, no retries."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.RESEND_API_KEY
        self.from_email = from_email or settings.RESEND_FROM_EMAIL
        self.from_name = from_name or settings.RESEND_FROM_NAME
        self.base_url = (base_url or settings.RESEND_API_URL).rstrip("/")
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def send(
        self,
        to: Union[str, List[str]],
        subject: str,
        html: Optional[str] = None,
        text: Optional[str] = None,
        from_name: Optional[str] = None,
        from_email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Send one message; returns ``{success, id}`` or ``{success: False, error}`` when unconfigured."""
        if not self.configured:
            logger.warning("Email service not configured (RESEND_API_KEY missing)")
            return {"success": False, "error": "Email service not configured"}

        sender = f"{from_name or self.from_name} <{from_email or self.from_email}>"
        payload: Dict[str, Any] = {
            "from": sender,
            "to": to if isinstance(to, list) else [to],
            "subject": subject,
            "html": html or text,
        }
        if text:
            payload["text"] = text

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=settings.OUTBOUND_TIMEOUT_SECONDS,
            transport=self.transport,
        ) as client:
            response = await client.post(
                "/emails",
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )

        if response.status_code >= 400:
            try:
                detail = response.json().get("message") or response.text
            except ValueError:
                detail = response.text
            logger.error("Email send failed", status_code=response.status_code, error=detail)
            raise IntegrationRequestError(detail)

        message_id = response.json().get("id")
        logger.info("Email sent", to=payload["to"], id=message_id)
        return {"success": True, "id": message_id}
