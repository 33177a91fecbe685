"""
Static-secret and API-key checks for inbound webhooks.

Both strategies compare a caller-supplied value against a stored value. There
is no HMAC signature, replay window or rate limit: anyone holding the secret
can submit events.
"""
import hmac
from typing import Any, Dict, Mapping, Optional

import structlog
from fastapi import Request

from projectit.core.exceptions import WebhookAuthenticationError

logger = structlog.get_logger(__name__)


def _same(provided: str, expected: str) -> bool:
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


class SharedSecretAuthenticator:
    """Pre-shared secret from a header or the ``secret`` query parameter."""

    def __init__(
        self,
        expected_secret: Optional[str],
        header: str = "x-webhook-secret",
        query_param: str = "secret",
        integration: str = "webhook",
    ):
        self.expected_secret = expected_secret
        self.header = header
        self.query_param = query_param
        self.integration = integration

    def check(self, headers: Mapping[str, str], query: Mapping[str, str]) -> None:
        """Raise ``WebhookAuthenticationError`` unless the secret matches."""
        if not self.expected_secret:
            logger.warning("Webhook secret not configured, skipping check", integration=self.integration)
            return

        provided = headers.get(self.header) or query.get(self.query_param)
        if provided is None or not _same(provided, self.expected_secret):
            logger.error("Webhook authentication failed", integration=self.integration)
            raise WebhookAuthenticationError("Unauthorized")

    def authenticate(self, request: Request) -> None:
        self.check(request.headers, request.query_params)


class ApiKeyAuthenticator:
    """API key from a header, matched against a field of the integration settings record."""

    def __init__(self, settings_field: str, header: str, integration: str = "webhook"):
        self.settings_field = settings_field
        self.header = header
        self.integration = integration

    def check(self, headers: Mapping[str, str], config: Dict[str, Any]) -> None:
        provided = headers.get(self.header)
        if not provided:
            logger.error("Webhook API key missing", integration=self.integration)
            raise WebhookAuthenticationError("Missing API Key")

        expected = (config or {}).get(self.settings_field)
        if not expected:
            logger.error("Webhook API key not configured", integration=self.integration)
            raise WebhookAuthenticationError("Webhook not configured")

        if not _same(provided, str(expected)):
            logger.error("Webhook API key mismatch", integration=self.integration)
            raise WebhookAuthenticationError("Invalid API Key")

    def authenticate(self, request: Request, config: Dict[str, Any]) -> None:
        self.check(request.headers, config)
