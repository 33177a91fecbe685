"""
QuoteIT API client: pull accepted quotes and tag quotes with their project.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
import structlog

from projectit.core.config import settings
from projectit.core.exceptions import IntegrationNotConfiguredError, IntegrationRequestError
from projectit.models.proposal import IncomingQuoteStatus
from projectit.services.entities import Entities, get_integration_settings

logger = structlog.get_logger(__name__)


class QuoteITClient:
    """Client for the QuoteIT function API. Single attempt, no retries."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.OUTBOUND_TIMEOUT_SECONDS
        self.transport = transport
        self.headers = {
            "x-gammastack-key": api_key,
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, config: Dict[str, Any], **kwargs) -> "QuoteITClient":
        """Build from the integration settings record."""
        if not config.get("quoteit_enabled") or not config.get("quoteit_api_url") or not config.get("quoteit_api_key"):
            raise IntegrationNotConfiguredError("QuoteIT integration not configured")
        return cls(config["quoteit_api_url"], config["quoteit_api_key"], **kwargs)

    async def add_project_tag(self, quote_id: str, project_id: str, project_number: Any) -> Dict[str, Any]:
        """Tag a quote with ``Project #<number>``."""
        url = f"{self.base_url}/api/functions/addProjectTag"
        tag = f"Project #{project_number}"
        logger.info("Linking project to quote", url=url, quote_id=quote_id, project_id=project_id)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(url, headers=self.headers, json={
                "quote_id": quote_id,
                "project_id": project_id,
                "tag": tag,
                "tags": [tag],
            })

        if response.status_code >= 400:
            raise IntegrationRequestError(
                f"Failed to link project on QuoteIT ({response.status_code}): {response.text}"
            )
        return response.json()

    async def get_active_accepted_quotes(self) -> List[Dict[str, Any]]:
        """Fetch accepted, non-archived quotes; a non-list body counts as none."""
        url = f"{self.base_url}/api/functions/getActiveAcceptedQuotes"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(url, headers=self.headers)

        if response.status_code >= 400:
            logger.error("QuoteIT quote fetch failed", status_code=response.status_code, body=response.text)
            raise IntegrationRequestError(
                "Failed to fetch quotes from QuoteIT",
                status_code=response.status_code,
                details=response.text,
            )

        quotes = response.json()
        if not isinstance(quotes, list):
            return []
        logger.info("Fetched quotes from QuoteIT", count=len(quotes))
        return quotes


async def link_quote_to_project(
    entities: Entities,
    quote_id: str,
    project_id: str,
    project_number: Any,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """Tag the quote in QuoteIT and mark the staged quote as linked.

    Configuration and remote failures are reported in the returned body
    rather than raised.
    """
    try:
        client = QuoteITClient.from_settings(get_integration_settings(entities), transport=transport)
        data = await client.add_project_tag(quote_id, project_id, project_number)
    except (IntegrationNotConfiguredError, IntegrationRequestError) as e:
        logger.warning("QuoteIT link failed", quote_id=quote_id, error=e.message)
        return {"success": False, "error": e.message}
    except httpx.HTTPError as e:
        logger.error("QuoteIT request error", quote_id=quote_id, error=str(e))
        return {"success": False, "error": str(e)}

    staged = entities.incoming_quotes.first({"quoteit_id": str(quote_id)})
    if staged is not None:
        entities.incoming_quotes.update(staged["id"], {
            "status": IncomingQuoteStatus.LINKED.value,
            "project_id": project_id,
        })

    return data


async def pull_quoteit_quotes(
    entities: Entities,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """Stage every fetched quote not already staged or converted into a project."""
    client = QuoteITClient.from_settings(get_integration_settings(entities), transport=transport)
    quotes = await client.get_active_accepted_quotes()

    known_ids = {
        str(q["quoteit_id"]) for q in entities.incoming_quotes.list() if q.get("quoteit_id") is not None
    }
    known_ids.update(
        str(p["quoteit_quote_id"]) for p in entities.projects.list() if p.get("quoteit_quote_id")
    )

    created = skipped = 0
    for quote in quotes:
        quote_id = quote.get("id") or quote.get("quote_id")
        if quote_id is None or str(quote_id) in known_ids:
            skipped += 1
            continue

        customer = quote.get("customer") or {}
        entities.incoming_quotes.create({
            "quoteit_id": str(quote_id),
            "title": quote.get("title") or quote.get("name") or f"Quote {quote_id}",
            "customer_name": quote.get("customer_name") or customer.get("name") or "",
            "customer_email": quote.get("customer_email") or customer.get("email") or "",
            "amount": quote.get("total") or quote.get("amount") or 0,
            "received_date": datetime.now(timezone.utc).isoformat(),
            "status": IncomingQuoteStatus.PENDING.value,
            "raw_data": quote,
        })
        known_ids.add(str(quote_id))
        created += 1

    logger.info("QuoteIT pull finished", created=created, skipped=skipped, total_fetched=len(quotes))
    return {
        "success": True,
        "message": "Synced quotes from QuoteIT",
        "created": created,
        "skipped": skipped,
        "total_fetched": len(quotes),
    }
