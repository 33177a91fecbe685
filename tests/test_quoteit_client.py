"""Tests for the QuoteIT link-back."""

import json

import httpx
import pytest

from projectit.core.exceptions import IntegrationNotConfiguredError, IntegrationRequestError
from projectit.services.integrations import link_quote_to_project, pull_quoteit_quotes


def quoteit_settings(integration_settings):
    return integration_settings(
        quoteit_enabled=True,
        quoteit_api_url="https://quoteit.example.com/",
        quoteit_api_key="qk-1",
    )


@pytest.mark.asyncio
async def test_not_configured(entities):
    result = await link_quote_to_project(entities, "501", "p-1", 1001)
    assert result == {"success": False, "error": "QuoteIT integration not configured"}


@pytest.mark.asyncio
async def test_links_and_marks_staged_quote(entities, integration_settings):
    quoteit_settings(integration_settings)
    staged = entities.incoming_quotes.create({"quoteit_id": "501", "status": "pending"})
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-gammastack-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "tagged": True})

    result = await link_quote_to_project(
        entities, "501", "p-1", 1001, transport=httpx.MockTransport(handler),
    )

    assert result == {"success": True, "tagged": True}
    assert seen["url"] == "https://quoteit.example.com/api/functions/addProjectTag"
    assert seen["key"] == "qk-1"
    assert seen["body"]["tag"] == "Project #1001"
    assert seen["body"]["tags"] == ["Project #1001"]

    stored = entities.incoming_quotes.get(staged["id"])
    assert stored["status"] == "linked"
    assert stored["project_id"] == "p-1"


@pytest.mark.asyncio
async def test_remote_failure_is_reported(entities, integration_settings):
    quoteit_settings(integration_settings)
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="quote locked"))

    result = await link_quote_to_project(entities, "501", "p-1", 1001, transport=transport)

    assert result == {
        "success": False,
        "error": "Failed to link project on QuoteIT (500): quote locked",
    }


class TestPullQuotes:

    @pytest.mark.asyncio
    async def test_not_configured(self, entities):
        with pytest.raises(IntegrationNotConfiguredError):
            await pull_quoteit_quotes(entities)

    @pytest.mark.asyncio
    async def test_stages_new_quotes_only(self, entities, integration_settings):
        quoteit_settings(integration_settings)
        entities.incoming_quotes.create({"quoteit_id": "501", "status": "pending"})
        entities.projects.create({"name": "Wifi", "quoteit_quote_id": "502"})
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-gammastack-key"]
            return httpx.Response(200, json=[
                {"id": 501, "title": "Already staged"},
                {"id": "502", "title": "Already a project"},
                {"quote_id": "503", "customer": {"name": "Acme", "email": "ops@acme.test"}, "amount": 1200},
            ])

        result = await pull_quoteit_quotes(entities, transport=httpx.MockTransport(handler))

        assert result == {
            "success": True,
            "message": "Synced quotes from QuoteIT",
            "created": 1,
            "skipped": 2,
            "total_fetched": 3,
        }
        assert seen["method"] == "GET"
        assert seen["url"] == "https://quoteit.example.com/api/functions/getActiveAcceptedQuotes"
        assert seen["key"] == "qk-1"

        staged = entities.incoming_quotes.first({"quoteit_id": "503"})
        assert staged["title"] == "Quote 503"
        assert staged["customer_name"] == "Acme"
        assert staged["customer_email"] == "ops@acme.test"
        assert staged["amount"] == 1200
        assert staged["status"] == "pending"

    @pytest.mark.asyncio
    async def test_non_list_body_fetches_nothing(self, entities, integration_settings):
        quoteit_settings(integration_settings)
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"quotes": []}))

        result = await pull_quoteit_quotes(entities, transport=transport)

        assert result["total_fetched"] == 0
        assert entities.incoming_quotes.list() == []

    @pytest.mark.asyncio
    async def test_remote_failure_keeps_status(self, entities, integration_settings):
        quoteit_settings(integration_settings)
        transport = httpx.MockTransport(lambda request: httpx.Response(403, text="bad key"))

        with pytest.raises(IntegrationRequestError) as exc_info:
            await pull_quoteit_quotes(entities, transport=transport)

        assert exc_info.value.status_code == 403
        assert exc_info.value.to_dict() == {
            "error": "Failed to fetch quotes from QuoteIT",
            "details": "bad key",
        }
