"""Tests for proposal e-signature actions and proposal intake."""

import pytest

from projectit.core.exceptions import ProjectITError
from projectit.services.integrations import ProposalWebhookProcessor


@pytest.fixture
def processor(entities):
    return ProposalWebhookProcessor(entities)


@pytest.fixture
def proposal(entities):
    return entities.proposals.create({
        "proposal_number": "P-100",
        "title": "Network refresh",
        "customer_name": "Jordan Lee",
        "status": "sent",
        "approval_token": "tok-1",
        "total": 1200,
        "items": [{"name": "Switch", "qty": 2}],
    })


class TestActions:

    @pytest.mark.asyncio
    async def test_viewed_moves_sent_to_viewed(self, processor, entities, proposal):
        result = await processor.process({"token": "tok-1", "action": "viewed"})

        assert result.status == "viewed"
        stored = entities.proposals.get(proposal["id"])
        assert stored["status"] == "viewed"
        assert stored["viewed_date"]
        assert [a["action"] for a in entities.proposal_activities.list()] == ["viewed"]

    @pytest.mark.asyncio
    async def test_viewed_twice_logs_once(self, processor, entities, proposal):
        await processor.process({"token": "tok-1", "action": "viewed"})
        await processor.process({"token": "tok-1", "action": "viewed"})

        assert len(entities.proposal_activities.list()) == 1

    @pytest.mark.asyncio
    async def test_approve_records_signature(self, processor, entities, proposal):
        result = await processor.process({
            "token": "tok-1",
            "action": "approve",
            "signerName": "J. Lee",
            "signatureData": "data:image/png;base64,AAA",
        })

        assert result.success is True
        stored = entities.proposals.get(proposal["id"])
        assert stored["status"] == "approved"
        assert stored["signer_name"] == "J. Lee"
        assert stored["signature_data"] == "data:image/png;base64,AAA"
        assert stored["signed_date"]

    @pytest.mark.asyncio
    async def test_approve_defaults_signer_to_customer(self, processor, entities, proposal):
        await processor.process({"token": "tok-1", "action": "approved"})
        assert entities.proposals.get(proposal["id"])["signer_name"] == "Jordan Lee"

    @pytest.mark.asyncio
    async def test_decline_uses_default_reason(self, processor, entities, proposal):
        await processor.process({"token": "tok-1", "action": "declined"})

        stored = entities.proposals.get(proposal["id"])
        assert stored["status"] == "rejected"
        assert stored["change_request_notes"] == "Declined by customer"

    @pytest.mark.asyncio
    async def test_changes_requested(self, processor, entities, proposal):
        await processor.process({
            "token": "tok-1",
            "action": "changes_requested",
            "changeNotes": "Add a second rack",
        })

        stored = entities.proposals.get(proposal["id"])
        assert stored["status"] == "changes_requested"
        assert stored["change_request_notes"] == "Add a second rack"

    @pytest.mark.asyncio
    async def test_fetch_returns_public_view(self, processor, entities, proposal):
        result = await processor.process({"token": "tok-1", "action": "fetch"})

        view = result.proposal
        assert view["proposal_number"] == "P-100"
        assert view["items"] == [{"name": "Switch", "qty": 2}]
        assert view["areas"] == []
        assert "approval_token" not in view
        assert entities.proposals.get(proposal["id"])["status"] == "viewed"


class TestValidation:

    @pytest.mark.asyncio
    async def test_token_required(self, processor):
        with pytest.raises(ProjectITError) as exc_info:
            await processor.process({"action": "viewed"})
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_token(self, processor, proposal):
        with pytest.raises(ProjectITError) as exc_info:
            await processor.process({"token": "missing", "action": "viewed"})
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Proposal not found"

    @pytest.mark.asyncio
    async def test_invalid_action(self, processor, proposal):
        with pytest.raises(ProjectITError) as exc_info:
            await processor.process({"token": "tok-1", "action": "archive"})
        assert exc_info.value.status_code == 400


class TestStore:

    def test_creates_then_updates(self, processor, entities):
        body = {"action": "store", "token": "tok-9", "proposal": {"title": "First"}}
        assert processor.store(body).action == "created"

        body["proposal"] = {"title": "Second"}
        assert processor.store(body).action == "updated"

        stored = entities.proposals.filter({"approval_token": "tok-9"})
        assert len(stored) == 1
        assert stored[0]["title"] == "Second"

    def test_rejects_incomplete_request(self, processor):
        with pytest.raises(ProjectITError) as exc_info:
            processor.store({"action": "store", "token": "tok-9"})
        assert exc_info.value.status_code == 400
