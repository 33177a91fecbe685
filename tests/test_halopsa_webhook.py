"""Tests for the HaloPSA ticket webhook processor."""

import pytest

from projectit.services.integrations import HaloPSAWebhookProcessor


@pytest.fixture
def processor(entities):
    return HaloPSAWebhookProcessor(entities, webhook_secret="")


@pytest.fixture
def project(entities):
    return entities.projects.create({
        "name": "Office move",
        "description": "Move the office",
        "status": "in_progress",
        "halopsa_ticket_id": "42",
    })


class TestTicketClosed:

    @pytest.mark.asyncio
    async def test_closes_linked_project(self, processor, entities, project):
        result = await processor.process({"event_type": "ticket.closed", "ticket_id": "42"})

        assert result.success is True
        assert entities.projects.get(project["id"])["status"] == "completed"

        activities = entities.project_activities.filter({"project_id": project["id"]})
        assert len(activities) == 1
        assert activities[0]["action"] == "project_status_change"
        assert activities[0]["actor_name"] == "HaloPSA Sync"

    @pytest.mark.asyncio
    async def test_already_completed_project_is_untouched(self, processor, entities):
        project = entities.projects.create({"status": "completed", "halopsa_ticket_id": 7})

        result = await processor.process({"event_type": "ticket.resolved", "ticket_id": 7})

        assert result.success is True
        assert result.updates == {}
        assert entities.project_activities.filter({"project_id": project["id"]}) == []


class TestTicketUpdated:

    @pytest.mark.asyncio
    async def test_applies_mapped_fields_and_status(self, processor, entities, project):
        result = await processor.process({
            "event_type": "ticket.updated",
            "ticket": {"id": 42, "summary": "Office relocation", "status_id": 23},
        })

        assert result.success is True
        assert result.project_id == project["id"]
        assert result.updates == {"name": "Office relocation", "status": "on_hold"}

        stored = entities.projects.get(project["id"])
        assert stored["name"] == "Office relocation"
        assert stored["status"] == "on_hold"
        assert stored["description"] == "Move the office"

        audit = entities.audit_logs.filter({"action": "halopsa_webhook_update"})
        assert len(audit) == 1
        assert audit[0]["details"] == "Updated fields: name, status"
        assert [a["action"] for a in entities.project_activities.list()] == ["halopsa_sync"]

    @pytest.mark.asyncio
    async def test_flat_ticket_body(self, processor, entities, project):
        result = await processor.process({"event_type": "ticket.updated", "id": 42, "status_id": 9})

        assert result.updates == {"status": "completed"}

    @pytest.mark.asyncio
    async def test_no_changes_records_nothing(self, processor, entities, project):
        result = await processor.process({
            "event_type": "ticket.updated",
            "ticket_id": "42",
            "ticket": {"summary": "Office move", "status_id": 4},
        })

        assert result.updates == {}
        assert entities.project_activities.list() == []
        assert entities.audit_logs.list() == []

    @pytest.mark.asyncio
    async def test_missing_ticket_id(self, processor):
        result = await processor.process({"event_type": "ticket.updated"})
        assert result.message == "No ticket ID to process"

    @pytest.mark.asyncio
    async def test_unlinked_ticket(self, processor, project):
        result = await processor.process({"event_type": "ticket.created", "ticket_id": "99"})
        assert result.success is True
        assert result.message == "No linked project found"


class TestActionCreated:

    @pytest.mark.asyncio
    async def test_visible_note_is_synced(self, processor, entities, project):
        result = await processor.process({
            "event_type": "action.created",
            "action": {"ticket_id": 42, "note": "Cables ordered", "who": "Dana"},
        })

        assert result.success is True
        notes = entities.project_notes.filter({"project_id": project["id"]})
        assert len(notes) == 1
        assert notes[0]["content"] == "Cables ordered"
        assert notes[0]["author_name"] == "Dana"
        assert notes[0]["title"] == "HaloPSA Note"
        assert entities.project_activities.list()[0]["action"] == "note_added"

    @pytest.mark.asyncio
    async def test_hidden_note_is_skipped(self, processor, entities, project):
        await processor.process({
            "event_type": "action.created",
            "action": {"ticket_id": 42, "note": "Internal", "hiddenfromuser": True},
        })

        assert entities.project_notes.list() == []

    @pytest.mark.asyncio
    async def test_null_hidden_flag_counts_as_visible(self, processor, entities, project):
        result = await processor.process({
            "event_type": "action.created",
            "action": {"ticket_id": 42, "note": "Parts shipped", "hiddenfromuser": None},
        })

        assert result.success is True
        assert entities.project_notes.list()[0]["content"] == "Parts shipped"


@pytest.mark.asyncio
async def test_unknown_event_is_acknowledged(processor):
    result = await processor.process({"event_type": "ticket.deleted", "ticket_id": "42"})

    assert result.success is True
    assert result.message == "Event type 'ticket.deleted' not handled"


@pytest.mark.asyncio
async def test_internal_error_becomes_failed_result(processor, project, monkeypatch):
    def boom(ticket_id):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(processor, "find_project", boom)

    result = await processor.process({"event_type": "ticket.closed", "ticket_id": "42"})

    assert result.success is False
    assert result.error == "database unavailable"
