"""Tests for GammaAi agent callbacks."""

import pytest

from projectit.core.exceptions import ProjectITError, WebhookAuthenticationError
from projectit.services.integrations import GammaAiWebhookProcessor


@pytest.fixture
def processor(entities):
    return GammaAiWebhookProcessor(entities)


@pytest.fixture
def feedback(entities):
    return entities.feedback.create({"title": "Dashboard is slow", "ai_status": "pending"})


@pytest.mark.asyncio
async def test_task_result_completes_feedback(processor, entities, feedback):
    result = await processor.process({
        "event": "task.completed",
        "data": {"id": "t-1", "result": "Add an index", "metadata": {"feedback_id": feedback["id"]}},
    })

    assert result.success is True
    assert result.message == "Webhook processed"
    stored = entities.feedback.get(feedback["id"])
    assert stored["ai_status"] == "completed"
    assert stored["ai_analysis"] == "Add an index"
    assert stored["ai_completed_at"]

    audit = entities.audit_logs.filter({"action": "gammaai_webhook"})
    assert audit[0]["entity_id"] == "t-1"


@pytest.mark.asyncio
async def test_unknown_status_falls_back_to_in_progress(processor, entities, feedback):
    await processor.process({
        "event": "task_status",
        "data": {"status": "queued", "metadata": {"feedback_id": feedback["id"]}},
    })

    assert entities.feedback.get(feedback["id"])["ai_status"] == "in_progress"


@pytest.mark.asyncio
async def test_failed_task(processor, entities, feedback):
    await processor.process({
        "event": "task.failed",
        "data": {"metadata": {"feedback_id": feedback["id"]}},
    })

    stored = entities.feedback.get(feedback["id"])
    assert stored["ai_status"] == "failed"
    assert stored["ai_analysis"] == "Agent task failed"


@pytest.mark.asyncio
async def test_missing_event_or_data(processor):
    with pytest.raises(ProjectITError) as exc_info:
        await processor.process({"event": "task.completed"})
    assert exc_info.value.status_code == 400


def test_unconfigured_secret_rejects(processor):
    with pytest.raises(WebhookAuthenticationError) as exc_info:
        processor.authenticator.check({"x-gammaai-webhook-secret": "anything"}, {})
    assert exc_info.value.message == "Webhook not configured"
