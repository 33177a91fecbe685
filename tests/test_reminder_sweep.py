"""Tests for the due-date reminder sweep."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from projectit.core.exceptions import IntegrationRequestError
from projectit.services.reminders import DueReminderSweep, due_text, parse_due_date

TODAY = date(2024, 6, 10)


@pytest.fixture
def notifier():
    notifier = AsyncMock()
    notifier.send.return_value = {"success": True}
    return notifier


@pytest.fixture
def project(entities):
    return entities.projects.create({"name": "Office move", "status": "in_progress"})


def add_task(entities, project, due, assignee="ana@example.com", **fields):
    return entities.tasks.create({
        "title": fields.pop("title", "Install switch"),
        "project_id": project["id"],
        "due_date": due,
        "assigned_to": assignee,
        "status": fields.pop("status", "todo"),
        **fields,
    })


def sweep(entities, notifier):
    return DueReminderSweep(entities, notifier, today=TODAY)


class TestClassification:

    @pytest.mark.asyncio
    async def test_overdue_and_due_soon(self, entities, notifier, project):
        add_task(entities, project, "2024-06-08")
        add_task(entities, project, "2024-06-11", title="Run cables")
        add_task(entities, project, "2024-06-20", title="Later")

        result = await sweep(entities, notifier).run()

        assert result.overdues_sent == 1
        assert result.reminders_sent == 1
        assert result.tasks_checked == 3
        assert result.email_failures == 0

        notifications = {n["title"]: n for n in entities.user_notifications.list()}
        overdue = notifications["Task is overdue"]
        assert overdue["type"] == "task_due"
        assert overdue["message"] == '"Install switch" was due 2 days ago'
        assert overdue["link"] == f"/ProjectDetail?id={project['id']}"
        assert overdue["project_name"] == "Office move"
        assert overdue["is_read"] is False
        assert notifications["Task due tomorrow"]["message"] == '"Run cables" is due tomorrow'

        sent_types = sorted(call.args[0].type for call in notifier.send.await_args_list)
        assert sent_types == ["task_due", "task_overdue"]

    @pytest.mark.asyncio
    async def test_single_day_overdue_message(self, entities, notifier, project):
        add_task(entities, project, "2024-06-09T15:30:00Z")

        await sweep(entities, notifier).run()

        assert entities.user_notifications.list()[0]["message"] == '"Install switch" was due 1 day ago'

    @pytest.mark.asyncio
    async def test_excludes_closed_unassigned_and_archived(self, entities, notifier, project):
        archived = entities.projects.create({"name": "Old", "status": "archived"})
        add_task(entities, project, "2024-06-01", status="completed")
        add_task(entities, project, "2024-06-01", status="archived")
        add_task(entities, project, "2024-06-01", assignee=None)
        add_task(entities, archived, "2024-06-01")

        result = await sweep(entities, notifier).run()

        assert result.tasks_checked == 1
        assert result.overdues_sent == 0
        assert entities.user_notifications.list() == []
        notifier.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reminder_window_from_preferences(self, entities, notifier, project):
        entities.notification_settings.create({"user_email": "ana@example.com", "due_reminder_days": 3})
        add_task(entities, project, "2024-06-13")

        result = await sweep(entities, notifier).run()

        assert result.reminders_sent == 1
        assert entities.user_notifications.list()[0]["title"] == "Task due in 3 days"

    @pytest.mark.asyncio
    async def test_disabled_preferences(self, entities, notifier, project):
        entities.notification_settings.create({
            "user_email": "ana@example.com",
            "notify_task_overdue": False,
            "notify_task_due_soon": False,
        })
        add_task(entities, project, "2024-06-01")
        add_task(entities, project, "2024-06-10")

        result = await sweep(entities, notifier).run()

        assert result.overdues_sent == 0
        assert result.reminders_sent == 0
        assert entities.user_notifications.list() == []


class TestEmail:

    @pytest.mark.asyncio
    async def test_digest_users_get_no_instant_email(self, entities, notifier, project):
        entities.notification_settings.create({"user_email": "ana@example.com", "email_frequency": "daily_digest"})
        add_task(entities, project, "2024-06-08")

        result = await sweep(entities, notifier).run()

        assert result.overdues_sent == 1
        assert len(entities.user_notifications.list()) == 1
        notifier.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_email_failure_is_counted_and_sweep_continues(self, entities, notifier, project):
        notifier.send.side_effect = [IntegrationRequestError("rate limited"), {"success": True}]
        add_task(entities, project, "2024-06-08")
        add_task(entities, project, "2024-06-10", title="Today")

        result = await sweep(entities, notifier).run()

        assert result.email_failures == 1
        assert result.overdues_sent == 1
        assert result.reminders_sent == 1
        assert len(entities.user_notifications.list()) == 2

    @pytest.mark.asyncio
    async def test_unsent_email_counts_as_failure(self, entities, notifier, project):
        notifier.send.return_value = {"success": False, "error": "Email service not configured"}
        add_task(entities, project, "2024-06-10")

        result = await sweep(entities, notifier).run()

        assert result.email_failures == 1
        assert result.reminders_sent == 1


@pytest.mark.asyncio
async def test_rerun_creates_duplicate_notifications(entities, notifier, project):
    """Nothing marks a reminder as sent, so a second run repeats it."""
    add_task(entities, project, "2024-06-08")

    await sweep(entities, notifier).run()
    await sweep(entities, notifier).run()

    assert len(entities.user_notifications.list()) == 2
    assert notifier.send.await_count == 2


@pytest.mark.asyncio
async def test_response_uses_camel_case(entities, notifier):
    result = await sweep(entities, notifier).run()
    assert result.to_response() == {
        "success": True,
        "remindersSent": 0,
        "overduesSent": 0,
        "tasksChecked": 0,
        "emailFailures": 0,
    }


def test_due_text():
    assert due_text(0) == "today"
    assert due_text(1) == "tomorrow"
    assert due_text(5) == "in 5 days"


def test_parse_due_date():
    assert parse_due_date("2024-06-10") == date(2024, 6, 10)
    assert parse_due_date("2024-06-10T23:59:00Z") == date(2024, 6, 10)
    assert parse_due_date("soon") is None
    assert parse_due_date(None) is None
