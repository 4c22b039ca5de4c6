"""
Tests for Celery tasks, run in-process
"""
import uuid

import pytest

from atlas.tasks import appointment_tasks
from atlas.services.scheduling.booking_committer import commit_booking

from tests.conftest import MONDAY, new_client_id


@pytest.fixture(autouse=True)
def task_sessions(monkeypatch, session_factory):
    monkeypatch.setattr(appointment_tasks, "SessionLocal", session_factory)


def test_notification_task_loads_the_appointment(db, business, service_30):
    appointment = commit_booking(db, business.id, MONDAY, "10:00", [service_30.id], new_client_id())

    result = appointment_tasks.send_appointment_notification(str(appointment.id), "new_appointment")

    assert result == {
        "status": "success",
        "appointment_id": str(appointment.id),
        "event_type": "new_appointment",
    }


def test_notification_task_rejects_unknown_event(db, business):
    result = appointment_tasks.send_appointment_notification(str(uuid.uuid4()), "appointment_exploded")
    assert result == {"status": "failed", "reason": "invalid_payload"}


def test_notification_task_missing_appointment(db, business):
    result = appointment_tasks.send_appointment_notification(str(uuid.uuid4()), "appointment_cancelled")
    assert result == {"status": "failed", "reason": "appointment_not_found"}


def test_completion_task_reports_count(db, business, service_30):
    commit_booking(db, business.id, MONDAY, "10:00", [service_30.id], new_client_id())

    result = appointment_tasks.complete_past_appointments()

    # 2030 is still in the future
    assert result["status"] == "success"
    assert result["completed"] == 0
    assert "ran_at" in result
