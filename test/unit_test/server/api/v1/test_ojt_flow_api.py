"""
One trainee's OJT run over HTTP.

Section setup, enrollment, placement review, a weekly report from draft to
supervisor approval, and the notifications that come out of it.
"""

import pytest

from sumikapp.core.models.domain.enums import Role

pytestmark = pytest.mark.asyncio

API = "/api/v1"

SECTION = {
    "title": "BSIT-4A",
    "internship_code": "CTNTERN1",
    "required_hours": 486,
    "start_date": "2024-01-08",
    "end_date": "2024-05-31",
}

PLACEMENT = {
    "company_name": "Globe Telecom",
    "contact_number": "09171234567",
    "nature_of_business": "Telecommunications",
    "address": "BGC, Taguig",
    "supervisor_email": "maria.santos@globe.example.com",
    "job_role": "Software Developer",
    "start_date": "2024-01-15",
    "end_date": "2024-05-15",
    "start_time": "09:00",
    "end_time": "18:00",
    "daily_schedule": ["monday", "tuesday", "wednesday", "thursday", "friday"],
}


async def test_trainee_placement_and_weekly_report(client, seed, as_user):
    coordinator = await seed.user(Role.coordinator)
    trainee = await seed.user(Role.trainee, first_name="Juan", last_name="Dela Cruz")
    as_coordinator = as_user(coordinator)
    as_trainee = as_user(trainee)

    # Section and enrollment
    response = await client.post(f"{API}/sections", json=SECTION, headers=as_coordinator)
    assert response.status_code == 201
    assert response.json()["data"]["title"] == "BSIT-4A"

    response = await client.post(
        f"{API}/sections/BSIT-4A/trainees", json={"trainee_ids": [trainee.id]}, headers=as_coordinator
    )
    assert response.json()["data"]["successful"] == [trainee.id]

    me = (await client.get(f"{API}/me", headers=as_trainee)).json()
    assert me["ojt_status"] == "not started"

    # Placement form
    response = await client.post(f"{API}/internships", json=PLACEMENT, headers=as_trainee)
    assert response.status_code == 201
    internship_id = response.json()["data"]["id"]

    response = await client.post(f"{API}/internships/{internship_id}/submit", headers=as_trainee)
    assert response.json()["data"]["status"] == "pending"

    response = await client.get(f"{API}/sections/BSIT-4A/internships?status=pending", headers=as_coordinator)
    assert [form["id"] for form in response.json()] == [internship_id]

    response = await client.post(
        f"{API}/sections/BSIT-4A/internships/{internship_id}/approve", headers=as_coordinator
    )
    assert response.status_code == 200
    supervisor_id = response.json()["data"]["supervisor_id"]
    assert supervisor_id

    me = (await client.get(f"{API}/me", headers=as_trainee)).json()
    assert me["ojt_status"] == "active"

    # Weekly report
    response = await client.post(
        f"{API}/weekly-reports", json={"start_date": "2024-01-15", "end_date": "2024-01-21"}, headers=as_trainee
    )
    assert response.status_code == 201
    report_id = response.json()["data"]["id"]

    for day in ("2024-01-15", "2024-01-16"):
        response = await client.post(
            f"{API}/weekly-reports/{report_id}/entries",
            json={"entry_date": day, "time_in": "08:00", "time_out": "17:00", "total_hours": 9},
            headers=as_trainee,
        )
        assert response.status_code == 200

    detail = (await client.get(f"{API}/weekly-reports/{report_id}", headers=as_trainee)).json()
    assert detail["period_total"] == 18
    assert len(detail["entries"]) == 2

    response = await client.post(f"{API}/weekly-reports/{report_id}/submit", headers=as_trainee)
    assert response.json()["data"]["status"] == "pending"

    # Supervisor review
    as_supervisor = {"X-User-Id": supervisor_id}
    pending = (await client.get(f"{API}/review-reports", headers=as_supervisor)).json()
    assert [(r["id"], r["trainee_name"]) for r in pending] == [(report_id, "Juan Dela Cruz")]

    response = await client.post(f"{API}/review-reports/{report_id}/approve", headers=as_supervisor)
    assert response.json()["message"] == "Weekly report successfully approved"

    response = await client.post(f"{API}/review-reports/{report_id}/reject", headers=as_supervisor)
    assert response.status_code == 409
    assert response.json()["error_type"] == "InvalidStatusTransitionError"

    # The approved report can no longer be edited
    response = await client.post(
        f"{API}/weekly-reports/{report_id}/entries",
        json={"entry_date": "2024-01-17", "total_hours": 8},
        headers=as_trainee,
    )
    assert response.status_code == 409

    # Notifications
    notifications = (await client.get(f"{API}/notifications", headers=as_trainee)).json()
    types = {n["notification_type"] for n in notifications}
    assert {"document status change", "report status change"} <= types

    response = await client.post(f"{API}/notifications/read-all", headers=as_trainee)
    assert response.json()["data"]["updated"] == len(notifications)
    unread = (await client.get(f"{API}/notifications?unread_only=true", headers=as_trainee)).json()
    assert unread == []


async def test_trainee_cannot_review_reports(client, placement, as_user):
    response = await client.get(f"{API}/review-reports", headers=as_user(placement.trainee))

    assert response.status_code == 403
