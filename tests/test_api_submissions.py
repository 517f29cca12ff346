"""
Shift submission endpoint tests.
"""


async def test_employee_submits_and_hr_confirms(async_client, employee, current_user):
    current_user.update(role="employee", employee_id=employee.id)
    created = await async_client.post(
        "/api/v1/shift-submissions",
        json={"working_day": "2024-03-04", "shift_type": "morning"},
    )
    assert created.status_code == 201
    submission_id = created.json()["id"]
    assert created.json()["status"] == "pending"

    forbidden = await async_client.post(f"/api/v1/shift-submissions/{submission_id}/confirm")
    assert forbidden.status_code == 403

    current_user.update(role="hr", employee_id=None)
    confirmed = await async_client.post(f"/api/v1/shift-submissions/{submission_id}/confirm")
    assert confirmed.status_code == 200
    body = confirmed.json()
    assert body["submission"]["status"] == "confirmed"
    assert body["record"]["hours_worked"] == 9.0
    assert body["record"]["is_manual_entry"] is True

    twice = await async_client.post(f"/api/v1/shift-submissions/{submission_id}/confirm")
    assert twice.status_code == 422
    assert twice.json()["reason"] == "invalid_transition"


async def test_employee_cannot_submit_for_others(async_client, employee, second_employee, current_user):
    current_user.update(role="employee", employee_id=employee.id)
    resp = await async_client.post(
        "/api/v1/shift-submissions",
        json={"employee_id": second_employee.id, "working_day": "2024-03-04", "shift_type": "night"},
    )
    assert resp.status_code == 403


async def test_reject_and_list(async_client, employee):
    created = await async_client.post(
        "/api/v1/shift-submissions",
        json={"employee_id": employee.id, "working_day": "2024-03-04", "shift_type": "evening"},
    )
    submission_id = created.json()["id"]
    rejected = await async_client.post(
        f"/api/v1/shift-submissions/{submission_id}/reject", json={"reason": "duplicate"}
    )
    assert rejected.json()["status"] == "rejected"

    listed = await async_client.get("/api/v1/shift-submissions", params={"status_filter": "rejected"})
    assert [s["id"] for s in listed.json()] == [submission_id]
