"""
Punch intake endpoint tests.
"""

from sqlalchemy import func, select

from shiftledger.models.punch import Punch


async def test_submit_night_punches(async_client, employee):
    first = await async_client.post(
        "/api/v1/punches",
        json={"employee_id": employee.id, "timestamp": "2024-03-01T21:05:00", "direction": "check_in"},
    )
    assert first.status_code == 200
    assert first.json()["created"] is True

    second = await async_client.post(
        "/api/v1/punches",
        json={"employee_id": employee.id, "timestamp": "2024-03-02T06:10:00", "direction": "check_out"},
    )
    body = second.json()
    assert body["punch"]["working_day"] == "2024-03-01"
    record = body["records"][0]
    assert record["working_day"] == "2024-03-01"
    assert record["hours_worked"] == 9.08
    assert record["is_late"] is False


async def test_aware_timestamps_are_converted(async_client, employee):
    resp = await async_client.post(
        "/api/v1/punches",
        json={"employee_id": employee.id, "timestamp": "2024-03-04T05:00:00+00:00", "direction": "check_in"},
    )
    assert resp.status_code == 200
    assert resp.json()["punch"]["timestamp"] == "2024-03-04T05:00:00"


async def test_resubmission_returns_existing(async_client, employee, session_factory):
    payload = {"employee_id": employee.id, "timestamp": "2024-03-04T05:00:00", "direction": "check_in"}
    await async_client.post("/api/v1/punches", json=payload)
    again = await async_client.post("/api/v1/punches", json=payload)
    assert again.status_code == 200
    assert again.json()["created"] is False
    async with session_factory() as session:
        assert (await session.execute(select(func.count(Punch.id)))).scalar() == 1


async def test_unknown_shift_hint_is_ignored(async_client, employee):
    resp = await async_client.post(
        "/api/v1/punches",
        json={
            "employee_id": employee.id,
            "timestamp": "2024-03-04T05:00:00",
            "direction": "check_in",
            "shift_hint": "brunch",
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["punch"]["shift_type"] == "morning"
    assert body["punch"]["shift_hint"] is None


async def test_unknown_employee_is_422(async_client):
    resp = await async_client.post(
        "/api/v1/punches",
        json={"employee_id": 999, "timestamp": "2024-03-04T05:00:00", "direction": "check_in"},
    )
    assert resp.status_code == 422
    assert resp.json()["success"] is False


async def test_inactive_employee_reports_reason(async_client, employee):
    await async_client.delete(f"/api/v1/employees/{employee.id}")
    resp = await async_client.post(
        "/api/v1/punches",
        json={"employee_id": employee.id, "timestamp": "2024-03-04T05:00:00", "direction": "check_in"},
    )
    assert resp.status_code == 422
    assert resp.json()["reason"] == "employee_inactive"


async def test_batch_ingestion(async_client):
    resp = await async_client.post(
        "/api/v1/punches/batch",
        json={
            "rows": [
                {"employee_number": "E900", "timestamp": "2024-03-04T05:00:00", "direction": "check_in"},
                {"employee_number": "E900", "timestamp": "2024-03-04T14:00:00", "direction": "check_out"},
            ]
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["success_count"] == 2

    punches = await async_client.get("/api/v1/punches", params={"period": "2024-03"})
    assert len(punches.json()) == 2


async def test_leave_and_off_days(async_client, employee):
    leave = await async_client.post(
        "/api/v1/leave",
        json={
            "employee_id": employee.id,
            "start": "2024-03-04",
            "end": "2024-03-06",
            "leave_type": "annual-leave",
        },
    )
    assert leave.status_code == 200
    records = leave.json()["records"]
    assert len(records) == 3
    assert {r["hours_worked"] for r in records} == {9.0}

    off = await async_client.post(
        "/api/v1/off-days", json={"employee_id": employee.id, "start": "2024-03-07"}
    )
    assert off.json()["records"][0]["display_check_in"] == "OFF-DAY"


async def test_leave_range_backwards_is_422(async_client, employee):
    resp = await async_client.post(
        "/api/v1/leave",
        json={
            "employee_id": employee.id,
            "start": "2024-03-06",
            "end": "2024-03-04",
            "leave_type": "sick-leave",
        },
    )
    assert resp.status_code == 422
