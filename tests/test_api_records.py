"""
Daily-record review endpoint tests.
"""

import pytest


async def _punch(client, employee_id, ts, direction, **extra):
    resp = await client.post(
        "/api/v1/punches",
        json={"employee_id": employee_id, "timestamp": ts, "direction": direction, **extra},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


async def _full_day(client, employee_id, day="2024-03-04"):
    await _punch(client, employee_id, f"{day}T05:00:00", "check_in")
    body = await _punch(client, employee_id, f"{day}T14:00:00", "check_out")
    return body["records"][0]


async def test_list_filters_by_period_and_approval(async_client, employee):
    await _full_day(async_client, employee.id, "2024-03-04")
    await _full_day(async_client, employee.id, "2024-04-01")
    await async_client.post(
        "/api/v1/records/approve", json={"employee_id": employee.id, "working_day": "2024-03-04"}
    )

    march = await async_client.get("/api/v1/records", params={"period": "2024-03"})
    assert [r["working_day"] for r in march.json()] == ["2024-03-04"]

    pending = await async_client.get("/api/v1/records", params={"approved": "false"})
    assert [r["working_day"] for r in pending.json()] == ["2024-04-01"]


async def test_bad_period_is_422(async_client):
    resp = await async_client.get("/api/v1/records", params={"period": "March"})
    assert resp.status_code == 422


async def test_approve_and_unapprove(async_client, employee):
    await _full_day(async_client, employee.id)
    ref = {"employee_id": employee.id, "working_day": "2024-03-04"}

    approved = await async_client.post("/api/v1/records/approve", json=ref)
    assert approved.status_code == 200
    assert approved.json()["records"][0]["approved"] is True

    unapproved = await async_client.post("/api/v1/records/unapprove", json=ref)
    assert unapproved.json()["records"][0]["approved"] is False


async def test_approve_incomplete_day_reports_reason(async_client, employee):
    await _punch(async_client, employee.id, "2024-03-04T05:00:00", "check_in")
    resp = await async_client.post(
        "/api/v1/records/approve", json={"employee_id": employee.id, "working_day": "2024-03-04"}
    )
    assert resp.status_code == 422
    assert resp.json()["reason"] == "missing_punches"


async def test_toggle_missing_record_is_notice(async_client):
    resp = await async_client.post("/api/v1/records/9999/toggle-approval")
    assert resp.status_code == 404
    assert "notice" in resp.json()


async def test_penalty(async_client, employee):
    await _full_day(async_client, employee.id)
    resp = await async_client.post(
        "/api/v1/records/penalty",
        json={"employee_id": employee.id, "working_day": "2024-03-04", "minutes": 60},
    )
    assert resp.status_code == 200
    assert resp.json()["penalty_minutes"] == 60
    assert resp.json()["hours_worked"] == 9.0


@pytest.mark.parametrize("minutes", [-1, 1441])
async def test_penalty_out_of_range(async_client, employee, minutes):
    resp = await async_client.post(
        "/api/v1/records/penalty",
        json={"employee_id": employee.id, "working_day": "2024-03-04", "minutes": minutes},
    )
    assert resp.status_code == 422


async def test_edit_times_and_convert_to_off_day(async_client, employee):
    await _full_day(async_client, employee.id)
    edited = await async_client.put(
        "/api/v1/records/times",
        json={
            "employee_id": employee.id,
            "working_day": "2024-03-04",
            "check_in": "2024-03-04T05:00:00",
            "check_out": "2024-03-04T12:00:00",
        },
    )
    assert edited.status_code == 200
    assert edited.json()["hours_worked"] == 7.0
    assert edited.json()["early_leave"] is True

    cleared = await async_client.put(
        "/api/v1/records/times",
        json={"employee_id": employee.id, "working_day": "2024-03-04"},
    )
    assert cleared.json()["day_kind"] == "off_day"
    assert cleared.json()["display_check_in"] == "OFF-DAY"


async def test_ambiguous_day_needs_shift_slot(async_client, employee):
    await _full_day(async_client, employee.id)
    await _punch(async_client, employee.id, "2024-03-04T21:00:00", "check_in")
    await _punch(async_client, employee.id, "2024-03-05T06:00:00", "check_out")

    ambiguous = await async_client.post(
        "/api/v1/records/penalty",
        json={"employee_id": employee.id, "working_day": "2024-03-04", "minutes": 15},
    )
    assert ambiguous.status_code == 422

    targeted = await async_client.post(
        "/api/v1/records/penalty",
        json={
            "employee_id": employee.id,
            "working_day": "2024-03-04",
            "minutes": 15,
            "shift_slot": "night",
        },
    )
    assert targeted.status_code == 200
    assert targeted.json()["shift_type"] == "night"


async def test_swap(async_client, employee):
    await _punch(async_client, employee.id, "2024-03-04T13:00:00", "check_in", shift_hint="morning")
    await _punch(async_client, employee.id, "2024-03-04T07:00:00", "check_out", shift_hint="morning")
    resp = await async_client.post(
        "/api/v1/records/swap", json={"employee_id": employee.id, "working_day": "2024-03-04"}
    )
    assert resp.status_code == 200
    assert resp.json()["hours_worked"] == 6.0
    assert resp.json()["corrected_records"] is True


async def test_bulk_delete_preserves_approved(async_client, employee):
    await _full_day(async_client, employee.id, "2024-03-04")
    await _full_day(async_client, employee.id, "2024-03-05")
    await async_client.post(
        "/api/v1/records/approve", json={"employee_id": employee.id, "working_day": "2024-03-04"}
    )

    resp = await async_client.delete("/api/v1/records", params={"period": "2024-03"})
    assert resp.status_code == 200
    assert resp.json()["success_count"] == 1

    remaining = await async_client.get("/api/v1/records")
    assert [r["working_day"] for r in remaining.json()] == ["2024-03-04"]


async def test_reset(async_client, employee):
    await async_client.post("/api/v1/holidays", json={"date": "2024-03-11", "name": "Spring"})
    await _full_day(async_client, employee.id)

    resp = await async_client.post("/api/v1/admin/reset")
    assert resp.status_code == 200
    body = resp.json()
    assert body["deleted_records"] == 1
    assert body["deleted_punches"] == 2
    assert body["holidays_backed_up"] == 1

    holidays = await async_client.get("/api/v1/holidays")
    assert [h["date"] for h in holidays.json()] == ["2024-03-11"]
