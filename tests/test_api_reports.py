"""
Approved-hours reporting endpoint tests.
"""


async def _approved_day(client, employee_id, day, start="05:00", end="14:00"):
    for ts, direction in ((f"{day}T{start}:00", "check_in"), (f"{day}T{end}:00", "check_out")):
        resp = await client.post(
            "/api/v1/punches",
            json={"employee_id": employee_id, "timestamp": ts, "direction": direction},
        )
        assert resp.status_code == 200, resp.text
    resp = await client.post(
        "/api/v1/records/approve", json={"employee_id": employee_id, "working_day": day}
    )
    assert resp.status_code == 200, resp.text


async def test_friday_bonus(async_client, employee):
    await _approved_day(async_client, employee.id, "2024-03-08")
    resp = await async_client.get("/api/v1/reports/approved-hours", params={"period": "2024-03"})
    assert resp.status_code == 200
    row = resp.json()["employees"][0]
    assert row["regular_hours"] == 9.0
    assert row["double_time_hours"] == 9.0
    assert row["payable_hours"] == 18.0


async def test_holiday_bonus_and_unapproved_days_excluded(async_client, employee):
    await async_client.post("/api/v1/holidays", json={"date": "2024-03-11"})
    await _approved_day(async_client, employee.id, "2024-03-11")
    # Punched but never approved
    await async_client.post(
        "/api/v1/punches",
        json={"employee_id": employee.id, "timestamp": "2024-03-12T05:00:00", "direction": "check_in"},
    )

    resp = await async_client.get(
        "/api/v1/reports/approved-hours",
        params={"date_from": "2024-03-01", "date_to": "2024-03-31"},
    )
    body = resp.json()
    assert body["totals"]["total_days"] == 1
    assert body["totals"]["double_time_hours"] == 9.0


async def test_penalty_reduces_payable(async_client, employee):
    await _approved_day(async_client, employee.id, "2024-03-04")
    await async_client.post(
        "/api/v1/records/penalty",
        json={"employee_id": employee.id, "working_day": "2024-03-04", "minutes": 30},
    )
    row = (await async_client.get("/api/v1/reports/approved-hours")).json()["employees"][0]
    assert row["regular_hours"] == 8.5
    assert row["penalty_hours"] == 0.5
    assert row["issues"]["penalties"] == 1


async def test_rows_sorted_by_name(async_client, employee, second_employee):
    await _approved_day(async_client, second_employee.id, "2024-03-04")
    await _approved_day(async_client, employee.id, "2024-03-04")
    body = (await async_client.get("/api/v1/reports/approved-hours")).json()
    assert [r["name"] for r in body["employees"]] == ["Alice Able", "Bob Baker"]
    assert body["totals"]["regular_hours"] == 18.0


async def test_csv_export(async_client, employee):
    await _approved_day(async_client, employee.id, "2024-03-08")
    resp = await async_client.get(
        "/api/v1/reports/approved-hours/csv", params={"period": "2024-03"}
    )
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    lines = resp.text.strip().splitlines()
    assert lines[0].startswith("employee_id,name,")
    assert lines[1].split(",")[1] == "Alice Able"
    assert lines[-1].split(",")[1] == "Total"


async def test_employee_detail(async_client, employee):
    await _approved_day(async_client, employee.id, "2024-03-08")
    resp = await async_client.get(
        f"/api/v1/reports/employees/{employee.id}/detail", params={"period": "2024-03"}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["summary"]["payable_hours"] == 18.0
    assert [r["working_day"] for r in body["records"]] == ["2024-03-08"]
    assert "2024-03-08" in body["double_time_days"]


async def test_employee_detail_unknown(async_client):
    resp = await async_client.get("/api/v1/reports/employees/999/detail")
    assert resp.status_code == 404


async def test_employee_role_sees_only_self(async_client, employee, second_employee, current_user):
    current_user.update(role="employee", employee_id=employee.id)
    own = await async_client.get(f"/api/v1/reports/employees/{employee.id}/detail")
    other = await async_client.get(f"/api/v1/reports/employees/{second_employee.id}/detail")
    everyone = await async_client.get("/api/v1/reports/approved-hours")
    assert own.status_code == 200
    assert other.status_code == 403
    assert everyone.status_code == 403


async def test_status(async_client, employee):
    resp = await async_client.get("/api/v1/status")
    assert resp.status_code == 200
    assert resp.json()["total_employees"] == 1
