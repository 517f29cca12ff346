"""
Holiday calendar endpoint tests.
"""


async def test_add_list_remove(async_client):
    created = await async_client.post(
        "/api/v1/holidays", json={"date": "2024-03-11", "name": "Spring"}
    )
    assert created.status_code == 201
    holiday_id = created.json()["id"]

    again = await async_client.post(
        "/api/v1/holidays", json={"date": "2024-03-11", "name": "Spring Day"}
    )
    assert again.json()["id"] == holiday_id

    listed = await async_client.get("/api/v1/holidays")
    assert [(h["date"], h["name"]) for h in listed.json()] == [("2024-03-11", "Spring Day")]

    removed = await async_client.delete(f"/api/v1/holidays/{holiday_id}")
    assert removed.status_code == 200
    assert (await async_client.get("/api/v1/holidays")).json() == []


async def test_remove_missing_is_404(async_client):
    resp = await async_client.delete("/api/v1/holidays/4242")
    assert resp.status_code == 404


async def test_double_time_reflects_new_holiday_immediately(async_client):
    params = {"period": "2024-03-01|2024-03-14"}
    before = await async_client.get("/api/v1/holidays/double-time", params=params)
    assert before.json()["days"] == ["2024-03-01", "2024-03-08"]

    await async_client.post("/api/v1/holidays", json={"date": "2024-03-11"})
    after = await async_client.get("/api/v1/holidays/double-time", params=params)
    assert after.json()["days"] == ["2024-03-01", "2024-03-08", "2024-03-11"]


async def test_double_time_needs_range(async_client):
    resp = await async_client.get("/api/v1/holidays/double-time")
    assert resp.status_code == 422


async def test_refresh_cache(async_client):
    await async_client.post("/api/v1/holidays", json={"date": "2024-12-25", "name": "Winter"})
    resp = await async_client.post("/api/v1/holidays/refresh-cache")
    assert resp.json() == {"success": True, "holidays": 1}
