"""
Employee registry endpoint tests.
"""


async def test_create_and_get(async_client):
    created = await async_client.post(
        "/api/v1/employees",
        json={"employee_number": "E777", "name": "  Cara Cook ", "is_canteen": True},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["name"] == "Cara Cook"
    assert body["is_canteen"] is True

    fetched = await async_client.get(f"/api/v1/employees/{body['id']}")
    assert fetched.json()["employee_number"] == "E777"


async def test_duplicate_number_rejected(async_client, employee):
    resp = await async_client.post(
        "/api/v1/employees", json={"employee_number": employee.employee_number, "name": "Dup"}
    )
    assert resp.status_code == 400


async def test_invalid_number_rejected(async_client):
    resp = await async_client.post(
        "/api/v1/employees", json={"employee_number": "has space", "name": "X"}
    )
    assert resp.status_code == 422


async def test_search_escapes_wildcards(async_client, employee):
    hit = await async_client.get("/api/v1/employees", params={"search": "alice"})
    miss = await async_client.get("/api/v1/employees", params={"search": "%"})
    assert [e["id"] for e in hit.json()] == [employee.id]
    assert miss.json() == []


async def test_soft_delete_hides_from_list(async_client, employee):
    resp = await async_client.delete(f"/api/v1/employees/{employee.id}")
    assert resp.json()["success"] is True
    assert (await async_client.get("/api/v1/employees")).json() == []
    listed = await async_client.get("/api/v1/employees", params={"include_inactive": "true"})
    assert listed.json()[0]["is_active"] is False


async def test_update(async_client, employee):
    resp = await async_client.put(f"/api/v1/employees/{employee.id}", json={"department": "Canteen"})
    assert resp.json()["department"] == "Canteen"
