"""
Authentication and role guard tests.
"""

from shiftledger.api.v1.deps import get_current_active_user
from shiftledger.core.security import (create_access_token,
                                       create_refresh_token, decode_token,
                                       get_password_hash)
from shiftledger.main import app
from shiftledger.models.user import User


async def _make_user(db_session, role="hr", password="correct-horse-1") -> User:
    user = User(
        email="reviewer@example.com",
        hashed_password=get_password_hash(password),
        full_name="Rita Reviewer",
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    return user


def test_token_types_are_not_interchangeable():
    access = create_access_token(42)
    refresh = create_refresh_token(42)
    assert decode_token(access, "access")["sub"] == "42"
    assert decode_token(access, "refresh") is None
    assert decode_token(refresh, "access") is None
    assert decode_token("garbage", "access") is None


async def test_login_and_me(async_client, db_session):
    user = await _make_user(db_session)
    resp = await async_client.post(
        "/api/v1/auth/login",
        data={"username": "Reviewer@Example.com", "password": "correct-horse-1"},
    )
    assert resp.status_code == 200
    token = resp.json()["access_token"]
    assert "access_token" in resp.cookies

    app.dependency_overrides.pop(get_current_active_user)
    me = await async_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == user.id
    assert me.json()["role"] == "hr"


async def test_login_wrong_password(async_client, db_session):
    await _make_user(db_session)
    resp = await async_client.post(
        "/api/v1/auth/login",
        data={"username": "reviewer@example.com", "password": "wrong-password"},
    )
    assert resp.status_code == 401
    assert resp.json()["success"] is False


async def test_refresh_with_body(async_client, db_session):
    user = await _make_user(db_session)
    resp = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": create_refresh_token(user.id)}
    )
    assert resp.status_code == 200
    assert decode_token(resp.json()["access_token"], "access")["sub"] == str(user.id)


async def test_refresh_rejects_access_token(async_client, db_session):
    user = await _make_user(db_session)
    resp = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": create_access_token(user.id)}
    )
    assert resp.status_code == 401


async def test_missing_token_is_unauthorised(async_client):
    app.dependency_overrides.pop(get_current_active_user)
    resp = await async_client.get("/api/v1/records")
    assert resp.status_code == 401


async def test_readonly_cannot_approve(async_client, current_user):
    current_user["role"] = "readonly"
    resp = await async_client.post(
        "/api/v1/records/approve", json={"employee_id": 1, "working_day": "2024-03-04"}
    )
    assert resp.status_code == 403


async def test_hr_cannot_reset(async_client, current_user):
    current_user["role"] = "hr"
    resp = await async_client.post("/api/v1/admin/reset")
    assert resp.status_code == 403


async def test_admin_creates_employee_account(async_client, employee):
    resp = await async_client.post(
        "/api/v1/auth/users",
        json={
            "email": "Alice@Example.com",
            "password": "s3cret-pass",
            "role": "employee",
            "employee_id": employee.id,
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == "alice@example.com"
    assert body["employee_id"] == employee.id


async def test_employee_account_needs_employee(async_client):
    resp = await async_client.post(
        "/api/v1/auth/users",
        json={"email": "bob@example.com", "password": "s3cret-pass", "role": "employee"},
    )
    assert resp.status_code == 400
