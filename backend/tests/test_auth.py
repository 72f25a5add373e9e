import pytest

from app.core.security import create_access_token, get_password_hash, verify_password
from tests.conftest import make_user


def test_password_hashing():
    hashed = get_password_hash("secret-pass")

    assert hashed != "secret-pass"
    assert verify_password("secret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)
    assert not verify_password("secret-pass", "not-a-bcrypt-hash")


@pytest.mark.asyncio
async def test_login_and_me(client, db):
    await make_user(db, "admin@lumina.test", is_admin=True)

    response = await client.post(
        "/auth/login", data={"username": "admin@lumina.test", "password": "secret-pass"}
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "admin@lumina.test"
    assert me.json()["is_admin"] is True


@pytest.mark.asyncio
async def test_login_with_wrong_password(client, db):
    await make_user(db, "admin@lumina.test", is_admin=True)

    response = await client.post(
        "/auth/login", data={"username": "admin@lumina.test", "password": "nope"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_non_admin_is_forbidden(client, db, event):
    user = await make_user(db, "jury@lumina.test", is_admin=False)
    headers = {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}

    response = await client.post(
        f"/events/{event.id}/invitation-codes", json={"code": "valid-code"}, headers=headers
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_garbage_token_is_rejected(client):
    response = await client.get("/auth/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
